"""
toysign - Main Entry Point

Generate a key pair, sign a message or verify a signature:

    $ toysign generate
    Private key: 902962279, 278653459
    Public key: 902962279, 291642999

    $ toysign sign meow 902962279 278653459
    Signature: 124665060

    $ toysign verify meow 124665060 902962279 291642999
    Signature verified!

Keys are tiny and the digest is not cryptographic: this is a teaching
tool, never use it to protect anything.
"""

import argparse
import random
import sys
from typing import List, Optional

from .core_crypto.digest import DEFAULT_DIGEST, digest_names, get_digest_function
from .core_crypto.primes import MAX_KEY_VAL
from .integration.event_logger import EventLogger
from .keys.keypair import generate_key_pair, parse_key_value
from .keys.signing import sign_message, verify_signature


USAGE = """Usage:
generate - generates a public/private keypair
sign <msg> <priv_key_mod> <priv_key_exp> - signs a message with private key
verify <msg> <signature> <pub_key_mod> <pub_key_exp> - verifies a message"""

EXIT_OK = 0
EXIT_USAGE = 1

MIN_KEY_VAL = 6


class _Parser(argparse.ArgumentParser):
    """Argument parser that reports errors with the usage text and exit code 1."""

    def error(self, message):
        print(f"Error: {message}")
        print(USAGE)
        self.exit(EXIT_USAGE)


def _key_bound(text: str) -> int:
    value = parse_key_value(text, "max-key-val")
    if not MIN_KEY_VAL <= value <= MAX_KEY_VAL:
        raise argparse.ArgumentTypeError(
            f"max-key-val must be between {MIN_KEY_VAL} and {MAX_KEY_VAL}"
        )
    return value


# ============================================================================
# Commands
# ============================================================================

def cmd_generate(args: argparse.Namespace, logger: EventLogger) -> int:
    """Generate and print a key pair."""
    rng = random.Random(args.seed) if args.seed is not None else None
    key_pair = generate_key_pair(rng, max_key_val=args.max_key_val, sanity_check=args.check)
    logger.log_key_generated(key_pair, args.max_key_val)

    print(f"Private key: {key_pair.private_key}")
    print(f"Public key: {key_pair.public_key}")
    return EXIT_OK


def cmd_sign(args: argparse.Namespace, logger: EventLogger) -> int:
    """Sign a message and print the signature."""
    modulus = parse_key_value(args.priv_key_mod, "priv_key_mod")
    exponent = parse_key_value(args.priv_key_exp, "priv_key_exp")
    digest = get_digest_function(args.digest)

    signature = sign_message(args.msg, modulus, exponent, digest)
    logger.log_sign(modulus, args.msg, signature, args.digest)

    print(f"Signature: {signature}")
    return EXIT_OK


def cmd_verify(args: argparse.Namespace, logger: EventLogger) -> int:
    """Verify a signature; an invalid signature is not an error."""
    signature = parse_key_value(args.signature, "signature")
    modulus = parse_key_value(args.pub_key_mod, "pub_key_mod")
    exponent = parse_key_value(args.pub_key_exp, "pub_key_exp")
    digest = get_digest_function(args.digest)

    valid = verify_signature(args.msg, signature, modulus, exponent, digest)
    logger.log_verify(modulus, args.msg, signature, valid, args.digest)

    if valid:
        print("Signature verified!")
    else:
        print("SIGNATURE INVALID!")
    return EXIT_OK


# ============================================================================
# Parser
# ============================================================================

def build_parser() -> argparse.ArgumentParser:
    common = _Parser(add_help=False)
    common.add_argument("--digest", choices=digest_names(), default=DEFAULT_DIGEST,
                        help="Message digest function (default: %(default)s)")
    common.add_argument("--audit", action="store_true",
                        help="Print the audit log after the command")

    parser = _Parser(prog="toysign", description="Toy public-key signatures.")
    subparsers = parser.add_subparsers(dest="command", metavar="command")
    subparsers.required = True

    gen = subparsers.add_parser("generate", parents=[common],
                                help="generates a public/private keypair")
    gen.add_argument("--seed", type=int, default=None,
                     help="Seed for reproducible (insecure) key generation")
    gen.add_argument("--max-key-val", type=_key_bound, default=MAX_KEY_VAL,
                     help="Exclusive upper bound for the primes (default: %(default)s)")
    gen.add_argument("--check", action="store_true",
                     help="Check the exponent pair before printing it")
    gen.set_defaults(handler=cmd_generate)

    sign = subparsers.add_parser("sign", parents=[common],
                                 help="signs a message with private key")
    sign.add_argument("msg")
    sign.add_argument("priv_key_mod")
    sign.add_argument("priv_key_exp")
    sign.set_defaults(handler=cmd_sign)

    verify = subparsers.add_parser("verify", parents=[common],
                                   help="verifies a message")
    verify.add_argument("msg")
    verify.add_argument("signature")
    verify.add_argument("pub_key_mod")
    verify.add_argument("pub_key_exp")
    verify.set_defaults(handler=cmd_verify)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for toysign; returns the process exit code."""
    parser = build_parser()
    try:
        args = parser.parse_args(argv)
    except SystemExit as exc:
        return exc.code if isinstance(exc.code, int) else EXIT_USAGE

    logger = EventLogger()
    try:
        status = args.handler(args, logger)
    except ValueError as exc:
        logger.log_invalid_input(args.command, str(exc))
        print(f"Error: {exc}")
        print(USAGE)
        status = EXIT_USAGE

    if args.audit:
        logger.print_audit_log()
    return status


if __name__ == "__main__":
    sys.exit(main())
