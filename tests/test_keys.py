"""
Unit tests for key pair generation, signing and verification.
"""

import random

import pytest
from toysign.core_crypto.digest import sha256_digest
from toysign.core_crypto.modular import is_coprime, mod_pow
from toysign.core_crypto.primes import is_prime
from toysign.keys.keypair import (
    KeyPair, PrivateKey, PublicKey, MAX_MODULUS,
    generate_key_pair, choose_signing_exponent, compute_verifying_exponent,
    parse_key_value
)
from toysign.keys.signing import (
    Signer, Verifier, sign_message, verify_signature, sign_digest, verify_digest
)


# Walkthrough key pair: private (n, d) and public (n, e)
MODULUS = 902962279
SIGNING_EXPONENT = 278653459
VERIFYING_EXPONENT = 291642999
MEOW_SIGNATURE = 124665060

# p = 61, q = 53, totient 780: modulus smaller than any 32-bit digest
SMALL_KEY = KeyPair(modulus=3233, signing_exponent=17, verifying_exponent=413)


class TestKeyGeneration:
    """Unit tests for key pair generation."""

    def test_choose_signing_exponent(self):
        """Exponent is coprime to the totient and in (1, totient)."""
        c = 70429
        rng = random.Random(5)
        for _ in range(10):
            e = choose_signing_exponent(c, rng)
            assert is_coprime(e, c)
            assert 1 < e < c

    def test_choose_signing_exponent_smallest_totient(self):
        """With totient 4 the only candidate is 3."""
        assert choose_signing_exponent(4, random.Random(0)) == 3

    def test_choose_signing_exponent_bad_totient(self):
        """A totient below 3 leaves nothing to choose."""
        with pytest.raises(ValueError):
            choose_signing_exponent(2, random.Random(0))

    def test_compute_verifying_exponent(self):
        """Verifying exponent is the modular inverse."""
        assert compute_verifying_exponent(600010331, 654955584) == 4070099
        assert compute_verifying_exponent(54741371, 314700540) == 151583711

    def test_generated_values_are_in_range(self):
        """Modulus fits below MAX_MODULUS; exponents are > 1."""
        rng = random.Random(11)
        for _ in range(10):
            keys = generate_key_pair(rng)
            assert 15 <= keys.modulus < MAX_MODULUS
            assert keys.signing_exponent > 1
            assert keys.verifying_exponent > 1

    def test_generate_with_sanity_check(self):
        """The built-in check passes for generated pairs."""
        rng = random.Random(12)
        for _ in range(10):
            generate_key_pair(rng, sanity_check=True)

    def test_inverse_law_on_factors(self):
        """(d * e) mod lcm(p - 1, q - 1) == 1 for the modulus' factors."""
        rng = random.Random(13)
        for _ in range(5):
            keys = generate_key_pair(rng, max_key_val=500)
            n = keys.modulus
            p = next(i for i in range(3, 500) if n % i == 0)
            q = n // p
            assert p != q
            assert is_prime(p) and is_prime(q)
            t = (p - 1) * (q - 1) // _gcd(p - 1, q - 1)
            assert (keys.signing_exponent * keys.verifying_exponent) % t == 1

    def test_seeded_generation_is_reproducible(self):
        """Same seed, same key pair."""
        assert generate_key_pair(random.Random(99)) == generate_key_pair(random.Random(99))

    def test_generate_key_pair_hash_500(self):
        """Round trip of digest 500."""
        h = 500
        rng = random.Random(500)
        for _ in range(10):
            keys = generate_key_pair(rng)
            r1 = mod_pow(h, keys.signing_exponent, keys.modulus)
            r2 = mod_pow(r1, keys.verifying_exponent, keys.modulus)
            assert r2 == h % keys.modulus

    def test_generate_key_pair_hash_99999999(self):
        """Round trip of a digest larger than some moduli."""
        h = 99999999
        rng = random.Random(99999999)
        for _ in range(10):
            keys = generate_key_pair(rng)
            r1 = mod_pow(h, keys.signing_exponent, keys.modulus)
            r2 = mod_pow(r1, keys.verifying_exponent, keys.modulus)
            assert r2 == h % keys.modulus

    def test_round_trip_every_residue_small_key(self):
        """Every digest survives sign-then-verify under a tiny key."""
        keys = generate_key_pair(random.Random(7), max_key_val=40)
        for h in range(keys.modulus):
            signature = sign_digest(h, keys.modulus, keys.signing_exponent)
            assert verify_digest(h, signature, keys.modulus, keys.verifying_exponent)

    def test_generate_with_system_random(self):
        """Generation works without an explicit random source."""
        keys = KeyPair.generate(sanity_check=True)
        signature = Signer.from_key_pair(keys).sign("hello")
        assert Verifier.from_key_pair(keys).verify("hello", signature)


def _gcd(a, b):
    while b:
        a, b = b, a % b
    return a


class TestKeyViews:
    """Unit tests for the private and public key views."""

    def test_views_share_modulus(self):
        """Private and public views carry the pair's modulus."""
        keys = KeyPair(MODULUS, SIGNING_EXPONENT, VERIFYING_EXPONENT)
        assert keys.private_key == PrivateKey(MODULUS, SIGNING_EXPONENT)
        assert keys.public_key == PublicKey(MODULUS, VERIFYING_EXPONENT)

    def test_key_text(self):
        """Keys print as 'modulus, exponent'."""
        keys = KeyPair(MODULUS, SIGNING_EXPONENT, VERIFYING_EXPONENT)
        assert str(keys.private_key) == "902962279, 278653459"
        assert str(keys.public_key) == "902962279, 291642999"

    def test_key_from_text(self):
        """Text form parses back to the same key."""
        assert PrivateKey.from_text("902962279, 278653459") == PrivateKey(MODULUS, SIGNING_EXPONENT)
        assert PublicKey.from_text(" 0x35d1c0e7 ,291642999") == PublicKey(0x35d1c0e7, VERIFYING_EXPONENT)

    def test_key_pair_is_immutable(self):
        """Key pairs cannot be modified."""
        keys = KeyPair(MODULUS, SIGNING_EXPONENT, VERIFYING_EXPONENT)
        with pytest.raises(AttributeError):
            keys.modulus = 5

    def test_repr_hides_signing_exponent(self):
        """repr() does not show the signing exponent."""
        keys = KeyPair(MODULUS, SIGNING_EXPONENT, VERIFYING_EXPONENT)
        assert str(SIGNING_EXPONENT) not in repr(keys)

    def test_docstring_examples_run(self):
        """The usage examples in the key modules run as written."""
        import doctest
        from toysign.keys import keypair, signing

        for module in (keypair, signing):
            assert doctest.testmod(module).failed == 0

    def test_parse_key_value(self):
        """Decimal and 0x hex are accepted."""
        assert parse_key_value("902962279") == 902962279
        assert parse_key_value("0xFF") == 255
        assert parse_key_value(" 42 ") == 42


class TestSignVerify:
    """Unit tests for signing and verification."""

    def test_sign_message_meow_walkthrough(self):
        """meow signs to the known signature."""
        assert sign_message("meow", MODULUS, SIGNING_EXPONENT) == MEOW_SIGNATURE

    def test_verify_message_meow_walkthrough(self):
        """The known meow signature verifies."""
        assert verify_signature("meow", MEOW_SIGNATURE, MODULUS, VERIFYING_EXPONENT)

    def test_verify_message_meow_wrong_signature(self):
        """A wrong meow signature does not verify."""
        assert not verify_signature("meow", 111111, MODULUS, VERIFYING_EXPONENT)

    def test_sign_message_foo(self):
        """Known signature for foo."""
        assert sign_message("foo", 262373123, 120571543) == 111862601

    def test_sign_message_bar(self):
        """Known signature for bar."""
        assert sign_message("bar", 3360057163, 423721031) == 2318946848

    def test_sign_message_meow(self):
        """Known signature for meow under a second key."""
        assert sign_message("meow", 1240214083, 97643729) == 866459596

    def test_verify_signature_dog_correct(self):
        """This signature is correct."""
        assert verify_signature("dog", 11318728, 4228098967, 26379711)

    def test_verify_signature_dog_incorrect(self):
        """This signature is incorrect."""
        assert not verify_signature("dog", 0, 4228098967, 26379711)

    def test_bytes_and_text_sign_alike(self):
        """Text is signed as its UTF-8 bytes."""
        assert sign_message(b"meow", MODULUS, SIGNING_EXPONENT) == MEOW_SIGNATURE

    def test_signing_is_deterministic(self):
        """The same message and key give the same signature."""
        first = sign_message("repeat", MODULUS, SIGNING_EXPONENT)
        assert sign_message("repeat", MODULUS, SIGNING_EXPONENT) == first

    def test_verification_is_idempotent(self):
        """Verifying twice gives the same verdict."""
        for signature in (MEOW_SIGNATURE, 111111):
            first = verify_signature("meow", signature, MODULUS, VERIFYING_EXPONENT)
            second = verify_signature("meow", signature, MODULUS, VERIFYING_EXPONENT)
            assert first == second

    def test_digest_larger_than_modulus(self):
        """The digest is reduced modulo n before comparing."""
        signature = sign_message("meow", SMALL_KEY.modulus, SMALL_KEY.signing_exponent)
        assert signature == 3021
        assert verify_signature("meow", signature, SMALL_KEY.modulus,
                                SMALL_KEY.verifying_exponent)

    def test_verify_digest_congruent_signature(self):
        """Adding multiples of n to a signature does not change the verdict."""
        signature = sign_digest(1234, SMALL_KEY.modulus, SMALL_KEY.signing_exponent)
        for k in (1, 2):
            assert verify_digest(1234, signature + k * SMALL_KEY.modulus,
                                 SMALL_KEY.modulus, SMALL_KEY.verifying_exponent)
        assert not verify_digest(1234, signature + 1, SMALL_KEY.modulus,
                                 SMALL_KEY.verifying_exponent)

    def test_signature_in_range(self):
        """Signatures lie in [0, n)."""
        rng = random.Random(21)
        for i in range(10):
            keys = generate_key_pair(rng)
            signature = Signer.from_key_pair(keys).sign(f"message {i}")
            assert 0 <= signature < keys.modulus

    def test_signer_verifier_objects(self):
        """Signer and Verifier wrap the function API."""
        keys = KeyPair(MODULUS, SIGNING_EXPONENT, VERIFYING_EXPONENT)
        signer = Signer(keys.private_key)
        verifier = Verifier(keys.public_key)
        assert signer.sign("meow") == MEOW_SIGNATURE
        assert verifier.verify("meow", MEOW_SIGNATURE)
        assert not verifier.verify("woof", MEOW_SIGNATURE)
        assert signer.private_key.exponent == SIGNING_EXPONENT
        assert verifier.public_key.exponent == VERIFYING_EXPONENT

    def test_pluggable_digest(self):
        """Any bytes -> int function can serve as the digest."""
        keys = generate_key_pair(random.Random(31))
        signer = Signer.from_key_pair(keys, digest=sha256_digest)
        verifier = Verifier.from_key_pair(keys, digest=sha256_digest)
        signature = signer.sign("meow")
        assert verifier.verify("meow", signature)

        constant = lambda data: 42
        signature = sign_message("anything", keys.modulus, keys.signing_exponent, constant)
        assert verify_signature("something else", signature, keys.modulus,
                                keys.verifying_exponent, constant)

    def test_round_trip_generated_keys(self):
        """Signatures from generated keys verify."""
        rng = random.Random(41)
        for i in range(10):
            keys = generate_key_pair(rng)
            signature = sign_message(f"msg-{i}", keys.modulus, keys.signing_exponent)
            assert verify_signature(f"msg-{i}", signature, keys.modulus, keys.verifying_exponent)

    def test_keys_above_default_bound(self):
        """Object API works with keys from a larger prime bound."""
        keys = generate_key_pair(random.Random(51), max_key_val=2 ** 20)
        signature = Signer.from_key_pair(keys).sign("big")
        assert Verifier.from_key_pair(keys).verify("big", signature)
