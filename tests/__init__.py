# toysign Test Suite
"""
Test suite including:
- Unit tests (number theory, digests, keys, signing)
- Integration tests (command line, audit log)
- Security tests (invalid inputs, tampering)

Run with: pytest
Coverage: coverage run -m pytest && coverage report
"""
