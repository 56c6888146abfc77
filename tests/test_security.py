import pytest

from storefront.domain.exceptions import ValidationError
from storefront.utils.security import hash_password, verify_password


def test_password_hash_is_bcrypt_and_verifies():
    encoded = hash_password("correct horse")

    assert encoded.startswith("$2")
    assert "correct horse" not in encoded
    assert verify_password("correct horse", encoded)
    assert not verify_password("wrong horse", encoded)


def test_same_password_gets_a_fresh_salt():
    assert hash_password("secret-pass") != hash_password("secret-pass")


def test_malformed_hash_does_not_verify():
    assert not verify_password("secret-pass", "not-a-bcrypt-hash")


def test_overlong_password_is_rejected():
    with pytest.raises(ValidationError):
        hash_password("x" * 73)
    assert not verify_password("x" * 73, hash_password("x" * 72))
