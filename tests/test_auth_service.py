import time
from datetime import timedelta

import pytest
from jose import jwt

from userhub.application.services.auth_service import PasswordHasher, TokenService
from userhub.core.exceptions import UnauthorizedException


@pytest.fixture(scope="module")
def hasher():
    return PasswordHasher(rounds=4)


@pytest.fixture
def tokens():
    return TokenService("unit-secret")


@pytest.mark.parametrize("password", ["secret-1", "p@ss w0rd ", "ünïcødé"])
def test_hash_then_verify_round_trips(hasher, password):
    hashed = hasher.hash(password)
    assert hashed != password
    assert hasher.verify(password, hashed)


def test_verify_rejects_other_plaintext(hasher):
    hashed = hasher.hash("secret-1")
    assert not hasher.verify("secret-2", hashed)
    assert not hasher.verify("", hashed)


def test_hash_is_salted(hasher):
    assert hasher.hash("secret-1") != hasher.hash("secret-1")


def test_default_work_factor_is_ten():
    assert PasswordHasher().hash("secret-1").startswith("$2b$10$")


def test_verify_malformed_hash_is_false(hasher):
    assert hasher.verify("secret-1", "not-a-bcrypt-hash") is False


def test_issue_and_verify(tokens):
    payload = tokens.verify(tokens.issue("abc123", "admin"))
    assert payload.id == "abc123"
    assert payload.role == "admin"


def test_token_carries_one_day_expiry(tokens):
    claims = jwt.get_unverified_claims(tokens.issue("abc123", "user"))
    assert set(claims) == {"id", "role", "exp"}
    assert abs(claims["exp"] - (time.time() + 24 * 60 * 60)) < 5


def test_expired_token_is_rejected(tokens):
    token = tokens.issue("abc123", "user", expires_delta=timedelta(seconds=-30))
    with pytest.raises(UnauthorizedException):
        tokens.verify(token)


def test_token_signed_with_other_secret_is_rejected(tokens):
    forged = TokenService("other-secret").issue("abc123", "admin")
    with pytest.raises(UnauthorizedException):
        tokens.verify(forged)


def test_tampered_token_is_rejected(tokens):
    token = tokens.issue("abc123", "user")
    header, payload, signature = token.split(".")
    with pytest.raises(UnauthorizedException):
        tokens.verify(f"{header}.{payload}x.{signature}")


def test_malformed_token_is_rejected(tokens):
    with pytest.raises(UnauthorizedException, match="Invalid token"):
        tokens.verify("not.a.token")


@pytest.mark.parametrize("claims", [{"role": "user"}, {"id": "abc123"}, {"id": "abc123", "role": "root"}])
def test_token_with_incomplete_claims_is_rejected(tokens, claims):
    token = jwt.encode(claims, "unit-secret", algorithm="HS256")
    with pytest.raises(UnauthorizedException):
        tokens.verify(token)


def test_token_without_expiry_is_rejected(tokens):
    token = jwt.encode({"id": "abc123", "role": "user"}, "unit-secret", algorithm="HS256")
    with pytest.raises(UnauthorizedException, match="Invalid token"):
        tokens.verify(token)
