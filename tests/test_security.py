# File: tests/test_security.py

from datetime import timedelta

import pytest

from vidshare.core.exceptions import InvalidTokenError
from vidshare.core.security import PasswordHasher, TokenIssuer


hasher = PasswordHasher(rounds=4)


def test_verify_accepts_own_digest():
    digest = hasher.hash("123456")
    assert digest != "123456"
    assert hasher.verify("123456", digest)


def test_verify_rejects_other_password():
    assert not hasher.verify("123456", hasher.hash("654321"))


def test_digests_are_salted():
    assert hasher.hash("123456") != hasher.hash("123456")


def test_verify_rejects_malformed_digest():
    # md5 hex digest of "123456", the legacy format
    assert not hasher.verify("123456", "e10adc3949ba59abbe56e057f20f883e")


def test_token_round_trip():
    issuer = TokenIssuer(secret="s3cret")
    token = issuer.issue({"userId": 42})
    claims = issuer.verify(token)
    assert claims["userId"] == 42
    assert claims["exp"] > claims["iat"]


def test_expired_token_rejected():
    issuer = TokenIssuer(secret="s3cret")
    token = issuer.issue({"userId": 42}, expires_delta=timedelta(seconds=-10))
    with pytest.raises(InvalidTokenError, match="expired"):
        issuer.verify(token)


def test_token_signed_with_other_secret_rejected():
    token = TokenIssuer(secret="one").issue({"userId": 42})
    with pytest.raises(InvalidTokenError):
        TokenIssuer(secret="two").verify(token)


def test_malformed_token_rejected():
    with pytest.raises(InvalidTokenError):
        TokenIssuer(secret="s3cret").verify("not-a-jwt")
