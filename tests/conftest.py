import json
import sys
import time
from pathlib import Path
from types import SimpleNamespace
from unittest.mock import patch

import pytest
import requests
from cryptography.hazmat.primitives.asymmetric import rsa
from cryptography.hazmat.primitives import serialization
from jose import jwt
from jose.utils import base64url_encode

# Ensure src/ is on sys.path so tests can import the `cognito_tokens` package.
PROJECT_ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(PROJECT_ROOT / "src"))

REGION = "us-east-1"
USER_POOL_ID = "us-east-1_TEST"
CLIENT_ID = "client-id-123"
ISSUER = f"https://cognito-idp.{REGION}.amazonaws.com/{USER_POOL_ID}"
JWKS_URL = f"{ISSUER}/.well-known/jwks.json"


def generate_rsa_jwk_and_pem(kid: str):
    private_key = rsa.generate_private_key(public_exponent=65537, key_size=2048)
    private_pem = private_key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.PKCS8,
        encryption_algorithm=serialization.NoEncryption(),
    ).decode("utf-8")

    pub_numbers = private_key.public_key().public_numbers()
    n, e = pub_numbers.n, pub_numbers.e
    n_b64 = base64url_encode(n.to_bytes((n.bit_length() + 7) // 8, "big")).decode("utf-8")
    e_b64 = base64url_encode(e.to_bytes((e.bit_length() + 7) // 8, "big")).decode("utf-8")

    return private_pem, {"kty": "RSA", "kid": kid, "use": "sig", "alg": "RS256", "n": n_b64, "e": e_b64}


class DummyResp:
    def __init__(self, body=None, status_code=200, content=None):
        self.status_code = status_code
        if content is None:
            content = json.dumps(body).encode("utf-8") if body is not None else b""
        self.content = content

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error")

    def json(self):
        return json.loads(self.content)


@pytest.fixture(scope="session")
def signing_key():
    private_pem, jwk = generate_rsa_jwk_and_pem("test-kid")
    return SimpleNamespace(kid="test-kid", private_pem=private_pem, jwk=jwk, jwks={"keys": [jwk]})


@pytest.fixture(scope="session")
def other_signing_key():
    private_pem, jwk = generate_rsa_jwk_and_pem("other-kid")
    return SimpleNamespace(kid="other-kid", private_pem=private_pem, jwk=jwk, jwks={"keys": [jwk]})


@pytest.fixture
def id_claims():
    return {"sub": "user-1", "cognito:username": "tester", "iss": ISSUER, "aud": CLIENT_ID,
            "token_use": "id", "exp": int(time.time()) + 300}


@pytest.fixture
def access_claims():
    return {"sub": "user-1", "iss": ISSUER, "client_id": CLIENT_ID, "token_use": "access",
            "scope": "openid profile", "exp": int(time.time()) + 300}


@pytest.fixture
def sign(signing_key):
    def _sign(claims, kid=None, private_pem=None):
        return jwt.encode(
            claims,
            private_pem or signing_key.private_pem,
            algorithm="RS256",
            headers={"kid": kid or signing_key.kid},
        )

    return _sign


@pytest.fixture
def make_verifier(signing_key):
    from cognito_tokens.verifier import CognitoTokenVerifier

    def _make(jwks=None, cache=None, **kwargs):
        body = signing_key.jwks if jwks is None else jwks
        with patch("requests.get", return_value=DummyResp(body)):
            return CognitoTokenVerifier(REGION, USER_POOL_ID, CLIENT_ID, cache, **kwargs)

    return _make
