"""Signing helpers shared by the tests."""

import base64
import hashlib

import httpx
from ecdsa import SigningKey
from ecdsa.util import sigencode_der


def sign_b64(signing_key: SigningKey, data: bytes) -> str:
    """Base64 DER ECDSA/SHA-256 signature, as the issuers send it."""
    der = signing_key.sign(data, hashfunc=hashlib.sha256, sigencode=sigencode_der)
    return base64.b64encode(der).decode("ascii")


def public_pem(signing_key: SigningKey) -> str:
    return signing_key.get_verifying_key().to_pem().decode("ascii")


class FakeSigningApi:
    """Stands in for the signing trigger API behind an httpx.MockTransport."""

    def __init__(self) -> None:
        self.status_code = 200
        self.exception: Exception | None = None
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.exception is not None:
            raise self.exception
        return httpx.Response(self.status_code, json={"ok": self.status_code < 300})
