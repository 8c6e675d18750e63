"""Public key material for webhook issuers.

Keys are parsed once at startup into an immutable ``KeyRing`` that request
handlers share read-only.
"""

from __future__ import annotations

import base64
import binascii
import logging
import re
from dataclasses import dataclass
from pathlib import Path

from ecdsa import NIST256p, VerifyingKey
from ecdsa.curves import UnknownCurveError
from ecdsa.der import UnexpectedDER
from ecdsa.keys import MalformedPointError

from hookguard.config import Settings
from hookguard.errors.exceptions import KeyFormatError
from hookguard.models.events import EventSource

logger = logging.getLogger(__name__)

_PEM_BEGIN = "-----BEGIN PUBLIC KEY-----"
_PEM_END = "-----END PUBLIC KEY-----"
_WHITESPACE = re.compile(r"\s+")


@dataclass(frozen=True)
class PublicKeyMaterial:
    """SPKI public key for one issuer: ECDSA over P-256 with SHA-256."""

    source: EventSource
    spki: bytes
    verifying_key: VerifyingKey
    curve: str = "P-256"
    algorithm: str = "ECDSA"
    hash_name: str = "SHA-256"


@dataclass(frozen=True)
class KeyRing:
    fordefi: PublicKeyMaterial
    hypernative: PublicKeyMaterial

    def for_source(self, source: EventSource) -> PublicKeyMaterial:
        if source is EventSource.FORDEFI:
            return self.fordefi
        return self.hypernative


def pem_to_spki(pem_text: str | None) -> bytes:
    """Strip PEM armour and whitespace and base64-decode the SPKI bytes."""
    if not pem_text or not pem_text.strip():
        raise KeyFormatError("public key is empty")

    # Keys pasted into env vars often carry literal "\n" sequences
    normalized = pem_text.replace("\\n", "\n")
    body = normalized.replace(_PEM_BEGIN, "").replace(_PEM_END, "")
    body = _WHITESPACE.sub("", body)
    if not body:
        raise KeyFormatError("public key has no content between PEM delimiters")

    try:
        return base64.b64decode(body, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise KeyFormatError(f"public key is not valid base64: {exc}") from exc


def load_public_key(source: EventSource, pem_text: str | None) -> PublicKeyMaterial:
    """Parse PEM text into key material, rejecting anything but a P-256 key."""
    spki = pem_to_spki(pem_text)
    try:
        verifying_key = VerifyingKey.from_der(spki)
    except (UnexpectedDER, MalformedPointError, UnknownCurveError, ValueError) as exc:
        raise KeyFormatError(f"{source.value} public key is not a valid SPKI key: {exc}") from exc

    if verifying_key.curve != NIST256p:
        raise KeyFormatError(
            f"{source.value} public key uses curve {verifying_key.curve.name}, expected NIST256p"
        )
    return PublicKeyMaterial(source=source, spki=spki, verifying_key=verifying_key)


def read_pem(inline_value: str | None, path: str) -> str:
    """Prefer the inline configuration value, fall back to the PEM file."""
    if inline_value:
        return inline_value
    try:
        return Path(path).read_text(encoding="utf-8")
    except OSError as exc:
        raise KeyFormatError(f"cannot read public key file {path}: {exc}") from exc


def load_key_ring(settings: Settings) -> KeyRing:
    """Load every issuer key. Any failure is fatal."""
    keys = {}
    for source, inline_value, path in (
        (EventSource.FORDEFI, settings.fordefi_public_key, settings.fordefi_public_key_path),
        (EventSource.HYPERNATIVE, settings.hypernative_public_key, settings.hypernative_public_key_path),
    ):
        keys[source] = load_public_key(source, read_pem(inline_value, path))
        logger.info(
            "Loaded %s public key from %s",
            source.value,
            "environment" if inline_value else path,
        )
    return KeyRing(fordefi=keys[EventSource.FORDEFI], hypernative=keys[EventSource.HYPERNATIVE])
