"""ECDSA P-256 / SHA-256 webhook signature verification."""

import base64
import binascii
import hashlib
import logging

from ecdsa import BadSignatureError
from ecdsa.util import sigdecode_string

from hookguard.crypto.codec import der_to_p1363
from hookguard.crypto.keys import PublicKeyMaterial
from hookguard.errors.exceptions import SignatureFormatError
from hookguard.models.events import VERIFIED, VerificationFailure, VerificationOutcome

logger = logging.getLogger(__name__)


def check_signature(key: PublicKeyMaterial, signature_b64: object, message: bytes) -> VerificationOutcome:
    """Verify a base64 DER signature over ``message``.

    Never raises: every failure is reported as an invalid outcome.
    """
    if not signature_b64:
        return VerificationOutcome(valid=False, failure=VerificationFailure.MISSING)
    if not isinstance(signature_b64, str):
        return VerificationOutcome(valid=False, failure=VerificationFailure.MALFORMED)

    try:
        der_signature = base64.b64decode(signature_b64, validate=True)
        compact = der_to_p1363(der_signature)
    except (binascii.Error, ValueError, SignatureFormatError) as exc:
        logger.warning("Signature for %s is malformed: %s", key.source.value, exc)
        return VerificationOutcome(valid=False, failure=VerificationFailure.MALFORMED)

    logger.debug(
        "Verifying %s signature",
        key.source.value,
        extra={
            "signature_length": len(der_signature),
            "data_length": len(message),
            "signature_preview": signature_b64[:20] + "...",
        },
    )

    try:
        key.verifying_key.verify(
            compact,
            message,
            hashfunc=hashlib.sha256,
            sigdecode=sigdecode_string,
        )
    except BadSignatureError:
        return VerificationOutcome(valid=False, failure=VerificationFailure.MISMATCH)
    except Exception:
        logger.exception("Signature verification error for %s", key.source.value)
        return VerificationOutcome(valid=False, failure=VerificationFailure.MALFORMED)

    return VERIFIED


def verify(key: PublicKeyMaterial, signature_b64: str | None, message: bytes) -> bool:
    """Boolean form of :func:`check_signature`."""
    return check_signature(key, signature_b64, message).valid
