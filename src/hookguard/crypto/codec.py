"""DER to IEEE P1363 conversion for ECDSA P-256 signatures."""

from ecdsa.der import UnexpectedDER, remove_integer, remove_sequence

from hookguard.errors.exceptions import SignatureFormatError

COMPONENT_SIZE = 32


def der_to_p1363(der_signature: bytes) -> bytes:
    """Convert ``SEQUENCE { INTEGER r, INTEGER s }`` into 64 bytes of ``r || s``.

    Each component is left-padded to 32 bytes. Components that are negative
    or wider than 32 bytes once the DER sign-padding byte is dropped are
    rejected, as is anything other than exactly two integers.
    """
    try:
        body, trailing = remove_sequence(der_signature)
        if trailing:
            raise SignatureFormatError("trailing bytes after signature sequence")
        r, rest = remove_integer(body)
        s, rest = remove_integer(rest)
    except UnexpectedDER as exc:
        raise SignatureFormatError(f"malformed DER signature: {exc}") from exc
    if rest:
        raise SignatureFormatError("signature sequence holds more than two integers")

    return _to_fixed(r, "r") + _to_fixed(s, "s")


def _to_fixed(value: int, name: str) -> bytes:
    if value < 0:
        raise SignatureFormatError(f"{name} is negative")
    if value.bit_length() > COMPONENT_SIZE * 8:
        raise SignatureFormatError(f"{name} is longer than {COMPONENT_SIZE} bytes")
    return value.to_bytes(COMPONENT_SIZE, "big")
