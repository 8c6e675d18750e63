"""Classify inbound webhooks by issuer before choosing a verification path."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any, Mapping, Union

from hookguard.errors.exceptions import MissingSignatureError

logger = logging.getLogger(__name__)

SIGNATURE_HEADER = "x-signature"
TRANSACTION_HEADER = "fordefi-transaction-id"
DIGITAL_SIGNATURE_FIELD = "digitalSignature"
DATA_FIELD = "data"


@dataclass(frozen=True)
class FordefiRequest:
    """Signed by the custody platform: header signature over the whole body."""

    signature: str
    raw_body: bytes


@dataclass(frozen=True)
class HypernativeRequest:
    """Signed by the risk platform: body field signature over the ``data`` string."""

    signature: Any
    raw_body: bytes
    document: dict[str, Any]
    transaction_id: str | None = None

    @property
    def signed_data(self) -> bytes | None:
        """Exact bytes the signature covers, or None when ``data`` is not a string."""
        data = self.document.get(DATA_FIELD)
        if not isinstance(data, str):
            return None
        return data.encode("utf-8")


RoutedRequest = Union[FordefiRequest, HypernativeRequest]


def _parse_object(raw_body: bytes) -> dict[str, Any] | None:
    try:
        document = json.loads(raw_body)
    except (UnicodeDecodeError, ValueError, RecursionError):
        return None
    return document if isinstance(document, dict) else None


def parse_hypernative(headers: Mapping[str, str], raw_body: bytes) -> HypernativeRequest:
    """Build a risk-platform request or fail with a missing signature."""
    document = _parse_object(raw_body)
    signature = document.get(DIGITAL_SIGNATURE_FIELD) if document else None
    if not signature:
        raise MissingSignatureError("Missing digitalSignature")
    return HypernativeRequest(
        signature=signature,
        raw_body=raw_body,
        document=document,
        transaction_id=headers.get(TRANSACTION_HEADER) or None,
    )


def classify(headers: Mapping[str, str], raw_body: bytes) -> RoutedRequest:
    """Decide which issuer sent the request.

    A transaction header plus a JSON body carrying any truthy
    ``digitalSignature`` wins over an ``x-signature`` header, so a request
    with both markers is treated as a risk-platform event. A non-string
    ``digitalSignature`` is still routed here and then fails verification.
    """
    transaction_id = headers.get(TRANSACTION_HEADER)
    if transaction_id:
        document = _parse_object(raw_body)
        signature = document.get(DIGITAL_SIGNATURE_FIELD) if document else None
        if signature:
            logger.info("Detected risk platform event on main endpoint")
            return HypernativeRequest(
                signature=signature,
                raw_body=raw_body,
                document=document,
                transaction_id=transaction_id,
            )

    signature = headers.get(SIGNATURE_HEADER)
    if signature:
        return FordefiRequest(signature=signature, raw_body=raw_body)

    raise MissingSignatureError()
