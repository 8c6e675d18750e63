"""Per-request webhook processing: route, verify, parse, trigger."""

from __future__ import annotations

import json
import logging
from typing import Mapping

from starlette.concurrency import run_in_threadpool

from hookguard.crypto.keys import KeyRing
from hookguard.crypto.verifier import check_signature
from hookguard.errors.exceptions import (
    EmptyBodyError,
    HookGuardError,
    InternalServerError,
    InvalidPayloadError,
    InvalidSignatureError,
)
from hookguard.logging_config import bind_event_context
from hookguard.models.events import (
    EventSource,
    InboundEvent,
    VerificationFailure,
    VerificationOutcome,
    WebhookAck,
)
from hookguard.services.event_router import (
    DIGITAL_SIGNATURE_FIELD,
    FordefiRequest,
    HypernativeRequest,
    RoutedRequest,
    classify,
    parse_hypernative,
)
from hookguard.services.signing_trigger import SigningTriggerClient

logger = logging.getLogger(__name__)


class WebhookIngress:
    """Turns a raw webhook request into an acknowledgement.

    Verification always runs against the bytes received on the wire and
    always completes before the payload is parsed or any downstream call
    is made.
    """

    def __init__(self, key_ring: KeyRing, trigger_client: SigningTriggerClient) -> None:
        self._key_ring = key_ring
        self._trigger_client = trigger_client

    async def handle(
        self,
        headers: Mapping[str, str],
        raw_body: bytes,
        source: EventSource | None = None,
    ) -> WebhookAck:
        """Process one webhook.

        Args:
            headers: Request headers (case-insensitive mapping).
            raw_body: Unparsed request body.
            source: Force the issuer instead of classifying the request.

        Raises:
            HookGuardError: On any rejection; unexpected faults are wrapped
                in ``InternalServerError``.
        """
        try:
            return await self._handle(headers, raw_body, source)
        except HookGuardError:
            raise
        except Exception as exc:
            logger.exception("Error processing webhook")
            raise InternalServerError() from exc

    async def _handle(
        self,
        headers: Mapping[str, str],
        raw_body: bytes,
        source: EventSource | None,
    ) -> WebhookAck:
        if not raw_body:
            raise EmptyBodyError()

        if source is EventSource.HYPERNATIVE:
            routed: RoutedRequest = parse_hypernative(headers, raw_body)
        else:
            routed = classify(headers, raw_body)

        event = await self._authenticate(routed)
        bind_event_context(event.source.value, event.transaction_id)

        if event.source is EventSource.FORDEFI:
            logger.info(
                "Received custody platform event",
                extra={
                    "payload": event.payload,
                    "event_transaction_id": event.details.get("event_transaction_id"),
                },
            )
            return WebhookAck(message="Fordefi webhook received and processed", source=event.source)

        return await self._finish_hypernative(event)

    async def _authenticate(self, routed: RoutedRequest) -> InboundEvent:
        if isinstance(routed, HypernativeRequest):
            source = EventSource.HYPERNATIVE
            message = routed.signed_data
        else:
            source = EventSource.FORDEFI
            message = routed.raw_body

        key = self._key_ring.for_source(source)
        if message is None:
            outcome = VerificationOutcome(valid=False, failure=VerificationFailure.MISSING)
        else:
            outcome = await run_in_threadpool(check_signature, key, routed.signature, message)

        if not outcome:
            logger.error(
                "Invalid %s signature",
                source.value,
                extra={"failure": outcome.failure.value if outcome.failure else None},
            )
            raise InvalidSignatureError()

        return _build_event(routed)

    async def _finish_hypernative(self, event: InboundEvent) -> WebhookAck:
        logger.info("Received risk platform event", extra={"payload": _redact(event.payload)})
        if "risk_insight" in event.details:
            logger.info("Parsed risk insight", extra={"risk_insight": event.details["risk_insight"]})

        if not event.transaction_id:
            logger.warning("No transaction ID provided, skipping signing trigger")
            return WebhookAck(
                message="Hypernative webhook received and processed (no transaction ID to trigger)",
                source=event.source,
                signing_triggered=False,
            )

        outcome = await self._trigger_client.trigger_signing(event.transaction_id)
        if outcome.success:
            return WebhookAck(
                message="Hypernative webhook received, processed, and signing triggered",
                source=event.source,
                transaction_id=event.transaction_id,
                signing_triggered=True,
            )
        return WebhookAck(
            status="partial_success",
            message="Hypernative webhook received and processed, but signing trigger failed",
            source=event.source,
            transaction_id=event.transaction_id,
            signing_triggered=False,
        )


def _redact(document: dict) -> dict:
    """Copy of a risk platform document with the signature cut to a preview."""
    signature = document.get(DIGITAL_SIGNATURE_FIELD)
    if not signature:
        return document
    return {**document, DIGITAL_SIGNATURE_FIELD: str(signature)[:20] + "..."}


def _build_event(routed: RoutedRequest) -> InboundEvent:
    """Parse a verified request into an InboundEvent."""
    if isinstance(routed, FordefiRequest):
        try:
            payload = json.loads(routed.raw_body)
        except (UnicodeDecodeError, ValueError, RecursionError) as exc:
            raise InvalidPayloadError() from exc
        if not isinstance(payload, dict):
            raise InvalidPayloadError("Webhook body must be a JSON object")
        event = payload.get("event")
        embedded_tx = event.get("transaction_id") if isinstance(event, dict) else None
        details = {"event_transaction_id": embedded_tx} if embedded_tx else {}
        return InboundEvent(
            source=EventSource.FORDEFI,
            raw_body=routed.raw_body,
            payload=payload,
            details=details,
        )

    details = {}
    try:
        details["risk_insight"] = json.loads(routed.document["data"])
    except (ValueError, RecursionError) as exc:
        logger.warning("Error parsing nested data: %s", exc)
    return InboundEvent(
        source=EventSource.HYPERNATIVE,
        raw_body=routed.raw_body,
        payload=routed.document,
        transaction_id=routed.transaction_id,
        details=details,
    )
