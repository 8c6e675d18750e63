"""Inbound webhook endpoints.

Both endpoints read the raw body themselves: signatures cover the exact
bytes on the wire, so the body is never pre-parsed by the framework.
"""

import logging

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from hookguard.dependencies import Ingress
from hookguard.models.events import EventSource, WebhookAck

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Webhooks"])


def _ack_response(ack: WebhookAck) -> JSONResponse:
    return JSONResponse(
        status_code=200,
        content=ack.model_dump(mode="json", by_alias=True, exclude_none=True),
    )


@router.post("/")
async def receive_webhook(request: Request, ingress: Ingress) -> JSONResponse:
    """Main endpoint: routes between custody and risk platform events."""
    raw_body = await request.body()
    ack = await ingress.handle(request.headers, raw_body)
    return _ack_response(ack)


@router.post("/hypernative")
async def receive_hypernative_webhook(request: Request, ingress: Ingress) -> JSONResponse:
    """Dedicated risk platform endpoint."""
    logger.info("Received risk platform webhook")
    raw_body = await request.body()
    ack = await ingress.handle(request.headers, raw_body, source=EventSource.HYPERNATIVE)
    return _ack_response(ack)
