"""FastAPI dependency injection providers."""

from typing import Annotated

from fastapi import Depends, Request

from hookguard.services.ingress import WebhookIngress


def get_ingress(request: Request) -> WebhookIngress:
    """Return the webhook processor built at startup."""
    return request.app.state.ingress


Ingress = Annotated[WebhookIngress, Depends(get_ingress)]
