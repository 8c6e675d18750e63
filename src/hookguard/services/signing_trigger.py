"""Client for the transaction signing trigger API."""

from __future__ import annotations

import logging
from urllib.parse import quote

import httpx

from hookguard.models.events import TriggerOutcome

logger = logging.getLogger(__name__)


class SigningTriggerClient:
    """Asks the custody API to sign a pending transaction.

    Failures are returned as outcomes, never raised, and never retried.
    """

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        api_token: str,
        url_template: str,
        timeout: float = 10.0,
    ) -> None:
        self._client = http_client
        self._api_token = api_token
        self._url_template = url_template
        self._timeout = timeout

    def url_for(self, transaction_id: str) -> str:
        return self._url_template.format(transaction_id=quote(transaction_id, safe=""))

    async def trigger_signing(self, transaction_id: str) -> TriggerOutcome:
        url = self.url_for(transaction_id)
        headers = {
            "Authorization": f"Bearer {self._api_token}",
            "Content-Type": "application/json",
        }
        logger.info("Triggering signing for transaction %s", transaction_id)

        try:
            response = await self._client.post(url, headers=headers, timeout=self._timeout)
        except httpx.HTTPError as exc:
            logger.error(
                "Error triggering signing for transaction %s: %s",
                transaction_id,
                exc,
                extra={"error_type": type(exc).__name__},
            )
            return TriggerOutcome(success=False, error=str(exc) or type(exc).__name__)

        if response.is_success:
            logger.info(
                "Triggered signing for transaction %s",
                transaction_id,
                extra={"status_code": response.status_code, "response": response.text},
            )
            return TriggerOutcome(success=True, status_code=response.status_code)

        logger.error(
            "Signing trigger for transaction %s returned %s",
            transaction_id,
            response.status_code,
            extra={"status_code": response.status_code, "response": response.text},
        )
        return TriggerOutcome(
            success=False,
            status_code=response.status_code,
            error=f"HTTP {response.status_code}",
        )
