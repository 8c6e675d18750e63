"""Models for inbound webhook events and their processing outcomes."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class EventSource(str, Enum):
    """Known webhook issuers."""

    FORDEFI = "fordefi"
    HYPERNATIVE = "hypernative"


class VerificationFailure(str, Enum):
    """Why a signature check failed. Logged, never returned to the caller."""

    MISSING = "missing"
    MALFORMED = "malformed"
    MISMATCH = "mismatch"


@dataclass(frozen=True)
class VerificationOutcome:
    valid: bool
    failure: VerificationFailure | None = None

    def __bool__(self) -> bool:
        return self.valid


VERIFIED = VerificationOutcome(valid=True)


@dataclass(frozen=True)
class TriggerOutcome:
    """Result of a signing trigger call.

    ``status_code`` is None when the request never got a response
    (timeout, connection or DNS failure).
    """

    success: bool
    status_code: int | None = None
    error: str | None = None


@dataclass
class InboundEvent:
    """A webhook whose signature has been verified."""

    source: EventSource
    raw_body: bytes
    payload: dict[str, Any]
    transaction_id: str | None = None
    details: dict[str, Any] = field(default_factory=dict)


class WebhookAck(BaseModel):
    """Success response for an accepted webhook."""

    model_config = ConfigDict(populate_by_name=True)

    status: str = "success"
    message: str
    source: EventSource
    transaction_id: str | None = Field(None, alias="transactionId")
    signing_triggered: bool | None = Field(None, alias="signingTriggered")
