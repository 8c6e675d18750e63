"""Custom exception classes for the webhook service."""


class HookGuardError(Exception):
    """Base exception for request-level failures."""

    def __init__(self, code: str, message: str, details=None, status_code: int = 500):
        self.code = code
        self.message = message
        self.details = details
        self.status_code = status_code
        super().__init__(message)


class EmptyBodyError(HookGuardError):
    """Request arrived without a body."""

    def __init__(self, message: str = "Empty request body"):
        super().__init__("EMPTY_BODY", message, status_code=400)


class InvalidPayloadError(HookGuardError):
    """Verified body is not a JSON object."""

    def __init__(self, message: str = "Invalid JSON in request body"):
        super().__init__("INVALID_PAYLOAD", message, status_code=400)


class MissingSignatureError(HookGuardError):
    """No recognised signature marker on the request."""

    def __init__(self, message: str = "Missing signature"):
        super().__init__("MISSING_SIGNATURE", message, status_code=401)


class InvalidSignatureError(HookGuardError):
    """Signature did not verify.

    Raised for every verification failure mode alike; the reason is only logged.
    """

    def __init__(self, message: str = "Invalid signature"):
        super().__init__("INVALID_SIGNATURE", message, status_code=401)


class KeyFormatError(Exception):
    """Public key text is absent or not a valid P-256 SPKI key. Fatal at startup."""


class ConfigurationError(Exception):
    """Required configuration is missing. Fatal at startup."""


class SignatureFormatError(ValueError):
    """DER signature is not a well-formed P-256 ECDSA signature."""


class InternalServerError(HookGuardError):
    """Unexpected fault while handling a webhook. Detail stays in the log."""

    def __init__(self, message: str = "Internal server error"):
        super().__init__("INTERNAL_ERROR", message, status_code=500)
