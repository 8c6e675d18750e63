"""Application configuration via environment variables."""

from pydantic import SecretStr
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Custody platform webhooks (x-signature header over the raw body)
    fordefi_public_key: str | None = None
    fordefi_public_key_path: str = "keys/fordefi_public_key.pem"

    # Risk monitoring webhooks (digitalSignature over the nested data field)
    hypernative_public_key: str | None = None
    hypernative_public_key_path: str = "keys/hypernative_public_key.pem"

    # Signing trigger API
    fordefi_api_user_token: SecretStr = SecretStr("")
    signing_trigger_url_template: str = (
        "https://api.fordefi.com/api/v1/transactions/{transaction_id}/trigger-signing"
    )
    signing_trigger_timeout_seconds: float = 10.0

    # Server
    host: str = "0.0.0.0"
    port: int = 8080
    log_level: str = "info"
    json_logs: bool = True

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }


settings = Settings()
