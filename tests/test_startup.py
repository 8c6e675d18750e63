"""Tests for application startup validation."""

import pytest
from pydantic import SecretStr

from hookguard.errors.exceptions import ConfigurationError, KeyFormatError
from hookguard.main import create_app
from hookguard.services.ingress import WebhookIngress


async def test_startup_loads_keys_and_builds_ingress(settings):
    app = create_app(settings)
    async with app.router.lifespan_context(app):
        assert isinstance(app.state.ingress, WebhookIngress)


async def test_startup_fails_without_api_token(settings):
    bad = settings.model_copy(update={"fordefi_api_user_token": SecretStr("")})
    app = create_app(bad)
    with pytest.raises(ConfigurationError):
        async with app.router.lifespan_context(app):
            pass


async def test_startup_fails_with_malformed_key(settings):
    app = create_app(settings.model_copy(update={"hypernative_public_key": "-----BEGIN PUBLIC KEY-----\nAAAA\n-----END PUBLIC KEY-----"}))
    with pytest.raises(KeyFormatError):
        async with app.router.lifespan_context(app):
            pass


async def test_startup_fails_with_missing_key_file(settings, tmp_path):
    app = create_app(
        settings.model_copy(
            update={"fordefi_public_key": None, "fordefi_public_key_path": str(tmp_path / "absent.pem")}
        )
    )
    with pytest.raises(KeyFormatError):
        async with app.router.lifespan_context(app):
            pass
