"""Unit tests for core/config.py -- Settings validation.

Covers:
- dev mode auto-generates a long enough SECRET_KEY
- production mode refuses to start without SECRET_KEY
- short keys are rejected in both modes
- token lifetime defaults to 24 hours
"""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from core.config import Settings


def test_debug_generates_secret_key() -> None:
    settings = Settings(debug=True, secret_key="")
    assert len(settings.secret_key) >= 32


def test_production_requires_secret_key() -> None:
    with pytest.raises(ValidationError, match="SECRET_KEY is required"):
        Settings(debug=False, secret_key="")


def test_short_secret_key_rejected() -> None:
    with pytest.raises(ValidationError, match="at least 32 characters"):
        Settings(debug=True, secret_key="too-short")


def test_explicit_key_kept() -> None:
    key = "k" * 40
    assert Settings(debug=False, secret_key=key).secret_key == key


def test_token_lifetime_default() -> None:
    assert Settings.model_fields["token_expire_seconds"].default == 86400


def test_bcrypt_rounds_bounds() -> None:
    with pytest.raises(ValidationError):
        Settings(debug=True, bcrypt_rounds=3)
