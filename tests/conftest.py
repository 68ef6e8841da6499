"""Test configuration utilities and shared fixtures."""

import sys
from pathlib import Path

# Make ``src`` importable when pytest runs without an editable install.
ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

import pytest  # noqa: E402
from flask import Flask  # noqa: E402
from flask.testing import FlaskClient  # noqa: E402

from salarytax.backend.app import create_app  # noqa: E402
from salarytax.backend.config.year_config import TaxBracket  # noqa: E402


@pytest.fixture()
def app() -> Flask:
    """Return a configured Flask application for integration tests."""

    application = create_app()
    application.config.update(TESTING=True)
    return application


@pytest.fixture()
def client(app: Flask) -> FlaskClient:
    """Provide a test client bound to the configured Flask app."""

    return app.test_client()


@pytest.fixture()
def sample_brackets() -> list[TaxBracket]:
    """Three-band set: 15% to 50k, 25% to 100k, 35% above."""

    return [
        TaxBracket(min=0, max=50_000, rate=0.15),
        TaxBracket(min=50_000, max=100_000, rate=0.25),
        TaxBracket(min=100_000, rate=0.35),
    ]
