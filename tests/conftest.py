"""Root conftest for the proxyconf test suite."""

from __future__ import annotations

import sys
from pathlib import Path

import pytest
import yaml

# ---------------------------------------------------------------------------
# Make ``src/`` importable without installing the package
# ---------------------------------------------------------------------------
_SRC = str(Path(__file__).resolve().parent.parent / "src")
if _SRC not in sys.path:
    sys.path.insert(0, _SRC)


# ---------------------------------------------------------------------------
# Config data shared by multiple test modules
# ---------------------------------------------------------------------------


@pytest.fixture()
def acme_config_data(tmp_path: Path) -> dict:
    """Return raw config data with an HTTPS entry point and an ACME block."""
    return {
        "defaultEntryPoints": ["http", "https"],
        "entryPoints": {
            "http": {"address": ":80"},
            "https": {"address": ":443", "tls": {}},
        },
        "acme": {
            "email": "ops@example.com",
            "storage": str(tmp_path / "acme.json"),
            "entryPoint": "https",
            "keyType": "RSA4096",
            "domains": [{"main": "example.com", "sans": ["www.example.com"]}],
            "httpChallenge": {"entryPoint": "http"},
        },
    }


@pytest.fixture()
def write_config(tmp_path: Path):
    """Return a helper writing *data* to a temp YAML file."""

    def _write(data: dict, name: str = "traefik.yaml") -> Path:
        path = tmp_path / name
        path.write_text(
            yaml.safe_dump(data, default_flow_style=False, sort_keys=False),
            encoding="utf-8",
        )
        return path

    return _write


# ---------------------------------------------------------------------------
# Logger cleanup: configure_logging() detaches "proxyconf" from the root
# logger, which would hide records from caplog in later tests
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def fresh_logging():
    """Restore the ``proxyconf`` logger after every test."""
    import logging

    yield
    logger = logging.getLogger("proxyconf")
    for handler in logger.handlers:
        handler.close()
    logger.handlers.clear()
    logger.propagate = True
    logger.setLevel(logging.NOTSET)
