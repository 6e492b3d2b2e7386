"""Tests for get_safe_acme_ca_server() in proxyconf.acme.legacy."""

from __future__ import annotations

import logging

import pytest

from proxyconf.acme.legacy import get_safe_acme_ca_server
from proxyconf.core.constants import DEFAULT_ACME_CA_SERVER


class TestGetSafeAcmeCaServer:
    def test_empty_returns_default(self):
        assert get_safe_acme_ca_server("") == DEFAULT_ACME_CA_SERVER
        assert DEFAULT_ACME_CA_SERVER == "https://acme-v02.api.letsencrypt.org/directory"

    def test_v01_production_upgraded(self, caplog):
        with caplog.at_level(logging.WARNING):
            result = get_safe_acme_ca_server("https://acme-v01.api.letsencrypt.org/directory")
        assert result == "https://acme-v02.api.letsencrypt.org/directory"
        assert "acme-v01.api.letsencrypt.org" in caplog.text
        assert "acme-v02.api.letsencrypt.org" in caplog.text

    def test_v01_staging_upgraded(self, caplog):
        with caplog.at_level(logging.WARNING):
            result = get_safe_acme_ca_server("https://acme-staging.api.letsencrypt.org/x")
        assert result == "https://acme-staging-v02.api.letsencrypt.org/x"
        assert "v01 endpoint" in caplog.text

    @pytest.mark.parametrize(
        "url",
        [
            "https://acme-v02.api.letsencrypt.org/directory",
            "https://acme-staging-v02.api.letsencrypt.org/directory",
            "https://ca.internal.example.com/acme/directory",
        ],
    )
    def test_other_urls_unchanged(self, url, caplog):
        with caplog.at_level(logging.WARNING):
            assert get_safe_acme_ca_server(url) == url
        assert caplog.records == []
