"""End-to-end tests for load_effective_configuration()."""

from __future__ import annotations

import json
import logging
from types import MappingProxyType

import pytest

from proxyconf.config.effective import build_effective_configuration, load_effective_configuration
from proxyconf.core.constants import DEFAULT_ACME_CA_SERVER
from proxyconf.core.errors import ConfigValidationError, FrozenConfigurationError


class TestLoadEffectiveConfiguration:
    def test_empty_file_gets_default_entry_point(self, write_config):
        path = write_config({})
        effective = load_effective_configuration(path)

        config = effective.configuration
        assert list(config.entry_points) == ["http"]
        assert config.entry_points["http"].address == ":80"
        assert config.default_entry_points == ("http",)
        assert config.life_cycle is not None
        assert effective.acme_provider is None
        assert effective.source == str(path.resolve())

    def test_acme_becomes_provider(self, write_config, acme_config_data):
        effective = load_effective_configuration(write_config(acme_config_data))

        assert effective.configuration.acme is None
        provider = effective.acme_provider
        assert provider is not None
        assert provider.configuration.ca_server == DEFAULT_ACME_CA_SERVER
        assert provider.configuration.http_challenge.entry_point == "http"
        assert provider.configuration.domains[0].sans == ("www.example.com",)
        assert provider.store is not None

    def test_result_is_frozen(self, write_config, acme_config_data):
        effective = load_effective_configuration(write_config(acme_config_data))
        config = effective.configuration

        assert isinstance(config.entry_points, MappingProxyType)
        with pytest.raises(FrozenConfigurationError):
            config.debug = True
        with pytest.raises(FrozenConfigurationError):
            config.entry_points["https"].address = ":8443"
        with pytest.raises(FrozenConfigurationError):
            effective.acme_provider.configuration.email = "other@example.com"

    def test_file_provider_gets_config_path(self, write_config):
        path = write_config({"file": {"watch": True}})
        effective = load_effective_configuration(path)
        assert effective.configuration.file.traefik_file == str(path.resolve())

    def test_unknown_acme_entry_point_rejected(self, write_config, acme_config_data):
        acme_config_data["acme"]["entryPoint"] = "websecure"
        with pytest.raises(ConfigValidationError, match="Unknown entrypoint 'websecure'"):
            load_effective_configuration(write_config(acme_config_data))

    def test_schema_error_rejected(self, write_config):
        with pytest.raises(ConfigValidationError, match="maxIdleConnsPerHost"):
            load_effective_configuration(write_config({"maxIdleConnsPerHost": -1}))


class TestBuildEffectiveConfiguration:
    def test_missing_storage_logged_and_acme_disabled(self, acme_config_data, caplog):
        acme_config_data["acme"]["storage"] = ""
        with caplog.at_level(logging.ERROR, logger="proxyconf"):
            effective = build_effective_configuration(acme_config_data)

        assert effective.acme_provider is None
        assert effective.configuration.acme is None
        assert "Unable to initialize ACME provider" in caplog.text

    def test_builder_error_wrapped(self):
        with pytest.raises(ConfigValidationError, match=r"lifeCycle\.graceTimeOut"):
            build_effective_configuration({"lifeCycle": {"graceTimeOut": "later"}})

    def test_tracing_pruned(self):
        effective = build_effective_configuration(
            {"tracing": {"backend": "zipkin", "jaeger": {}}},
        )
        tracing = effective.configuration.tracing
        assert tracing.jaeger is None
        assert tracing.zipkin is not None


class TestEmptySections:
    def test_empty_tls_challenge_enables_it(self, tmp_path):
        path = tmp_path / "traefik.yaml"
        path.write_text(
            "entryPoints:\n"
            "  https:\n"
            "    address: ':443'\n"
            "    tls:\n"
            "acme:\n"
            "  email: ops@example.com\n"
            f"  storage: {tmp_path / 'acme.json'}\n"
            "  entryPoint: https\n"
            "  tlsChallenge:\n",
            encoding="utf-8",
        )
        effective = load_effective_configuration(path)

        assert effective.configuration.entry_points["https"].tls is not None
        assert effective.acme_provider.configuration.tls_challenge is not None

    def test_empty_api_enables_it(self, tmp_path):
        path = tmp_path / "traefik.yaml"
        path.write_text("api:\n", encoding="utf-8")
        effective = load_effective_configuration(path)

        config = effective.configuration
        assert config.api is not None
        assert config.api.entry_point == "traefik"
        assert config.entry_points["traefik"].address == ":8080"


class TestStoreUpgradeFailure:
    def test_backup_failure_does_not_abort(self, tmp_path, acme_config_data, caplog):
        storage = tmp_path / "acme.json"
        storage.write_text(
            json.dumps({"Email": "ops@example.com", "DomainsCertificate": {"Certs": []}}),
            encoding="utf-8",
        )
        (tmp_path / "acme.json.bak").mkdir()

        with caplog.at_level(logging.ERROR, logger="proxyconf"):
            effective = build_effective_configuration(acme_config_data)

        assert effective.acme_provider is not None
        assert "Unable to create a backup" in caplog.text
