"""Tests for the builders in proxyconf.config.settings."""

from __future__ import annotations

from datetime import timedelta

import pytest

from proxyconf.config.settings import (
    _build_entry_point,
    _build_life_cycle,
    _build_metrics,
    _build_rancher,
    _build_tracing,
    build_configuration,
    parse_default_entry_points,
)
from proxyconf.core.constants import DEFAULT_GRACE_TIMEOUT, DEFAULT_IDLE_TIMEOUT


class TestBuildConfigurationDefaults:
    def test_empty_dict(self):
        config = build_configuration({})
        assert config.entry_points == {}
        assert config.default_entry_points == []
        assert config.acme is None
        assert config.tracing is None
        assert config.life_cycle is None
        assert config.log_level == "ERROR"
        assert config.providers_throttle_duration == timedelta(seconds=2)
        assert config.max_idle_conns_per_host == 200

    def test_sections_with_defaults(self):
        config = build_configuration(
            {
                "respondingTimeouts": {"readTimeout": "5s"},
                "forwardingTimeouts": {},
                "healthCheck": {"interval": 15},
                "api": {},
            }
        )
        assert config.responding_timeouts.read_timeout == timedelta(seconds=5)
        assert config.responding_timeouts.idle_timeout == DEFAULT_IDLE_TIMEOUT
        assert config.forwarding_timeouts.dial_timeout == timedelta(seconds=30)
        assert config.health_check.interval == timedelta(seconds=15)
        assert config.health_check.timeout == timedelta(seconds=5)
        assert config.api.entry_point == "traefik"
        assert config.api.dashboard is True


class TestBuildEntryPoint:
    def test_full_entry_point(self):
        ep = _build_entry_point(
            {
                "address": ":443",
                "compress": True,
                "forwardedHeaders": {"trustedIPs": ["10.0.0.0/8"]},
                "redirect": {"entryPoint": "https", "permanent": True},
                "tls": {
                    "minVersion": "VersionTLS12",
                    "certificates": [
                        {"certFile": "a.crt", "keyFile": "a.key"},
                        {"certFile": "b.crt", "keyFile": "b.key"},
                    ],
                    "clientCA": {"files": ["ca.pem"], "optional": True},
                },
            },
            "https",
        )
        assert ep.address == ":443"
        assert ep.compress is True
        assert ep.forwarded_headers.trusted_ips == ["10.0.0.0/8"]
        assert ep.redirect.entry_point == "https"
        assert ep.redirect.permanent is True
        assert ep.tls.min_version == "VersionTLS12"
        assert [c.cert_file for c in ep.tls.certificates] == ["a.crt", "b.crt"]
        assert ep.tls.client_ca.files == ["ca.pem"]
        assert ep.tls.default_certificate is None

    def test_none_gives_bare_entry_point(self):
        ep = _build_entry_point(None, "web")
        assert ep.address == ""
        assert ep.tls is None
        assert ep.forwarded_headers is None


class TestBuildLifeCycle:
    def test_absent(self):
        assert _build_life_cycle(None) is None

    def test_grace_timeout_default(self):
        life_cycle = _build_life_cycle({})
        assert life_cycle.grace_timeout == DEFAULT_GRACE_TIMEOUT
        assert life_cycle.request_accept_grace_timeout == timedelta(0)

    def test_bad_duration_names_field(self):
        with pytest.raises(ValueError, match=r"lifeCycle\.graceTimeOut"):
            _build_life_cycle({"graceTimeOut": "soon"})


class TestBuildRancher:
    def test_flat_and_nested(self):
        rancher = _build_rancher(
            {
                "accessKey": "A",
                "api": {"endpoint": "https://rancher", "accessKey": "X", "secretKey": "Y"},
                "metadata": {"intervalPoll": True},
            }
        )
        assert rancher.access_key == "A"
        assert rancher.api.endpoint == "https://rancher"
        assert rancher.metadata.interval_poll is True
        assert rancher.metadata.prefix == ""


class TestBuildMetrics:
    def test_prometheus_defaults(self):
        metrics = _build_metrics({"prometheus": {}})
        assert metrics.prometheus.entry_point == "traefik"
        assert metrics.prometheus.buckets == [0.1, 0.3, 1.2, 5.0]

    def test_no_prometheus(self):
        assert _build_metrics({}).prometheus is None


class TestBuildTracing:
    def test_partial_backend_uses_defaults(self):
        tracing = _build_tracing({"backend": "jaeger", "jaeger": {"samplingParam": 0.5}})
        assert tracing.jaeger.sampling_param == 0.5
        assert tracing.jaeger.local_agent_host_port == "127.0.0.1:6831"
        assert tracing.zipkin is None


class TestBuildAcme:
    def test_acme_block(self):
        config = build_configuration(
            {
                "acme": {
                    "email": "ops@example.com",
                    "storage": "acme.json",
                    "entryPoint": "https",
                    "onDemand": True,
                    "domains": [{"main": "example.com"}],
                    "dnsChallenge": {"provider": "route53", "delayBeforeCheck": "1m"},
                    "tlsChallenge": {},
                }
            }
        )
        acme = config.acme
        assert acme.email == "ops@example.com"
        assert acme.on_demand is True
        assert acme.domains[0].main == "example.com"
        assert acme.domains[0].sans == []
        assert acme.dns_challenge.delay_before_check == timedelta(minutes=1)
        assert acme.tls_challenge is not None
        assert acme.http_challenge is None


class TestParseDefaultEntryPoints:
    def test_list(self):
        assert parse_default_entry_points(["http", "https"]) == ["http", "https"]

    def test_comma_string(self):
        assert parse_default_entry_points("http, https") == ["http", "https"]

    def test_none(self):
        assert parse_default_entry_points(None) == []

    def test_empty_string_rejected(self):
        with pytest.raises(ValueError, match="bad defaultEntryPoints format"):
            parse_default_entry_points(" , ")


class TestNullSections:
    def test_null_section_enabled_with_defaults(self):
        config = build_configuration({"api": None, "ping": None, "lifeCycle": None})
        assert config.api.entry_point == "traefik"
        assert config.ping.entry_point == "traefik"
        assert config.life_cycle.grace_timeout == DEFAULT_GRACE_TIMEOUT

    def test_null_challenge_marker_enabled(self):
        config = build_configuration(
            {"acme": {"storage": "acme.json", "tlsChallenge": None, "httpChallenge": None}},
        )
        assert config.acme.tls_challenge is not None
        assert config.acme.http_challenge.entry_point == ""

    def test_null_nested_sections(self):
        config = build_configuration(
            {
                "entryPoints": {"https": {"tls": None, "forwardedHeaders": None}},
                "metrics": {"prometheus": None},
                "tracing": {"backend": "zipkin", "zipkin": None},
            },
        )
        assert config.entry_points["https"].tls is not None
        assert config.entry_points["https"].forwarded_headers.trusted_ips == []
        assert config.metrics.prometheus.entry_point == "traefik"
        assert config.tracing.zipkin is not None

    def test_absent_section_stays_absent(self):
        config = build_configuration({"acme": {"storage": "acme.json"}})
        assert config.api is None
        assert config.acme.tls_challenge is None


class TestBuildCluster:
    def test_cluster_fields(self):
        config = build_configuration({"cluster": {"node": "n1", "storePrefix": "proxy"}})
        assert config.cluster.node == "n1"
        assert config.cluster.store_prefix == "proxy"

    def test_empty_cluster_uses_default_prefix(self):
        config = build_configuration({"cluster": None})
        assert config.cluster.store_prefix == "traefik"
