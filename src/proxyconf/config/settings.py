"""Dataclasses for every configuration section and their builders.

This module is the **single source of truth** for default values.
The JSON Schema only describes the file shape; these builders are what
the pipeline actually reads.

Raw files use the camelCase keys used by traefik configuration files::

    entryPoints:
      https:
        address: ":443"
        tls:
          certificates:
            - certFile: /etc/certs/site.crt
              keyFile: /etc/certs/site.key

The dataclasses stay mutable while the effective-configuration
pipeline runs and are frozen once it completes.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import timedelta
from typing import Any

from proxyconf.acme.legacy import Acme, DNSChallenge, Domain, HTTPChallenge, TLSChallenge
from proxyconf.core.constants import (
    DEFAULT_DIAL_TIMEOUT,
    DEFAULT_GRACE_TIMEOUT,
    DEFAULT_HEALTH_CHECK_INTERVAL,
    DEFAULT_HEALTH_CHECK_TIMEOUT,
    DEFAULT_IDLE_TIMEOUT,
    DEFAULT_INTERNAL_ENTRY_POINT_NAME,
    DEFAULT_LOG_LEVEL,
)
from proxyconf.core.durations import parse_duration
from proxyconf.core.freeze import ConfigNode
from proxyconf.core.types import LogFormat
from proxyconf.tracing.config import DatadogConfig, JaegerConfig, Tracing, ZipkinConfig

_ZERO = timedelta(0)


def _duration(d: dict, key: str, default: timedelta, path: str) -> timedelta:
    if d.get(key) is None:
        return default
    try:
        return parse_duration(d[key])
    except ValueError as exc:
        msg = f"{path}.{key}: {exc}"
        raise ValueError(msg) from exc


def _str_list(value: Any, path: str) -> list[str]:  # noqa: ANN401
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if not isinstance(value, list):
        msg = f"{path} must be a list of strings (got {type(value).__name__})"
        raise ValueError(msg)
    return [str(item) for item in value]


def _section(data: dict, key: str) -> dict | None:
    """Return the sub-table at *key*, or ``None`` when the key is absent.

    A key given with no value (``tlsChallenge:`` in YAML) still enables
    its section, with every setting at its default.
    """
    if key not in data:
        return None
    return data[key] or {}


# ---------------------------------------------------------------------------
# Entry points
# ---------------------------------------------------------------------------


@dataclass
class ForwardedHeaders(ConfigNode):
    """Trust policy for X-Forwarded-* headers."""

    insecure: bool = False
    trusted_ips: list[str] = field(default_factory=list)


@dataclass
class ProxyProtocol(ConfigNode):
    insecure: bool = False
    trusted_ips: list[str] = field(default_factory=list)


@dataclass
class Certificate(ConfigNode):
    cert_file: str = ""
    key_file: str = ""


@dataclass
class ClientCA(ConfigNode):
    files: list[str] = field(default_factory=list)
    optional: bool = False


@dataclass
class TLS(ConfigNode):
    """TLS settings of an entry point."""

    min_version: str = ""
    cipher_suites: list[str] = field(default_factory=list)
    certificates: list[Certificate] = field(default_factory=list)
    client_ca: ClientCA | None = None
    default_certificate: Certificate | None = None
    sni_strict: bool = False


@dataclass
class Redirect(ConfigNode):
    entry_point: str = ""
    regex: str = ""
    replacement: str = ""
    permanent: bool = False


@dataclass
class EntryPoint(ConfigNode):
    """A named network listener."""

    address: str = ""
    tls: TLS | None = None
    redirect: Redirect | None = None
    forwarded_headers: ForwardedHeaders | None = None
    proxy_protocol: ProxyProtocol | None = None
    compress: bool = False


def _build_trusted(data: dict | None, cls: type, path: str) -> Any:  # noqa: ANN401
    if data is None:
        return None
    return cls(
        insecure=data.get("insecure", False),
        trusted_ips=_str_list(data.get("trustedIPs"), f"{path}.trustedIPs"),
    )


def _build_certificate(data: dict | None) -> Certificate | None:
    if data is None:
        return None
    return Certificate(
        cert_file=data.get("certFile", ""),
        key_file=data.get("keyFile", ""),
    )


def _build_tls(data: dict | None, path: str) -> TLS | None:
    if data is None:
        return None
    client_ca = _section(data, "clientCA")
    return TLS(
        min_version=data.get("minVersion", ""),
        cipher_suites=_str_list(data.get("cipherSuites"), f"{path}.cipherSuites"),
        certificates=[_build_certificate(c) for c in data.get("certificates") or []],
        client_ca=(
            ClientCA(
                files=_str_list(client_ca.get("files"), f"{path}.clientCA.files"),
                optional=client_ca.get("optional", False),
            )
            if client_ca is not None
            else None
        ),
        default_certificate=_build_certificate(data.get("defaultCertificate")),
        sni_strict=data.get("sniStrict", False),
    )


def _build_redirect(data: dict | None) -> Redirect | None:
    if data is None:
        return None
    return Redirect(
        entry_point=data.get("entryPoint", ""),
        regex=data.get("regex", ""),
        replacement=data.get("replacement", ""),
        permanent=data.get("permanent", False),
    )


def _build_entry_point(data: dict | None, name: str) -> EntryPoint:
    d = data or {}
    path = f"entryPoints.{name}"
    return EntryPoint(
        address=d.get("address", ""),
        tls=_build_tls(_section(d, "tls"), f"{path}.tls"),
        redirect=_build_redirect(_section(d, "redirect")),
        forwarded_headers=_build_trusted(
            _section(d, "forwardedHeaders"),
            ForwardedHeaders,
            f"{path}.forwardedHeaders",
        ),
        proxy_protocol=_build_trusted(
            _section(d, "proxyProtocol"),
            ProxyProtocol,
            f"{path}.proxyProtocol",
        ),
        compress=d.get("compress", False),
    )


def _build_entry_points(data: dict | None) -> dict[str, EntryPoint]:
    return {name: _build_entry_point(ep, name) for name, ep in (data or {}).items()}


def parse_default_entry_points(value: str | list[str] | None) -> list[str]:
    """Parse ``defaultEntryPoints`` from a list or a comma-separated string."""
    if value is None:
        return []
    if isinstance(value, list):
        return [str(name) for name in value]
    names = [name.strip() for name in value.split(",") if name.strip()]
    if not names:
        msg = f"bad defaultEntryPoints format: {value!r}"
        raise ValueError(msg)
    return names


# ---------------------------------------------------------------------------
# Server life cycle and timeouts
# ---------------------------------------------------------------------------


@dataclass
class LifeCycle(ConfigNode):
    """Timeouts influencing the shutdown phase."""

    request_accept_grace_timeout: timedelta = _ZERO
    grace_timeout: timedelta = _ZERO


def _build_life_cycle(data: dict | None) -> LifeCycle | None:
    if data is None:
        return None
    return LifeCycle(
        request_accept_grace_timeout=_duration(
            data,
            "requestAcceptGraceTimeout",
            _ZERO,
            "lifeCycle",
        ),
        grace_timeout=_duration(data, "graceTimeOut", DEFAULT_GRACE_TIMEOUT, "lifeCycle"),
    )


@dataclass
class Retry(ConfigNode):
    attempts: int = 0


@dataclass
class HealthCheckConfig(ConfigNode):
    interval: timedelta = DEFAULT_HEALTH_CHECK_INTERVAL
    timeout: timedelta = DEFAULT_HEALTH_CHECK_TIMEOUT


def _build_health_check(data: dict | None) -> HealthCheckConfig | None:
    if data is None:
        return None
    return HealthCheckConfig(
        interval=_duration(data, "interval", DEFAULT_HEALTH_CHECK_INTERVAL, "healthCheck"),
        timeout=_duration(data, "timeout", DEFAULT_HEALTH_CHECK_TIMEOUT, "healthCheck"),
    )


@dataclass
class RespondingTimeouts(ConfigNode):
    """Timeouts for incoming requests; zero means no timeout."""

    read_timeout: timedelta = _ZERO
    write_timeout: timedelta = _ZERO
    idle_timeout: timedelta = DEFAULT_IDLE_TIMEOUT


def _build_responding_timeouts(data: dict | None) -> RespondingTimeouts | None:
    if data is None:
        return None
    path = "respondingTimeouts"
    return RespondingTimeouts(
        read_timeout=_duration(data, "readTimeout", _ZERO, path),
        write_timeout=_duration(data, "writeTimeout", _ZERO, path),
        idle_timeout=_duration(data, "idleTimeout", DEFAULT_IDLE_TIMEOUT, path),
    )


@dataclass
class ForwardingTimeouts(ConfigNode):
    """Timeouts for requests forwarded to backend servers."""

    dial_timeout: timedelta = DEFAULT_DIAL_TIMEOUT
    response_header_timeout: timedelta = _ZERO


def _build_forwarding_timeouts(data: dict | None) -> ForwardingTimeouts | None:
    if data is None:
        return None
    path = "forwardingTimeouts"
    return ForwardingTimeouts(
        dial_timeout=_duration(data, "dialTimeout", DEFAULT_DIAL_TIMEOUT, path),
        response_header_timeout=_duration(data, "responseHeaderTimeout", _ZERO, path),
    )


@dataclass
class HostResolverConfig(ConfigNode):
    """CNAME flattening settings."""

    cname_flattening: bool = False
    resolv_config: str = "/etc/resolv.conf"
    resolv_depth: int = 5


def _build_host_resolver(data: dict | None) -> HostResolverConfig | None:
    if data is None:
        return None
    return HostResolverConfig(
        cname_flattening=data.get("cnameFlattening", False),
        resolv_config=data.get("resolvConfig", "/etc/resolv.conf"),
        resolv_depth=data.get("resolvDepth", 5),
    )


@dataclass
class Cluster(ConfigNode):
    """Legacy clustered mode (key-value store backed ACME)."""

    node: str = ""
    store_prefix: str = "traefik"


# ---------------------------------------------------------------------------
# Logs
# ---------------------------------------------------------------------------


@dataclass
class TraefikLog(ConfigNode):
    file_path: str = ""
    format: str = LogFormat.COMMON.value


@dataclass
class AccessLog(ConfigNode):
    file_path: str = ""
    format: str = LogFormat.COMMON.value
    buffering_size: int = 0


def _build_traefik_log(data: dict | None) -> TraefikLog | None:
    if data is None:
        return None
    return TraefikLog(
        file_path=data.get("filePath", ""),
        format=data.get("format", LogFormat.COMMON.value),
    )


def _build_access_log(data: dict | None) -> AccessLog | None:
    if data is None:
        return None
    return AccessLog(
        file_path=data.get("filePath", ""),
        format=data.get("format", LogFormat.COMMON.value),
        buffering_size=data.get("bufferingSize", 0),
    )


# ---------------------------------------------------------------------------
# Internal handlers (API, ping, metrics)
# ---------------------------------------------------------------------------


@dataclass
class Statistics(ConfigNode):
    recent_errors: int = 10


@dataclass
class ApiConfig(ConfigNode):
    """API and dashboard handler."""

    entry_point: str = DEFAULT_INTERNAL_ENTRY_POINT_NAME
    dashboard: bool = True
    debug: bool = False
    statistics: Statistics | None = None


@dataclass
class PingConfig(ConfigNode):
    entry_point: str = DEFAULT_INTERNAL_ENTRY_POINT_NAME


@dataclass
class Prometheus(ConfigNode):
    entry_point: str = DEFAULT_INTERNAL_ENTRY_POINT_NAME
    buckets: list[float] = field(default_factory=lambda: [0.1, 0.3, 1.2, 5.0])


@dataclass
class Metrics(ConfigNode):
    prometheus: Prometheus | None = None


def _build_api(data: dict | None) -> ApiConfig | None:
    if data is None:
        return None
    statistics = _section(data, "statistics")
    return ApiConfig(
        entry_point=data.get("entryPoint", DEFAULT_INTERNAL_ENTRY_POINT_NAME),
        dashboard=data.get("dashboard", True),
        debug=data.get("debug", False),
        statistics=(
            Statistics(recent_errors=statistics.get("recentErrors", 10))
            if statistics is not None
            else None
        ),
    )


def _build_ping(data: dict | None) -> PingConfig | None:
    if data is None:
        return None
    return PingConfig(entry_point=data.get("entryPoint", DEFAULT_INTERNAL_ENTRY_POINT_NAME))


def _build_metrics(data: dict | None) -> Metrics | None:
    if data is None:
        return None
    prometheus = _section(data, "prometheus")
    if prometheus is None:
        return Metrics()
    return Metrics(
        prometheus=Prometheus(
            entry_point=prometheus.get("entryPoint", DEFAULT_INTERNAL_ENTRY_POINT_NAME),
            buckets=[float(b) for b in prometheus.get("buckets", [0.1, 0.3, 1.2, 5.0])],
        ),
    )


# ---------------------------------------------------------------------------
# Providers
# ---------------------------------------------------------------------------


@dataclass
class FileProvider(ConfigNode):
    """File-based dynamic configuration provider."""

    filename: str = ""
    directory: str = ""
    watch: bool = False
    # Path of the static configuration file, set by the pipeline
    traefik_file: str = ""


@dataclass
class RestProvider(ConfigNode):
    entry_point: str = DEFAULT_INTERNAL_ENTRY_POINT_NAME


@dataclass
class RancherApi(ConfigNode):
    endpoint: str = ""
    access_key: str = ""
    secret_key: str = ""


@dataclass
class RancherMetadata(ConfigNode):
    interval_poll: bool = False
    prefix: str = ""


@dataclass
class RancherProvider(ConfigNode):
    """Rancher cluster-metadata provider.

    ``endpoint``, ``access_key`` and ``secret_key`` at this level are
    deprecated in favour of :attr:`api`.
    """

    endpoint: str = ""
    access_key: str = ""
    secret_key: str = ""
    api: RancherApi | None = None
    metadata: RancherMetadata | None = None
    domain: str = ""
    watch: bool = True
    refresh_seconds: int = 15
    expose_by_default: bool = True
    enable_service_health_filter: bool = True


def _build_file(data: dict | None) -> FileProvider | None:
    if data is None:
        return None
    return FileProvider(
        filename=data.get("filename", ""),
        directory=data.get("directory", ""),
        watch=data.get("watch", False),
    )


def _build_rest(data: dict | None) -> RestProvider | None:
    if data is None:
        return None
    return RestProvider(entry_point=data.get("entryPoint", DEFAULT_INTERNAL_ENTRY_POINT_NAME))


def _build_rancher(data: dict | None) -> RancherProvider | None:
    if data is None:
        return None
    api = _section(data, "api")
    metadata = _section(data, "metadata")
    return RancherProvider(
        endpoint=data.get("endpoint", ""),
        access_key=data.get("accessKey", ""),
        secret_key=data.get("secretKey", ""),
        api=(
            RancherApi(
                endpoint=api.get("endpoint", ""),
                access_key=api.get("accessKey", ""),
                secret_key=api.get("secretKey", ""),
            )
            if api is not None
            else None
        ),
        metadata=(
            RancherMetadata(
                interval_poll=metadata.get("intervalPoll", False),
                prefix=metadata.get("prefix", ""),
            )
            if metadata is not None
            else None
        ),
        domain=data.get("domain", ""),
        watch=data.get("watch", True),
        refresh_seconds=data.get("refreshSeconds", 15),
        expose_by_default=data.get("exposedByDefault", True),
        enable_service_health_filter=data.get("enableServiceHealthFilter", True),
    )


# ---------------------------------------------------------------------------
# ACME
# ---------------------------------------------------------------------------


def _build_domain(data: dict) -> Domain:
    return Domain(
        main=data.get("main", ""),
        sans=_str_list(data.get("sans"), "acme.domains[].sans"),
    )


def _build_acme(data: dict | None) -> Acme | None:
    if data is None:
        return None
    http = _section(data, "httpChallenge")
    dns = _section(data, "dnsChallenge")
    tls = _section(data, "tlsChallenge")
    return Acme(
        email=data.get("email", ""),
        domains=[_build_domain(d) for d in data.get("domains") or []],
        storage=data.get("storage", ""),
        on_demand=data.get("onDemand", False),
        on_host_rule=data.get("onHostRule", False),
        ca_server=data.get("caServer", ""),
        entry_point=data.get("entryPoint", ""),
        key_type=data.get("keyType", ""),
        acme_logging=data.get("acmeLogging", False),
        http_challenge=(
            HTTPChallenge(entry_point=http.get("entryPoint", "")) if http is not None else None
        ),
        dns_challenge=(
            DNSChallenge(
                provider=dns.get("provider", ""),
                delay_before_check=_duration(
                    dns,
                    "delayBeforeCheck",
                    _ZERO,
                    "acme.dnsChallenge",
                ),
            )
            if dns is not None
            else None
        ),
        tls_challenge=TLSChallenge() if tls is not None else None,
    )


# ---------------------------------------------------------------------------
# Tracing
# ---------------------------------------------------------------------------


def _build_jaeger(data: dict | None) -> JaegerConfig | None:
    if data is None:
        return None
    defaults = JaegerConfig()
    return JaegerConfig(
        sampling_server_url=data.get("samplingServerURL", defaults.sampling_server_url),
        sampling_type=data.get("samplingType", defaults.sampling_type),
        sampling_param=float(data.get("samplingParam", defaults.sampling_param)),
        local_agent_host_port=data.get("localAgentHostPort", defaults.local_agent_host_port),
        propagation=data.get("propagation", defaults.propagation),
        gen128_bit=data.get("gen128Bit", defaults.gen128_bit),
    )


def _build_zipkin(data: dict | None) -> ZipkinConfig | None:
    if data is None:
        return None
    defaults = ZipkinConfig()
    return ZipkinConfig(
        http_endpoint=data.get("httpEndpoint", defaults.http_endpoint),
        same_span=data.get("sameSpan", defaults.same_span),
        id128_bit=data.get("id128Bit", defaults.id128_bit),
        debug=data.get("debug", defaults.debug),
        sample_rate=float(data.get("sampleRate", defaults.sample_rate)),
    )


def _build_datadog(data: dict | None) -> DatadogConfig | None:
    if data is None:
        return None
    defaults = DatadogConfig()
    return DatadogConfig(
        local_agent_host_port=data.get("localAgentHostPort", defaults.local_agent_host_port),
        global_tag=data.get("globalTag", defaults.global_tag),
        debug=data.get("debug", defaults.debug),
        priority_sampling=data.get("prioritySampling", defaults.priority_sampling),
    )


def _build_tracing(data: dict | None) -> Tracing | None:
    if data is None:
        return None
    return Tracing(
        backend=data.get("backend", "jaeger"),
        service_name=data.get("serviceName", "traefik"),
        span_name_limit=data.get("spanNameLimit", 0),
        jaeger=_build_jaeger(_section(data, "jaeger")),
        zipkin=_build_zipkin(_section(data, "zipkin")),
        datadog=_build_datadog(_section(data, "datadog")),
    )


# ---------------------------------------------------------------------------
# Root aggregate
# ---------------------------------------------------------------------------


@dataclass
class GlobalConfiguration(ConfigNode):
    """Static configuration of the proxy process.

    Built from the configuration file, completed by
    :func:`~proxyconf.config.effective.set_effective_configuration` and
    frozen before the serving components read it.
    """

    life_cycle: LifeCycle | None = None
    debug: bool = False
    check_new_version: bool = True
    send_anonymous_usage: bool = False
    access_log: AccessLog | None = None
    traefik_log: TraefikLog | None = None
    tracing: Tracing | None = None
    log_level: str = DEFAULT_LOG_LEVEL
    entry_points: dict[str, EntryPoint] = field(default_factory=dict)
    cluster: Cluster | None = None
    constraints: list[str] = field(default_factory=list)
    acme: Acme | None = None
    default_entry_points: list[str] = field(default_factory=list)
    providers_throttle_duration: timedelta = timedelta(seconds=2)
    max_idle_conns_per_host: int = 200
    insecure_skip_verify: bool = False
    root_cas: list[str] = field(default_factory=list)
    retry: Retry | None = None
    health_check: HealthCheckConfig | None = None
    responding_timeouts: RespondingTimeouts | None = None
    forwarding_timeouts: ForwardingTimeouts | None = None
    keep_trailing_slash: bool = False  # deprecated
    file: FileProvider | None = None
    rest: RestProvider | None = None
    rancher: RancherProvider | None = None
    api: ApiConfig | None = None
    metrics: Metrics | None = None
    ping: PingConfig | None = None
    host_resolver: HostResolverConfig | None = None


def build_configuration(data: dict) -> GlobalConfiguration:
    """Build the typed configuration aggregate from raw config data.

    Raises :class:`ValueError` when a value cannot be converted (for
    example a malformed duration).
    """
    cluster = _section(data, "cluster")
    retry = _section(data, "retry")
    return GlobalConfiguration(
        life_cycle=_build_life_cycle(_section(data, "lifeCycle")),
        debug=data.get("debug", False),
        check_new_version=data.get("checkNewVersion", True),
        send_anonymous_usage=data.get("sendAnonymousUsage", False),
        access_log=_build_access_log(_section(data, "accessLog")),
        traefik_log=_build_traefik_log(_section(data, "traefikLog")),
        tracing=_build_tracing(_section(data, "tracing")),
        log_level=data.get("logLevel", DEFAULT_LOG_LEVEL),
        entry_points=_build_entry_points(data.get("entryPoints")),
        cluster=(
            Cluster(
                node=cluster.get("node", ""),
                store_prefix=cluster.get("storePrefix", "traefik"),
            )
            if cluster is not None
            else None
        ),
        constraints=_str_list(data.get("constraints"), "constraints"),
        acme=_build_acme(_section(data, "acme")),
        default_entry_points=parse_default_entry_points(data.get("defaultEntryPoints")),
        providers_throttle_duration=_duration(
            data,
            "providersThrottleDuration",
            timedelta(seconds=2),
            "global",
        ),
        max_idle_conns_per_host=data.get("maxIdleConnsPerHost", 200),
        insecure_skip_verify=data.get("insecureSkipVerify", False),
        root_cas=_str_list(data.get("rootCAs"), "rootCAs"),
        retry=Retry(attempts=retry.get("attempts", 0)) if retry is not None else None,
        health_check=_build_health_check(_section(data, "healthCheck")),
        responding_timeouts=_build_responding_timeouts(_section(data, "respondingTimeouts")),
        forwarding_timeouts=_build_forwarding_timeouts(_section(data, "forwardingTimeouts")),
        keep_trailing_slash=data.get("keepTrailingSlash", False),
        file=_build_file(_section(data, "file")),
        rest=_build_rest(_section(data, "rest")),
        rancher=_build_rancher(_section(data, "rancher")),
        api=_build_api(_section(data, "api")),
        metrics=_build_metrics(_section(data, "metrics")),
        ping=_build_ping(_section(data, "ping")),
        host_resolver=_build_host_resolver(_section(data, "hostResolver")),
    )
