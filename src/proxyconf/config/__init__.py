"""Configuration subsystem for proxyconf.

Public API::

    from proxyconf.config import load_effective_configuration

    # At startup, exactly once:
    effective = load_effective_configuration("/etc/traefik/traefik.yaml")

    cfg = effective.configuration          # frozen GlobalConfiguration
    cfg.entry_points["http"].address       # typed access
    provider = effective.acme_provider     # AcmeProvider or None
"""

from proxyconf.config.effective import (
    EffectiveConfiguration,
    build_effective_configuration,
    init_acme_provider,
    load_effective_configuration,
    set_effective_configuration,
    validate_configuration,
)
from proxyconf.config.loader import load_raw_configuration, resolve_env_vars
from proxyconf.config.settings import (
    TLS,
    AccessLog,
    ApiConfig,
    Certificate,
    Cluster,
    EntryPoint,
    FileProvider,
    ForwardedHeaders,
    ForwardingTimeouts,
    GlobalConfiguration,
    HealthCheckConfig,
    HostResolverConfig,
    LifeCycle,
    Metrics,
    PingConfig,
    Prometheus,
    RancherApi,
    RancherMetadata,
    RancherProvider,
    Redirect,
    RespondingTimeouts,
    RestProvider,
    Retry,
    TraefikLog,
    build_configuration,
    parse_default_entry_points,
)
from proxyconf.core.errors import (
    AcmeConfigurationError,
    ConfigError,
    ConfigValidationError,
    FrozenConfigurationError,
)

__all__ = [
    "TLS",
    "AccessLog",
    "AcmeConfigurationError",
    "ApiConfig",
    "Certificate",
    "Cluster",
    "ConfigError",
    "ConfigValidationError",
    "EffectiveConfiguration",
    "EntryPoint",
    "FileProvider",
    "ForwardedHeaders",
    "ForwardingTimeouts",
    "FrozenConfigurationError",
    "GlobalConfiguration",
    "HealthCheckConfig",
    "HostResolverConfig",
    "LifeCycle",
    "Metrics",
    "PingConfig",
    "Prometheus",
    "RancherApi",
    "RancherMetadata",
    "RancherProvider",
    "Redirect",
    "RespondingTimeouts",
    "RestProvider",
    "Retry",
    "TraefikLog",
    "build_configuration",
    "build_effective_configuration",
    "init_acme_provider",
    "load_effective_configuration",
    "load_raw_configuration",
    "parse_default_entry_points",
    "resolve_env_vars",
    "set_effective_configuration",
    "validate_configuration",
]
