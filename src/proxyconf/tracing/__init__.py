"""Distributed tracing configuration.

Public API::

    from proxyconf.tracing import Tracing, resolve_tracing_backend

    resolve_tracing_backend(config.tracing)
    config.tracing.active      # the selected backend's settings
"""

from proxyconf.tracing.config import (
    DatadogConfig,
    JaegerConfig,
    Tracing,
    ZipkinConfig,
    resolve_tracing_backend,
)

__all__ = [
    "DatadogConfig",
    "JaegerConfig",
    "Tracing",
    "ZipkinConfig",
    "resolve_tracing_backend",
]
