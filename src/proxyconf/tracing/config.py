"""Tracing block and backend resolution.

Only one backend is meaningful at a time.  :func:`resolve_tracing_backend`
keeps the sub-configuration named by ``Tracing.backend`` (building it
from the built-in defaults when it is absent) and discards the others.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from proxyconf.core.freeze import ConfigNode
from proxyconf.core.types import TracingBackend

log = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Backend settings
# ---------------------------------------------------------------------------


@dataclass
class JaegerConfig(ConfigNode):
    """Jaeger client settings."""

    sampling_server_url: str = "http://localhost:5778/sampling"
    sampling_type: str = "const"
    sampling_param: float = 1.0
    local_agent_host_port: str = "127.0.0.1:6831"
    propagation: str = "jaeger"
    gen128_bit: bool = False


@dataclass
class ZipkinConfig(ConfigNode):
    """Zipkin HTTP collector settings."""

    http_endpoint: str = "http://localhost:9411/api/v1/spans"
    same_span: bool = False
    id128_bit: bool = True
    debug: bool = False
    sample_rate: float = 1.0


@dataclass
class DatadogConfig(ConfigNode):
    """DataDog agent settings."""

    local_agent_host_port: str = "localhost:8126"
    global_tag: str = ""
    debug: bool = False
    priority_sampling: bool = False


BackendConfig = JaegerConfig | ZipkinConfig | DatadogConfig


# ---------------------------------------------------------------------------
# Tracing block
# ---------------------------------------------------------------------------


@dataclass
class Tracing(ConfigNode):
    """Tracing settings: a backend selector plus per-backend settings."""

    backend: str = TracingBackend.JAEGER.value
    service_name: str = "traefik"
    span_name_limit: int = 0
    jaeger: JaegerConfig | None = None
    zipkin: ZipkinConfig | None = None
    datadog: DatadogConfig | None = None

    @property
    def selected(self) -> TracingBackend | None:
        """The known backend named by :attr:`backend`, or ``None``."""
        try:
            return TracingBackend(self.backend)
        except ValueError:
            return None

    @property
    def active(self) -> BackendConfig | None:
        """Settings of the selected backend; ``None`` for an unknown selector."""
        selected = self.selected
        if selected is None:
            return None
        return getattr(self, _ATTRIBUTES[selected])


_ATTRIBUTES: dict[TracingBackend, str] = {
    TracingBackend.JAEGER: "jaeger",
    TracingBackend.ZIPKIN: "zipkin",
    TracingBackend.DATADOG: "datadog",
}

_LABELS: dict[TracingBackend, str] = {
    TracingBackend.JAEGER: "Jaeger",
    TracingBackend.ZIPKIN: "Zipkin",
    TracingBackend.DATADOG: "DataDog",
}

_DEFAULTS: dict[TracingBackend, type[BackendConfig]] = {
    TracingBackend.JAEGER: JaegerConfig,
    TracingBackend.ZIPKIN: ZipkinConfig,
    TracingBackend.DATADOG: DatadogConfig,
}


def resolve_tracing_backend(tracing: Tracing) -> None:
    """Keep only the selected backend's settings on *tracing*.

    An unknown selector is reported and leaves every sub-configuration
    untouched.
    """
    selected = tracing.selected
    if selected is None:
        log.warning("Unknown tracer %r", tracing.backend)
        return

    attribute = _ATTRIBUTES[selected]
    if getattr(tracing, attribute) is None:
        setattr(tracing, attribute, _DEFAULTS[selected]())

    for other in TracingBackend:
        if other is selected:
            continue
        if getattr(tracing, _ATTRIBUTES[other]) is not None:
            log.warning("%s configuration will be ignored", _LABELS[other])
            setattr(tracing, _ATTRIBUTES[other], None)
