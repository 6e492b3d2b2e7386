"""Enumerated types for the configuration pipeline.

All enums inherit from ``StrEnum`` so their ``.value`` is the plain
string used in configuration files.
"""

from __future__ import annotations

from enum import StrEnum

# ---------------------------------------------------------------------------
# Tracing
# ---------------------------------------------------------------------------


class TracingBackend(StrEnum):
    JAEGER = "jaeger"
    ZIPKIN = "zipkin"
    DATADOG = "datadog"


# ---------------------------------------------------------------------------
# ACME challenge types
# ---------------------------------------------------------------------------


class ChallengeType(StrEnum):
    HTTP_01 = "http-01"
    DNS_01 = "dns-01"
    TLS_ALPN_01 = "tls-alpn-01"


# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------


class LogFormat(StrEnum):
    COMMON = "common"
    JSON = "json"
