"""Deprecated ``acme`` configuration block.

The legacy block is read from the configuration file, normalised in
place by :func:`init_legacy_acme` and later consumed exactly once when it
is converted into a current-shape provider (see
:mod:`proxyconf.acme.provider`).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import timedelta

from proxyconf.core.constants import (
    DEFAULT_ACME_CA_SERVER,
    LETSENCRYPT_V01_PRODUCTION_PREFIX,
    LETSENCRYPT_V01_STAGING_PREFIX,
    LETSENCRYPT_V02_STAGING_PREFIX,
)
from proxyconf.core.freeze import ConfigNode
from proxyconf.core.types import ChallengeType

log = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Data model
# ---------------------------------------------------------------------------


@dataclass
class Domain(ConfigNode):
    """A certificate's main domain plus its subject alternative names."""

    main: str = ""
    sans: list[str] = field(default_factory=list)


@dataclass
class HTTPChallenge(ConfigNode):
    entry_point: str = ""


@dataclass
class DNSChallenge(ConfigNode):
    provider: str = ""
    delay_before_check: timedelta = field(default_factory=timedelta)


@dataclass
class TLSChallenge(ConfigNode):
    pass


@dataclass
class Acme(ConfigNode):
    """Legacy ACME (Let's Encrypt) settings."""

    email: str = ""
    domains: list[Domain] = field(default_factory=list)
    storage: str = ""
    on_demand: bool = False
    on_host_rule: bool = False
    ca_server: str = ""
    entry_point: str = ""
    key_type: str = ""
    acme_logging: bool = False
    dns_challenge: DNSChallenge | None = None
    http_challenge: HTTPChallenge | None = None
    tls_challenge: TLSChallenge | None = None

    @property
    def challenge(self) -> ChallengeType | None:
        """The challenge type that wins once exclusivity is resolved."""
        if self.dns_challenge is not None:
            return ChallengeType.DNS_01
        if self.tls_challenge is not None:
            return ChallengeType.TLS_ALPN_01
        if self.http_challenge is not None:
            return ChallengeType.HTTP_01
        return None


# ---------------------------------------------------------------------------
# Normalisation
# ---------------------------------------------------------------------------


def un_fqdn(name: str) -> str:
    """Return *name* without its trailing dot, if it has one."""
    if name.endswith("."):
        return name[:-1]
    return name


def get_safe_acme_ca_server(ca_server: str) -> str:
    """Return a usable CA server URL, upgrading retired v01 endpoints."""
    if not ca_server:
        return DEFAULT_ACME_CA_SERVER

    if ca_server.startswith(LETSENCRYPT_V01_PRODUCTION_PREFIX):
        upgraded = ca_server.replace("v01", "v02", 1)
        log.warning(
            "The CA server %r refers to a v01 endpoint of the ACME API, "
            "please change to %r. Fallback to %r.",
            ca_server,
            upgraded,
            upgraded,
        )
        return upgraded

    if ca_server.startswith(LETSENCRYPT_V01_STAGING_PREFIX):
        upgraded = ca_server.replace(
            LETSENCRYPT_V01_STAGING_PREFIX,
            LETSENCRYPT_V02_STAGING_PREFIX,
            1,
        )
        log.warning(
            "The CA server %r refers to a v01 endpoint of the ACME API, "
            "please change to %r. Fallback to %r.",
            ca_server,
            upgraded,
            upgraded,
        )
        return upgraded

    return ca_server


def resolve_challenges(acme: Acme) -> None:
    """Drop conflicting challenge settings so at most one survives.

    DNS wins over HTTP and TLS; TLS wins over HTTP.  The three pairwise
    checks run in this order.
    """
    if acme.dns_challenge is not None and acme.http_challenge is not None:
        log.warning(
            "Unable to use DNS challenge and HTTP challenge at the same time. "
            "Fallback to DNS challenge.",
        )
        acme.http_challenge = None

    if acme.dns_challenge is not None and acme.tls_challenge is not None:
        log.warning(
            "Unable to use DNS challenge and TLS challenge at the same time. "
            "Fallback to DNS challenge.",
        )
        acme.tls_challenge = None

    if acme.http_challenge is not None and acme.tls_challenge is not None:
        log.warning(
            "Unable to use HTTP challenge and TLS challenge at the same time. "
            "Fallback to TLS challenge.",
        )
        acme.http_challenge = None

    if acme.on_demand:
        log.warning("ACME.OnDemand is deprecated")


def init_legacy_acme(acme: Acme) -> None:
    """Normalise the CA server and resolve challenge exclusivity in place."""
    acme.ca_server = get_safe_acme_ca_server(acme.ca_server)
    resolve_challenges(acme)
