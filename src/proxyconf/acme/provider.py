"""Current-shape ACME provider configuration.

The serving runtime only understands :class:`AcmeConfiguration`;
:func:`convert_acme_challenge` maps the deprecated block from
:mod:`proxyconf.acme.legacy` onto it.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import timedelta

from proxyconf.acme import legacy
from proxyconf.acme.store import LocalStore
from proxyconf.core.freeze import ConfigNode

log = logging.getLogger(__name__)


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
class AcmeConfiguration(ConfigNode):
    """ACME settings consumed by the certificate-automation subsystem."""

    email: str = ""
    acme_logging: bool = False
    ca_server: str = ""
    storage: str = ""
    entry_point: str = ""
    key_type: str = ""
    on_host_rule: bool = False
    dns_challenge: DNSChallenge | None = None
    http_challenge: HTTPChallenge | None = None
    tls_challenge: TLSChallenge | None = None
    domains: list[legacy.Domain] = field(default_factory=list)


@dataclass
class AcmeProvider:
    """ACME provider handed to the certificate-automation subsystem."""

    configuration: AcmeConfiguration
    store: LocalStore | None = None

    @property
    def storage(self) -> str:
        return self.configuration.storage


def _warn_fqdn(name: str) -> None:
    if name != legacy.un_fqdn(name):
        log.warning("FQDN detected, please remove the trailing dot: %s", name)


def convert_acme_challenge(old: legacy.Acme) -> AcmeConfiguration:
    """Build an :class:`AcmeConfiguration` from the legacy block.

    Domain names keep any trailing dot; it is only reported.
    """
    conf = AcmeConfiguration(
        key_type=old.key_type,
        on_host_rule=old.on_host_rule,
        email=old.email,
        storage=old.storage,
        acme_logging=old.acme_logging,
        ca_server=old.ca_server,
        entry_point=old.entry_point,
    )

    for domain in old.domains:
        _warn_fqdn(domain.main)
        for san in domain.sans:
            _warn_fqdn(san)
        conf.domains.append(legacy.Domain(main=domain.main, sans=list(domain.sans)))

    if old.http_challenge is not None:
        conf.http_challenge = HTTPChallenge(entry_point=old.http_challenge.entry_point)

    if old.dns_challenge is not None:
        conf.dns_challenge = DNSChallenge(
            provider=old.dns_challenge.provider,
            delay_before_check=old.dns_challenge.delay_before_check,
        )

    if old.tls_challenge is not None:
        conf.tls_challenge = TLSChallenge()

    return conf
