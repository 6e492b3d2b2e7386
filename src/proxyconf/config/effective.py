"""Effective configuration pipeline.

Lifecycle::

    # 1. Raw file -> typed aggregate
    config = build_configuration(load_raw_configuration(path))

    # 2. Defaults, backwards compatibility, ACME and tracing normalisation
    set_effective_configuration(config, config_file=str(path))

    # 3. Cross-field checks (raises ConfigValidationError)
    validate_configuration(config)

    # 4. Legacy ACME block -> provider (the block is consumed)
    provider = init_acme_provider(config)

    # 5. Read-only from here on
    config.freeze()

:func:`load_effective_configuration` runs all of the above.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from proxyconf.acme.legacy import init_legacy_acme
from proxyconf.acme.provider import AcmeProvider, convert_acme_challenge
from proxyconf.acme.store import LocalStore, convert_to_new_format
from proxyconf.config.loader import load_raw_configuration
from proxyconf.config.settings import (
    EntryPoint,
    ForwardedHeaders,
    GlobalConfiguration,
    LifeCycle,
    RancherApi,
    build_configuration,
)
from proxyconf.core.constants import (
    DEFAULT_HTTP_ENTRY_POINT_ADDRESS,
    DEFAULT_HTTP_ENTRY_POINT_NAME,
    DEFAULT_INTERNAL_ENTRY_POINT_ADDRESS,
    DEFAULT_INTERNAL_ENTRY_POINT_NAME,
    DEFAULT_RANCHER_METADATA_PREFIX,
)
from proxyconf.core.errors import AcmeConfigurationError, ConfigValidationError
from proxyconf.tracing.config import resolve_tracing_backend

log = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Defaulting and backwards compatibility
# ---------------------------------------------------------------------------


def _uses_internal_entry_point(config: GlobalConfiguration) -> bool:
    name = DEFAULT_INTERNAL_ENTRY_POINT_NAME
    return (
        (config.api is not None and config.api.entry_point == name)
        or (config.ping is not None and config.ping.entry_point == name)
        or (
            config.metrics is not None
            and config.metrics.prometheus is not None
            and config.metrics.prometheus.entry_point == name
        )
        or (config.rest is not None and config.rest.entry_point == name)
    )


def _set_entry_points(config: GlobalConfiguration) -> None:
    if not config.entry_points:
        config.entry_points = {
            DEFAULT_HTTP_ENTRY_POINT_NAME: EntryPoint(
                address=DEFAULT_HTTP_ENTRY_POINT_ADDRESS,
                forwarded_headers=ForwardedHeaders(),
            ),
        }
        config.default_entry_points = [DEFAULT_HTTP_ENTRY_POINT_NAME]

    if (
        _uses_internal_entry_point(config)
        and DEFAULT_INTERNAL_ENTRY_POINT_NAME not in config.entry_points
    ):
        config.entry_points[DEFAULT_INTERNAL_ENTRY_POINT_NAME] = EntryPoint(
            address=DEFAULT_INTERNAL_ENTRY_POINT_ADDRESS,
        )

    for name, entry_point in config.entry_points.items():
        if entry_point.forwarded_headers is None:
            entry_point.forwarded_headers = ForwardedHeaders()

        tls = entry_point.tls
        if tls is not None and tls.default_certificate is None and tls.certificates:
            log.info(
                "No tls.defaultCertificate given for %s: using the first item "
                "in tls.certificates as a fallback.",
                name,
            )
            tls.default_certificate = tls.certificates[0]


def _set_rancher_compat(config: GlobalConfiguration) -> None:
    rancher = config.rancher
    if rancher is None:
        return

    if rancher.access_key or rancher.endpoint or rancher.secret_key:
        if rancher.api is None:
            rancher.api = RancherApi(
                access_key=rancher.access_key,
                secret_key=rancher.secret_key,
                endpoint=rancher.endpoint,
            )
        log.warning(
            "Deprecated configuration found: rancher.[accesskey|secretkey|endpoint]. "
            "Please use rancher.api.[accesskey|secretkey|endpoint] instead.",
        )

    if rancher.metadata is not None and not rancher.metadata.prefix:
        rancher.metadata.prefix = DEFAULT_RANCHER_METADATA_PREFIX


def set_effective_configuration(config: GlobalConfiguration, config_file: str = "") -> None:
    """Add missing parameters derived from existing ones, in place.

    Also upgrades deprecated settings to their current form.  Safe to
    call more than once.

    Parameters
    ----------
    config:
        The aggregate built from the raw configuration.
    config_file:
        Resolved path of the static configuration file, handed to the
        file provider.

    """
    _set_entry_points(config)

    # Downstream code never has to check for a missing life cycle
    if config.life_cycle is None:
        config.life_cycle = LifeCycle()

    _set_rancher_compat(config)

    if config.api is not None:
        config.api.debug = config.debug

    if config.file is not None:
        config.file.traefik_file = config_file

    if config.acme is not None:
        init_legacy_acme(config.acme)

    if config.tracing is not None:
        resolve_tracing_backend(config.tracing)


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------


def validate_configuration(config: GlobalConfiguration) -> None:
    """Reject configurations whose ACME block points nowhere usable.

    Raises :class:`ConfigValidationError`; terminating the process is
    left to the caller.
    """
    acme = config.acme
    if acme is None:
        return

    entry_point = config.entry_points.get(acme.entry_point)
    if entry_point is None:
        raise ConfigValidationError(
            [f"Unknown entrypoint {acme.entry_point!r} for ACME configuration"],
        )
    if entry_point.tls is None:
        raise ConfigValidationError(
            [f"Entrypoint {acme.entry_point!r} has no TLS configuration for ACME configuration"],
        )


# ---------------------------------------------------------------------------
# ACME provider
# ---------------------------------------------------------------------------


def init_acme_provider(config: GlobalConfiguration) -> AcmeProvider | None:
    """Turn the legacy ACME block into a provider and consume the block.

    Returns ``None`` when there is no ACME block (including when it was
    already consumed by an earlier call) and in legacy clustered mode,
    where the block is left for the cluster code path.

    Raises :class:`AcmeConfigurationError` when no storage location is
    set; the ACME block is cleared first so certificate automation never
    starts from it.
    """
    acme = config.acme
    if acme is None:
        return None

    if not acme.storage:
        config.acme = None
        msg = "unable to initialize ACME provider with no storage location for the certificates"
        raise AcmeConfigurationError(msg)

    if config.cluster is not None:
        log.debug("Legacy cluster mode: ACME configuration is not converted")
        return None

    provider = AcmeProvider(configuration=convert_acme_challenge(acme))
    provider.store = LocalStore(provider.storage)
    convert_to_new_format(provider.storage)
    config.acme = None
    return provider


# ---------------------------------------------------------------------------
# Whole pipeline
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class EffectiveConfiguration:
    """Result of the pipeline: the frozen aggregate and its ACME provider."""

    configuration: GlobalConfiguration
    acme_provider: AcmeProvider | None
    source: str


def build_effective_configuration(
    data: dict,
    config_file: str = "",
) -> EffectiveConfiguration:
    """Run the pipeline over already-loaded raw data.

    A missing ACME storage location is logged and ACME is disabled;
    validation failures propagate as :class:`ConfigValidationError`.
    """
    try:
        config = build_configuration(data)
    except ValueError as exc:
        raise ConfigValidationError([str(exc)]) from exc

    set_effective_configuration(config, config_file=config_file)
    validate_configuration(config)

    provider: AcmeProvider | None = None
    try:
        provider = init_acme_provider(config)
    except AcmeConfigurationError as exc:
        log.error("Unable to initialize ACME provider: %s", exc)

    config.freeze()
    if provider is not None:
        provider.configuration.freeze()
    return EffectiveConfiguration(
        configuration=config,
        acme_provider=provider,
        source=config_file,
    )


def load_effective_configuration(config_file: str | Path) -> EffectiveConfiguration:
    """Load *config_file* and run the whole pipeline over it."""
    path = Path(config_file).resolve()
    data = load_raw_configuration(path)
    result = build_effective_configuration(data, config_file=str(path))
    log.debug("Effective configuration built from %s", path)
    return result
