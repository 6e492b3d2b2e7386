"""proxyconf command-line entry point.

Builds the effective configuration once and prints a summary.  A
validation failure terminates the process with exit status 1.

Usage::

    proxyconf -c /etc/traefik/traefik.yaml
    proxyconf -c traefik.yaml --debug
    python -m proxyconf -c traefik.yaml
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from proxyconf.config import EffectiveConfiguration

log = logging.getLogger(__name__)


def _get_version() -> str:
    from proxyconf import __version__

    return __version__


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="proxyconf",
        description="Build and check the effective reverse-proxy configuration",
    )
    parser.add_argument(
        "-c",
        "--config",
        required=True,
        metavar="PATH",
        help="Path to the configuration file (YAML or JSON).",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        default=False,
        help="Enable debug output (full tracebacks, verbose logging).",
    )
    parser.add_argument(
        "-v",
        "--version",
        action="version",
        version=f"%(prog)s {_get_version()}",
    )
    return parser


def _print_error(message: str) -> None:
    """Print a user-facing error to stderr."""
    sys.stderr.write(f"error: {message}\n")


def _print_summary(effective: EffectiveConfiguration) -> None:
    cfg = effective.configuration
    lines = [f"Configuration: {effective.source}"]
    for name, entry_point in sorted(cfg.entry_points.items()):
        tls = " (tls)" if entry_point.tls is not None else ""
        lines.append(f"  entry point {name}: {entry_point.address}{tls}")
    lines.append(f"  default entry points: {', '.join(cfg.default_entry_points) or '-'}")
    if cfg.tracing is not None:
        lines.append(f"  tracing backend: {cfg.tracing.backend}")
    if effective.acme_provider is not None:
        acme = effective.acme_provider.configuration
        lines.append(f"  acme: {acme.ca_server} (storage {acme.storage})")
    sys.stdout.write("\n".join(lines) + "\n")


def main(argv: list[str] | None = None) -> None:
    """CLI entry point.  Parses arguments and builds the configuration."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    config_path = Path(args.config)
    if not config_path.is_file():
        _print_error(f"configuration file not found: {config_path}")
        sys.exit(1)

    # Basic stderr logging until the configuration says otherwise
    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.WARNING,
        format="%(levelname)s: %(message)s",
        stream=sys.stderr,
    )

    from proxyconf.config import ConfigValidationError, load_effective_configuration

    try:
        effective = load_effective_configuration(config_path)
    except ConfigValidationError as exc:
        _print_error(str(exc))
        sys.exit(1)
    except Exception as exc:
        if args.debug:
            raise
        _print_error(f"failed to load configuration: {exc}")
        sys.exit(1)

    from proxyconf.logging import configure_logging

    configure_logging(effective.configuration)
    _print_summary(effective)
