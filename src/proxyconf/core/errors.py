"""Exception hierarchy for the configuration pipeline."""

from __future__ import annotations


class ConfigError(Exception):
    """Base class for every configuration problem raised by proxyconf."""


class ConfigValidationError(ConfigError):
    """Raised when the configuration is structurally inconsistent.

    The top-level caller decides whether this terminates the process.
    """

    def __init__(self, errors: list[str]) -> None:
        """Store *errors* and build a human-readable message."""
        self.errors = errors
        body = "\n".join(f"  - {e}" for e in errors)
        super().__init__(f"Configuration validation failed:\n{body}")


class AcmeConfigurationError(ConfigError):
    """Raised when the legacy ACME block cannot be turned into a provider."""


class FrozenConfigurationError(ConfigError, AttributeError):
    """Raised on any attempt to mutate a frozen configuration node."""
