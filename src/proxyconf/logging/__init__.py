"""Logging subsystem for proxyconf.

Public API::

    from proxyconf.logging import configure_logging

    configure_logging(effective.configuration)
"""

from proxyconf.logging.setup import configure_logging

__all__ = ["configure_logging"]
