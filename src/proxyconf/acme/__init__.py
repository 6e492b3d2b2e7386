"""ACME (Let's Encrypt) configuration: legacy block, provider, store.

Public API::

    from proxyconf.acme import convert_acme_challenge, get_safe_acme_ca_server

    configuration = convert_acme_challenge(legacy_block)
"""

from proxyconf.acme.legacy import (
    Acme,
    Domain,
    get_safe_acme_ca_server,
    init_legacy_acme,
    resolve_challenges,
    un_fqdn,
)
from proxyconf.acme.provider import (
    AcmeConfiguration,
    AcmeProvider,
    convert_acme_challenge,
)
from proxyconf.acme.store import LocalStore, convert_to_new_format

__all__ = [
    "Acme",
    "AcmeConfiguration",
    "AcmeProvider",
    "Domain",
    "LocalStore",
    "convert_acme_challenge",
    "convert_to_new_format",
    "get_safe_acme_ca_server",
    "init_legacy_acme",
    "resolve_challenges",
    "un_fqdn",
]
