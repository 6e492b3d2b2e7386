"""Built-in names, endpoints and timeouts shared across the pipeline."""

from __future__ import annotations

from datetime import timedelta

# Name of the entry point used by the API, ping, metrics and REST handlers
DEFAULT_INTERNAL_ENTRY_POINT_NAME = "traefik"
DEFAULT_INTERNAL_ENTRY_POINT_ADDRESS = ":8080"

DEFAULT_HTTP_ENTRY_POINT_NAME = "http"
DEFAULT_HTTP_ENTRY_POINT_ADDRESS = ":80"

DEFAULT_HEALTH_CHECK_INTERVAL = timedelta(seconds=30)
DEFAULT_HEALTH_CHECK_TIMEOUT = timedelta(seconds=5)

# Timeout when connecting to a backend server
DEFAULT_DIAL_TIMEOUT = timedelta(seconds=30)

# Before closing an idle connection
DEFAULT_IDLE_TIMEOUT = timedelta(seconds=180)

# How long pending requests are served before shutting down
DEFAULT_GRACE_TIMEOUT = timedelta(seconds=10)

DEFAULT_ACME_CA_SERVER = "https://acme-v02.api.letsencrypt.org/directory"

# Retired v01 endpoints and their v02 replacements
LETSENCRYPT_V01_PRODUCTION_PREFIX = "https://acme-v01.api.letsencrypt.org"
LETSENCRYPT_V01_STAGING_PREFIX = "https://acme-staging.api.letsencrypt.org"
LETSENCRYPT_V02_STAGING_PREFIX = "https://acme-staging-v02.api.letsencrypt.org"

DEFAULT_RANCHER_METADATA_PREFIX = "latest"

DEFAULT_LOG_LEVEL = "ERROR"
