"""proxyconf: effective configuration pipeline for the reverse proxy."""

__version__ = "1.0.0"
