"""Allow ``python -m proxyconf``."""

from proxyconf.cli.main import main

main()
