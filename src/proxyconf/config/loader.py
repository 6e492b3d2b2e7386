"""Raw configuration file loader.

Reads a YAML or JSON file, resolves ``${VAR}`` / ``${VAR:-default}``
environment references and validates the result against the bundled
JSON Schema::

    data = load_raw_configuration("/etc/traefik/traefik.yaml")
    config = build_configuration(data)
"""

from __future__ import annotations

import json
import logging
import os
import re
from functools import lru_cache
from pathlib import Path
from typing import Any

import yaml
from jsonschema import Draft7Validator

from proxyconf.core.errors import ConfigValidationError

SCHEMA_PATH = Path(__file__).parent / "schema.json"

_ENV_RE = re.compile(
    r"^\$\{([^}:]+?)(?::-(.*))?\}$",
    re.DOTALL,
)

log = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Environment variable resolution
# ---------------------------------------------------------------------------


def _resolve_value(value: str, path: str) -> str:
    """Replace ``${VAR}`` or ``${VAR:-default}`` with env var value."""
    match = _ENV_RE.match(value)
    if match is None:
        return value
    var_name = match.group(1)
    fallback = match.group(2)
    resolved = os.environ.get(var_name)
    if resolved is not None:
        return resolved
    if fallback is not None:
        return fallback
    raise ConfigValidationError(
        [
            f"Environment variable '${{{var_name}}}' referenced "
            f"at '{path}' is not set and has no default",
        ],
    )


def resolve_env_vars(
    data: Any,  # noqa: ANN401
    path: str = "",
) -> None:
    """Walk *data* in-place and resolve ``${VAR}``/``${VAR:-default}`` strings."""
    if isinstance(data, dict):
        for key in data:
            child_path = f"{path}.{key}" if path else key
            if isinstance(data[key], str):
                data[key] = _resolve_value(data[key], child_path)
            elif isinstance(data[key], (dict, list)):
                resolve_env_vars(data[key], child_path)
    elif isinstance(data, list):
        for idx, item in enumerate(data):
            child_path = f"{path}[{idx}]"
            if isinstance(item, str):
                data[idx] = _resolve_value(item, child_path)
            elif isinstance(item, (dict, list)):
                resolve_env_vars(item, child_path)


# ---------------------------------------------------------------------------
# Schema validation
# ---------------------------------------------------------------------------


@lru_cache(maxsize=1)
def load_schema() -> dict:
    """Return the bundled JSON Schema."""
    return json.loads(SCHEMA_PATH.read_text(encoding="utf-8"))


def validate_schema(data: dict) -> None:
    """Check *data* against the bundled schema, collecting every error."""
    validator = Draft7Validator(load_schema())
    found = sorted(
        validator.iter_errors(data),
        key=lambda e: [str(p) for p in e.absolute_path],
    )
    errors = [
        f"{'.'.join(str(p) for p in err.absolute_path) or '<root>'}: {err.message}"
        for err in found
    ]
    if errors:
        raise ConfigValidationError(errors)


# ---------------------------------------------------------------------------
# Loading
# ---------------------------------------------------------------------------


def load_raw_configuration(config_file: str | Path) -> dict:
    """Read, resolve and schema-check *config_file*.

    An empty file is treated as an empty configuration.
    """
    path = Path(config_file)
    with path.open(encoding="utf-8") as f:
        if path.suffix in (".yaml", ".yml"):
            data = yaml.safe_load(f)
        else:
            data = json.load(f)

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigValidationError(
            [f"{path}: top-level configuration must be a mapping"],
        )

    resolve_env_vars(data)
    validate_schema(data)
    log.debug("Loaded configuration file %s", path)
    return data
