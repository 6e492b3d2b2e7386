"""Builder-then-freeze base class for configuration dataclasses.

Every configuration node is an ordinary mutable dataclass while the
pipeline runs.  Once the pipeline completes, :meth:`ConfigNode.freeze`
walks the tree and makes it read-only::

    config = build_configuration(raw)
    set_effective_configuration(config)
    config.freeze()
    config.debug = True        # raises FrozenConfigurationError

Lists become tuples and dicts become read-only mappings so nested
collections are protected as well.
"""

from __future__ import annotations

import dataclasses
from types import MappingProxyType
from typing import Any, Self

from proxyconf.core.errors import FrozenConfigurationError

_FROZEN_FLAG = "_frozen"


class ConfigNode:
    """Mixin for dataclasses that take part in the configuration tree."""

    def __setattr__(self, name: str, value: Any) -> None:  # noqa: ANN401
        if self.__dict__.get(_FROZEN_FLAG, False):
            msg = f"cannot set {type(self).__name__}.{name}: configuration is frozen"
            raise FrozenConfigurationError(msg)
        object.__setattr__(self, name, value)

    def __delattr__(self, name: str) -> None:
        if self.__dict__.get(_FROZEN_FLAG, False):
            msg = f"cannot delete {type(self).__name__}.{name}: configuration is frozen"
            raise FrozenConfigurationError(msg)
        object.__delattr__(self, name)

    @property
    def frozen(self) -> bool:
        """Whether :meth:`freeze` has been called on this node."""
        return self.__dict__.get(_FROZEN_FLAG, False)

    def freeze(self) -> Self:
        """Recursively make this node and everything below it read-only."""
        if self.frozen:
            return self
        for f in dataclasses.fields(self):  # type: ignore[arg-type]
            object.__setattr__(self, f.name, _freeze_value(getattr(self, f.name)))
        object.__setattr__(self, _FROZEN_FLAG, True)
        return self


def _freeze_value(value: Any) -> Any:  # noqa: ANN401
    if isinstance(value, ConfigNode):
        return value.freeze()
    if isinstance(value, (list, tuple)):
        return tuple(_freeze_value(item) for item in value)
    if isinstance(value, (dict, MappingProxyType)):
        return MappingProxyType({key: _freeze_value(item) for key, item in value.items()})
    return value
