"""
Ordered configuration layers with "last applied wins" merge semantics.

Manifesto:
    Precedence must be a property of construction order, not of some
    library's implicit behaviour.  A :class:`LayeredProvider` is nothing
    more than an ordered tuple of named :class:`Layer` objects; merging
    walks them lowest priority first and lets each later layer overwrite
    what came before.

Merge policy::

    mapping + mapping  →  recursive merge per key
    anything else      →  the later layer replaces the earlier value

Type mismatches between layers are *not* detected here; they surface when
the merged tree is deserialized into the typed settings document.

Tags:
    torrent-index, configuration, layers, precedence, deep-merge
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from copy import deepcopy
from dataclasses import dataclass, field
from typing import Any

_MISSING = object()


def deep_merge(base: Mapping[str, Any], override: Mapping[str, Any]) -> dict[str, Any]:
    """Merge *override* on top of *base* without mutating either input.

    Nested mappings are merged key by key; every other value in *override*
    (scalars, lists, ``None``) replaces the value in *base* wholesale.
    """
    result: dict[str, Any] = deepcopy(dict(base))

    for key, override_value in override.items():
        base_value = result.get(key, _MISSING)

        if isinstance(base_value, Mapping) and isinstance(override_value, Mapping):
            result[key] = deep_merge(base_value, override_value)
        else:
            result[key] = deepcopy(override_value)

    return result


def split_path(path: str) -> list[str]:
    """Split a dotted option path (``"auth.user_claim_token_pepper"``)."""
    return [segment for segment in path.split(".") if segment]


def lookup(data: Mapping[str, Any], path: str) -> Any:
    """Resolve a dotted *path* inside nested mappings.

    Raises:
        KeyError: if any segment is absent or traverses a non-mapping value.
    """
    node: Any = data
    for segment in split_path(path):
        if not isinstance(node, Mapping) or segment not in node:
            raise KeyError(path)
        node = node[segment]
    return node


@dataclass(frozen=True)
class Layer:
    """A named source of configuration key-value data."""

    name: str
    data: Mapping[str, Any] = field(default_factory=dict)

    def __len__(self) -> int:
        return len(self.data)

    def find_value(self, path: str) -> Any:
        return lookup(self.data, path)


@dataclass(frozen=True)
class LayeredProvider:
    """An ordered stack of layers; the last layer has the highest priority.

    Providers are immutable: :meth:`merge` and :meth:`join` return new
    providers, so a view built before defaults were added stays valid after.
    """

    layers: tuple[Layer, ...] = ()

    @classmethod
    def from_layers(cls, *layers: Layer) -> LayeredProvider:
        return cls(tuple(layers))

    def __iter__(self) -> Iterator[Layer]:
        return iter(self.layers)

    @property
    def names(self) -> list[str]:
        return [layer.name for layer in self.layers]

    def merge(self, layer: Layer) -> LayeredProvider:
        """Add *layer* with a higher priority than every existing layer."""
        return LayeredProvider((*self.layers, layer))

    def join(self, layer: Layer) -> LayeredProvider:
        """Add *layer* with a lower priority than every existing layer.

        Values already provided win; *layer* only fills in what's missing.
        """
        return LayeredProvider((layer, *self.layers))

    def merged(self) -> dict[str, Any]:
        """Collapse all layers into one tree, last applied wins."""
        result: dict[str, Any] = {}
        for layer in self.layers:
            result = deep_merge(result, layer.data)
        return result

    def find_value(self, path: str) -> Any:
        """Return the effective value at dotted *path*.

        Raises:
            KeyError: if no layer provides a value for *path*.
        """
        return lookup(self.merged(), path)

    def contains(self, path: str) -> bool:
        try:
            self.find_value(path)
        except KeyError:
            return False
        return True

    def origin(self, path: str) -> str | None:
        """Name of the highest-priority layer that supplies *path*, if any."""
        for layer in reversed(self.layers):
            try:
                layer.find_value(path)
            except KeyError:
                continue
            return layer.name
        return None


__all__ = [
    "Layer",
    "LayeredProvider",
    "deep_merge",
    "lookup",
    "split_path",
]
