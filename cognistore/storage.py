"""In-memory state of a store: namespaces, triples, counters and the store descriptor."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Optional

from .store import Store
from .triples import Triple


@dataclass
class Namespace:
    """A namespace shared by the IRIs of stored nodes."""

    value: str
    """The namespace value."""
    key: int
    """The unique, incremented key referencing this namespace from a node."""
    counter: int
    """How many stored references point at this namespace."""


@dataclass
class Storage:
    """State of a single store.

    Namespaces are indexed both by value and by key, the key being unique.
    Values handed in and out are copies, so callers never alias stored state.
    """

    namespace_key_increment: Optional[int] = None
    """Next key to issue to a newly allocated namespace."""
    blank_node_counter: Optional[int] = None
    """Counter serving as the blank node unique identifier generator."""
    store: Optional[Store] = None
    triples: dict[tuple[bytes, bytes, bytes], Triple] = field(default_factory=dict)
    _by_value: dict[str, Namespace] = field(default_factory=dict, init=False, repr=False)
    _value_by_key: dict[int, str] = field(default_factory=dict, init=False, repr=False)

    def namespace_by_value(self, value: str) -> Optional[Namespace]:
        """Load the namespace with this value, or ``None``."""
        namespace = self._by_value.get(value)
        return replace(namespace) if namespace is not None else None

    def namespace_by_key(self, key: int) -> Optional[Namespace]:
        """Load the namespace with this key, or ``None``."""
        value = self._value_by_key.get(key)
        return self.namespace_by_value(value) if value is not None else None

    def save_namespace(self, namespace: Namespace) -> None:
        """Save a namespace under its value.

        Raises ``ValueError`` when another namespace already holds its key.
        """
        holder = self._value_by_key.get(namespace.key)
        if holder is not None and holder != namespace.value:
            raise ValueError(
                f"Violates unique constraint on index: namespace key {namespace.key}"
            )
        previous = self._by_value.get(namespace.value)
        if previous is not None and previous.key != namespace.key:
            del self._value_by_key[previous.key]
        self._by_value[namespace.value] = replace(namespace)
        self._value_by_key[namespace.key] = namespace.value

    def remove_namespace(self, value: str) -> Optional[Namespace]:
        """Remove the namespace with this value, returning it, or ``None`` if absent."""
        namespace = self._by_value.pop(value, None)
        if namespace is None:
            return None
        del self._value_by_key[namespace.key]
        return namespace