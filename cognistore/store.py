"""Store descriptor: owner, configured limits and running statistics."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class StoreLimits:
    """Limits a store enforces on its content and on queries."""

    max_triple_count: int
    max_byte_size: int
    max_triple_byte_size: int
    max_query_limit: int
    max_query_variable_count: int
    max_insert_data_byte_size: int
    max_insert_data_triple_count: int


@dataclass
class StoreStat:
    """Running statistics of a store's content."""

    triple_count: int = 0
    namespace_count: int = 0
    byte_size: int = 0


@dataclass
class Store:
    owner: str
    limits: StoreLimits
    stat: StoreStat = field(default_factory=StoreStat)

    @classmethod
    def new(cls, owner: str, limits: StoreLimits) -> "Store":
        """Create an empty store for ``owner`` with the given limits."""
        return cls(owner=owner, limits=limits, stat=StoreStat())