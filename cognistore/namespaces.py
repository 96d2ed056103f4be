"""Namespace resolution with in-memory caching, and batched namespace writes."""

from __future__ import annotations

from dataclasses import replace
from typing import Iterable, Optional, Protocol

from .storage import Namespace, Storage


class NamespaceNotFoundError(LookupError):
    """Raised when a namespace cannot be resolved."""

    def __init__(self, message: str = "Namespace not found") -> None:
        super().__init__(message)


class NamespaceSolver(Protocol):
    """Resolves namespaces by key or value, raising ``NamespaceNotFoundError``."""

    def resolve_from_key(self, key: int) -> Namespace:
        """Return the namespace with this key."""

    def resolve_from_val(self, value: str) -> Namespace:
        """Return the namespace with this value."""


class NamespaceQuerier:
    """Namespace lookup by value or key with a two-way indexed in-memory cache.

    The cache is consulted first; the storage is only read on a miss.
    """

    def __init__(self, namespaces: Iterable[Namespace] = ()) -> None:
        self._by_val: dict[str, Namespace] = {}
        self._by_key: dict[int, Namespace] = {}
        for namespace in namespaces:
            self._insert(namespace)

    def resolve_from_val(self, storage: Storage, value: str) -> Optional[Namespace]:
        """Resolve a namespace from its value, or ``None`` if unknown."""
        cell = self._cell_from_val(storage, value)
        return replace(cell) if cell is not None else None

    def resolve_from_key(self, storage: Storage, key: int) -> Optional[Namespace]:
        """Resolve a namespace from its key, or ``None`` if unknown."""
        cell = self._cell_from_key(storage, key)
        return replace(cell) if cell is not None else None

    def cached_namespaces(self) -> list[Namespace]:
        """The cached namespaces, ordered by key."""
        return [replace(self._by_key[key]) for key in sorted(self._by_key)]

    def clear_cache(self) -> None:
        """Empty the cache."""
        self._by_val.clear()
        self._by_key.clear()

    def _cell_from_val(self, storage: Storage, value: str) -> Optional[Namespace]:
        cell = self._by_val.get(value)
        if cell is not None:
            return cell
        loaded = storage.namespace_by_value(value)
        return self._insert(loaded) if loaded is not None else None

    def _cell_from_key(self, storage: Storage, key: int) -> Optional[Namespace]:
        cell = self._by_key.get(key)
        if cell is not None:
            return cell
        loaded = storage.namespace_by_key(key)
        return self._insert(loaded) if loaded is not None else None

    def _insert(self, namespace: Namespace) -> Namespace:
        cell = replace(namespace)
        self._by_val[cell.value] = cell
        self._by_key[cell.key] = cell
        return cell

    def _cells_by_value(self) -> list[Namespace]:
        return [self._by_val[value] for value in sorted(self._by_val)]


class NamespaceResolver(NamespaceSolver):
    """A ``NamespaceSolver`` reading from a storage through a cache."""

    def __init__(self, storage: Storage, ns_cache: Optional[Iterable[Namespace]] = None) -> None:
        self._storage = storage
        self._querier = NamespaceQuerier(ns_cache or ())

    def resolve_from_key(self, key: int) -> Namespace:
        namespace = self._querier.resolve_from_key(self._storage, key)
        if namespace is None:
            raise NamespaceNotFoundError()
        return namespace

    def resolve_from_val(self, value: str) -> Namespace:
        namespace = self._querier.resolve_from_val(self._storage, value)
        if namespace is None:
            raise NamespaceNotFoundError()
        return namespace

    def cached_namespaces(self) -> list[Namespace]:
        """The cached namespaces, ordered by key."""
        return self._querier.cached_namespaces()

    def clear_cache(self) -> None:
        """Empty the cache."""
        self._querier.clear_cache()


class NamespaceBatchService:
    """Batches namespace writes: allocation, reference counting and deletion.

    Changes stay in memory until ``flush`` writes them to the storage.
    """

    def __init__(self, storage: Storage) -> None:
        if storage.namespace_key_increment is None:
            raise LookupError("namespace key increment not found")
        self._querier = NamespaceQuerier()
        self._key_inc = storage.namespace_key_increment
        self._count_diff = 0

    def resolve_from_key(self, storage: Storage, key: int) -> Optional[Namespace]:
        """Resolve a namespace from its key, from the cache first."""
        return self._querier.resolve_from_key(storage, key)

    def resolve_or_allocate(self, storage: Storage, value: str) -> Namespace:
        """Resolve a namespace by value, allocating a new one if it does not exist."""
        cell = self._querier._cell_from_val(storage, value)
        if cell is None:
            cell = self._allocate(value)
        return replace(cell)

    def count_ref(self, storage: Storage, key: int) -> Namespace:
        """Increment the reference count of a namespace."""
        cell = self._querier._cell_from_key(storage, key)
        if cell is None:
            raise NamespaceNotFoundError()
        cell.counter += 1
        return replace(cell)

    def free_ref(self, storage: Storage, key: int) -> Namespace:
        """Decrement the reference count of a namespace, deleting it when unused.

        Raises ``ValueError`` if the namespace is unknown or already unreferenced.
        """
        cell = self._querier._cell_from_key(storage, key)
        if cell is None or cell.counter <= 0:
            raise ValueError("Trying to delete a non existing namespace")
        cell.counter -= 1
        if cell.counter == 0:
            self._count_diff -= 1
        return replace(cell)

    def flush(self, storage: Storage) -> int:
        """Write cached changes to the storage, returning the namespace count diff."""
        storage.namespace_key_increment = self._key_inc
        for cell in self._querier._cells_by_value():
            if cell.counter > 0:
                storage.save_namespace(cell)
            else:
                storage.remove_namespace(cell.value)

        diff = self._count_diff
        self._count_diff = 0
        self._querier.clear_cache()
        return diff

    def _allocate(self, value: str) -> Namespace:
        cell = self._querier._insert(Namespace(value=value, key=self._key_inc, counter=0))
        self._key_inc += 1
        self._count_diff += 1
        return cell