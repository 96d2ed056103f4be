"""Writes and deletes triples in a store while enforcing its limits."""

from __future__ import annotations

from dataclasses import replace
from typing import Callable, Iterable

from .atom import Atom, NodeKind, Value, ValueKind
from .namespaces import NamespaceBatchService, NamespaceNotFoundError
from .storage import Storage
from .store import Store
from .triples import (
    BLANK_NODE_SIZE,
    I18NString,
    Node,
    Object,
    SimpleLiteral,
    Subject,
    Triple,
    TypedLiteral,
)


class StoreError(Exception):
    """A store limit was exceeded."""


class TripleCountError(StoreError):
    def __init__(self, limit: int) -> None:
        super().__init__(f"Maximum triples number exceeded: {limit}")
        self.limit = limit


class InsertDataTripleCountError(StoreError):
    def __init__(self, limit: int) -> None:
        super().__init__(f"Maximum inserted triple count exceeded: {limit}")
        self.limit = limit


class TripleByteSizeError(StoreError):
    def __init__(self, size: int, limit: int) -> None:
        super().__init__(f"Maximum triple byte size exceeded: {size} / {limit}")
        self.size = size
        self.limit = limit


class ByteSizeError(StoreError):
    def __init__(self, limit: int) -> None:
        super().__init__(f"Maximum byte size exceeded: {limit}")
        self.limit = limit


class InsertDataByteSizeError(StoreError):
    def __init__(self, limit: int) -> None:
        super().__init__(f"Maximum inserted data byte size exceeded: {limit}")
        self.limit = limit


def _explode_iri(iri: str) -> tuple[str, str]:
    """Split an IRI after its last ``#``, ``/`` or ``:`` into namespace and local value."""
    index = max(iri.rfind(delim) for delim in "#/:")
    if index < 0:
        raise ValueError("Couldn't extract IRI namespace")
    return iri[: index + 1], iri[index + 1 :]


class _BlankNodeIssuer:
    """Issues sequential numeric identifiers to blank node labels."""

    def __init__(self, counter: int) -> None:
        self.counter = counter
        self._issued: dict[str, int] = {}

    def get_or_issue(self, label: str) -> int:
        issued = self._issued.get(label)
        if issued is None:
            issued = self.counter
            self._issued[label] = issued
            self.counter += 1
        return issued


def _copy_store(store: Store) -> Store:
    return replace(store, stat=replace(store.stat))


class StoreEngine:
    """Applies batches of insertions or deletions to a storage.

    Statistics, namespaces and the blank node counter are written back to the
    storage at the end of each batch.
    """

    def __init__(self, storage: Storage) -> None:
        if storage.store is None:
            raise LookupError("Store not found")
        if storage.blank_node_counter is None:
            raise LookupError("blank node identifier counter not found")
        self._storage = storage
        self._store = _copy_store(storage.store)
        self._ns_batch = NamespaceBatchService(storage)
        self._blank_issuer = _BlankNodeIssuer(storage.blank_node_counter)
        self._initial_triple_count = self._store.stat.triple_count
        self._initial_byte_size = self._store.stat.byte_size

    def store_all(self, atoms: Iterable[Atom]) -> int:
        """Store every atom, returning how many triples were actually added."""
        for atom in atoms:
            self._store_atom(atom)
        return self._finish()

    def delete_all(self, triples: Iterable[Triple]) -> int:
        """Delete the given triples, returning how many were actually removed."""
        for triple in triples:
            self._delete_triple(triple)
        return self._finish()

    def _store_atom(self, atom: Atom) -> None:
        stat = self._store.stat
        limits = self._store.limits

        stat.triple_count += 1
        if stat.triple_count > limits.max_triple_count:
            raise TripleCountError(limits.max_triple_count)
        if stat.triple_count - self._initial_triple_count > limits.max_insert_data_triple_count:
            raise InsertDataTripleCountError(limits.max_insert_data_triple_count)

        triple = self._atom_to_triple(atom)
        size = self._triple_size(triple)
        if size > limits.max_triple_byte_size:
            raise TripleByteSizeError(size, limits.max_triple_byte_size)

        stat.byte_size += size
        if stat.byte_size > limits.max_byte_size:
            raise ByteSizeError(limits.max_byte_size)
        if stat.byte_size - self._initial_byte_size > limits.max_insert_data_byte_size:
            raise InsertDataByteSizeError(limits.max_insert_data_byte_size)

        key = triple.primary_key()
        if key in self._storage.triples:
            stat.triple_count -= 1
            stat.byte_size -= size
            return

        self._storage.triples[key] = triple
        for ns_key in triple.namespaces():
            self._ns_batch.count_ref(self._storage, ns_key)

    def _delete_triple(self, triple: Triple) -> None:
        key = triple.primary_key()
        if key not in self._storage.triples:
            return
        del self._storage.triples[key]
        self._store.stat.triple_count -= 1
        self._store.stat.byte_size -= self._triple_size(triple)
        for ns_key in triple.namespaces():
            self._ns_batch.free_ref(self._storage, ns_key)

    def _finish(self) -> int:
        stat = self._store.stat
        stat.namespace_count += self._ns_batch.flush(self._storage)
        self._storage.blank_node_counter = self._blank_issuer.counter
        self._storage.store = _copy_store(self._store)

        count_diff = abs(stat.triple_count - self._initial_triple_count)
        self._initial_triple_count = stat.triple_count
        self._initial_byte_size = stat.byte_size
        return count_diff

    def _namespace_key(self, namespace: str) -> int:
        return self._ns_batch.resolve_or_allocate(self._storage, namespace).key

    def _iri_to_node(self, iri: str, ns_fn: Callable[[str], int]) -> Node:
        namespace, value = _explode_iri(iri)
        return Node(namespace=ns_fn(namespace), value=value)

    def _atom_to_triple(self, atom: Atom) -> Triple:
        ns_fn = self._namespace_key
        if atom.subject.kind is NodeKind.BLANK:
            subject: Subject = self._blank_issuer.get_or_issue(atom.subject.value)
        else:
            subject = self._iri_to_node(atom.subject.value, ns_fn)
        predicate = self._iri_to_node(atom.property.value, ns_fn)
        obj = self._value_to_object(atom.value, ns_fn)
        return Triple(subject=subject, predicate=predicate, object=obj)

    def _value_to_object(self, value: Value, ns_fn: Callable[[str], int]) -> Object:
        kind = value.kind
        if kind is ValueKind.BLANK_NODE:
            return self._blank_issuer.get_or_issue(value.value)
        if kind is ValueKind.NAMED_NODE:
            return self._iri_to_node(value.value, ns_fn)
        if kind is ValueKind.LITERAL_SIMPLE:
            return SimpleLiteral(value.value)
        if kind is ValueKind.LITERAL_LANG:
            return I18NString(value=value.value, language=value.qualifier or "")
        return TypedLiteral(
            value=value.value, datatype=self._iri_to_node(value.qualifier or "", ns_fn)
        )

    def _node_size(self, node: Node) -> int:
        namespace = self._ns_batch.resolve_from_key(self._storage, node.namespace)
        if namespace is None:
            raise NamespaceNotFoundError()
        return len(namespace.value.encode()) + len(node.value.encode())

    def _term_size(self, term: Object) -> int:
        if isinstance(term, Node):
            return self._node_size(term)
        if isinstance(term, SimpleLiteral):
            return len(term.value.encode())
        if isinstance(term, I18NString):
            return len(term.value.encode()) + len(term.language.encode())
        if isinstance(term, TypedLiteral):
            return len(term.value.encode()) + self._node_size(term.datatype)
        return BLANK_NODE_SIZE

    def _triple_size(self, triple: Triple) -> int:
        return (
            self._term_size(triple.subject)
            + self._node_size(triple.predicate)
            + self._term_size(triple.object)
        )