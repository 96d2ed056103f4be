"""Stored triple model with namespace-compressed nodes and storage keys."""

from __future__ import annotations

import hashlib
from dataclasses import dataclass
from typing import Protocol, Union

BLANK_NODE_SIZE = 16

BlankNode = int


class _NamespaceLike(Protocol):
    value: str


class _KeySolver(Protocol):
    def resolve_from_key(self, key: int) -> _NamespaceLike: ...


def _u128(value: int) -> bytes:
    return value.to_bytes(16, "big")


@dataclass(frozen=True)
class Node:
    """An IRI split into a namespace key and a local value."""

    namespace: int
    value: str

    def key(self) -> bytes:
        """Binary key: big-endian 128-bit namespace followed by the UTF-8 value."""
        return _u128(self.namespace) + self.value.encode()

    def as_iri(self, ns_solver: _KeySolver) -> str:
        """Rebuild the full IRI through ``ns_solver``; its lookup errors propagate."""
        return ns_solver.resolve_from_key(self.namespace).value + self.value


@dataclass(frozen=True)
class SimpleLiteral:
    value: str


@dataclass(frozen=True)
class I18NString:
    value: str
    language: str


@dataclass(frozen=True)
class TypedLiteral:
    value: str
    datatype: Node


Literal = Union[SimpleLiteral, I18NString, TypedLiteral]
Subject = Union[Node, BlankNode]
Predicate = Node
Object = Union[Node, BlankNode, SimpleLiteral, I18NString, TypedLiteral]


def _is_blank(term: object) -> bool:
    return isinstance(term, int) and not isinstance(term, bool)


def subject_key(subject: Subject) -> bytes:
    """Binary key of a subject, tagged ``n`` for named and ``b`` for blank."""
    if isinstance(subject, Node):
        return b"n" + subject.key()
    if _is_blank(subject):
        return b"b" + _u128(subject)
    raise TypeError(f"not a subject: {subject!r}")


def object_hash(obj: Object) -> bytes:
    """A 32-byte digest identifying an object."""
    if isinstance(obj, Node):
        data = b"n" + _u128(obj.namespace) + obj.value.encode()
    elif _is_blank(obj):
        data = b"b" + _u128(obj)
    elif isinstance(obj, SimpleLiteral):
        data = b"ls" + obj.value.encode()
    elif isinstance(obj, I18NString):
        data = b"li" + obj.value.encode() + obj.language.encode()
    elif isinstance(obj, TypedLiteral):
        data = (
            b"lt"
            + obj.value.encode()
            + _u128(obj.datatype.namespace)
            + obj.datatype.value.encode()
        )
    else:
        raise TypeError(f"not an object: {obj!r}")
    return hashlib.blake2b(data, digest_size=32).digest()


@dataclass(frozen=True)
class Triple:
    subject: Subject
    predicate: Predicate
    object: Object

    def namespaces(self) -> list[int]:
        """Namespace keys referenced by this triple, in subject, predicate, object order."""
        keys = []
        if isinstance(self.subject, Node):
            keys.append(self.subject.namespace)
        keys.append(self.predicate.namespace)
        if isinstance(self.object, Node):
            keys.append(self.object.namespace)
        elif isinstance(self.object, TypedLiteral):
            keys.append(self.object.datatype.namespace)
        return keys

    def primary_key(self) -> tuple[bytes, bytes, bytes]:
        """Storage key: object hash, predicate key, subject key."""
        return object_hash(self.object), self.predicate.key(), subject_key(self.subject)