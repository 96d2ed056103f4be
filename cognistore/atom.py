"""RDF atoms: plain string-level triples as read from or written to documents."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Mapping


class NodeKind(Enum):
    """Kind of node that can stand as a subject."""

    NAMED = "named"
    BLANK = "blank"


class ValueKind(Enum):
    """Kind of term that can stand as the value (object) of an atom."""

    NAMED_NODE = "named_node"
    BLANK_NODE = "blank_node"
    LITERAL_SIMPLE = "literal_simple"
    LITERAL_LANG = "literal_lang"
    LITERAL_DATATYPE = "literal_datatype"


@dataclass(frozen=True)
class Subject:
    """Subject of an atom: a named node (IRI) or a blank node identifier."""

    kind: NodeKind
    value: str

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class Property:
    """Predicate of an atom, held as a full IRI."""

    value: str

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class Value:
    """Object of an atom.

    ``qualifier`` holds the language tag of a language-tagged literal or the
    datatype IRI of a typed literal, and is ``None`` for every other kind.
    """

    kind: ValueKind
    value: str
    qualifier: str | None = None

    def __post_init__(self) -> None:
        needs_qualifier = self.kind in (ValueKind.LITERAL_LANG, ValueKind.LITERAL_DATATYPE)
        if needs_qualifier and self.qualifier is None:
            raise ValueError(f"{self.kind.value} value requires a qualifier")
        if not needs_qualifier and self.qualifier is not None:
            raise ValueError(f"{self.kind.value} value takes no qualifier")

    def __str__(self) -> str:
        if self.kind is ValueKind.LITERAL_LANG:
            return f"{self.value}@{self.qualifier}"
        if self.kind is ValueKind.LITERAL_DATATYPE:
            return f"{self.value}^^{self.qualifier}"
        return self.value


@dataclass(frozen=True)
class Atom:
    """A subject, property and value triple at the string level."""

    subject: Subject
    property: Property
    value: Value

    def __str__(self) -> str:
        return f"<{self.subject}> <{self.property}> '{self.value}'"


def prefix_map(prefixes: Iterable[tuple[str, str]]) -> dict[str, str]:
    """Build a prefix to namespace mapping; a later prefix overrides an earlier one."""
    return {prefix: namespace for prefix, namespace in prefixes}


def expand_uri(curie: str, prefixes: Mapping[str, str]) -> str:
    """Expand a ``prefix:local`` compact IRI using ``prefixes``.

    Raises ``ValueError`` when the IRI is not prefixed or the prefix is unknown.
    """
    prefix, sep, local = curie.partition(":")
    if not sep:
        raise ValueError(f"Malformed CURIE: {curie}")
    try:
        namespace = prefixes[prefix]
    except KeyError:
        raise ValueError(f"Prefix not found: {prefix}") from None
    return namespace + local