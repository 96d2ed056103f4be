"""Values bound to query variables, and sets of them as a solution row."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from .namespaces import NamespaceSolver
from .triples import (
    I18NString,
    Node,
    Object,
    Predicate,
    SimpleLiteral,
    Subject,
    TypedLiteral,
)


def _is_blank(term: object) -> bool:
    return isinstance(term, int) and not isinstance(term, bool)


class VariableRole(Enum):
    """Position of a triple that a variable was resolved from."""

    SUBJECT = "subject"
    PREDICATE = "predicate"
    OBJECT = "object"


@dataclass(frozen=True)
class ResolvedVariable:
    """A value bound to a variable, tagged with the triple position it came from."""

    role: VariableRole
    value: Object

    def __post_init__(self) -> None:
        value = self.value
        if self.role is VariableRole.SUBJECT:
            valid = isinstance(value, Node) or _is_blank(value)
        elif self.role is VariableRole.PREDICATE:
            valid = isinstance(value, Node)
        else:
            valid = isinstance(value, (Node, SimpleLiteral, I18NString, TypedLiteral)) or _is_blank(
                value
            )
        if not valid:
            raise TypeError(f"invalid {self.role.value} value: {value!r}")

    @classmethod
    def subject(cls, value: Subject) -> "ResolvedVariable":
        return cls(VariableRole.SUBJECT, value)

    @classmethod
    def predicate(cls, value: Predicate) -> "ResolvedVariable":
        return cls(VariableRole.PREDICATE, value)

    @classmethod
    def object(cls, value: Object) -> "ResolvedVariable":
        return cls(VariableRole.OBJECT, value)

    def as_subject(self) -> Optional[Subject]:
        """The value usable as a subject, or ``None`` if it is a literal."""
        if isinstance(self.value, Node) or _is_blank(self.value):
            return self.value
        return None

    def as_predicate(self) -> Optional[Predicate]:
        """The value usable as a predicate, or ``None`` unless it is a named node."""
        if isinstance(self.value, Node):
            return self.value
        return None

    def as_object(self) -> Optional[Object]:
        """The value usable as an object; every resolved value qualifies."""
        return self.value

    def as_term(self, ns_solver: NamespaceSolver) -> str:
        """String form used when evaluating expressions.

        Named nodes become full IRIs, blank nodes ``_:<id>``; namespace lookup
        errors raised by ``ns_solver`` propagate.
        """
        value = self.value
        if isinstance(value, Node):
            return value.as_iri(ns_solver)
        if _is_blank(value):
            return f"_:{value}"
        if isinstance(value, SimpleLiteral):
            return value.value
        if isinstance(value, I18NString):
            return f"{value.value}{value.language}"
        if isinstance(value, TypedLiteral):
            return f"{value.value}{value.datatype.as_iri(ns_solver)}"
        raise TypeError(f"invalid value: {value!r}")


@dataclass
class ResolvedVariables:
    """A fixed-size row of variable bindings, indexed by variable number."""

    variables: list[Optional[ResolvedVariable]] = field(default_factory=list)

    @classmethod
    def with_capacity(cls, cap: int) -> "ResolvedVariables":
        """A row of ``cap`` unbound variables."""
        return cls([None] * cap)

    def merge_with(self, other: "ResolvedVariables") -> Optional["ResolvedVariables"]:
        """Merge with another row.

        Returns ``None`` if a variable is bound on both sides to different values.
        """
        merged = list(other.variables)
        for key, var in enumerate(self.variables):
            if var is None:
                continue
            other_val = other.variables[key]
            if other_val is None:
                merged[key] = var
            elif other_val != var:
                return None
        return ResolvedVariables(merged)

    def merge_index(self, index: int, var: ResolvedVariable) -> bool:
        """Bind ``var`` at ``index``.

        Returns ``False`` if the index is already bound to a different value.
        """
        old = self.get(index)
        if old is not None:
            return old == var
        self.variables[index] = var
        return True

    def get(self, index: int) -> Optional[ResolvedVariable]:
        """The binding at ``index``, or ``None`` if unbound or out of range."""
        if 0 <= index < len(self.variables):
            return self.variables[index]
        return None