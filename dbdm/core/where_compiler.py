"""Compile condition mappings into parameterized WHERE clauses.

A condition maps column names to one of:

* a scalar, compiled to ``column = ?``;
* a mapping of operator to scalar (``{"gt": 20, "lte": 65}``), compiled to
  one comparison per operator;
* a list or tuple of scalars, compiled to ``column IN (?, ...)``.

Values always travel in the parameter list. Column names are written into
the SQL verbatim because they cannot be bound, so callers must never build
condition keys from untrusted input.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, List, Tuple

from dbdm.db.models import OPERATOR_SYMBOLS, Compare, Equals, In, Term
from dbdm.errors import UnknownOperator

__all__ = ["WhereClause", "compile_where", "parse_condition"]


@dataclass(frozen=True)
class WhereClause:
    """Compiled condition: AND-joined fragments and their bound parameters."""

    fragments: Tuple[str, ...] = ()
    params: Tuple[Any, ...] = ()

    @property
    def text(self) -> str:
        return " AND ".join(self.fragments)

    @property
    def sql(self) -> str:
        """The clause with its ``WHERE`` keyword, or ``""`` when empty."""
        if not self.fragments:
            return ""
        return f"WHERE {self.text}"

    def __bool__(self) -> bool:
        return bool(self.fragments)


def parse_condition(condition: Mapping[str, Any]) -> List[Term]:
    """Normalize a condition mapping into terms, preserving declaration order."""
    terms: List[Term] = []
    for column, value in condition.items():
        if isinstance(value, Mapping):
            for operator, operand in value.items():
                if operator not in OPERATOR_SYMBOLS:
                    raise UnknownOperator(operator)
                terms.append(Compare(column, operator, operand))
        elif isinstance(value, (list, tuple)):
            terms.append(In(column, tuple(value)))
        else:
            terms.append(Equals(column, value))
    return terms


def _render(term: Term) -> Tuple[str, Tuple[Any, ...]]:
    if isinstance(term, Compare):
        return f"{term.column} {term.symbol} ?", (term.value,)
    if isinstance(term, In):
        # An empty list renders as "IN ()", which SQLite accepts and which matches nothing.
        placeholders = ", ".join("?" for _ in term.values)
        return f"{term.column} IN ({placeholders})", term.values
    return f"{term.column} = ?", (term.value,)


def compile_where(condition: Mapping[str, Any] | None = None) -> WhereClause:
    """Compile *condition* into a :class:`WhereClause`.

    Raises :class:`~dbdm.errors.UnknownOperator` for operator keys other than
    ``gt``, ``lt``, ``gte``, ``lte`` and ``ne``. Never touches storage.
    """
    fragments: List[str] = []
    params: List[Any] = []
    for term in parse_condition(condition or {}):
        fragment, values = _render(term)
        fragments.append(fragment)
        params.extend(values)
    return WhereClause(tuple(fragments), tuple(params))
