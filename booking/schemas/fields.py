"""Queryable field tables for the list endpoints.

Each entity declares, once, which public field names may appear in ``sort``
and ``filter`` parameters and how a filter value for that field is checked
and turned into an SQL literal. The tables are module constants and are
never mutated, so concurrent requests read them without locking.
"""
from __future__ import annotations

import enum
import logging
import re
from dataclasses import dataclass

from booking.core.errors import validation_error

_LOG = logging.getLogger("booking.query")

_INTEGER_RE = re.compile(r"^[+-]?[0-9]+$")
_INT64_MIN = -(2**63)
_INT64_MAX = 2**63 - 1
_TRUE_LITERALS = {"1", "t", "T", "TRUE", "true", "True"}
_FALSE_LITERALS = {"0", "f", "F", "FALSE", "false", "False"}


class ValueKind(str, enum.Enum):
    INTEGER = "integer"
    BOOLEAN = "boolean"
    CHAR = "char"
    STRING = "string"


@dataclass(frozen=True)
class FieldDescriptor:
    public_name: str
    kind: ValueKind
    sortable: bool = True
    filterable: bool = True
    # SQL identifier the field renders as; backquoted where the name is a keyword.
    column: str = ""

    @property
    def sql(self) -> str:
        return self.column or self.public_name


def quote_string(value: str) -> str:
    return "'" + value.replace("'", "''") + "'"


def is_int64(value: str) -> bool:
    if not _INTEGER_RE.fullmatch(value):
        return False
    return _INT64_MIN <= int(value) <= _INT64_MAX


def _invalid(field: str, value: str, reason: str):
    _LOG.warning("%s is not %s value=%r", field, reason, value)
    return validation_error(f"{field}.Invalid", f"{field} is not {reason}", field)


class EntitySchema:
    def __init__(self, entity: str, fields: tuple[FieldDescriptor, ...]):
        self.entity = entity
        self._fields = tuple(fields)
        self._by_name = {f.public_name: f for f in self._fields}

    def is_sortable(self, name: str) -> bool:
        descriptor = self._by_name.get(name)
        return descriptor is not None and descriptor.sortable

    def filter_descriptor(self, name: str) -> FieldDescriptor | None:
        descriptor = self._by_name.get(name)
        if descriptor is None or not descriptor.filterable:
            return None
        return descriptor

    def sort_descriptor(self, name: str) -> FieldDescriptor | None:
        return self._by_name.get(name) if self.is_sortable(name) else None

    def all_filterable_fields(self) -> tuple[FieldDescriptor, ...]:
        return tuple(f for f in self._fields if f.filterable)

    def render_value(self, descriptor: FieldDescriptor, value: str) -> str:
        """Check ``value`` against the field kind and return it as an SQL literal.

        Raises ``ApiValidationError`` with ``<field>.Invalid`` when the value
        does not fit the kind.
        """
        name = descriptor.public_name
        if descriptor.kind is ValueKind.INTEGER:
            if not is_int64(value):
                raise _invalid(name, value, "integer")
            return value
        if descriptor.kind is ValueKind.BOOLEAN:
            if value in _TRUE_LITERALS:
                return "true"
            if value in _FALSE_LITERALS:
                return "false"
            raise _invalid(name, value, "boolean")
        if descriptor.kind is ValueKind.CHAR:
            if len(value) != 1:
                raise _invalid(name, value, "one character")
            return quote_string(value)
        return quote_string(value)


FLIGHT_SCHEMA = EntitySchema(
    "flight",
    (
        FieldDescriptor("id", ValueKind.INTEGER),
        FieldDescriptor("name", ValueKind.STRING),
        FieldDescriptor("created_at", ValueKind.INTEGER),
    ),
)

SEAT_SCHEMA = EntitySchema(
    "seat",
    (
        FieldDescriptor("id", ValueKind.INTEGER),
        FieldDescriptor("index", ValueKind.INTEGER, column="`index`"),
        FieldDescriptor("type", ValueKind.INTEGER),
        FieldDescriptor("row", ValueKind.INTEGER, column="`row`"),
        FieldDescriptor("line", ValueKind.CHAR),
        FieldDescriptor("assigned", ValueKind.BOOLEAN),
        FieldDescriptor("created_at", ValueKind.INTEGER),
        FieldDescriptor("updated_at", ValueKind.INTEGER),
    ),
)
