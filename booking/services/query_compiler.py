"""Compile ``offset``/``limit``/``sort``/``filter`` query parameters.

The output fragments are concatenated verbatim after a store select, so
their exact text (leading spaces, keyword casing, separators) is part of
the contract:

* limitation: ``" LIMIT {offset}, {count}"``
* ordering:   ``""`` or ``" ORDER BY line ASC, id DESC"``
* predicate:  ``""`` or ``" AND (line = 'v') AND (id > 100)"``

Any invalid parameter rejects the whole request with a single
``ApiValidationError``; nothing is compiled partially.
"""
from __future__ import annotations

import csv
import enum
import io
import logging
import re
from dataclasses import dataclass
from typing import Iterable, Protocol
from urllib.parse import unquote_plus

from booking.core.config import settings
from booking.core.errors import validation_error
from booking.schemas.fields import EntitySchema, FieldDescriptor, is_int64, quote_string

_LOG = logging.getLogger("booking.query")

PARAM_OFFSET = "offset"
PARAM_LIMIT = "limit"
PARAM_SORT = "sort"
PARAM_FILTER = "filter"

DELIMITER = ":"
WILDCARD_FIELD = "*"
SORT_LENGTH = 2
FILTER_LENGTH = 3

_BAD_ESCAPE_RE = re.compile(r"%(?![0-9A-Fa-f]{2})")


class Direction(str, enum.Enum):
    ASC = "ASC"
    DESC = "DESC"


class Operator(str, enum.Enum):
    EQ = "="
    NE = "!="
    LT = "<"
    LE = "<="
    GT = ">"
    GE = ">="
    LIKE = "LIKE"


OPERATOR_CODES = {
    "eq": Operator.EQ,
    "ne": Operator.NE,
    "lt": Operator.LT,
    "le": Operator.LE,
    "gt": Operator.GT,
    "ge": Operator.GE,
    "lk": Operator.LIKE,
}

DIRECTION_CODES = {
    "asc": Direction.ASC,
    "desc": Direction.DESC,
}


def _ascii_lookup(codes: dict, raw: str):
    # ASCII case folding only: "a\u017fc".upper() == "ASC".
    if not raw.isascii():
        return None
    return codes.get(raw.lower())


@dataclass(frozen=True)
class Limitation:
    offset: int = 0
    count: int = 100

    def render(self) -> str:
        return f" LIMIT {self.offset}, {self.count}"


@dataclass(frozen=True)
class OrderItem:
    field: FieldDescriptor
    direction: Direction

    def render(self) -> str:
        return f"{self.field.sql} {self.direction.value}"


@dataclass(frozen=True)
class Ordering:
    items: tuple[OrderItem, ...] = ()

    def render(self) -> str:
        if not self.items:
            return ""
        return " ORDER BY " + ", ".join(item.render() for item in self.items)


@dataclass(frozen=True)
class FilterAtom:
    field: FieldDescriptor
    operator: Operator
    value: str

    def render(self) -> str:
        return f"{self.field.sql} {self.operator.value} {self.value}"


@dataclass(frozen=True)
class FilterGroup:
    atoms: tuple[FilterAtom, ...]

    def render(self) -> str:
        return "(" + " OR ".join(atom.render() for atom in self.atoms) + ")"


@dataclass(frozen=True)
class Predicate:
    groups: tuple[FilterGroup, ...] = ()

    def render(self) -> str:
        if not self.groups:
            return ""
        return " AND " + " AND ".join(group.render() for group in self.groups)


@dataclass(frozen=True)
class CompiledQuery:
    limitation: Limitation
    order: Ordering
    predicate: Predicate

    @property
    def filtering(self) -> str:
        return self.predicate.render()

    @property
    def sorting(self) -> str:
        return self.order.render()

    @property
    def limiting(self) -> str:
        return self.limitation.render()


class QueryParameters(Protocol):
    def getlist(self, key: str) -> list[str]:
        ...


def unescape(value: str) -> str:
    """URL-unescape ``value``; raises ``ValueError`` on a malformed escape."""
    if _BAD_ESCAPE_RE.search(value):
        raise ValueError(f"invalid URL escape in {value!r}")
    return unquote_plus(value, errors="strict")


def _first(values: list[str]) -> str:
    return values[0] if values else ""


def parse_limitation(offset: str | None = None, limit: str | None = None, *, default_limit: int | None = None) -> Limitation:
    parsed = {PARAM_OFFSET: 0, PARAM_LIMIT: 0}
    for name, raw in ((PARAM_OFFSET, offset), (PARAM_LIMIT, limit)):
        title = name.capitalize()
        try:
            value = unescape(raw or "")
        except (ValueError, UnicodeDecodeError):
            _LOG.warning("%s can't be unescaped raw=%r", title, raw)
            raise validation_error(f"{name}.Bad", f"{title} can't be unescaped", name)
        if value == "":
            continue
        if not is_int64(value):
            _LOG.warning("%s is not integer value=%r", title, value)
            raise validation_error(f"{name}.Invalid", f"{title} is not integer", name)
        number = int(value)
        if number < 0:
            _LOG.warning("%s can't be negative value=%r", title, value)
            raise validation_error(f"{name}.Negative", f"{title} can't be negative", name)
        parsed[name] = number

    count = parsed[PARAM_LIMIT]
    if count <= 0:
        count = default_limit if default_limit is not None else settings.QUERY_DEFAULT_LIMIT
    limitation = Limitation(offset=parsed[PARAM_OFFSET], count=count)
    _LOG.debug("Offset and limit successfully parsed limitation=%r", limitation.render())
    return limitation


def parse_sorting(values: Iterable[str], schema: EntitySchema) -> Ordering:
    items: list[OrderItem] = []
    for raw in values:
        try:
            element = unescape(raw)
        except (ValueError, UnicodeDecodeError):
            _LOG.warning("Sort can't be unescaped raw=%r", raw)
            raise validation_error("sort.Bad", "Sort can't be unescaped", "sort")
        if element == "":
            continue

        parts = element.split(DELIMITER)
        if len(parts) != SORT_LENGTH:
            _LOG.warning("Sort has wrong length of elements element=%r", element)
            raise validation_error("sort.WrongLength", "Sort has wrong length of elements", "sort")
        field_name, order = parts

        descriptor = schema.sort_descriptor(field_name)
        if descriptor is None:
            _LOG.warning("Sort contains unknown field entity=%s field=%r", schema.entity, field_name)
            raise validation_error("sort.UnknownField", "Sort contains unknown field", "sort")

        direction = _ascii_lookup(DIRECTION_CODES, order)
        if direction is None:
            _LOG.warning("Sort contains unknown order order=%r", order)
            raise validation_error("sort.UnknownOrder", "Sort contains unknown order", "sort")

        items.append(OrderItem(field=descriptor, direction=direction))

    ordering = Ordering(items=tuple(items))
    _LOG.debug("Sort successfully parsed sorting=%r", ordering.render())
    return ordering


def _read_record(element: str) -> list[str]:
    # Lazy quoting: stray quotes are kept literally instead of failing.
    reader = csv.reader(io.StringIO(element), delimiter=DELIMITER, quotechar='"', doublequote=True, strict=False)
    records = [record for record in reader if record]
    if not records:
        return []
    width = len(records[0])
    if any(len(record) != width for record in records[1:]):
        raise csv.Error("records have different number of fields")
    return records[0]


def _parse_filter(element: str, schema: EntitySchema) -> FilterGroup | None:
    try:
        parts = _read_record(element)
    except csv.Error as exc:
        _LOG.warning("Filter is not in csv format element=%r error=%s", element, exc)
        raise validation_error("filter.InvalidFormat", "Filter is not in csv format", "filter")
    if not parts:
        return None
    if len(parts) != FILTER_LENGTH:
        _LOG.warning("Filter has wrong length of elements element=%r", element)
        raise validation_error("filter.WrongLength", "Filter has wrong length of elements", "filter")
    field_name, op_code, value = parts

    if field_name == WILDCARD_FIELD:
        descriptors = schema.all_filterable_fields()
        literal = quote_string(value)
    else:
        descriptor = schema.filter_descriptor(field_name)
        if descriptor is None:
            _LOG.warning("%s field is unknown entity=%s", field_name, schema.entity)
            raise validation_error("field.Unknown", f"{field_name} field is unknown", "field")
        descriptors = (descriptor,)
        literal = schema.render_value(descriptor, value)

    operator = _ascii_lookup(OPERATOR_CODES, op_code)
    if operator is None:
        _LOG.warning("Filter contains unknown operation op=%r", op_code)
        raise validation_error("filter.UnknownOperation", "Filter contains unknown operation", "filter")
    if operator is Operator.LIKE:
        literal = literal.replace("*", "%")

    return FilterGroup(atoms=tuple(FilterAtom(field=f, operator=operator, value=literal) for f in descriptors))


def parse_filtering(values: Iterable[str], schema: EntitySchema) -> Predicate:
    groups: list[FilterGroup] = []
    for raw in values:
        try:
            element = unescape(raw)
        except (ValueError, UnicodeDecodeError):
            _LOG.warning("Filter can't be unescaped raw=%r", raw)
            raise validation_error("filter.Bad", "Filter can't be unescaped", "filter")
        group = _parse_filter(element, schema)
        if group is not None:
            groups.append(group)

    predicate = Predicate(groups=tuple(groups))
    _LOG.debug("Filter successfully parsed filtering=%r", predicate.render())
    return predicate


def compile_query(params: QueryParameters, schema: EntitySchema) -> CompiledQuery:
    limitation = parse_limitation(_first(params.getlist(PARAM_OFFSET)), _first(params.getlist(PARAM_LIMIT)))
    order = parse_sorting(params.getlist(PARAM_SORT), schema)
    predicate = parse_filtering(params.getlist(PARAM_FILTER), schema)
    return CompiledQuery(limitation=limitation, order=order, predicate=predicate)
