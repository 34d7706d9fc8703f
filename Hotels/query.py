"""
Translation of listing query parameters into filter, sort and projection.

The builders are pure and know nothing about MongoDB. ``build_filter`` returns
a small tree of tagged predicates; ``to_mongo`` turns that tree into a native
query document at the store boundary.
"""

import re
from dataclasses import dataclass
from typing import Any, Mapping, Optional, Union

from utils import parse_number

ASCENDING = 1
DESCENDING = -1

PRICE_FIELD = "price_per_night"
CITY_FIELD = "location"
SEARCH_FIELDS = ("title", "description", "location", "amenities")

SortOrder = tuple[tuple[str, int], ...]

SORT_ORDERS: dict[str, SortOrder] = {
    "price_asc": ((PRICE_FIELD, ASCENDING), ("title", ASCENDING)),
    "price_desc": ((PRICE_FIELD, DESCENDING), ("title", ASCENDING)),
    "title_asc": (("title", ASCENDING), (PRICE_FIELD, ASCENDING)),
    "title_desc": (("title", DESCENDING), (PRICE_FIELD, ASCENDING)),
}
DEFAULT_SORT = "price_asc"


@dataclass(frozen=True)
class Exact:
    field: str
    value: Any

    def matches(self, record: Mapping[str, Any]) -> bool:
        return record.get(self.field) == self.value


@dataclass(frozen=True)
class Range:
    """Inclusive numeric bounds; a missing bound is open."""

    field: str
    low: Optional[float] = None
    high: Optional[float] = None

    def matches(self, record: Mapping[str, Any]) -> bool:
        value = record.get(self.field)
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            return False
        if self.low is not None and value < self.low:
            return False
        if self.high is not None and value > self.high:
            return False
        return True


@dataclass(frozen=True)
class AnySubstring:
    """Case-insensitive literal substring match against any of ``fields``."""

    fields: tuple[str, ...]
    text: str

    def matches(self, record: Mapping[str, Any]) -> bool:
        needle = self.text.lower()
        return any(
            isinstance(record.get(field), str) and needle in record[field].lower()
            for field in self.fields
        )


@dataclass(frozen=True)
class And:
    predicates: tuple["Predicate", ...] = ()

    def matches(self, record: Mapping[str, Any]) -> bool:
        return all(predicate.matches(record) for predicate in self.predicates)


Predicate = Union[Exact, Range, AnySubstring, And]


def _param(params: Mapping[str, Any], name: str) -> str:
    value = params.get(name)
    return "" if value is None else str(value).strip()


def build_filter(params: Mapping[str, Any]) -> And:
    """
    Build the listing predicate from ``q``, ``city``, ``minPrice`` and ``maxPrice``.

    Args:
        params: query parameter mapping (values are strings).

    Returns:
        And: conjunction of the recognized predicates; empty when none apply,
        which matches every record.
    """

    predicates: list[Predicate] = []

    city = _param(params, "city")
    if city:
        predicates.append(Exact(CITY_FIELD, city))

    low = parse_number(params.get("minPrice"))
    high = parse_number(params.get("maxPrice"))
    if low is not None or high is not None:
        predicates.append(Range(PRICE_FIELD, low, high))

    text = _param(params, "q")
    if text:
        predicates.append(AnySubstring(SEARCH_FIELDS, text))

    return And(tuple(predicates))


def build_sort(params: Mapping[str, Any]) -> SortOrder:
    """Primary and tie-break ordering for ``sort``; unknown values use price ascending."""

    return SORT_ORDERS.get(_param(params, "sort"), SORT_ORDERS[DEFAULT_SORT])


def build_projection(params: Mapping[str, Any]) -> Optional[tuple[str, ...]]:
    """
    Parse ``fields`` as a comma separated list of field names.

    Returns:
        Optional[tuple[str, ...]]: the field names in request order without
        duplicates, or None for a full record.
    """

    names: list[str] = []
    for name in _param(params, "fields").split(","):
        name = name.strip()
        if name and name not in names:
            names.append(name)
    return tuple(names) or None


def to_mongo(predicate: Predicate) -> dict[str, Any]:
    """Translate a predicate tree into a MongoDB query document."""

    if isinstance(predicate, Exact):
        return {predicate.field: predicate.value}
    if isinstance(predicate, Range):
        bounds: dict[str, float] = {}
        if predicate.low is not None:
            bounds["$gte"] = predicate.low
        if predicate.high is not None:
            bounds["$lte"] = predicate.high
        return {predicate.field: bounds} if bounds else {}
    if isinstance(predicate, AnySubstring):
        pattern = re.escape(predicate.text)
        return {"$or": [{field: {"$regex": pattern, "$options": "i"}} for field in predicate.fields]}
    if isinstance(predicate, And):
        clauses = [clause for clause in map(to_mongo, predicate.predicates) if clause]
        if not clauses:
            return {}
        if len(clauses) == 1:
            return clauses[0]
        return {"$and": clauses}
    raise TypeError(f"Unsupported predicate {predicate!r}")


def projection_to_mongo(fields: Optional[tuple[str, ...]]) -> Optional[dict[str, int]]:
    if not fields:
        return None
    return {field: 1 for field in fields}
