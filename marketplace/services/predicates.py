"""Optional-predicate composition.

A filter object is reduced to an ordered list of ``Predicate`` triples, one per
non-null field. Nothing here touches SQL: the store renders the triples into
bound SQLAlchemy clauses, so values never reach the query text.
"""
import enum
import re
from dataclasses import dataclass
from typing import Any, Mapping

from pydantic import BaseModel


class Operator(str, enum.Enum):
    EQ = "eq"
    NE = "ne"
    IEQ = "ieq"
    GTE = "gte"
    LTE = "lte"
    IN = "in"
    MATCH = "match"
    WITHIN = "within"


@dataclass(frozen=True)
class Predicate:
    column: str
    op: Operator
    value: Any


@dataclass(frozen=True)
class GeoRadius:
    latitude: float
    longitude: float
    meters: float


COMMON_FIELDS = {
    "city": ("city", Operator.IEQ),
    "district": ("district", Operator.IEQ),
    "category_slug": ("category_slug", Operator.EQ),
    "status": ("status", Operator.EQ),
    "min_price": ("price", Operator.GTE),
    "max_price": ("price", Operator.LTE),
    "owner_id": ("owner_id", Operator.EQ),
}

REAL_ESTATE_FIELDS = {
    **COMMON_FIELDS,
    "real_estate_type": ("real_estate_type", Operator.EQ),
    "room_count": ("room_count", Operator.IEQ),
    "min_square_meter": ("square_meter", Operator.GTE),
    "max_square_meter": ("square_meter", Operator.LTE),
    "min_building_age": ("building_age", Operator.GTE),
    "max_building_age": ("building_age", Operator.LTE),
    "min_floor": ("floor", Operator.GTE),
    "max_floor": ("floor", Operator.LTE),
    "heating_type": ("heating_type", Operator.EQ),
    "furnished": ("furnished", Operator.EQ),
}

VEHICLE_FIELDS = {
    **COMMON_FIELDS,
    "brand": ("brand", Operator.IEQ),
    "model": ("model", Operator.IEQ),
    "min_year": ("year", Operator.GTE),
    "max_year": ("year", Operator.LTE),
    "fuel_type": ("fuel_type", Operator.EQ),
    "transmission": ("transmission", Operator.EQ),
    "min_kilometer": ("kilometer", Operator.GTE),
    "max_kilometer": ("kilometer", Operator.LTE),
    "engine_volume": ("engine_volume", Operator.EQ),
}

LAND_FIELDS = {
    **COMMON_FIELDS,
    "land_type": ("land_type", Operator.EQ),
    "min_square_meter": ("square_meter", Operator.GTE),
    "max_square_meter": ("square_meter", Operator.LTE),
}

WORKPLACE_FIELDS = {
    **COMMON_FIELDS,
    "workplace_type": ("workplace_type", Operator.EQ),
    "min_square_meter": ("square_meter", Operator.GTE),
    "max_square_meter": ("square_meter", Operator.LTE),
    "min_floor_count": ("floor_count", Operator.GTE),
    "max_floor_count": ("floor_count", Operator.LTE),
    "furnished": ("furnished", Operator.EQ),
}


def build_predicates(filter_obj: BaseModel, fields: Mapping[str, tuple[str, Operator]]) -> list[Predicate]:
    """Conjunction of the non-null constraints, in field declaration order."""
    predicates = []
    for name in type(filter_obj).model_fields:
        value = getattr(filter_obj, name)
        if value is None:
            continue
        try:
            column, op = fields[name]
        except KeyError:
            raise ValueError(f"No column mapping for filter field '{name}'") from None
        if op is Operator.IEQ and isinstance(value, str):
            value = value.strip()
        predicates.append(Predicate(column, op, value))
    return predicates


_TSQUERY_SPECIALS = re.compile(r"[&|!():*<>'\"\\]")


def format_search_query(query: str | None) -> str | None:
    """"istanbul  daire" -> "istanbul & daire"; None when nothing searchable is left."""
    if not query:
        return None
    tokens = [_TSQUERY_SPECIALS.sub("", token) for token in query.split()]
    tokens = [token for token in tokens if token]
    return " & ".join(tokens) if tokens else None


def search_tokens(tsquery: str) -> list[str]:
    return [token.strip() for token in tsquery.split("&") if token.strip()]
