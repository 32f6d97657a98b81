from decimal import Decimal

import pytest

from marketplace.models.enums import FuelType, ListingStatus
from marketplace.schemas.filters import GeneralFilter, RealEstateFilter, VehicleFilter
from marketplace.services.predicates import (
    COMMON_FIELDS,
    REAL_ESTATE_FIELDS,
    VEHICLE_FIELDS,
    Operator,
    Predicate,
    build_predicates,
    format_search_query,
    search_tokens,
)


def test_empty_filter_builds_no_predicates():
    assert build_predicates(RealEstateFilter(), REAL_ESTATE_FIELDS) == []


def test_only_non_null_fields_become_predicates():
    filters = RealEstateFilter(city=" Istanbul ", min_price=Decimal("100000"), max_price=Decimal("500000"))

    assert build_predicates(filters, REAL_ESTATE_FIELDS) == [
        Predicate("city", Operator.IEQ, "Istanbul"),
        Predicate("price", Operator.GTE, Decimal("100000")),
        Predicate("price", Operator.LTE, Decimal("500000")),
    ]


def test_blank_strings_count_as_absent():
    filters = GeneralFilter.model_validate({"city": "  ", "district": ""})

    assert build_predicates(filters, COMMON_FIELDS) == []


def test_vehicle_fields_map_to_detail_columns():
    filters = VehicleFilter.model_validate({"brand": "BMW", "minYear": "2015", "fuelType": "DIESEL", "status": "ACTIVE"})

    predicates = build_predicates(filters, VEHICLE_FIELDS)

    assert Predicate("brand", Operator.IEQ, "BMW") in predicates
    assert Predicate("year", Operator.GTE, 2015) in predicates
    assert Predicate("fuel_type", Operator.EQ, FuelType.DIESEL) in predicates
    assert Predicate("status", Operator.EQ, ListingStatus.ACTIVE) in predicates


def test_unmapped_field_is_rejected():
    with pytest.raises(ValueError):
        build_predicates(VehicleFilter(brand="BMW"), COMMON_FIELDS)


def test_search_query_tokens_are_joined_with_and():
    assert format_search_query("istanbul   daire") == "istanbul & daire"


def test_search_query_operators_are_stripped():
    assert format_search_query("deniz & | !manzara (villa)") == "deniz & manzara & villa"
    assert search_tokens("deniz & manzara & villa") == ["deniz", "manzara", "villa"]


@pytest.mark.parametrize("query", [None, "", "   ", "& | !"])
def test_search_query_without_tokens_is_none(query):
    assert format_search_query(query) is None
