"""
Unit tests - operation catalog contents and introspection.
"""
import pytest

from comexstat.errors import ValidationError
from comexstat.mapper import ROUTES
from comexstat.registry import (
    METRICS,
    MONTH_PATTERN,
    OPERATIONS,
    QUERY_FIELDS,
    get_operation,
    list_operations,
)

EXPECTED_OPERATIONS = [
    "getLastUpdate",
    "getAvailableYears",
    "getAvailableFilters",
    "getFilterValues",
    "getAvailableFields",
    "getAvailableMetrics",
    "queryData",
    "queryMunicipalitiesData",
    "queryHistoricalData",
    "getAuxiliaryTable",
    "getStates",
    "getStateDetails",
    "getCities",
    "getCityDetails",
    "getCountries",
    "getCountryDetails",
    "getEconomicBlocks",
    "getHarmonizedSystem",
    "getNBM",
    "getNBMDetails",
]


def test_catalog_lists_every_operation_in_order():
    assert list_operations() == EXPECTED_OPERATIONS


def test_every_operation_has_a_route():
    assert set(ROUTES) == set(OPERATIONS)


def test_catalog_is_read_only():
    with pytest.raises(TypeError):
        OPERATIONS["extra"] = OPERATIONS["getStates"]


def test_enum_sizes():
    assert len(QUERY_FIELDS) == 8
    assert len(METRICS) == 6


def _resolve(schema: dict, node: dict) -> dict:
    """Follow a $ref, or the non-null branch of an Optional."""
    if "$ref" in node:
        return _resolve(schema, schema["$defs"][node["$ref"].split("/")[-1]])
    if len(node.get("allOf", [])) == 1:
        return _resolve(schema, node["allOf"][0])
    if "anyOf" in node:
        branches = [b for b in node["anyOf"] if b.get("type") != "null"]
        if len(branches) == 1:
            return _resolve(schema, branches[0])
    return node


@pytest.mark.parametrize("name,required", [
    ("getLastUpdate", set()),
    ("getFilterValues", {"filter"}),
    ("queryData", {"flow", "monthDetail", "period", "details", "metrics"}),
    ("queryMunicipalitiesData", {"flow", "period", "details", "metrics"}),
    ("queryHistoricalData", {"flow", "period", "details", "metrics"}),
    ("getAuxiliaryTable", {"table"}),
    ("getStateDetails", {"ufId"}),
    ("getCityDetails", {"cityId"}),
    ("getCountryDetails", {"countryId"}),
    ("getNBMDetails", {"coNbm"}),
    ("getNBM", set()),
])
def test_required_parameters(name, required):
    schema = get_operation(name).describe()["inputSchema"]
    assert set(schema.get("required", [])) == required


def test_describe_query_data_schema():
    schema = get_operation("queryData").describe()["inputSchema"]
    props = schema["properties"]
    assert props["flow"]["enum"] == ["export", "import"]

    period = _resolve(schema, props["period"])
    assert set(period["properties"]) == {"from", "to"}
    assert period["properties"]["from"]["pattern"] == MONTH_PATTERN

    clause = _resolve(schema, _resolve(schema, props["filters"])["items"])
    assert clause["properties"]["filter"]["enum"] == list(QUERY_FIELDS)
    assert props["metrics"]["items"]["enum"] == list(METRICS)
    assert props["language"]["default"] == "pt"


def test_describe_historical_values_union():
    schema = get_operation("queryHistoricalData").describe()["inputSchema"]
    clause = _resolve(schema, _resolve(schema, schema["properties"]["filters"])["items"])
    options = clause["properties"]["values"]["anyOf"]
    assert [option["type"] for option in options] == ["array", "array"]
    assert options[1]["items"]["type"] == "string"


def test_pagination_defaults_are_declared():
    props = get_operation("getNBM").describe()["inputSchema"]["properties"]
    assert (props["page"]["default"], props["perPage"]["default"]) == (1, 5)


def test_get_operation_unknown():
    with pytest.raises(ValidationError):
        get_operation("getWeather")
