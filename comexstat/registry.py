# =============================================================================
# comexstat/registry.py - The Operation Catalog
# =============================================================================
#
# WHAT THIS MODULE DOES:
#   Declares every tool the server exposes: its camelCase name, a short
#   description, and a pydantic model of its arguments (types, defaults,
#   enums, the YYYY-MM pattern).  The catalog is built once at import time
#   and is read-only.
#
#   The same types (Flow, Metric, MonthRange, Number, ...) annotate the
#   FastMCP tool signatures, so the schema clients see in tools/list and the
#   rules validation.py enforces come from one declaration.
#
# THREE FLAVOURS OF QUERY:
#   queryData               strict: filter names and metrics are enums
#   queryMunicipalitiesData loose:  free-text names, monthDetail defaults False
#   queryHistoricalData     loose:  filter values may be numbers OR strings
#
# Every other operation is a lookup with at most a handful of scalar params.
#
# STRICTNESS:
#   Every model validates in strict mode: "no" is not a boolean, "10" is not
#   a number and True is not a number.  Scalars use the Strict* types so the
#   same rules hold in FastMCP's own (lax) argument validation.
# =============================================================================

from types import MappingProxyType
from typing import Annotated, Iterable, Literal, Mapping, Optional, Union, get_args

from pydantic import BaseModel, ConfigDict, Field, StrictBool, StrictFloat, StrictInt, StrictStr

from comexstat.errors import ValidationError
from comexstat.models import OperationSpec

# -----------------------------------------------------------------------------
# Enumerated value sets
# -----------------------------------------------------------------------------
Flow = Literal["export", "import"]

QueryField = Literal[
    "country",
    "state",
    "economicBlock",
    "section",
    "chapter",
    "position",
    "subposition",
    "ncm",
]

Metric = Literal[
    "metricFOB",
    "metricKG",
    "metricStatistic",
    "metricFreight",
    "metricInsurance",
    "metricCIF",
]

FLOWS: tuple[str, ...] = get_args(Flow)
QUERY_FIELDS: tuple[str, ...] = get_args(QueryField)
METRICS: tuple[str, ...] = get_args(Metric)

MONTH_PATTERN = r"^\d{4}-\d{2}$"
MONTH_HINT = "YYYY-MM (e.g. '2023-01')"

DEFAULT_LANGUAGE = "pt"

# -----------------------------------------------------------------------------
# Scalar types shared with the tool signatures
# -----------------------------------------------------------------------------
Month = Annotated[StrictStr, Field(pattern=MONTH_PATTERN)]
Number = Union[StrictInt, StrictFloat]

LANGUAGE_HINT = "Response language: 'pt', 'en' or 'es'."


# -----------------------------------------------------------------------------
# Argument models
# -----------------------------------------------------------------------------
class ToolParameters(BaseModel):
    """Base for every operation's argument model."""

    model_config = ConfigDict(strict=True, extra="ignore")


class NoParameters(ToolParameters):
    """Operations that take no arguments."""


class MonthRange(ToolParameters):
    """Inclusive month range; from <= to is left to the upstream API."""

    start: Month = Field(alias="from", description="First month, YYYY-MM.")
    end: Month = Field(alias="to", description="Last month, YYYY-MM.")


class QueryFilter(ToolParameters):
    filter: QueryField
    values: list[Number]


class CityFilter(ToolParameters):
    filter: StrictStr
    values: list[Number]


class HistoricalFilter(ToolParameters):
    filter: StrictStr
    values: Union[list[Number], list[StrictStr]]


class _QueryParameters(ToolParameters):
    flow: Flow = Field(description="'export' or 'import'.")
    period: MonthRange = Field(description="Inclusive month range.")
    monthDetail: StrictBool = Field(False, description="Break results down by month.")
    details: list[StrictStr] = Field(description="Fields to group results by.")
    metrics: list[StrictStr] = Field(description="Metrics to return.")
    language: StrictStr = Field(DEFAULT_LANGUAGE, description=LANGUAGE_HINT)


class QueryDataParameters(_QueryParameters):
    monthDetail: StrictBool = Field(description="Break results down by month.")
    filters: Optional[list[QueryFilter]] = Field(
        None, description="Filter clauses; codes come from getFilterValues or the /tables lookups."
    )
    # Free text: the upstream also accepts time fields such as "month".
    details: list[StrictStr] = Field(
        description="Fields to group results by, e.g. " + ", ".join(QUERY_FIELDS) + "."
    )
    metrics: list[Metric] = Field(description="Metrics to return.")


class MunicipalitiesQueryParameters(_QueryParameters):
    filters: Optional[list[CityFilter]] = None


class HistoricalQueryParameters(_QueryParameters):
    filters: Optional[list[HistoricalFilter]] = None


class LanguageParameters(ToolParameters):
    language: StrictStr = Field(DEFAULT_LANGUAGE, description=LANGUAGE_HINT)


class FilterValuesParameters(ToolParameters):
    filter: StrictStr = Field(description="Filter name.")
    language: Optional[StrictStr] = Field(None, description=LANGUAGE_HINT)


class AuxiliaryTableParameters(ToolParameters):
    table: StrictStr = Field(description="Auxiliary table name.")
    search: Optional[StrictStr] = Field(None, description="Search term.")
    page: Number = 1
    pageSize: Number = 100


class StateDetailsParameters(ToolParameters):
    ufId: StrictStr = Field(description="State code, e.g. '26' for Pernambuco.")


class CityDetailsParameters(ToolParameters):
    cityId: StrictStr = Field(description="Municipality code, e.g. '5300050'.")


class CountriesParameters(ToolParameters):
    search: Optional[StrictStr] = Field(None, description="Search term.")


class CountryDetailsParameters(ToolParameters):
    countryId: StrictStr = Field(description="Country code, e.g. '105' for Brazil.")


class EconomicBlocksParameters(ToolParameters):
    language: StrictStr = Field(DEFAULT_LANGUAGE, description=LANGUAGE_HINT)
    add: Optional[StrictStr] = Field(None, description="Extra data to include, e.g. 'country'.")
    search: Optional[StrictStr] = Field(None, description="Search term.")


class HarmonizedSystemParameters(ToolParameters):
    language: StrictStr = Field(DEFAULT_LANGUAGE, description=LANGUAGE_HINT)
    page: Number = 1
    perPage: Number = 10
    add: Optional[StrictStr] = Field(None, description="Extra data to include, e.g. 'ncm'.")


class NBMParameters(ToolParameters):
    language: StrictStr = Field(DEFAULT_LANGUAGE, description=LANGUAGE_HINT)
    page: Number = 1
    perPage: Number = 5
    add: Optional[StrictStr] = Field(None, description="Extra data to include, e.g. 'ncm'.")
    search: Optional[StrictStr] = Field(None, description="Search term.")


class NBMDetailsParameters(ToolParameters):
    coNbm: StrictStr = Field(description="NBM code, e.g. '2924101100'.")


# -----------------------------------------------------------------------------
# The catalog
# -----------------------------------------------------------------------------
def _build_catalog() -> Iterable[OperationSpec]:
    yield OperationSpec(
        "getLastUpdate", "Date of the most recent Comexstat data update.", NoParameters
    )
    yield OperationSpec(
        "getAvailableYears", "First and last years available for queries.", NoParameters
    )
    yield OperationSpec(
        "getAvailableFilters", "Filters that can be used in queries.", LanguageParameters
    )
    yield OperationSpec(
        "getFilterValues",
        "Values accepted by one filter (e.g. 'country', 'economicBlock', 'section', 'ncm').",
        FilterValuesParameters,
    )
    yield OperationSpec(
        "getAvailableFields",
        "Fields that can be used to detail (group) query results.",
        LanguageParameters,
    )
    yield OperationSpec(
        "getAvailableMetrics",
        "Metrics that can be requested, with their flow/filter dependencies.",
        LanguageParameters,
    )
    yield OperationSpec("queryData", "Query general export/import data.", QueryDataParameters)
    yield OperationSpec(
        "queryMunicipalitiesData",
        "Query export/import data broken down by municipality.",
        MunicipalitiesQueryParameters,
    )
    yield OperationSpec(
        "queryHistoricalData",
        "Query historical export/import data (1989-1996).",
        HistoricalQueryParameters,
    )
    yield OperationSpec(
        "getAuxiliaryTable",
        "Rows of an auxiliary (lookup) table, paginated.",
        AuxiliaryTableParameters,
    )
    yield OperationSpec(
        "getStates", "Brazilian states (UF) with codes and abbreviations.", NoParameters
    )
    yield OperationSpec(
        "getStateDetails", "Details of one Brazilian state.", StateDetailsParameters
    )
    yield OperationSpec("getCities", "Brazilian municipalities with their codes.", NoParameters)
    yield OperationSpec(
        "getCityDetails", "Details of one Brazilian municipality.", CityDetailsParameters
    )
    yield OperationSpec(
        "getCountries", "Countries with their Comexstat codes.", CountriesParameters
    )
    yield OperationSpec(
        "getCountryDetails",
        "Details of one country, including ISO codes.",
        CountryDetailsParameters,
    )
    yield OperationSpec(
        "getEconomicBlocks",
        "Economic blocks, optionally with member countries.",
        EconomicBlocksParameters,
    )
    yield OperationSpec(
        "getHarmonizedSystem",
        "Harmonized System (HS) classifications, paginated.",
        HarmonizedSystemParameters,
    )
    yield OperationSpec(
        "getNBM",
        "NBM (Nomenclatura Brasileira de Mercadorias) codes, paginated.",
        NBMParameters,
    )
    yield OperationSpec("getNBMDetails", "Details of one NBM code.", NBMDetailsParameters)


OPERATIONS: Mapping[str, OperationSpec] = MappingProxyType(
    {spec.name: spec for spec in _build_catalog()}
)


def get_operation(name: str) -> OperationSpec:
    """Look up an operation by its tool name.

    Raises:
        ValidationError: If no operation has that name.
    """
    spec = OPERATIONS.get(name)
    if spec is None:
        raise ValidationError("operation", f"'{name}' is not a known operation")
    return spec


def list_operations() -> list[str]:
    """All operation names, in declaration order."""
    return list(OPERATIONS.keys())
