# =============================================================================
# comexstat_tools/mcp_server.py - FastMCP Tool Server (all tools in one place)
# =============================================================================
#
# WHAT THIS FILE DOES:
#   Registers one MCP tool per Comexstat operation.  Every tool body is the
#   same three steps:
#     1. log the incoming call
#     2. hand the arguments, as plain JSON, to ComexstatService.call(), which
#        validates, sends the HTTP request and unwraps the envelope
#     3. render the result as text (JSON, or the bare date for getLastUpdate)
#
#   Parameters are annotated with the types declared in comexstat/registry.py
#   (Flow, Metric, MonthRange, QueryFilter, Number, Strict*), so tools/list
#   advertises the same enums and YYYY-MM pattern the service enforces, and
#   FastMCP rejects a mistyped argument ("no" for a boolean) before the tool
#   body runs.  Optional parameters default to None here; the service fills
#   in the declared defaults.
#
# TOOL NAMING:
#   Tool names are camelCase (getLastUpdate, queryData, ...) to match the
#   upstream API vocabulary; the Python functions stay snake_case.
#
# ERRORS:
#   Any ComexstatError becomes a fastmcp ToolError with the same message.
#   Anything else propagates and FastMCP reports it as a tool failure.
#
# RUNNING THIS SERVER:
#   python main.py                      (stdio, the default)
#   COMEXSTAT_HTTP_MODE=true python main.py
#   python -m comexstat_tools.mcp_server
# =============================================================================

import json
import logging
import sys
from typing import Any, Optional

from fastmcp import FastMCP
from fastmcp.exceptions import ToolError
from pydantic import BaseModel, StrictBool

from comexstat.errors import ComexstatError
from comexstat.prompts import build_export_data_prompt
from comexstat.registry import (
    CityFilter,
    Flow,
    HistoricalFilter,
    Metric,
    MonthRange,
    Number,
    QueryFilter,
)
from comexstat.service import ComexstatService

logger = logging.getLogger("comexstat.mcp")

# =============================================================================
# Logging Setup
# =============================================================================
# Logs go to STDERR: with the stdio transport, STDOUT carries the MCP
# JSON-RPC stream and must contain nothing else.
#
#   CYAN   incoming tool call + arguments
#   YELLOW intermediate status
#   GREEN  rendered response (truncated)
# =============================================================================
_CYAN = "\033[36m"
_GREEN = "\033[32m"
_YELLOW = "\033[33m"
_RESET = "\033[0m"

_MAX_LOGGED_RESPONSE = 500


def setup_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s [MCP] %(levelname)s %(name)s: %(message)s",
        datefmt="%H:%M:%S",
        stream=sys.stderr,
    )


def _log_request(tool_name: str, **params) -> None:
    param_str = ", ".join(f"{k}={v!r}" for k, v in params.items() if v is not None)
    logger.info(f"{_CYAN}{tool_name} called with: {param_str}{_RESET}")


def _log_status(message: str) -> None:
    logger.info(f"{_YELLOW}  → {message}{_RESET}")


def _log_response(tool_name: str, text: str) -> str:
    shown = text if len(text) <= _MAX_LOGGED_RESPONSE else text[:_MAX_LOGGED_RESPONSE] + "…"
    logger.info(f"{_GREEN}  ← {tool_name} response: {shown}{_RESET}")
    return text


def render_result(result: Any) -> str:
    """Text content for a shaped result: strings as-is, everything else JSON."""
    if isinstance(result, str):
        return result
    return json.dumps(result, ensure_ascii=False)


def _plain(value: Any) -> Any:
    # FastMCP hands nested arguments over as registry models.
    if isinstance(value, BaseModel):
        return value.model_dump(by_alias=True, exclude_none=True)
    if isinstance(value, list):
        return [_plain(item) for item in value]
    return value


def _run(service: ComexstatService, operation: str, **arguments) -> str:
    arguments = {name: _plain(value) for name, value in arguments.items()}
    _log_request(operation, **arguments)
    try:
        result = service.call(operation, arguments)
    except ComexstatError as exc:
        _log_status(f"{operation} failed: {exc}")
        raise ToolError(str(exc)) from exc
    return _log_response(operation, render_result(result))


# =============================================================================
# Server factory
# =============================================================================
def build_server(service: Optional[ComexstatService] = None) -> FastMCP:
    """Create the FastMCP server with every Comexstat tool registered.

    Args:
        service: The service the tools call into.  Built from environment
            settings when omitted; tests pass one wired to a fake session.
    """
    service = service or ComexstatService()
    server = FastMCP(
        name="comexstat",
        instructions=(
            "Brazilian foreign trade statistics (Comexstat). Use the lookup tools "
            "(getAvailableFilters, getFilterValues, getCountries, ...) to find codes, "
            "then queryData / queryMunicipalitiesData / queryHistoricalData to fetch "
            "export and import figures."
        ),
    )

    # -------------------------------------------------------------------------
    # General metadata
    # -------------------------------------------------------------------------
    @server.tool(name="getLastUpdate")
    def get_last_update() -> str:
        """Date of the most recent Comexstat data update (e.g. "2025-03-07")."""
        return _run(service, "getLastUpdate")

    @server.tool(name="getAvailableYears")
    def get_available_years() -> str:
        """First and last years with data, as {"min": "1997", "max": "2025"}."""
        return _run(service, "getAvailableYears")

    @server.tool(name="getAvailableFilters")
    def get_available_filters(language: Optional[str] = None) -> str:
        """List the filters usable in queryData, as [{filter, text}].

        Args:
            language: Response language ("pt", "en" or "es"). Defaults to "pt".
        """
        return _run(service, "getAvailableFilters", language=language)

    @server.tool(name="getFilterValues")
    def get_filter_values(filter: str, language: Optional[str] = None) -> str:
        """List the values one filter accepts, as [{id, text}].

        WHEN TO CALL THIS: before building a queryData filter, to turn a name
        ("Soja", "China") into the numeric code the query needs.

        Args:
            filter: Filter name, e.g. "country", "economicBlock", "section", "ncm".
            language: Response language. Defaults to "pt".
        """
        return _run(service, "getFilterValues", filter=filter, language=language)

    @server.tool(name="getAvailableFields")
    def get_available_fields(language: Optional[str] = None) -> str:
        """List the fields results can be detailed (grouped) by, as [{filter, text}]."""
        return _run(service, "getAvailableFields", language=language)

    @server.tool(name="getAvailableMetrics")
    def get_available_metrics(language: Optional[str] = None) -> str:
        """List the metrics a query can return, as [{id, text, depends}].

        `depends` tells which flow or filter a metric requires (e.g. freight
        and insurance only exist for imports).
        """
        return _run(service, "getAvailableMetrics", language=language)

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------
    @server.tool(name="queryData")
    def query_data(
        flow: Flow,
        monthDetail: StrictBool,
        period: MonthRange,
        details: list[str],
        metrics: list[Metric],
        filters: Optional[list[QueryFilter]] = None,
        language: Optional[str] = None,
    ) -> str:
        """Query general Brazilian export/import data.

        Args:
            flow: "export" or "import".
            monthDetail: Break results down by month.
            period: {"from": "YYYY-MM", "to": "YYYY-MM"}, e.g. {"from": "2023-01", "to": "2023-12"}.
            details: Fields to group by, e.g. country, state, economicBlock,
                section, chapter, position, subposition, ncm.
            metrics: Any of: metricFOB, metricKG, metricStatistic, metricFreight,
                metricInsurance, metricCIF.
            filters: Optional list of {"filter": <one of the detail fields>,
                "values": [<numeric codes>]}. Get country codes from getCountries
                first (the Brazil code is not needed).
            language: Response language. Defaults to "pt".

        Returns:
            The full API envelope: {data: {list: [...]}, success, message, ...}.
        """
        return _run(
            service, "queryData",
            flow=flow, monthDetail=monthDetail, period=period, filters=filters,
            details=details, metrics=metrics, language=language,
        )

    @server.tool(name="queryMunicipalitiesData")
    def query_municipalities_data(
        flow: Flow,
        period: MonthRange,
        details: list[str],
        metrics: list[str],
        monthDetail: Optional[StrictBool] = None,
        filters: Optional[list[CityFilter]] = None,
        language: Optional[str] = None,
    ) -> str:
        """Query export/import data broken down by Brazilian municipality.

        Args:
            flow: "export" or "import".
            period: {"from": "YYYY-MM", "to": "YYYY-MM"}.
            details: Fields to group by (free text, e.g. "city", "country").
            metrics: Metrics to return (free text, e.g. "metricFOB").
            monthDetail: Break results down by month. Defaults to false.
            filters: Optional list of {"filter": <name>, "values": [<numeric codes>]}.
            language: Response language. Defaults to "pt".
        """
        return _run(
            service, "queryMunicipalitiesData",
            flow=flow, period=period, monthDetail=monthDetail, filters=filters,
            details=details, metrics=metrics, language=language,
        )

    @server.tool(name="queryHistoricalData")
    def query_historical_data(
        flow: Flow,
        period: MonthRange,
        details: list[str],
        metrics: list[str],
        monthDetail: Optional[StrictBool] = None,
        filters: Optional[list[HistoricalFilter]] = None,
        language: Optional[str] = None,
    ) -> str:
        """Query historical export/import data (1989-1996).

        Args:
            flow: "export" or "import".
            period: {"from": "YYYY-MM", "to": "YYYY-MM"}.
            details: Fields to group by.
            metrics: Metrics to return.
            monthDetail: Break results down by month. Defaults to false.
            filters: Optional list of {"filter": <name>, "values": [...]} where
                values are all numbers or all strings.
            language: Response language. Defaults to "pt".
        """
        return _run(
            service, "queryHistoricalData",
            flow=flow, period=period, monthDetail=monthDetail, filters=filters,
            details=details, metrics=metrics, language=language,
        )

    # -------------------------------------------------------------------------
    # Auxiliary and reference tables
    # -------------------------------------------------------------------------
    @server.tool(name="getAuxiliaryTable")
    def get_auxiliary_table(
        table: str,
        search: Optional[str] = None,
        page: Optional[Number] = None,
        pageSize: Optional[Number] = None,
    ) -> str:
        """Rows of an auxiliary lookup table with pagination info.

        Prefer the specific table tools (getStates, getCountries, getNBM, ...)
        when one exists.

        Args:
            table: Table name.
            search: Optional search term.
            page: Page number. Defaults to 1.
            pageSize: Rows per page. Defaults to 100.
        """
        return _run(
            service, "getAuxiliaryTable",
            table=table, search=search, page=page, pageSize=pageSize,
        )

    @server.tool(name="getStates")
    def get_states() -> str:
        """Brazilian states (UF) with their codes, names and abbreviations."""
        return _run(service, "getStates")

    @server.tool(name="getStateDetails")
    def get_state_details(ufId: str) -> str:
        """Code, abbreviation, name and region of one state (e.g. ufId "26" = Pernambuco)."""
        return _run(service, "getStateDetails", ufId=ufId)

    @server.tool(name="getCities")
    def get_cities() -> str:
        """Brazilian municipalities with their codes and names."""
        return _run(service, "getCities")

    @server.tool(name="getCityDetails")
    def get_city_details(cityId: str) -> str:
        """Geographic code, name and state of one municipality (e.g. cityId "5300050")."""
        return _run(service, "getCityDetails", cityId=cityId)

    @server.tool(name="getCountries")
    def get_countries(search: Optional[str] = None) -> str:
        """Countries with their Comexstat codes; use these codes in country filters.

        Args:
            search: Optional search term, e.g. "China".
        """
        return _run(service, "getCountries", search=search)

    @server.tool(name="getCountryDetails")
    def get_country_details(countryId: str) -> str:
        """Name and ISO codes of one country (e.g. countryId "105" = Brazil)."""
        return _run(service, "getCountryDetails", countryId=countryId)

    @server.tool(name="getEconomicBlocks")
    def get_economic_blocks(
        language: Optional[str] = None,
        add: Optional[str] = None,
        search: Optional[str] = None,
    ) -> str:
        """Economic blocks (Mercosul, EU, ...), optionally with member countries.

        Args:
            language: Response language. Defaults to "pt".
            add: Extra data to include, e.g. "country".
            search: Optional search term.
        """
        return _run(service, "getEconomicBlocks", language=language, add=add, search=search)

    @server.tool(name="getHarmonizedSystem")
    def get_harmonized_system(
        language: Optional[str] = None,
        page: Optional[Number] = None,
        perPage: Optional[Number] = None,
        add: Optional[str] = None,
    ) -> str:
        """Harmonized System (HS) classifications with their NCM codes.

        Args:
            language: Response language. Defaults to "pt".
            page: Page number. Defaults to 1.
            perPage: Items per page. Defaults to 10.
            add: Extra data to include, e.g. "ncm".
        """
        return _run(
            service, "getHarmonizedSystem",
            language=language, page=page, perPage=perPage, add=add,
        )

    @server.tool(name="getNBM")
    def get_nbm(
        language: Optional[str] = None,
        page: Optional[Number] = None,
        perPage: Optional[Number] = None,
        add: Optional[str] = None,
        search: Optional[str] = None,
    ) -> str:
        """NBM (Nomenclatura Brasileira de Mercadorias) codes, paginated.

        Args:
            language: Response language. Defaults to "pt".
            page: Page number. Defaults to 1.
            perPage: Items per page. Defaults to 5.
            add: Extra data to include, e.g. "ncm".
            search: Optional search term.
        """
        return _run(
            service, "getNBM",
            language=language, page=page, perPage=perPage, add=add, search=search,
        )

    @server.tool(name="getNBMDetails")
    def get_nbm_details(coNbm: str) -> str:
        """Code and description of one NBM entry (e.g. coNbm "2924101100")."""
        return _run(service, "getNBMDetails", coNbm=coNbm)

    # -------------------------------------------------------------------------
    # Prompts
    # -------------------------------------------------------------------------
    @server.prompt(
        name="exportDataQuery",
        description="Guide a query of Brazilian exports for a period, product and destination.",
    )
    def export_data_query(
        periodFrom: str,
        periodTo: str,
        product: Optional[str] = None,
        country: Optional[str] = None,
    ) -> str:
        return build_export_data_prompt(periodFrom, periodTo, product=product, country=country)

    return server


# =============================================================================
# Server entry point
# =============================================================================
# `python -m comexstat_tools.mcp_server` starts a stdio server with settings
# from the environment.  main.py adds .env loading and HTTP mode.
# =============================================================================
if __name__ == "__main__":
    setup_logging()
    build_server().run()
