# =============================================================================
# comexstat/mapper.py - Operation → HTTP Request → Shaped Result
# =============================================================================
#
# WHAT THIS MODULE DOES:
#   Owns the route table: for every operation, which HTTP method and path
#   to hit, which arguments become query parameters, and how the JSON
#   envelope that comes back is unwrapped.
#
#   The upstream envelope always looks like
#       {"data": ..., "success": ..., "message": ..., "processo_info": ...,
#        "language": ...}
#   and each operation keeps either the whole thing or one slice of it:
#
#       getLastUpdate                     data.updated
#       getAvailableYears                 data
#       getAvailable{Filters,Fields,Metrics}  data.list
#       getFilterValues                   data[0]   (one extra array layer)
#       everything else                   the whole envelope
#
# PRE-FLIGHT:
#   The three POST query operations re-check the period format right before
#   the request is built, even though validation.py already did.  Callers
#   that reach the mapper without going through the registry get the same
#   guarantee.
# =============================================================================

import logging
import re
from dataclasses import dataclass, field
from typing import Any, Callable, Mapping
from urllib.parse import quote

from comexstat.errors import MalformedPeriodError, MalformedResponseError, ValidationError
from comexstat.models import QueryRequest, UpstreamRequest
from comexstat.registry import DEFAULT_LANGUAGE, MONTH_PATTERN

logger = logging.getLogger(__name__)

_MONTH_RE = re.compile(MONTH_PATTERN)
_PATH_ARG_RE = re.compile(r"{(\w+)}")
_QUERY_REQUIRED = ("flow", "details", "metrics")


# -----------------------------------------------------------------------------
# Response shapers
# -----------------------------------------------------------------------------
def _dig(operation: str, payload: Any, *keys: str) -> Any:
    current = payload
    trail = "response"
    for key in keys:
        if not isinstance(current, dict) or key not in current:
            raise MalformedResponseError(operation, f"missing '{key}' in {trail}")
        current = current[key]
        trail = f"{trail}.{key}"
    return current


def envelope(operation: str, payload: Any) -> Any:
    if not isinstance(payload, dict):
        raise MalformedResponseError(operation, "response is not a JSON object")
    return payload


def data(operation: str, payload: Any) -> Any:
    return _dig(operation, payload, "data")


def data_list(operation: str, payload: Any) -> Any:
    return _dig(operation, payload, "data", "list")


def data_updated(operation: str, payload: Any) -> Any:
    return _dig(operation, payload, "data", "updated")


def first_inner_array(operation: str, payload: Any) -> Any:
    outer = _dig(operation, payload, "data")
    if not isinstance(outer, list):
        raise MalformedResponseError(operation, "response.data is not an array")
    if not outer:
        return []
    if not isinstance(outer[0], list):
        raise MalformedResponseError(operation, "response.data[0] is not an array")
    return outer[0]


# -----------------------------------------------------------------------------
# Route table
# -----------------------------------------------------------------------------
@dataclass(frozen=True)
class Route:
    method: str
    path: str                          # May hold "{arg}" placeholders
    query: tuple[str, ...] = ()        # Argument names sent as query params
    defaults: Mapping[str, Any] = field(default_factory=dict)
    shape: Callable[[str, Any], Any] = envelope
    query_body: bool = False           # POST body built from a QueryRequest

    @property
    def path_args(self) -> list[str]:
        return _PATH_ARG_RE.findall(self.path)


_LANG = {"language": DEFAULT_LANGUAGE}

ROUTES: Mapping[str, Route] = {
    "getLastUpdate": Route("GET", "/general/dates/updated", shape=data_updated),
    "getAvailableYears": Route("GET", "/general/dates/years", shape=data),
    "getAvailableFilters": Route(
        "GET", "/general/filters", ("language",), _LANG, shape=data_list
    ),
    "getFilterValues": Route(
        "GET", "/general/filters/{filter}", ("language",), _LANG, shape=first_inner_array
    ),
    "getAvailableFields": Route(
        "GET", "/general/details", ("language",), _LANG, shape=data_list
    ),
    "getAvailableMetrics": Route(
        "GET", "/general/metrics", ("language",), _LANG, shape=data_list
    ),
    "queryData": Route("POST", "/general", query_body=True),
    "queryMunicipalitiesData": Route("POST", "/cities", query_body=True),
    "queryHistoricalData": Route("POST", "/historical-data", query_body=True),
    "getAuxiliaryTable": Route(
        "GET", "/auxiliary/{table}", ("search", "page", "pageSize"),
        {"page": 1, "pageSize": 100},
    ),
    "getStates": Route("GET", "/tables/uf"),
    "getStateDetails": Route("GET", "/tables/uf/{ufId}"),
    "getCities": Route("GET", "/tables/cities"),
    "getCityDetails": Route("GET", "/tables/cities/{cityId}"),
    "getCountries": Route("GET", "/tables/countries", ("search",)),
    "getCountryDetails": Route("GET", "/tables/countries/{countryId}"),
    "getEconomicBlocks": Route(
        "GET", "/tables/economic-blocks", ("language", "add", "search"), _LANG
    ),
    "getHarmonizedSystem": Route(
        "GET", "/tables/hs", ("language", "page", "perPage", "add"),
        {"language": DEFAULT_LANGUAGE, "page": 1, "perPage": 10},
    ),
    "getNBM": Route(
        "GET", "/tables/nbm", ("language", "page", "perPage", "add", "search"),
        {"language": DEFAULT_LANGUAGE, "page": 1, "perPage": 5},
    ),
    "getNBMDetails": Route("GET", "/tables/nbm/{coNbm}"),
}


def get_route(operation: str) -> Route:
    route = ROUTES.get(operation)
    if route is None:
        raise ValidationError("operation", f"'{operation}' is not a known operation")
    return route


# -----------------------------------------------------------------------------
# Request building
# -----------------------------------------------------------------------------
def ensure_period(period: Any) -> None:
    """Raise MalformedPeriodError unless both bounds are "YYYY-MM"."""
    if not isinstance(period, dict):
        raise MalformedPeriodError()
    for bound in ("from", "to"):
        value = period.get(bound)
        if not isinstance(value, str) or _MONTH_RE.fullmatch(value) is None:
            raise MalformedPeriodError()


def build_request(operation: str, args: dict) -> UpstreamRequest:
    """Translate normalized arguments into one UpstreamRequest."""
    route = get_route(operation)

    path_values = {}
    for name in route.path_args:
        value = args.get(name)
        if value is None or value == "":
            raise ValidationError(name, "is required")
        path_values[name] = quote(str(value), safe="")
    path = route.path.format(**path_values)

    if route.query_body:
        ensure_period(args.get("period"))
        for name in _QUERY_REQUIRED:
            if args.get(name) is None:
                raise ValidationError(name, "is required")
        query = QueryRequest.from_arguments(args)
        return UpstreamRequest(
            route.method, path, params={"language": query.language}, body=query.to_body()
        )

    params = {}
    for name in route.query:
        value = args.get(name)
        if value is None:
            value = route.defaults.get(name)
        if value is None or value == "":
            continue
        params[name] = value
    return UpstreamRequest(route.method, path, params=params)


def shape_response(operation: str, payload: Any) -> Any:
    return get_route(operation).shape(operation, payload)


def execute(client, operation: str, args: dict) -> Any:
    """Build the request, send it through `client`, shape the result."""
    request = build_request(operation, args)
    logger.debug("%s -> %s %s", operation, request.method, request.path)
    payload = client.request(request.method, request.path, params=request.params, body=request.body)
    return shape_response(operation, payload)
