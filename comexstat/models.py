# =============================================================================
# comexstat/models.py - Data Models (the "nouns" of the adapter)
# =============================================================================
#
# Two families live here:
#
#   1. OperationSpec pairs a tool name with the pydantic model of its
#      arguments (declared in comexstat/registry.py).  Built once, frozen.
#
#   2. CALL models (Period, FilterClause, QueryRequest, UpstreamRequest) are
#      built per call from validated arguments and thrown away once the
#      response has been shaped.  Nothing here outlives a single tool call.
# =============================================================================

from dataclasses import dataclass, field
from typing import Optional

from pydantic import BaseModel


# -----------------------------------------------------------------------------
# OperationSpec - one tool, identified by its camelCase name
# -----------------------------------------------------------------------------
@dataclass(frozen=True)
class OperationSpec:
    """A tool name and the model its arguments must satisfy."""

    name: str
    description: str
    parameters: type[BaseModel]

    def describe(self) -> dict:
        return {
            "name": self.name,
            "description": self.description,
            "inputSchema": self.parameters.model_json_schema(by_alias=True),
        }


# -----------------------------------------------------------------------------
# Period - inclusive month range, both bounds "YYYY-MM"
# -----------------------------------------------------------------------------
# from <= to is NOT checked here; the upstream API owns that rule.
# -----------------------------------------------------------------------------
@dataclass
class Period:
    start: str                         # Serialized as "from" (a Python keyword)
    end: str                           # Serialized as "to"

    @classmethod
    def from_dict(cls, data: dict) -> "Period":
        return cls(start=data["from"], end=data["to"])

    def to_dict(self) -> dict:
        return {"from": self.start, "to": self.end}


@dataclass
class FilterClause:
    """One filter: a name and the codes it matches."""

    filter: str                        # e.g. "country", "state", "ncm"
    values: list = field(default_factory=list)

    def to_dict(self) -> dict:
        return {"filter": self.filter, "values": list(self.values)}


# -----------------------------------------------------------------------------
# QueryRequest - body of the three POST query endpoints
# -----------------------------------------------------------------------------
@dataclass
class QueryRequest:
    flow: str                          # "export" | "import"
    period: Period
    month_detail: bool = False
    filters: list[FilterClause] = field(default_factory=list)
    details: list[str] = field(default_factory=list)
    metrics: list[str] = field(default_factory=list)
    language: str = "pt"               # Sent as a query parameter, not in the body

    @classmethod
    def from_arguments(cls, args: dict) -> "QueryRequest":
        return cls(
            flow=args["flow"],
            period=Period.from_dict(args["period"]),
            month_detail=args.get("monthDetail", False),
            filters=[
                FilterClause(filter=clause["filter"], values=list(clause["values"]))
                for clause in args.get("filters") or []
            ],
            details=list(args.get("details") or []),
            metrics=list(args.get("metrics") or []),
            language=args.get("language") or "pt",
        )

    def to_body(self) -> dict:
        # Key order matches what the upstream documentation shows.
        return {
            "flow": self.flow,
            "monthDetail": self.month_detail,
            "period": self.period.to_dict(),
            "filters": [clause.to_dict() for clause in self.filters],
            "details": list(self.details),
            "metrics": list(self.metrics),
        }


# -----------------------------------------------------------------------------
# UpstreamRequest - exactly one outbound HTTP call
# -----------------------------------------------------------------------------
@dataclass
class UpstreamRequest:
    method: str                        # "GET" | "POST"
    path: str                          # Already formatted, e.g. "/tables/uf/26"
    params: dict = field(default_factory=dict)
    body: Optional[dict] = None        # JSON body for POST, None for GET
