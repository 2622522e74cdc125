# =============================================================================
# comexstat/errors.py - Error Taxonomy
# =============================================================================
#
#   ComexstatError
#     ├── ValidationError          bad tool arguments, no HTTP call made
#     │     └── MalformedPeriodError   mapper's pre-flight period check
#     ├── UpstreamError            HTTP status >= 400 or transport failure
#     ├── MalformedResponseError   envelope lacks what the operation unwraps
#     └── ConfigurationError       bad environment value at startup
#
# The tool layer turns any ComexstatError into an MCP tool error carrying
# str(exc), so messages here are written for the model to read.
# =============================================================================

from typing import Optional


class ComexstatError(Exception):
    """Base class for every error this package raises."""


class ValidationError(ComexstatError):
    """Tool arguments failed their declared schema."""

    def __init__(self, field: str, constraint: str):
        self.field = field
        self.constraint = constraint
        super().__init__(f"{field} {constraint}")


class MalformedPeriodError(ValidationError):
    """A period bound is not "YYYY-MM" at the moment a query is sent."""

    def __init__(self):
        super().__init__("Period", 'dates must be in YYYY-MM format (e.g. "2023-01")')


class UpstreamError(ComexstatError):
    """The Comexstat API answered with an error status, or never answered."""

    def __init__(self, message: str, status: Optional[int] = None, endpoint: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.status = status
        self.endpoint = endpoint


class MalformedResponseError(ComexstatError):
    """The response envelope does not have the shape the operation expects.

    The mapper knows the operation; the HTTP client only knows the endpoint.
    """

    def __init__(self, operation: Optional[str], detail: str, endpoint: Optional[str] = None):
        self.operation = operation
        self.detail = detail
        self.endpoint = endpoint
        if operation is not None:
            message = f"Unexpected response for {operation}: {detail}"
        else:
            message = f"Unexpected response from {endpoint}: {detail}"
        super().__init__(message)


class ConfigurationError(ComexstatError):
    """An environment variable holds a value that cannot be used."""

    def __init__(self, variable: str, value: str, expected: str):
        self.variable = variable
        super().__init__(f"{variable}={value!r} is invalid: expected {expected}")
