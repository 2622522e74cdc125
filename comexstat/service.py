# =============================================================================
# comexstat/service.py - One Tool Call, End to End
# =============================================================================
#
#   inbound (name, raw args)
#       → validation.validate_arguments   reject early, no network
#       → mapper.build_request            method, path, params, body
#       → ComexstatClient.request         one HTTP round trip
#       → mapper.shape_response           unwrap the envelope
#
# The service holds only the client handle it was given.  Calls share no
# mutable state, so any number may run at the same time.
# =============================================================================

import logging
from typing import Any, Optional

from comexstat import mapper
from comexstat.client import ComexstatClient
from comexstat.config import Settings
from comexstat.validation import validate_arguments

logger = logging.getLogger(__name__)


class ComexstatService:
    """Validates, forwards and shapes Comexstat tool calls."""

    def __init__(self, client: Optional[ComexstatClient] = None):
        self.client = client or ComexstatClient(Settings.from_env())

    def call(self, operation: str, arguments: Optional[dict] = None) -> Any:
        """Run one operation and return its shaped result.

        Raises:
            ValidationError: Arguments do not match the operation's schema.
            MalformedPeriodError: Pre-flight period check failed.
            UpstreamError: The HTTP call failed.
            MalformedResponseError: The envelope lacks the expected slice.
        """
        normalized = validate_arguments(operation, arguments)
        logger.debug("%s validated: %s", operation, normalized)
        return mapper.execute(self.client, operation, normalized)
