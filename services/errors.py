"""Error types raised inside the compost monitoring pipeline."""

from __future__ import annotations


class ValidationError(ValueError):
    """Raised when a caller submits a value outside the accepted domain."""


class AdvisoryError(Exception):
    """Base class for failures talking to the advisory service.

    ``kind`` tags the failure for logging; callers of the advisory client never
    see these because they are collapsed into the fallback result.
    """

    kind = "advisory"


class TransportError(AdvisoryError):
    """Service unreachable, rejected the request, rate limited, or timed out."""

    kind = "transport"


class EmptyResponseError(AdvisoryError):
    """Service answered without a body."""

    kind = "empty_response"


class SchemaError(AdvisoryError):
    """Body present but not an advisory result."""

    kind = "schema"
