"""
Error types for the extension transformation relay.

Every failure a handler can report is a RelayError. The message is the text
returned to the caller, `code` is a stable identifier callers can match on
instead of the text, and `status_code` is the HTTP status of the response.

Classification:
    - Caller errors: MalformedRequestBody, UnknownFunction
    - Storage errors: SeriesNotFound, UpstreamUnavailable
    - Workflow errors: DataFetchFailed, DispatchRejected, WriteFailed

None of these are retried anywhere.
"""

from __future__ import annotations


class RelayError(Exception):
    """Base exception for relay errors."""

    code: str = "relay_error"
    status_code: int = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return self.message

    def to_response(self) -> dict[str, str]:
        """Body returned to the caller."""
        return {"response": self.message, "error": self.code}


class MalformedRequestBody(RelayError):
    """Raised when an inbound request body cannot be decoded."""

    code = "malformed_request_body"
    status_code = 400


class SeriesNotFound(RelayError):
    """Raised when a storage service answers with a non-success status."""

    code = "series_not_found"
    status_code = 502

    def __init__(self, message: str, series_id: str):
        super().__init__(message)
        self.series_id = series_id


class UpstreamUnavailable(RelayError):
    """Raised when a downstream service cannot be reached or times out."""

    code = "upstream_unavailable"
    status_code = 503

    def __init__(self, message: str, service: str):
        super().__init__(f"[{service}] {message}")
        self.service = service


class DataFetchFailed(RelayError):
    """Raised when input data for a series cannot be fetched."""

    code = "data_fetch_failed"
    status_code = 502

    def __init__(self, series_id: str):
        super().__init__(f'Unable to get data for Timeseries: "{series_id}"')
        self.series_id = series_id


class UnknownFunction(RelayError):
    """Raised when a function name has no configured route."""

    code = "unknown_function"
    status_code = 422

    def __init__(self, function: str):
        super().__init__(f'No transformation route configured for function: "{function}"')
        self.function = function


class DispatchRejected(RelayError):
    """Raised when a transformation service answers with a non-success status."""

    code = "dispatch_rejected"
    status_code = 502

    def __init__(self, extension: str, route: str):
        super().__init__(f'Unable to trigger Extension: "{extension}"-"{route}"')
        self.extension = extension
        self.route = route


class WriteFailed(RelayError):
    """Raised when computed output data cannot be written back."""

    code = "write_failed"
    status_code = 502

    def __init__(self, series_id: str, cause: Exception | None = None):
        message = f'Unable to save data for Timeseries: "{series_id}"'
        if cause is not None:
            message = f"{message} ({cause})"
        super().__init__(message)
        self.series_id = series_id
