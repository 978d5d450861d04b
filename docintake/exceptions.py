"""
Error taxonomy for the ingestion pipelines.

- InvalidInputError: the caller sent something unusable. Not retried.
- RemoteError: the remote API answered with a non-2xx status or could not
  be reached. Safe to retry after backoff.
- ProtocolError: the remote API answered 2xx but the payload is missing a
  field we depend on (contract drift). Not retried.
"""

MAX_ERROR_BODY_CHARS = 500


class DocIntakeError(Exception):
    """Base class for all pipeline errors."""

    pass


class InvalidInputError(DocIntakeError):
    """Raised when caller input is missing or malformed."""

    pass


class RemoteError(DocIntakeError):
    """Raised when a remote API call does not succeed."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        body: str | None = None,
        url: str | None = None,
    ):
        self.status_code = status_code
        self.body = body[:MAX_ERROR_BODY_CHARS] if body else body
        self.url = url
        super().__init__(message)


class ProtocolError(DocIntakeError):
    """Raised when a successful response lacks an expected field."""

    pass
