"""Error taxonomy for the GNS3 topology provider.

Every lifecycle failure surfaces as a subclass of ProviderError carrying enough
context (operation, status code, body) for the orchestrating layer to log it.
"""
from typing import Any


class ProviderError(Exception):
    """Base class for all provider errors."""


class ConfigurationError(ProviderError):
    """Provider configuration is missing or invalid."""


class SchemaError(ProviderError):
    """A declared attribute violates the resource schema."""


class EncodingError(ProviderError):
    """Payload could not be encoded; nothing was sent."""


class TransportError(ProviderError):
    """Request could not be sent or the response could not be read.

    The remote object's existence is unknown afterwards.
    """

    def __init__(self, message: str, operation: str = "", timed_out: bool = False):
        super().__init__(message)
        self.operation = operation
        self.timed_out = timed_out

    @property
    def retryable(self) -> bool:
        return self.timed_out


class ProtocolError(ProviderError):
    """Controller answered but broke the expected response contract.

    ``identity`` is set when the node was created before the violation was
    detected; the node exists remotely under that ID.
    """

    def __init__(self, message: str, operation: str = "", body: Any = None, identity: str = ""):
        super().__init__(message)
        self.operation = operation
        self.body = body
        self.identity = identity


class RejectedRequestError(ProviderError):
    """Controller answered with a status the operation does not accept."""

    def __init__(self, operation: str, status_code: int, body: Any = None):
        self.operation = operation
        self.status_code = status_code
        self.body = body
        super().__init__(
            f"{operation} failed, status code: {status_code}, response: {_snippet(body)}"
        )


class PartialCreateError(ProviderError):
    """Node was created but the follow-up start request failed.

    The node exists remotely under ``identity``; it was not rolled back.
    """

    def __init__(self, identity: str, message: str):
        super().__init__(
            f"node {identity} was created but could not be started: {message}"
        )
        self.identity = identity


class ImportKeyError(ProviderError):
    """Import key does not match any accepted format."""

    def __init__(self, raw: str, accepted: list[str]):
        self.raw = raw
        self.accepted = accepted
        super().__init__(
            f"invalid import ID {raw!r}: expected " + " or ".join(accepted)
        )


class MissingIdentityError(ProviderError):
    """Operation needs a remote identity but the instance has none."""


def _snippet(body: Any, limit: int = 500) -> str:
    if body is None:
        return ""
    text = body if isinstance(body, str) else repr(body)
    if len(text) > limit:
        return text[:limit] + "..."
    return text

