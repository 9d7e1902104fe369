"""Character fetch exceptions."""

from enum import StrEnum

from charfeed.core.domain.exceptions import DomainException, EntityNotFoundError


class FetchErrorKind(StrEnum):
    """Failure classes surfaced to feed observers."""

    INVALID_REQUEST = "invalid_request"
    TRANSPORT = "transport"
    DECODE = "decode"


class FetchError(DomainException):
    """Base error raised by the remote collection client."""

    error_code = "FETCH_ERROR"
    kind: FetchErrorKind


class InvalidRequestError(FetchError):
    """The request target could not be constructed."""

    error_code = "INVALID_REQUEST"
    kind = FetchErrorKind.INVALID_REQUEST

    def __init__(self, message: str):
        super().__init__(f"Invalid request: {message}")


class TransportError(FetchError):
    """Connectivity failure, timeout or non-success HTTP status."""

    error_code = "TRANSPORT_ERROR"
    kind = FetchErrorKind.TRANSPORT

    def __init__(self, message: str, status_code: int | None = None):
        self.status_code = status_code
        super().__init__(f"Network error: {message}")


class DecodeError(FetchError):
    """Response body did not match the expected envelope."""

    error_code = "DECODE_ERROR"
    kind = FetchErrorKind.DECODE

    def __init__(self, message: str = "Failed to decode response"):
        super().__init__(message)


class CharacterNotFoundError(EntityNotFoundError):
    """Raised when the by-id endpoint has no such character."""

    def __init__(self, character_id: int):
        super().__init__("Character", str(character_id))


class ImageFetchError(DomainException):
    """Row image could not be downloaded."""

    error_code = "IMAGE_FETCH_ERROR"
