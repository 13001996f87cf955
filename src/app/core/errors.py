"""API error classification shared by the persistence layer.

Every failure leaving the store is wrapped in an :class:`APIError` carrying one
of a small fixed set of codes. Callers inspect the code to decide how to
respond; the store itself never maps errors to transport responses.
"""

from __future__ import annotations

from enum import Enum


class ErrorCode(str, Enum):
    """Error categories understood by callers of the store."""

    BAD_REQUEST = "BAD_REQUEST"
    NOT_FOUND = "NOT_FOUND"
    INTERNAL_SERVER = "INTERNAL_SERVER"

    @property
    def status_code(self) -> int:
        """HTTP status a caller would typically answer with."""
        return _STATUS_CODES[self]


_STATUS_CODES = {
    ErrorCode.BAD_REQUEST: 400,
    ErrorCode.NOT_FOUND: 404,
    ErrorCode.INTERNAL_SERVER: 500,
}


class APIError(Exception):
    """A classified failure with a human-readable message.

    Attributes:
        code: The error category.
        message: Message safe to show to an API consumer.
        details: The underlying exception, if any.
    """

    def __init__(
        self, code: ErrorCode, message: str, details: BaseException | None = None
    ) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.details = details

    def __str__(self) -> str:
        return self.message

    def __repr__(self) -> str:
        return f"APIError(code={self.code.value}, message={self.message!r})"


def new_api_error(
    code: ErrorCode, message: str, err: BaseException | None = None
) -> APIError:
    """Build an APIError wrapping ``err``."""
    return APIError(code, message, err)


def is_not_found(err: BaseException) -> bool:
    return isinstance(err, APIError) and err.code is ErrorCode.NOT_FOUND


def is_bad_request(err: BaseException) -> bool:
    return isinstance(err, APIError) and err.code is ErrorCode.BAD_REQUEST
