"""Error classes for the atlasctl CLI and client library."""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    import requests


class AtlasError(Exception):
    """Base exception class for all atlasctl-related errors.

    Parameters
    ----------
    msg : str, optional
        Message to log and include in the exception.

    Attributes
    ----------
    msg : str
        Error message associated with the exception.
    exit_code : int
        Exit code for the error type. Defaults to 1.
    """

    exit_code = 1

    def __init__(self, msg: str = "") -> None:
        super().__init__(msg)
        self.msg = msg

    def __str__(self) -> str:
        """Return the error message as a string."""
        return self.msg


class UserError(AtlasError):
    """User errors that atlasctl can safely log and display.

    Attributes
    ----------
    msg : str
        Primary error message to display.
    hint_msg : str
        Optional user guidance for resolving the issue.
    exit_code : int
        Exit code used to signal a user-handled error. Defaults to 2.

    Parameters
    ----------
    msg : str, optional
        Message to log and include in the exception.
    hint_msg : str, optional
        Additional guidance for resolving the issue.
    """

    exit_code = 2

    def __init__(self, msg: str = "", hint_msg: str = "") -> None:
        self.hint_msg = hint_msg
        if hint_msg:
            super().__init__(f"User error: {msg}\nHint: {hint_msg}")
        else:
            super().__init__(f"User error: {msg}")


class ArgumentError(UserError):
    """A required argument was missing or empty.

    Raised before any request is sent to the API.

    Parameters
    ----------
    arg : str
        Name of the offending argument.
    reason : str
        Why the argument was rejected, e.g. "must be set".
    """

    def __init__(self, arg: str, reason: str) -> None:
        self.arg = arg
        self.reason = reason
        super().__init__(f"{arg}: {reason}")


class ResourceValidationError(UserError):
    """A resource definition failed validation before being sent."""


class ImportFormatError(UserError):
    """An import identifier could not be parsed."""


class RemoteOperationError(AtlasError):
    """A request to the management API failed.

    Covers transport failures, non-2xx responses and undecodable bodies.

    Parameters
    ----------
    msg : str
        Description of the failure.
    status_code : int, optional
        HTTP status code, if a response was received.
    error_code : str, optional
        The API's `errorCode` value, if the body carried one.
    detail : str, optional
        The API's `detail` value, if the body carried one.
    response : requests.Response, optional
        The raw response, for callers that need headers or the body.
    """

    def __init__(
        self,
        msg: str = "",
        status_code: Optional[int] = None,
        error_code: str = "",
        detail: str = "",
        response: Optional[requests.Response] = None,
    ) -> None:
        super().__init__(msg)
        self.status_code = status_code
        self.error_code = error_code
        self.detail = detail
        self.response = response

    @property
    def not_found(self) -> bool:
        """Return True if the API answered with 404."""
        return self.status_code == 404

    def with_context(self, context: str) -> RemoteOperationError:
        """Return a copy of this error prefixed with operation context."""
        return RemoteOperationError(
            f"{context}: {self.msg}",
            status_code=self.status_code,
            error_code=self.error_code,
            detail=self.detail,
            response=self.response,
        )
