"""Responses from the management API and the errors raised when they are not as expected."""

from __future__ import annotations

from dataclasses import dataclass
from http import HTTPStatus
from typing import Any

__all__ = ["ApiResponse", "ApiError", "check_client_response"]


@dataclass(frozen=True)
class ApiResponse:
    """A decoded response of the management API."""

    status_code: int
    body: Any = None

    @property
    def status(self) -> str:
        """The status line, such as "404 Not Found"."""
        try:
            phrase = HTTPStatus(self.status_code).phrase
        except ValueError:
            return str(self.status_code)
        return f"{self.status_code} {phrase}"


class ApiError(RuntimeError):
    """Raised when an API call does not end as expected."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


def check_client_response(response: ApiResponse, expected_status: int) -> Any:
    """Return the body of a response that has the expected status, or raise ApiError."""
    if response.status_code != expected_status:
        raise ApiError(
            f"unexpected status code: {response.status}",
            status_code=response.status_code,
        )
    return response.body