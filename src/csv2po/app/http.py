"""HTTP helper utilities shared across Flask blueprints."""

from __future__ import annotations

from dataclasses import dataclass
from http import HTTPStatus
from typing import Any, Mapping

from flask import jsonify

from csv2po.errors import ConfigurationError, Csv2PoError, FetchError, TableParseError

_ERROR_STATUSES: tuple[tuple[type[Csv2PoError], str, HTTPStatus], ...] = (
    (ConfigurationError, "configuration_error", HTTPStatus.BAD_REQUEST),
    (FetchError, "fetch_error", HTTPStatus.BAD_GATEWAY),
    (TableParseError, "parse_error", HTTPStatus.UNPROCESSABLE_ENTITY),
)


@dataclass(frozen=True)
class ProblemResponse:
    """Lightweight representation of an RFC 7807-style error payload."""

    error: str
    status: int
    message: str | None = None
    extra: Mapping[str, Any] | None = None

    def as_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"error": self.error}
        if self.message:
            payload["message"] = self.message
        if self.extra:
            payload.update(self.extra)
        return payload

    def to_response(self) -> tuple[Any, int]:
        return jsonify(self.as_dict()), self.status


def problem_response(
    error: str,
    *,
    status: int,
    message: str | None = None,
    **extra: Any,
) -> ProblemResponse:
    """Build a :class:`ProblemResponse`, folding keyword extras into the payload."""

    additional: Mapping[str, Any] | None = extra or None
    return ProblemResponse(error=error, status=status, message=message, extra=additional)


def problem_for_error(error: Csv2PoError, **extra: Any) -> ProblemResponse:
    """Map a fatal pipeline error onto its problem code and HTTP status."""

    for error_type, code, status in _ERROR_STATUSES:
        if isinstance(error, error_type):
            return problem_response(code, status=status, message=str(error), **extra)
    return problem_response(
        "sync_error", status=HTTPStatus.INTERNAL_SERVER_ERROR, message=str(error), **extra
    )


__all__ = ["ProblemResponse", "problem_for_error", "problem_response"]
