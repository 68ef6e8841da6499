"""HTTP helper utilities shared across Flask blueprints."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

from flask import jsonify

from salarytax.backend.services.validation import ValidationErrors


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
    """Build a problem payload; keyword arguments become extra members."""

    additional: Mapping[str, Any] | None = extra or None
    return ProblemResponse(error=error, status=status, message=message, extra=additional)


def validation_problem(errors: ValidationErrors) -> ProblemResponse:
    """Report field-level guard failures as a 400 with a ``fields`` mapping."""

    fields = errors.as_dict()
    message = "; ".join(fields.values()) or "Invalid calculation input"
    return problem_response("validation_error", status=400, message=message, fields=fields)


__all__ = ["ProblemResponse", "problem_response", "validation_problem"]
