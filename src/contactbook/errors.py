# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Application error taxonomy.

Each error carries a machine code and the HTTP status it maps to. Route
handlers turn the 400-class ones into field-level payloads; anything that
reaches the app's exception handler is rendered as ``{"error": code}``.
"""

from __future__ import annotations

from http import HTTPStatus
from typing import Dict, List, Mapping, Optional

FieldErrors = Dict[str, List[str]]


class AppError(Exception):
    code = "internal_error"
    status = HTTPStatus.INTERNAL_SERVER_ERROR

    def __init__(self, message: str = "", *, field_errors: Optional[Mapping[str, List[str]]] = None) -> None:
        super().__init__(message or self.code)
        self.message = message or self.code
        self.field_errors: FieldErrors = {k: list(v) for k, v in (field_errors or {}).items()}

    def to_dict(self) -> dict:
        if self.field_errors:
            return {"errors": self.field_errors}
        return {"error": self.code}


class HashingFailure(AppError):
    """The key derivation function reported an error."""

    code = "hashing_failure"


class InvalidCredentials(AppError):
    code = "invalid_credentials"
    status = HTTPStatus.BAD_REQUEST

    def __init__(self) -> None:
        # One message for unknown email and wrong password alike.
        super().__init__(
            "Invalid email or password",
            field_errors={"email": ["Invalid email or password"]},
        )


class EmailTaken(AppError):
    code = "email_taken"
    status = HTTPStatus.BAD_REQUEST

    def __init__(self) -> None:
        super().__init__(
            "A user with this email already exists",
            field_errors={"email": ["A user with this email already exists"]},
        )


class FormInvalid(AppError):
    code = "form_invalid"
    status = HTTPStatus.BAD_REQUEST

    def __init__(self, field_errors: Mapping[str, List[str]]) -> None:
        super().__init__(field_errors=field_errors)


class NotFound(AppError):
    code = "not_found"
    status = HTTPStatus.NOT_FOUND

    def __init__(self, what: str = "Resource") -> None:
        super().__init__(f"{what} not found")

    def to_dict(self) -> dict:
        return {"error": self.code, "detail": self.message}
