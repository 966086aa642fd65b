"""Error taxonomy shared by services and the HTTP layer."""

from __future__ import annotations


class ApiError(Exception):
    """Base class for errors surfaced to API callers with an HTTP status."""

    status = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict:
        return {"status": self.status, "message": self.message}


class BadRequest(ApiError):
    status = 400


class Forbidden(ApiError):
    status = 403


class NotFound(ApiError):
    status = 404


class InvalidValue(ApiError):
    status = 422


class InternalError(ApiError):
    status = 500
