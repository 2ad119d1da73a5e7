# app/exceptions.py
"""
HTTP-aware error taxonomy raised by services and the authorization gate.
Every subclass is rendered by the single handler in app/main.py as
{status, message, errors}.
"""

from typing import Any, Optional


class HttpException(Exception):
    status = 500

    def __init__(self, message: str, errors: Optional[Any] = None, status: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.errors = errors
        if status is not None:
            self.status = status

    def to_dict(self) -> dict:
        return {"status": self.status, "message": self.message, "errors": self.errors}


class BadRequestException(HttpException):
    status = 400


class UnauthorizedException(HttpException):
    status = 401


class ForbiddenException(HttpException):
    status = 403


class NotFoundException(HttpException):
    status = 404


class ConflictException(HttpException):
    status = 409
