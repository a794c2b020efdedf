"""
Application error taxonomy.

Services raise these; `api/main.py` maps them to HTTP responses.
"""

from __future__ import annotations


class AppError(RuntimeError):
    status_code = 500

    def __init__(self, message: str = "") -> None:
        super().__init__(message)
        self.message = message


class ValidationError(AppError):
    status_code = 400


class ConflictError(AppError):
    status_code = 409


class InvalidCredentialsError(AppError):
    status_code = 401

    def __init__(self, message: str = "Invalid credentials") -> None:
        super().__init__(message)


# Token failures are all surfaced to the caller as "unauthenticated".
class TokenError(AppError):
    status_code = 401


class InvalidTokenError(TokenError):
    pass


class ExpiredTokenError(TokenError):
    pass


class BadSignatureError(TokenError):
    pass


class PermissionDeniedError(AppError):
    status_code = 403


class NotFoundError(AppError):
    status_code = 404


class InternalError(AppError):
    status_code = 500
