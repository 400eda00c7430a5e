"""HTTP-aware application errors.

Services raise these for expected failure modes; the handler registered in
``app.main`` turns them into ``{"error": message}`` responses. Anything else
that escapes a route is an unhandled 500.
"""

from http import HTTPStatus


class HttpError(Exception):
    status_code: int = HTTPStatus.INTERNAL_SERVER_ERROR

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.status_code}, {self.message!r})"


class BadRequestError(HttpError):
    status_code = HTTPStatus.BAD_REQUEST


class UnauthorizedError(HttpError):
    status_code = HTTPStatus.UNAUTHORIZED


class NotFoundError(HttpError):
    status_code = HTTPStatus.NOT_FOUND


class ConflictError(HttpError):
    status_code = HTTPStatus.CONFLICT


class InternalServerError(HttpError):
    status_code = HTTPStatus.INTERNAL_SERVER_ERROR


class NotImplementedHttpError(HttpError):
    status_code = HTTPStatus.NOT_IMPLEMENTED
