# app/core/exceptions.py

"""Domain errors raised by the service layer.

Each error carries the HTTP status the API layer answers with; the handler
registered in ``app.main`` turns them into ``{"detail": ...}`` responses.
"""


class BlogSpotError(Exception):
    status_code = 500

    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail


class NotFoundError(BlogSpotError):
    status_code = 404


class ForbiddenError(BlogSpotError):
    status_code = 403


class InvalidArgumentError(BlogSpotError):
    status_code = 400


class UnauthenticatedError(BlogSpotError):
    status_code = 401
