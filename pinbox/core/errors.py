"""
Domain errors raised by the registry and storage services.

Routes turn these into HTTPException via `to_http`; anything else that
escapes a handler is logged and answered with a generic 500.
"""

from fastapi import HTTPException


class PinboxError(Exception):
    status_code = 500
    default_detail = "Internal error"

    def __init__(self, detail: str = None):
        self.detail = detail or self.default_detail
        super().__init__(self.detail)


class InvalidInput(PinboxError):
    status_code = 400
    default_detail = "Invalid input"


class PathTraversal(InvalidInput):
    default_detail = "Invalid path"


class AlreadyExists(InvalidInput):
    default_detail = "PIN already exists"


class Unauthorized(PinboxError):
    status_code = 401
    default_detail = "Invalid PIN"


class NotFound(PinboxError):
    status_code = 404
    default_detail = "Not found"


def to_http(err: PinboxError) -> HTTPException:
    return HTTPException(status_code=err.status_code, detail=err.detail)
