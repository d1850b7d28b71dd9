from typing import Optional

from fastapi import HTTPException, status


class DataAccessError(Exception):
    """Raised by a store backend when the underlying engine fails."""


class DataIntegrityError(DataAccessError):
    pass


class ResourceNotFoundHTTPException(HTTPException):
    def __init__(self, detail: str = "Requested resource was not found on the server"):
        self.status_code = status.HTTP_404_NOT_FOUND
        self.detail = detail
        self.headers = None


class InvalidTokenHTTPException(HTTPException):
    def __init__(
        self,
        detail: str = "Could not validate credentials",
        status_code: int = status.HTTP_401_UNAUTHORIZED,
        headers: Optional[dict] = None,
    ):
        self.detail = detail
        self.status_code = status_code
        self.headers = headers or {"WWW-Authenticate": "Bearer"}


class InsufficientPermissionsHTTPException(HTTPException):
    def __init__(self):
        self.detail = "Insufficient permissions to perform this action"
        self.status_code = status.HTTP_403_FORBIDDEN
        self.headers = {"WWW-Authenticate": "Bearer"}


class InvalidUpdatesHTTPException(HTTPException):
    def __init__(self, invalid_fields: list[str]):
        self.status_code = status.HTTP_400_BAD_REQUEST
        self.detail = f"Invalid updates: {', '.join(sorted(invalid_fields))}"
        self.headers = None


class SelfDeletionHTTPException(HTTPException):
    def __init__(self):
        self.status_code = status.HTTP_400_BAD_REQUEST
        self.detail = "Cannot delete your own account"
        self.headers = None
