# services/errors.py
from fastapi import HTTPException


class ServiceError(HTTPException):
    """HTTP-aware failure raised by the service layer, rendered as {"error": detail}"""
    status_code = 500

    def __init__(self, detail: str):
        super().__init__(status_code=self.status_code, detail=detail)


class ValidationError(ServiceError):
    status_code = 400


class AuthorizationError(ServiceError):
    status_code = 401

    def __init__(self, detail: str = "unauthorised"):
        super().__init__(detail)


class ForbiddenError(ServiceError):
    status_code = 403


class NotFoundError(ServiceError):
    status_code = 404


class ConflictError(ServiceError):
    status_code = 409


class StoreError(ServiceError):
    status_code = 500
