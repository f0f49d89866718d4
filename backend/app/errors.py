"""Error taxonomy shared by services and routers.

Every error is an ``HTTPException`` carrying its own status code, so services
can raise them directly and ``app.main`` renders them as ``{"error": ...}``.
"""
from fastapi import HTTPException, status


class AppError(HTTPException):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str):
        super().__init__(status_code=self.status_code, detail=message)


class Unauthorized(AppError):
    status_code = status.HTTP_401_UNAUTHORIZED


class ValidationError(AppError):
    status_code = status.HTTP_400_BAD_REQUEST


class Forbidden(AppError):
    status_code = status.HTTP_403_FORBIDDEN


class NotFound(AppError):
    status_code = status.HTTP_404_NOT_FOUND


class InternalError(AppError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
