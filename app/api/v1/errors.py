"""
Translation of domain errors into HTTP responses
Reference: https://fastapi.tiangolo.com/tutorial/handling-errors/
"""
from fastapi import HTTPException, status

from app.core.exceptions import (
    InvalidInputError,
    MarketplaceError,
    NotFoundError,
    UnauthorizedError,
)

STATUS_BY_ERROR = {
    InvalidInputError: status.HTTP_400_BAD_REQUEST,
    NotFoundError: status.HTTP_404_NOT_FOUND,
    UnauthorizedError: status.HTTP_403_FORBIDDEN,
}


def http_error(error: MarketplaceError) -> HTTPException:
    """Failed result: the error message as detail, status chosen by error kind"""
    status_code = STATUS_BY_ERROR.get(type(error), status.HTTP_400_BAD_REQUEST)
    return HTTPException(status_code=status_code, detail=error.message)


def unexpected_error(action: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail=f"An unexpected error occurred while {action}",
    )
