import secrets
from typing import Optional
from fastapi import Depends, Header, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from restaurant.config import settings
from restaurant.database import get_db
from restaurant.domain.exceptions import (
    ConflictError, DomainException, DomainViolationError, NotFoundError,
)
from restaurant.infrastructure.unit_of_work import UnitOfWork


def use_case(use_case_cls):
    """Фабрика use case на сессию текущего запроса"""
    def factory(db: AsyncSession = Depends(get_db)):
        uow = UnitOfWork(lambda: db)
        return use_case_cls(uow)
    return factory


async def require_admin(x_api_key: Optional[str] = Header(default=None)):
    token = settings.ADMIN_API_TOKEN
    if not token or not x_api_key or not secrets.compare_digest(x_api_key, token):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unauthorized")


def to_http_exception(error: DomainException) -> HTTPException:
    if isinstance(error, NotFoundError):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(error))
    if isinstance(error, DomainViolationError):
        return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(error))
    if isinstance(error, ConflictError):
        return HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(error))
    return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(error))
