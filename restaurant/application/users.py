import logging
import uuid
from datetime import datetime, timezone
from typing import List, Optional
from pydantic import BaseModel

from restaurant.domain.models import User, UserRole, UserStatus
from restaurant.domain.exceptions import EmailAlreadyExistsError, UserNotFoundError

logger = logging.getLogger(__name__)


class UserDTO(BaseModel):
    name: str
    email: str
    phone: Optional[str] = None
    role: UserRole = UserRole.CUSTOMER
    status: UserStatus = UserStatus.ACTIVE


class ListUsersUseCase:
    def __init__(self, unit_of_work):
        self._uow = unit_of_work

    async def __call__(self) -> List[User]:
        async with self._uow() as uow:
            return await uow.users.list_all()


class GetUserUseCase:
    def __init__(self, unit_of_work):
        self._uow = unit_of_work

    async def __call__(self, user_id: str) -> User:
        async with self._uow() as uow:
            user = await uow.users.get_by_id(user_id)
            if not user:
                raise UserNotFoundError(user_id)
            return user


class CreateUserUseCase:
    def __init__(self, unit_of_work):
        self._uow = unit_of_work

    async def __call__(self, data: UserDTO) -> User:
        async with self._uow() as uow:
            if await uow.users.get_by_email(data.email):
                raise EmailAlreadyExistsError(data.email)

            user = User(id=str(uuid.uuid4()), created_at=datetime.now(timezone.utc), **data.model_dump())
            await uow.users.create(user)
            await uow.commit()
            logger.info(f"Создан пользователь {user.id} ({user.role.value})")
            return user


class UpdateUserUseCase:
    def __init__(self, unit_of_work):
        self._uow = unit_of_work

    async def __call__(self, user_id: str, data: UserDTO) -> User:
        async with self._uow() as uow:
            existing = await uow.users.get_by_id(user_id)
            if not existing:
                raise UserNotFoundError(user_id)
            same_email = await uow.users.get_by_email(data.email)
            if same_email and same_email.id != user_id:
                raise EmailAlreadyExistsError(data.email)

            user = existing.model_copy(update=data.model_dump())
            await uow.users.update(user)
            await uow.commit()
            return user


class DeleteUserUseCase:
    def __init__(self, unit_of_work):
        self._uow = unit_of_work

    async def __call__(self, user_id: str) -> None:
        async with self._uow() as uow:
            if not await uow.users.get_by_id(user_id):
                raise UserNotFoundError(user_id)
            await uow.users.delete(user_id)
            await uow.commit()
            logger.info(f"Удален пользователь {user_id}")
