import logging
from contextlib import asynccontextmanager
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from restaurant.domain.exceptions import PersistenceError
from restaurant.infrastructure.repositories import (
    SQLAlchemyBookingRepository,
    SQLAlchemyMenuRepository,
    SQLAlchemyOrderRepository,
    SQLAlchemyOutboxRepository,
    SQLAlchemyPromotionRepository,
    SQLAlchemyRestaurantProfileRepository,
    SQLAlchemyUserRepository,
)

logger = logging.getLogger(__name__)


class UnitOfWork:
    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self._session_factory = session_factory

    @asynccontextmanager
    async def __call__(self):
        async with self._session_factory() as session:
            try:
                uow_impl = _UnitOfWorkImpl(session)
                yield uow_impl
                # Всё, что не закоммичено явно, откатывается
                await session.rollback()
            except SQLAlchemyError as e:
                await session.rollback()
                logger.error(f"Ошибка базы данных: {e}")
                # Текст SQL и параметры остаются только в логе
                raise PersistenceError("Ошибка сохранения данных") from e
            except Exception:
                await session.rollback()
                raise


class _UnitOfWorkImpl:
    def __init__(self, session: AsyncSession):
        self._session = session
        self.menu = SQLAlchemyMenuRepository(session)
        self.promotions = SQLAlchemyPromotionRepository(session)
        self.orders = SQLAlchemyOrderRepository(session)
        self.bookings = SQLAlchemyBookingRepository(session)
        self.users = SQLAlchemyUserRepository(session)
        self.profile = SQLAlchemyRestaurantProfileRepository(session)
        self.outbox = SQLAlchemyOutboxRepository(session)

    async def commit(self):
        await self._session.commit()

    async def rollback(self):
        await self._session.rollback()
