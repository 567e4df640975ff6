from decimal import Decimal
from typing import List
from pydantic import BaseModel

from restaurant.domain.models import Booking, Order

RECENT_LIMIT = 5


class DashboardStats(BaseModel):
    total_orders: int
    total_revenue: Decimal
    total_bookings: int
    total_users: int
    recent_orders: List[Order]
    recent_bookings: List[Booking]


class GetDashboardUseCase:
    """Сводка для админ-панели. Выручка считается по неотмененным заказам."""

    def __init__(self, unit_of_work):
        self._uow = unit_of_work

    async def __call__(self) -> DashboardStats:
        async with self._uow() as uow:
            return DashboardStats(
                total_orders=await uow.orders.count(),
                total_revenue=await uow.orders.revenue(),
                total_bookings=await uow.bookings.count(),
                total_users=await uow.users.count(),
                recent_orders=await uow.orders.list_filtered(limit=RECENT_LIMIT),
                recent_bookings=await uow.bookings.list_filtered(limit=RECENT_LIMIT),
            )
