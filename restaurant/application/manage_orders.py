import logging
from datetime import datetime
from typing import List, Optional

from restaurant.domain.models import Order, OrderStatus
from restaurant.domain.exceptions import InvalidStatusTransitionError, OrderNotFoundError

logger = logging.getLogger(__name__)


class ListOrdersUseCase:
    def __init__(self, unit_of_work):
        self._uow = unit_of_work

    async def __call__(
        self,
        status: Optional[OrderStatus] = None,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
    ) -> List[Order]:
        async with self._uow() as uow:
            return await uow.orders.list_filtered(status=status, start=start, end=end)


class UpdateOrderStatusUseCase:
    """Смена статуса заказа администратором.

    Суммы заказа повторно не проверяются, они проверены при создании.
    """

    def __init__(self, unit_of_work):
        self._uow = unit_of_work

    async def __call__(self, order_id: str, status: OrderStatus) -> Order:
        logger.info(f"Смена статуса заказа {order_id} на {status.value}")

        async with self._uow() as uow:
            order = await uow.orders.get_by_id(order_id)
            if not order:
                raise OrderNotFoundError(f"Заказ {order_id} не найден")

            if order.status == status:
                logger.info(f"Заказ {order_id} уже в статусе {status.value}")
                return order

            if not order.can_transition_to(status):
                raise InvalidStatusTransitionError(order.status.value, status.value)

            await uow.orders.update_status(order_id, status)
            await uow.outbox.create(
                event_type="order.status_changed",
                event_data={
                    "order_id": order_id,
                    "user_id": order.user_id,
                    "previous_status": order.status.value,
                    "status": status.value,
                },
                order_id=order_id,
            )
            await uow.commit()

            return await uow.orders.get_by_id(order_id)
