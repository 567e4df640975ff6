import logging
from decimal import Decimal
from typing import List, Optional
from pydantic import BaseModel
from datetime import datetime, timezone
import uuid

from restaurant.domain.models import LineItem, Order, OrderStatus
from restaurant.domain.exceptions import (
    EmptyOrderError, MenuItemNotFoundError, MissingCustomerError, PromotionNotFoundError,
    UserNotFoundError,
)
from restaurant.domain.pricing import verify_order_totals


logger = logging.getLogger(__name__)


class OrderItemDTO(BaseModel):
    menu_item_id: str
    quantity: int
    price: Decimal


class CreateOrderDTO(BaseModel):
    user_id: Optional[str] = None
    guest_name: Optional[str] = None
    guest_email: Optional[str] = None
    guest_phone: Optional[str] = None
    items: List[OrderItemDTO]
    promotion_id: Optional[str] = None
    subtotal: Decimal
    discount: Decimal
    total: Decimal

    @property
    def is_guest(self) -> bool:
        return self.user_id is None


class CreateOrderUseCase:
    def __init__(self, unit_of_work):
        self._uow = unit_of_work

    async def __call__(self, order_data: CreateOrderDTO) -> Order:
        logger.info(
            f"Создание заказа: user {order_data.user_id or order_data.guest_email}, "
            f"позиций {len(order_data.items)}, итого {order_data.total}"
        )

        if not order_data.items:
            raise EmptyOrderError()
        if order_data.is_guest and not (
            order_data.guest_name and order_data.guest_email and order_data.guest_phone
        ):
            raise MissingCustomerError()

        async with self._uow() as uow:
            # 1. Покупатель
            if order_data.user_id:
                user = await uow.users.get_by_id(order_data.user_id)
                if not user:
                    raise UserNotFoundError(order_data.user_id)

            # 2. Позиции меню
            line_items = []
            for item in order_data.items:
                menu_item = await uow.menu.get_item(item.menu_item_id)
                if not menu_item:
                    raise MenuItemNotFoundError(item.menu_item_id)
                line_items.append(
                    LineItem(
                        menu_item_id=item.menu_item_id,
                        quantity=item.quantity,
                        unit_price=item.price,
                        name=menu_item.name,
                    )
                )

            # 3. Акция
            promotion = None
            if order_data.promotion_id:
                promotion = await uow.promotions.get_by_id(order_data.promotion_id)
                if not promotion:
                    raise PromotionNotFoundError(order_data.promotion_id)

            # 4. Суммы
            verify_order_totals(
                line_items,
                promotion,
                subtotal=order_data.subtotal,
                discount=order_data.discount,
                total=order_data.total,
            )

            # 5. Создание заказа, строк и события одной транзакцией
            now = datetime.now(timezone.utc)
            order = Order(
                id=str(uuid.uuid4()),
                user_id=order_data.user_id,
                guest_name=order_data.guest_name if order_data.is_guest else None,
                guest_email=order_data.guest_email if order_data.is_guest else None,
                guest_phone=order_data.guest_phone if order_data.is_guest else None,
                items=line_items,
                promotion_id=promotion.id if promotion else None,
                subtotal=order_data.subtotal,
                discount=order_data.discount,
                total=order_data.total,
                status=OrderStatus.PENDING,
                created_at=now,
                updated_at=now,
            )
            await uow.orders.create(order)
            await uow.outbox.create(
                event_type="order.created",
                event_data={
                    "order_id": order.id,
                    "user_id": order.user_id,
                    "status": order.status.value,
                    "total": str(order.total),
                    "items": [
                        {"menu_item_id": i.menu_item_id, "quantity": i.quantity}
                        for i in order.items
                    ],
                },
                order_id=order.id,
            )
            await uow.commit()

        logger.info(f"Заказ создан: {order.id}")
        return order
