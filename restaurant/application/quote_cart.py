from typing import List
from pydantic import BaseModel

from restaurant.domain.cart import Cart
from restaurant.domain.exceptions import MenuItemNotFoundError


class CartLineDTO(BaseModel):
    menu_item_id: str
    quantity: int


class QuoteCartUseCase:
    """Собирает корзину по ценам меню и текущим акциям и возвращает её расчет"""

    def __init__(self, unit_of_work):
        self._uow = unit_of_work

    async def __call__(self, lines: List[CartLineDTO]) -> Cart:
        async with self._uow() as uow:
            cart = Cart(await uow.promotions.list_all())
            for line in lines:
                menu_item = await uow.menu.get_item(line.menu_item_id)
                if not menu_item:
                    raise MenuItemNotFoundError(line.menu_item_id)
                cart.add_item(menu_item)
                cart.update_quantity(menu_item.id, cart.get_quantity(menu_item.id) - 1 + line.quantity)
        return cart
