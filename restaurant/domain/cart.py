from decimal import Decimal
from typing import List, Optional, Sequence

from restaurant.domain.models import LineItem, MenuItem, Promotion
from restaurant.domain.pricing import CartTotals, calculate_totals


class Cart:
    """Корзина одной сессии.

    Каждая операция пересобирает список строк и полностью пересчитывает
    `totals`, состояние заменяется одним присваиванием.
    """

    def __init__(self, promotions: Optional[Sequence[Promotion]] = None):
        self._items: List[LineItem] = []
        self._promotions: List[Promotion] = list(promotions or [])
        self.totals = CartTotals()

    @property
    def items(self) -> List[LineItem]:
        return list(self._items)

    @property
    def promotions(self) -> List[Promotion]:
        return list(self._promotions)

    @property
    def subtotal(self) -> Decimal:
        return self.totals.subtotal

    @property
    def discount(self) -> Decimal:
        return self.totals.discount

    @property
    def total(self) -> Decimal:
        return self.totals.total

    @property
    def applied_promotion(self) -> Optional[Promotion]:
        return self.totals.applied_promotion

    def get_quantity(self, menu_item_id: str) -> int:
        for item in self._items:
            if item.menu_item_id == menu_item_id:
                return item.quantity
        return 0

    def add_item(self, menu_item: MenuItem) -> None:
        """Повторное добавление увеличивает количество существующей строки"""
        if self.get_quantity(menu_item.id):
            items = [
                item.model_copy(update={"quantity": item.quantity + 1})
                if item.menu_item_id == menu_item.id else item
                for item in self._items
            ]
        else:
            items = self._items + [
                LineItem(
                    menu_item_id=menu_item.id,
                    name=menu_item.name,
                    unit_price=menu_item.price,
                    quantity=1,
                )
            ]
        self._replace(items)

    def remove_item(self, menu_item_id: str) -> None:
        self._replace([item for item in self._items if item.menu_item_id != menu_item_id])

    def update_quantity(self, menu_item_id: str, quantity: int) -> None:
        if quantity < 1:
            self.remove_item(menu_item_id)
            return
        self._replace([
            item.model_copy(update={"quantity": quantity})
            if item.menu_item_id == menu_item_id else item
            for item in self._items
        ])

    def set_promotions(self, promotions: Sequence[Promotion]) -> None:
        self._promotions = list(promotions)
        self._replace(self._items)

    def clear(self) -> None:
        self._items = []
        self.totals = CartTotals()

    def _replace(self, items: List[LineItem]) -> None:
        totals = calculate_totals(items, self._promotions)
        self._items = items
        self.totals = totals
