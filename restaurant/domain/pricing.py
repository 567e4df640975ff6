"""Расчет суммы корзины и проверка сумм присланного заказа.

Одни и те же функции используются для корзины (`Cart`) и при создании заказа,
поэтому допуск сравнения денежных сумм один на всё приложение.
"""
from decimal import Decimal
from typing import Iterable, Optional, Sequence

from pydantic import BaseModel

from restaurant.domain.models import LineItem, Promotion
from restaurant.domain.exceptions import MinimumOrderNotMetError, TotalsMismatchError

MONEY_TOLERANCE = Decimal("0.01")
ZERO = Decimal("0")
HUNDRED = Decimal("100")


class CartTotals(BaseModel):
    subtotal: Decimal = ZERO
    applied_promotion: Optional[Promotion] = None
    discount: Decimal = ZERO
    total: Decimal = ZERO


def within_tolerance(submitted: Decimal, expected: Decimal) -> bool:
    return abs(submitted - expected) <= MONEY_TOLERANCE


def calculate_subtotal(items: Iterable[LineItem]) -> Decimal:
    return sum((item.unit_price * item.quantity for item in items), ZERO)


def calculate_discount(subtotal: Decimal, promotion: Optional[Promotion]) -> Decimal:
    if promotion is None:
        return ZERO
    return subtotal * promotion.discount_percentage / HUNDRED


def select_best_promotion(subtotal: Decimal, promotions: Sequence[Promotion]) -> Optional[Promotion]:
    """Лучшая акция, чей порог минимальной суммы достигнут.

    При равных процентах выигрывает первая по порядку в списке.
    """
    applicable = [p for p in promotions if p.is_applicable(subtotal)]
    if not applicable:
        return None
    # max() возвращает первый максимальный элемент
    return max(applicable, key=lambda p: p.discount_percentage)


def calculate_totals(items: Sequence[LineItem], promotions: Sequence[Promotion]) -> CartTotals:
    subtotal = calculate_subtotal(items)
    promotion = select_best_promotion(subtotal, promotions)
    discount = calculate_discount(subtotal, promotion)
    return CartTotals(
        subtotal=subtotal,
        applied_promotion=promotion,
        discount=discount,
        total=subtotal - discount,
    )


def verify_order_totals(
    items: Sequence[LineItem],
    promotion: Optional[Promotion],
    subtotal: Decimal,
    discount: Decimal,
    total: Decimal,
) -> None:
    """Проверка присланных сумм заказа против пересчитанных на сервере.

    Порядок проверок: порог акции, скидка, сумма строк, итог.
    Первое нарушение прерывает проверку исключением.
    """
    if promotion is not None:
        if not promotion.is_applicable(subtotal):
            raise MinimumOrderNotMetError(promotion.minimum_order, subtotal)

        expected_discount = calculate_discount(subtotal, promotion)
        if not within_tolerance(discount, expected_discount):
            raise TotalsMismatchError("discount", discount, expected_discount)
    elif not within_tolerance(discount, ZERO):
        raise TotalsMismatchError("discount", discount, ZERO)

    calculated_subtotal = calculate_subtotal(items)
    if not within_tolerance(subtotal, calculated_subtotal):
        raise TotalsMismatchError("subtotal", subtotal, calculated_subtotal)

    expected_total = subtotal - discount
    if not within_tolerance(total, expected_total):
        raise TotalsMismatchError("total", total, expected_total)
