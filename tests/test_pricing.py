from decimal import Decimal

import pytest

from restaurant.domain.exceptions import MinimumOrderNotMetError, TotalsMismatchError
from restaurant.domain.models import LineItem, Promotion
from restaurant.domain.pricing import (
    MONEY_TOLERANCE, calculate_totals, select_best_promotion, verify_order_totals,
)


def promo(promo_id, percentage, minimum):
    return Promotion(
        id=promo_id,
        description=f"{percentage}% from {minimum}",
        discount_percentage=Decimal(str(percentage)),
        minimum_order=Decimal(str(minimum)),
    )


def line(menu_item_id, price, quantity):
    return LineItem(menu_item_id=menu_item_id, unit_price=Decimal(str(price)), quantity=quantity)


ITEMS = [line("item-1", 50, 2), line("item-2", 30, 1)]


def test_select_best_promotion_picks_highest_qualifying_percentage():
    promotions = [promo("a", 5, 0), promo("b", 20, 500), promo("c", 10, 100)]

    best = select_best_promotion(Decimal("130"), promotions)

    assert best.id == "c"


def test_select_best_promotion_returns_none_when_no_threshold_met():
    promotions = [promo("a", 10, 200), promo("b", 15, 300)]

    assert select_best_promotion(Decimal("130"), promotions) is None
    assert select_best_promotion(Decimal("130"), []) is None


def test_select_best_promotion_threshold_is_inclusive():
    assert select_best_promotion(Decimal("100"), [promo("a", 10, 100)]).id == "a"


def test_select_best_promotion_tie_keeps_first_in_input_order():
    promotions = [promo("first", 10, 50), promo("second", 10, 0)]

    assert select_best_promotion(Decimal("100"), promotions).id == "first"


@pytest.mark.parametrize("subtotal", ["0", "49.99", "100", "250", "1000"])
def test_selected_promotion_is_never_beaten_by_another_qualifying_one(subtotal):
    subtotal = Decimal(subtotal)
    promotions = [promo("a", 5, 0), promo("b", 12, 100), promo("c", 8, 50), promo("d", 30, 999)]

    best = select_best_promotion(subtotal, promotions)

    qualifying = [p for p in promotions if p.minimum_order <= subtotal]
    assert best.minimum_order <= subtotal
    assert all(p.discount_percentage <= best.discount_percentage for p in qualifying)


def test_calculate_totals_applies_best_promotion():
    totals = calculate_totals(ITEMS, [promo("p", 10, 100)])

    assert totals.subtotal == Decimal("130")
    assert totals.applied_promotion.id == "p"
    assert totals.discount == Decimal("13")
    assert totals.total == Decimal("117")


def test_calculate_totals_without_promotion_has_zero_discount():
    totals = calculate_totals(ITEMS, [promo("p", 10, 200)])

    assert totals.applied_promotion is None
    assert totals.discount == 0
    assert totals.total == totals.subtotal == Decimal("130")


def test_calculate_totals_is_pure():
    promotions = [promo("p", 15, 100)]

    first = calculate_totals(ITEMS, promotions)
    second = calculate_totals(ITEMS, promotions)

    assert first == second
    assert first.total == first.subtotal - first.discount


def test_calculate_totals_keeps_cents_exact():
    items = [line("x", "0.10", 3), line("y", "19.99", 7)]

    totals = calculate_totals(items, [promo("p", "12.5", 0)])

    assert totals.subtotal == Decimal("140.23")
    assert totals.total == totals.subtotal - totals.discount


def test_verify_order_totals_accepts_exact_values():
    verify_order_totals(
        ITEMS, promo("p", 10, 100),
        subtotal=Decimal("130"), discount=Decimal("13"), total=Decimal("117"),
    )


def test_verify_order_totals_accepts_values_within_tolerance():
    verify_order_totals(
        ITEMS, promo("p", 10, 100),
        subtotal=Decimal("130.01"), discount=Decimal("13"), total=Decimal("117.01"),
    )


def test_verify_order_totals_rejects_total_off_by_one():
    with pytest.raises(TotalsMismatchError) as exc:
        verify_order_totals(
            ITEMS, promo("p", 10, 100),
            subtotal=Decimal("130"), discount=Decimal("13"), total=Decimal("118"),
        )
    assert exc.value.field == "total"
    assert exc.value.expected == Decimal("117")


def test_verify_order_totals_rejects_total_just_outside_tolerance():
    with pytest.raises(TotalsMismatchError):
        verify_order_totals(
            ITEMS, None,
            subtotal=Decimal("130"), discount=Decimal("0"),
            total=Decimal("130") + MONEY_TOLERANCE + Decimal("0.001"),
        )


def test_verify_order_totals_checks_minimum_order_before_amounts():
    with pytest.raises(MinimumOrderNotMetError):
        verify_order_totals(
            ITEMS, promo("p", 10, 100),
            subtotal=Decimal("90"), discount=Decimal("999"), total=Decimal("-1"),
        )


def test_verify_order_totals_rejects_wrong_discount():
    with pytest.raises(TotalsMismatchError) as exc:
        verify_order_totals(
            ITEMS, promo("p", 10, 100),
            subtotal=Decimal("130"), discount=Decimal("10"), total=Decimal("120"),
        )
    assert exc.value.field == "discount"


def test_verify_order_totals_rejects_discount_without_promotion():
    with pytest.raises(TotalsMismatchError) as exc:
        verify_order_totals(
            ITEMS, None,
            subtotal=Decimal("130"), discount=Decimal("13"), total=Decimal("117"),
        )
    assert exc.value.field == "discount"


def test_verify_order_totals_rejects_subtotal_not_matching_items():
    with pytest.raises(TotalsMismatchError) as exc:
        verify_order_totals(
            ITEMS, None,
            subtotal=Decimal("100"), discount=Decimal("0"), total=Decimal("100"),
        )
    assert exc.value.field == "subtotal"
