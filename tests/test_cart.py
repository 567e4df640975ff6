from decimal import Decimal

from restaurant.domain.cart import Cart
from restaurant.domain.models import MenuItem, Promotion

RICE = MenuItem(id="item-1", name="Beef rice", price=Decimal("50"))
FRIES = MenuItem(id="item-2", name="Fries", price=Decimal("30"))
TEN_OFF_100 = Promotion(
    id="promo-10", description="10% from 100",
    discount_percentage=Decimal("10"), minimum_order=Decimal("100"),
)


def test_adding_same_item_twice_increments_quantity():
    cart = Cart()

    cart.add_item(RICE)
    cart.add_item(RICE)

    assert len(cart.items) == 1
    assert cart.items[0].quantity == 2
    assert cart.subtotal == Decimal("100")


def test_removing_last_unit_drops_the_line():
    cart = Cart()
    cart.add_item(RICE)
    cart.add_item(FRIES)

    cart.update_quantity("item-2", 0)

    assert [item.menu_item_id for item in cart.items] == ["item-1"]
    assert cart.total == Decimal("50")


def test_update_quantity_recalculates_promotion():
    cart = Cart([TEN_OFF_100])
    cart.add_item(RICE)
    assert cart.applied_promotion is None

    cart.update_quantity("item-1", 3)

    assert cart.subtotal == Decimal("150")
    assert cart.applied_promotion.id == "promo-10"
    assert cart.discount == Decimal("15")
    assert cart.total == Decimal("135")


def test_remove_item_drops_promotion_below_threshold():
    cart = Cart([TEN_OFF_100])
    cart.add_item(RICE)
    cart.add_item(RICE)
    cart.add_item(FRIES)
    assert cart.total == Decimal("117")

    cart.remove_item("item-1")

    assert cart.applied_promotion is None
    assert cart.discount == 0
    assert cart.total == Decimal("30")


def test_promotion_refresh_keeps_items():
    cart = Cart()
    cart.add_item(RICE)
    cart.add_item(RICE)
    assert cart.discount == 0

    cart.set_promotions([TEN_OFF_100])

    assert cart.items[0].quantity == 2
    assert cart.discount == Decimal("10")
    assert cart.total == Decimal("90")


def test_totals_stay_consistent_after_every_mutation():
    cart = Cart([TEN_OFF_100])
    mutations = [
        lambda: cart.add_item(RICE),
        lambda: cart.add_item(FRIES),
        lambda: cart.add_item(RICE),
        lambda: cart.update_quantity("item-2", 4),
        lambda: cart.remove_item("item-1"),
        lambda: cart.set_promotions([]),
    ]

    for mutate in mutations:
        mutate()
        expected = sum((i.unit_price * i.quantity for i in cart.items), Decimal("0"))
        assert cart.subtotal == expected
        assert cart.total == cart.subtotal - cart.discount


def test_clear_resets_state():
    cart = Cart([TEN_OFF_100])
    cart.add_item(RICE)

    cart.clear()

    assert cart.items == []
    assert cart.subtotal == cart.discount == cart.total == 0
    assert cart.applied_promotion is None
