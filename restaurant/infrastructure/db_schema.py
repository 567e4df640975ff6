from sqlalchemy import (
    Table, Column, String, Integer, Numeric, Boolean, Date, Enum, DateTime, JSON, Text,
    MetaData, ForeignKey,
)
from sqlalchemy.sql import func

from restaurant.domain.models import OrderStatus, BookingStatus, UserRole, UserStatus

metadata = MetaData()

MONEY = Numeric(10, 2)


def _values(enum_cls):
    return [member.value for member in enum_cls]


users_tbl = Table(
    "users",
    metadata,
    Column("id", String, primary_key=True),
    Column("name", String, nullable=False),
    Column("email", String, unique=True, nullable=False, index=True),
    Column("phone", String, nullable=True),
    Column("role", Enum(UserRole, values_callable=_values), default=UserRole.CUSTOMER),
    Column("status", Enum(UserStatus, values_callable=_values), default=UserStatus.ACTIVE),
    Column("created_at", DateTime(timezone=True), server_default=func.now()),
)


restaurant_profile_tbl = Table(
    "restaurant_profile",
    metadata,
    Column("id", String, primary_key=True),
    Column("name", String, nullable=False),
    Column("description", Text, default=""),
    Column("address", String, default=""),
    Column("phone", String, default=""),
    Column("email", String, default=""),
    Column("opening_hours", String, default=""),
    Column("website", String, nullable=True),
    Column("facebook", String, nullable=True),
    Column("instagram", String, nullable=True),
    Column("logo_url", String, nullable=True),
    Column("banner_url", String, nullable=True),
    Column("currency", String, default="HKD"),
    Column("tax_rate", Numeric(5, 2), default=0),
    Column("service_charge", Numeric(5, 2), default=0),
    Column("max_booking_days", Integer, default=30),
    Column("max_booking_per_slot", Integer, default=5),
    Column("max_table_size", Integer, default=10),
    Column("rating", Numeric(3, 1), default=0),
    Column("total_reviews", Integer, default=0),
    Column("license_number", String, nullable=True),
    Column("license_type", String, nullable=True),
    Column("updated_at", DateTime(timezone=True), server_default=func.now(), onupdate=func.now()),
)


categories_tbl = Table(
    "categories",
    metadata,
    Column("id", String, primary_key=True),
    Column("name", String, unique=True, nullable=False),
)


menu_items_tbl = Table(
    "menu_items",
    metadata,
    Column("id", String, primary_key=True),
    Column("name", String, nullable=False),
    Column("description", Text, default=""),
    Column("price", MONEY, nullable=False),
    Column("category_id", String, ForeignKey("categories.id"), nullable=True, index=True),
    Column("image_url", String, nullable=True),
    Column("is_available", Boolean, default=True),
    Column("created_at", DateTime(timezone=True), server_default=func.now()),
    Column("updated_at", DateTime(timezone=True), server_default=func.now(), onupdate=func.now()),
)


promotions_tbl = Table(
    "promotions",
    metadata,
    Column("id", String, primary_key=True),
    Column("description", String, nullable=False),
    Column("discount_percentage", Numeric(5, 2), nullable=False),
    Column("minimum_order", MONEY, nullable=False, default=0),
    Column("is_auto_applied", Boolean, default=False),
    Column("created_at", DateTime(timezone=True), server_default=func.now()),
    Column("updated_at", DateTime(timezone=True), server_default=func.now(), onupdate=func.now()),
)


orders_tbl = Table(
    "orders",
    metadata,
    Column("id", String, primary_key=True),
    Column("user_id", String, ForeignKey("users.id"), nullable=True, index=True),
    Column("guest_name", String, nullable=True),
    Column("guest_email", String, nullable=True),
    Column("guest_phone", String, nullable=True),
    Column("promotion_id", String, ForeignKey("promotions.id"), nullable=True, index=True),
    Column("subtotal", MONEY, nullable=False),
    Column("discount", MONEY, nullable=False, default=0),
    Column("total", MONEY, nullable=False),
    Column("status", Enum(OrderStatus, values_callable=_values), default=OrderStatus.PENDING),
    Column("created_at", DateTime(timezone=True), server_default=func.now()),
    Column("updated_at", DateTime(timezone=True), server_default=func.now(), onupdate=func.now()),
)


order_items_tbl = Table(
    "order_items",
    metadata,
    Column("id", String, primary_key=True),
    Column("order_id", String, ForeignKey("orders.id", ondelete="CASCADE"), nullable=False, index=True),
    Column("menu_item_id", String, ForeignKey("menu_items.id"), nullable=False, index=True),
    Column("quantity", Integer, nullable=False),
    Column("price", MONEY, nullable=False),
)


bookings_tbl = Table(
    "bookings",
    metadata,
    Column("id", String, primary_key=True),
    Column("user_id", String, ForeignKey("users.id"), nullable=True, index=True),
    Column("customer_name", String, nullable=False),
    Column("phone_number", String, nullable=False),
    Column("date", Date, nullable=False, index=True),
    Column("time", String, nullable=False),
    Column("number_of_people", Integer, nullable=False),
    Column("status", Enum(BookingStatus, values_callable=_values), default=BookingStatus.PENDING),
    Column("created_at", DateTime(timezone=True), server_default=func.now()),
    Column("updated_at", DateTime(timezone=True), server_default=func.now(), onupdate=func.now()),
)


outbox_events_tbl = Table(
    "outbox_events",
    metadata,
    Column("id", String, primary_key=True),
    Column("event_type", String, nullable=False),
    Column("event_data", JSON, nullable=False),
    Column("order_id", String, nullable=False),
    Column("status", String, default="pending"),
    Column("created_at", DateTime(timezone=True), server_default=func.now()),
)
