from datetime import date, datetime
from decimal import Decimal
from typing import Annotated, List, Optional
from pydantic import BaseModel, ConfigDict, Field, PlainSerializer, field_validator
from pydantic.alias_generators import to_camel

from restaurant.domain.models import (
    BookingStatus, OrderStatus, UserRole, UserStatus,
)

# Деньги: Decimal внутри, число в JSON
Money = Annotated[Decimal, PlainSerializer(float, return_type=float, when_used="json")]
# Суммы в запросах: не больше двух знаков после запятой, как в колонках Numeric(10, 2)
MoneyInput = Annotated[Decimal, Field(max_digits=10, decimal_places=2)]


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ErrorResponse(BaseModel):
    error: str


# Orders

class OrderItemRequest(CamelModel):
    menu_item_id: str
    quantity: int = Field(ge=1)
    price: MoneyInput = Field(ge=0)


class CreateOrderRequest(CamelModel):
    user_id: Optional[str] = None
    guest_name: Optional[str] = None
    guest_email: Optional[str] = None
    guest_phone: Optional[str] = None
    items: List[OrderItemRequest]
    promotion_id: Optional[str] = None
    subtotal: MoneyInput
    discount: MoneyInput = Decimal("0")
    total: MoneyInput


class OrderItemResponse(CamelModel):
    menu_item_id: str
    name: Optional[str] = None
    quantity: int
    price: Money

    @classmethod
    def from_domain(cls, item):
        return cls(
            menu_item_id=item.menu_item_id,
            name=item.name,
            quantity=item.quantity,
            price=item.unit_price,
        )


class OrderResponse(CamelModel):
    id: str
    user_id: Optional[str] = None
    guest_name: Optional[str] = None
    guest_email: Optional[str] = None
    guest_phone: Optional[str] = None
    items: List[OrderItemResponse]
    promotion_id: Optional[str] = None
    subtotal: Money
    discount: Money
    total: Money
    status: OrderStatus
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_domain(cls, order):
        return cls(
            id=order.id,
            user_id=order.user_id,
            guest_name=order.guest_name,
            guest_email=order.guest_email,
            guest_phone=order.guest_phone,
            items=[OrderItemResponse.from_domain(item) for item in order.items],
            promotion_id=order.promotion_id,
            subtotal=order.subtotal,
            discount=order.discount,
            total=order.total,
            status=order.status,
            created_at=order.created_at,
            updated_at=order.updated_at
        )


class OrderStatusUpdateRequest(BaseModel):
    status: OrderStatus


# Cart

class CartLineRequest(CamelModel):
    menu_item_id: str
    quantity: int = Field(ge=1)


class CartQuoteRequest(CamelModel):
    items: List[CartLineRequest]


class PromotionResponse(CamelModel):
    id: str
    description: str
    discount_percentage: Money
    minimum_order: Money
    is_auto_applied: bool
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_domain(cls, promotion):
        return cls.model_validate(promotion.model_dump())


class CartQuoteResponse(CamelModel):
    items: List[OrderItemResponse]
    subtotal: Money
    applied_promotion: Optional[PromotionResponse] = None
    discount: Money
    total: Money

    @classmethod
    def from_cart(cls, cart):
        promotion = cart.applied_promotion
        return cls(
            items=[OrderItemResponse.from_domain(item) for item in cart.items],
            subtotal=cart.subtotal,
            applied_promotion=PromotionResponse.from_domain(promotion) if promotion else None,
            discount=cart.discount,
            total=cart.total,
        )


# Promotions

class PromotionRequest(CamelModel):
    description: str = Field(min_length=1)
    discount_percentage: Decimal = Field(ge=0, le=100, decimal_places=2)
    minimum_order: MoneyInput = Field(ge=0)
    is_auto_applied: bool = False


class DeletePromotionsRequest(BaseModel):
    ids: List[str] = Field(min_length=1)


# Menu

class CategoryRequest(BaseModel):
    name: str = Field(min_length=1)


class CategoryResponse(BaseModel):
    id: str
    name: str


class MenuItemRequest(CamelModel):
    name: str = Field(min_length=1)
    description: str = ""
    price: MoneyInput = Field(ge=0)
    category_id: Optional[str] = None
    image_url: Optional[str] = None
    is_available: bool = True


class MenuItemResponse(CamelModel):
    id: str
    name: str
    description: str
    price: Money
    category_id: Optional[str] = None
    image_url: Optional[str] = None
    is_available: bool
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_domain(cls, item):
        return cls.model_validate(item.model_dump())


# Bookings

class BookingRequest(CamelModel):
    user_id: Optional[str] = None
    customer_name: str = Field(min_length=1)
    phone_number: str = Field(min_length=1)
    date: date
    time: str = Field(pattern=r"^([01]\d|2[0-3]):[0-5]\d$")
    number_of_people: int = Field(ge=1)


class BookingResponse(CamelModel):
    id: str
    user_id: Optional[str] = None
    customer_name: str
    phone_number: str
    date: date
    time: str
    number_of_people: int
    status: BookingStatus
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_domain(cls, booking):
        return cls.model_validate(booking.model_dump())


class BookingStatusUpdateRequest(BaseModel):
    status: BookingStatus


# Users

class UserRequest(BaseModel):
    name: str = Field(min_length=1)
    email: str = Field(pattern=r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
    phone: Optional[str] = None
    role: UserRole = UserRole.CUSTOMER
    status: UserStatus = UserStatus.ACTIVE


class UserResponse(CamelModel):
    id: str
    name: str
    email: str
    phone: Optional[str] = None
    role: UserRole
    status: UserStatus
    created_at: Optional[datetime] = None

    @classmethod
    def from_domain(cls, user):
        return cls.model_validate(user.model_dump())


# Restaurant profile

class RestaurantProfileUpdateRequest(CamelModel):
    name: Optional[str] = None
    description: Optional[str] = None
    address: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    opening_hours: Optional[str] = None
    website: Optional[str] = None
    facebook: Optional[str] = None
    instagram: Optional[str] = None
    logo_url: Optional[str] = None
    banner_url: Optional[str] = None
    currency: Optional[str] = None
    tax_rate: Optional[Decimal] = Field(default=None, ge=0, le=100, decimal_places=2)
    service_charge: Optional[Decimal] = Field(default=None, ge=0, le=100, decimal_places=2)
    max_booking_days: Optional[int] = Field(default=None, ge=0)
    max_booking_per_slot: Optional[int] = Field(default=None, ge=1)
    max_table_size: Optional[int] = Field(default=None, ge=1)
    rating: Optional[Decimal] = Field(default=None, ge=0, le=5, decimal_places=1)
    total_reviews: Optional[int] = Field(default=None, ge=0)
    license_number: Optional[str] = None
    license_type: Optional[str] = None

    @field_validator(
        "name", "description", "address", "phone", "email", "opening_hours", "currency",
        "tax_rate", "service_charge", "max_booking_days", "max_booking_per_slot",
        "max_table_size", "rating", "total_reviews",
    )
    @classmethod
    def not_null(cls, value):
        # Поле можно не передавать, но нельзя обнулить
        if value is None:
            raise ValueError("значение не может быть null")
        return value


class RestaurantProfileResponse(CamelModel):
    id: str
    name: str
    description: str
    address: str
    phone: str
    email: str
    opening_hours: str
    website: Optional[str] = None
    facebook: Optional[str] = None
    instagram: Optional[str] = None
    logo_url: Optional[str] = None
    banner_url: Optional[str] = None
    currency: str
    tax_rate: Money
    service_charge: Money
    max_booking_days: int
    max_booking_per_slot: int
    max_table_size: int
    rating: Money
    total_reviews: int
    license_number: Optional[str] = None
    license_type: Optional[str] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_domain(cls, profile):
        return cls.model_validate(profile.model_dump())


class MenuCategoryResponse(CamelModel):
    id: Optional[str] = None
    name: Optional[str] = None
    items: List[MenuItemResponse]


class RestaurantResponse(RestaurantProfileResponse):
    categories: List[MenuCategoryResponse]
    promotions: List[PromotionResponse]

    @classmethod
    def from_overview(cls, overview):
        return cls(
            **overview.profile.model_dump(),
            categories=[
                MenuCategoryResponse(
                    id=group.category.id if group.category else None,
                    name=group.category.name if group.category else None,
                    items=[MenuItemResponse.from_domain(i) for i in group.items],
                )
                for group in overview.categories
            ],
            promotions=[PromotionResponse.from_domain(p) for p in overview.promotions],
        )


# Dashboard

class DashboardResponse(CamelModel):
    total_orders: int
    total_revenue: Money
    total_bookings: int
    total_users: int
    recent_orders: List[OrderResponse]
    recent_bookings: List[BookingResponse]

    @classmethod
    def from_stats(cls, stats):
        return cls(
            total_orders=stats.total_orders,
            total_revenue=stats.total_revenue,
            total_bookings=stats.total_bookings,
            total_users=stats.total_users,
            recent_orders=[OrderResponse.from_domain(o) for o in stats.recent_orders],
            recent_bookings=[BookingResponse.from_domain(b) for b in stats.recent_bookings],
        )
