from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import List, Optional
from pydantic import BaseModel


class OrderStatus(str, Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    PREPARING = "preparing"
    READY = "ready"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


ORDER_TRANSITIONS = {
    OrderStatus.PENDING: {OrderStatus.CONFIRMED, OrderStatus.CANCELLED},
    OrderStatus.CONFIRMED: {OrderStatus.PREPARING, OrderStatus.CANCELLED},
    OrderStatus.PREPARING: {OrderStatus.READY},
    OrderStatus.READY: {OrderStatus.COMPLETED},
    OrderStatus.COMPLETED: set(),
    OrderStatus.CANCELLED: set(),
}


class BookingStatus(str, Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"
    COMPLETED = "completed"


BOOKING_TRANSITIONS = {
    BookingStatus.PENDING: {BookingStatus.CONFIRMED, BookingStatus.CANCELLED},
    BookingStatus.CONFIRMED: {BookingStatus.CANCELLED, BookingStatus.COMPLETED},
    BookingStatus.CANCELLED: set(),
    BookingStatus.COMPLETED: set(),
}


class UserRole(str, Enum):
    ADMIN = "admin"
    STAFF = "staff"
    CUSTOMER = "customer"


class UserStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"


class Category(BaseModel):
    """Value Object — категория меню"""
    id: str
    name: str


class MenuItem(BaseModel):
    """Entity — позиция меню"""
    id: str
    name: str
    description: str = ""
    price: Decimal
    category_id: Optional[str] = None
    image_url: Optional[str] = None
    is_available: bool = True
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class Promotion(BaseModel):
    """Entity — акция: скидка в процентах от минимальной суммы заказа"""
    id: str
    description: str
    discount_percentage: Decimal
    minimum_order: Decimal
    is_auto_applied: bool = False
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def is_applicable(self, subtotal: Decimal) -> bool:
        return subtotal >= self.minimum_order


class LineItem(BaseModel):
    """Value Object — строка корзины или заказа"""
    menu_item_id: str
    quantity: int
    unit_price: Decimal
    name: Optional[str] = None

    @property
    def line_total(self) -> Decimal:
        return self.unit_price * self.quantity


class Order(BaseModel):
    """Aggregate — заказ со строками"""
    id: str
    user_id: Optional[str] = None
    guest_name: Optional[str] = None
    guest_email: Optional[str] = None
    guest_phone: Optional[str] = None
    items: List[LineItem] = []
    promotion_id: Optional[str] = None
    subtotal: Decimal
    discount: Decimal
    total: Decimal
    status: OrderStatus
    created_at: datetime
    updated_at: datetime

    def can_transition_to(self, status: OrderStatus) -> bool:
        """Бизнес-правило: статусы идут по цепочке, отмена только из pending/confirmed"""
        return status in ORDER_TRANSITIONS[self.status]


class Booking(BaseModel):
    """Entity — бронирование столика"""
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

    def can_transition_to(self, status: BookingStatus) -> bool:
        return status in BOOKING_TRANSITIONS[self.status]


class User(BaseModel):
    id: str
    name: str
    email: str
    phone: Optional[str] = None
    role: UserRole = UserRole.CUSTOMER
    status: UserStatus = UserStatus.ACTIVE
    created_at: Optional[datetime] = None


class RestaurantProfile(BaseModel):
    """Единственная запись с настройками ресторана"""
    id: str
    name: str
    description: str = ""
    address: str = ""
    phone: str = ""
    email: str = ""
    opening_hours: str = ""
    website: Optional[str] = None
    facebook: Optional[str] = None
    instagram: Optional[str] = None
    logo_url: Optional[str] = None
    banner_url: Optional[str] = None
    currency: str = "HKD"
    tax_rate: Decimal = Decimal("0")
    service_charge: Decimal = Decimal("0")
    max_booking_days: int = 30
    max_booking_per_slot: int = 5
    max_table_size: int = 10
    rating: Decimal = Decimal("0")
    total_reviews: int = 0
    license_number: Optional[str] = None
    license_type: Optional[str] = None
    updated_at: Optional[datetime] = None
