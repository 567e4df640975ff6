from abc import ABC, abstractmethod
from datetime import date, datetime
from decimal import Decimal
from typing import Optional, List

from restaurant.domain.models import (
    Booking, BookingStatus, Category, MenuItem, Order, OrderStatus, Promotion,
    RestaurantProfile, User,
)


class MenuRepository(ABC):
    @abstractmethod
    async def get_item(self, menu_item_id: str) -> Optional[MenuItem]:
        pass

    @abstractmethod
    async def list_items(self, only_available: bool = False) -> List[MenuItem]:
        pass

    @abstractmethod
    async def create_item(self, item: MenuItem) -> None:
        pass

    @abstractmethod
    async def update_item(self, item: MenuItem) -> None:
        pass

    @abstractmethod
    async def delete_item(self, menu_item_id: str) -> None:
        pass

    @abstractmethod
    async def is_item_ordered(self, menu_item_id: str) -> bool:
        pass

    @abstractmethod
    async def get_category(self, category_id: str) -> Optional[Category]:
        pass

    @abstractmethod
    async def get_category_by_name(self, name: str) -> Optional[Category]:
        pass

    @abstractmethod
    async def list_categories(self) -> List[Category]:
        pass

    @abstractmethod
    async def create_category(self, category: Category) -> None:
        pass

    @abstractmethod
    async def rename_category(self, category_id: str, name: str) -> None:
        pass

    @abstractmethod
    async def delete_category(self, category_id: str) -> None:
        pass

    @abstractmethod
    async def count_items_in_category(self, category_id: str) -> int:
        pass


class PromotionRepository(ABC):
    @abstractmethod
    async def get_by_id(self, promotion_id: str) -> Optional[Promotion]:
        pass

    @abstractmethod
    async def list_all(self) -> List[Promotion]:
        pass

    @abstractmethod
    async def create(self, promotion: Promotion) -> None:
        pass

    @abstractmethod
    async def update(self, promotion: Promotion) -> None:
        pass

    @abstractmethod
    async def delete_many(self, promotion_ids: List[str]) -> None:
        pass

    @abstractmethod
    async def get_used_ids(self, promotion_ids: List[str]) -> List[str]:
        pass


class OrderRepository(ABC):
    @abstractmethod
    async def get_by_id(self, order_id: str) -> Optional[Order]:
        pass

    @abstractmethod
    async def list_by_user(self, user_id: str) -> List[Order]:
        pass

    @abstractmethod
    async def list_filtered(
        self,
        status: Optional[OrderStatus] = None,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
        limit: Optional[int] = None,
    ) -> List[Order]:
        pass

    @abstractmethod
    async def create(self, order: Order) -> None:
        pass

    @abstractmethod
    async def update_status(self, order_id: str, status: OrderStatus) -> None:
        pass

    @abstractmethod
    async def count(self) -> int:
        pass

    @abstractmethod
    async def revenue(self) -> Decimal:
        pass


class BookingRepository(ABC):
    @abstractmethod
    async def get_by_id(self, booking_id: str) -> Optional[Booking]:
        pass

    @abstractmethod
    async def list_by_user(self, user_id: str) -> List[Booking]:
        pass

    @abstractmethod
    async def list_filtered(
        self,
        status: Optional[BookingStatus] = None,
        on_date: Optional[date] = None,
        limit: Optional[int] = None,
    ) -> List[Booking]:
        pass

    @abstractmethod
    async def count_active_in_slot(self, on_date: date, time: str) -> int:
        pass

    @abstractmethod
    async def create(self, booking: Booking) -> None:
        pass

    @abstractmethod
    async def update_status(self, booking_id: str, status: BookingStatus) -> None:
        pass

    @abstractmethod
    async def count(self) -> int:
        pass


class UserRepository(ABC):
    @abstractmethod
    async def get_by_id(self, user_id: str) -> Optional[User]:
        pass

    @abstractmethod
    async def get_by_email(self, email: str) -> Optional[User]:
        pass

    @abstractmethod
    async def list_all(self) -> List[User]:
        pass

    @abstractmethod
    async def create(self, user: User) -> None:
        pass

    @abstractmethod
    async def update(self, user: User) -> None:
        pass

    @abstractmethod
    async def delete(self, user_id: str) -> None:
        pass

    @abstractmethod
    async def count(self) -> int:
        pass


class RestaurantProfileRepository(ABC):
    @abstractmethod
    async def get(self) -> Optional[RestaurantProfile]:
        pass

    @abstractmethod
    async def save(self, profile: RestaurantProfile) -> None:
        pass


class OutboxRepository(ABC):
    @abstractmethod
    async def create(self, event_type: str, event_data: dict, order_id: str) -> str:
        pass

    @abstractmethod
    async def get_pending(self, limit: int = 10) -> List[dict]:
        pass

    @abstractmethod
    async def mark_as_published(self, event_id: str) -> None:
        pass


class UnitOfWork(ABC):
    @property
    @abstractmethod
    def menu(self) -> MenuRepository:
        pass

    @property
    @abstractmethod
    def promotions(self) -> PromotionRepository:
        pass

    @property
    @abstractmethod
    def orders(self) -> OrderRepository:
        pass

    @property
    @abstractmethod
    def bookings(self) -> BookingRepository:
        pass

    @property
    @abstractmethod
    def users(self) -> UserRepository:
        pass

    @property
    @abstractmethod
    def profile(self) -> RestaurantProfileRepository:
        pass

    @property
    @abstractmethod
    def outbox(self) -> OutboxRepository:
        pass

    @abstractmethod
    async def __call__(self):
        pass

    @abstractmethod
    async def commit(self):
        pass

    @abstractmethod
    async def rollback(self):
        pass


class EventPublisher(ABC):
    @abstractmethod
    async def publish(self, event_type: str, key: str, payload: dict) -> bool:
        pass
