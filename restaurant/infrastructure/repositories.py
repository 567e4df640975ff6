import uuid
from datetime import date, datetime, timezone
from decimal import Decimal
from typing import Optional, List
from sqlalchemy import select, insert, update, delete, func
from sqlalchemy.ext.asyncio import AsyncSession

from restaurant.domain.models import (
    Booking, BookingStatus, Category, LineItem, MenuItem, Order, OrderStatus, Promotion,
    RestaurantProfile, User,
)
from restaurant.infrastructure.db_schema import (
    bookings_tbl, categories_tbl, menu_items_tbl, order_items_tbl, orders_tbl,
    outbox_events_tbl, promotions_tbl, restaurant_profile_tbl, users_tbl,
)
from restaurant.application.interfaces import (
    BookingRepository, MenuRepository, OrderRepository, OutboxRepository, PromotionRepository,
    RestaurantProfileRepository, UserRepository,
)


def _now() -> datetime:
    return datetime.now(timezone.utc)


class SQLAlchemyMenuRepository(MenuRepository):
    def __init__(self, session: AsyncSession):
        self._session = session

    async def get_item(self, menu_item_id: str) -> Optional[MenuItem]:
        result = await self._session.execute(
            select(menu_items_tbl).where(menu_items_tbl.c.id == menu_item_id)
        )
        row = result.fetchone()
        return self._item_to_domain(row) if row else None

    async def list_items(self, only_available: bool = False) -> List[MenuItem]:
        stmt = (
            select(menu_items_tbl)
            .outerjoin(categories_tbl, menu_items_tbl.c.category_id == categories_tbl.c.id)
            .order_by(categories_tbl.c.name.asc(), menu_items_tbl.c.name.asc())
        )
        if only_available:
            stmt = stmt.where(menu_items_tbl.c.is_available.is_(True))
        result = await self._session.execute(stmt)
        return [self._item_to_domain(row) for row in result.fetchall()]

    async def create_item(self, item: MenuItem) -> None:
        now = _now()
        await self._session.execute(
            insert(menu_items_tbl).values(
                id=item.id,
                name=item.name,
                description=item.description,
                price=item.price,
                category_id=item.category_id,
                image_url=item.image_url,
                is_available=item.is_available,
                created_at=item.created_at or now,
                updated_at=item.updated_at or now,
            )
        )

    async def update_item(self, item: MenuItem) -> None:
        await self._session.execute(
            update(menu_items_tbl)
            .where(menu_items_tbl.c.id == item.id)
            .values(
                name=item.name,
                description=item.description,
                price=item.price,
                category_id=item.category_id,
                image_url=item.image_url,
                is_available=item.is_available,
                updated_at=_now(),
            )
        )

    async def delete_item(self, menu_item_id: str) -> None:
        await self._session.execute(
            delete(menu_items_tbl).where(menu_items_tbl.c.id == menu_item_id)
        )

    async def is_item_ordered(self, menu_item_id: str) -> bool:
        result = await self._session.execute(
            select(order_items_tbl.c.id)
            .where(order_items_tbl.c.menu_item_id == menu_item_id)
            .limit(1)
        )
        return result.fetchone() is not None

    async def get_category(self, category_id: str) -> Optional[Category]:
        result = await self._session.execute(
            select(categories_tbl).where(categories_tbl.c.id == category_id)
        )
        row = result.fetchone()
        return Category(id=row.id, name=row.name) if row else None

    async def get_category_by_name(self, name: str) -> Optional[Category]:
        result = await self._session.execute(
            select(categories_tbl).where(categories_tbl.c.name == name)
        )
        row = result.fetchone()
        return Category(id=row.id, name=row.name) if row else None

    async def list_categories(self) -> List[Category]:
        result = await self._session.execute(
            select(categories_tbl).order_by(categories_tbl.c.name.asc())
        )
        return [Category(id=row.id, name=row.name) for row in result.fetchall()]

    async def create_category(self, category: Category) -> None:
        await self._session.execute(
            insert(categories_tbl).values(id=category.id, name=category.name)
        )

    async def rename_category(self, category_id: str, name: str) -> None:
        await self._session.execute(
            update(categories_tbl).where(categories_tbl.c.id == category_id).values(name=name)
        )

    async def delete_category(self, category_id: str) -> None:
        await self._session.execute(
            delete(categories_tbl).where(categories_tbl.c.id == category_id)
        )

    async def count_items_in_category(self, category_id: str) -> int:
        result = await self._session.execute(
            select(func.count()).select_from(menu_items_tbl)
            .where(menu_items_tbl.c.category_id == category_id)
        )
        return result.scalar_one()

    def _item_to_domain(self, row) -> MenuItem:
        return MenuItem(
            id=row.id,
            name=row.name,
            description=row.description or "",
            price=Decimal(str(row.price)),
            category_id=row.category_id,
            image_url=row.image_url,
            is_available=row.is_available,
            created_at=row.created_at,
            updated_at=row.updated_at,
        )


class SQLAlchemyPromotionRepository(PromotionRepository):
    def __init__(self, session: AsyncSession):
        self._session = session

    async def get_by_id(self, promotion_id: str) -> Optional[Promotion]:
        result = await self._session.execute(
            select(promotions_tbl).where(promotions_tbl.c.id == promotion_id)
        )
        row = result.fetchone()
        return self._to_domain(row) if row else None

    async def list_all(self) -> List[Promotion]:
        result = await self._session.execute(
            select(promotions_tbl).order_by(promotions_tbl.c.created_at.desc())
        )
        return [self._to_domain(row) for row in result.fetchall()]

    async def create(self, promotion: Promotion) -> None:
        now = _now()
        await self._session.execute(
            insert(promotions_tbl).values(
                id=promotion.id,
                description=promotion.description,
                discount_percentage=promotion.discount_percentage,
                minimum_order=promotion.minimum_order,
                is_auto_applied=promotion.is_auto_applied,
                created_at=promotion.created_at or now,
                updated_at=promotion.updated_at or now,
            )
        )

    async def update(self, promotion: Promotion) -> None:
        await self._session.execute(
            update(promotions_tbl)
            .where(promotions_tbl.c.id == promotion.id)
            .values(
                description=promotion.description,
                discount_percentage=promotion.discount_percentage,
                minimum_order=promotion.minimum_order,
                is_auto_applied=promotion.is_auto_applied,
                updated_at=_now(),
            )
        )

    async def delete_many(self, promotion_ids: List[str]) -> None:
        await self._session.execute(
            delete(promotions_tbl).where(promotions_tbl.c.id.in_(promotion_ids))
        )

    async def get_used_ids(self, promotion_ids: List[str]) -> List[str]:
        result = await self._session.execute(
            select(orders_tbl.c.promotion_id)
            .where(orders_tbl.c.promotion_id.in_(promotion_ids))
            .distinct()
        )
        return sorted(row.promotion_id for row in result.fetchall())

    def _to_domain(self, row) -> Promotion:
        return Promotion(
            id=row.id,
            description=row.description,
            discount_percentage=Decimal(str(row.discount_percentage)),
            minimum_order=Decimal(str(row.minimum_order)),
            is_auto_applied=row.is_auto_applied,
            created_at=row.created_at,
            updated_at=row.updated_at,
        )


class SQLAlchemyOrderRepository(OrderRepository):
    def __init__(self, session: AsyncSession):
        self._session = session

    async def get_by_id(self, order_id: str) -> Optional[Order]:
        result = await self._session.execute(
            select(orders_tbl).where(orders_tbl.c.id == order_id)
        )
        row = result.fetchone()
        if not row:
            return None
        items = await self._load_items([row.id])
        return self._to_domain(row, items.get(row.id, []))

    async def list_by_user(self, user_id: str) -> List[Order]:
        result = await self._session.execute(
            select(orders_tbl)
            .where(orders_tbl.c.user_id == user_id)
            .order_by(orders_tbl.c.created_at.desc())
        )
        return await self._with_items(result.fetchall())

    async def list_filtered(
        self,
        status: Optional[OrderStatus] = None,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
        limit: Optional[int] = None,
    ) -> List[Order]:
        stmt = select(orders_tbl).order_by(orders_tbl.c.created_at.desc())
        if status:
            stmt = stmt.where(orders_tbl.c.status == status)
        if start:
            stmt = stmt.where(orders_tbl.c.created_at >= start)
        if end:
            stmt = stmt.where(orders_tbl.c.created_at <= end)
        if limit:
            stmt = stmt.limit(limit)
        result = await self._session.execute(stmt)
        return await self._with_items(result.fetchall())

    async def create(self, order: Order) -> None:
        """Заказ и его строки пишутся в одной сессии, коммит делает UoW"""
        await self._session.execute(
            insert(orders_tbl).values(
                id=order.id,
                user_id=order.user_id,
                guest_name=order.guest_name,
                guest_email=order.guest_email,
                guest_phone=order.guest_phone,
                promotion_id=order.promotion_id,
                subtotal=order.subtotal,
                discount=order.discount,
                total=order.total,
                status=order.status,
                created_at=order.created_at,
                updated_at=order.updated_at,
            )
        )
        await self._session.execute(
            insert(order_items_tbl),
            [
                {
                    "id": str(uuid.uuid4()),
                    "order_id": order.id,
                    "menu_item_id": item.menu_item_id,
                    "quantity": item.quantity,
                    "price": item.unit_price,
                }
                for item in order.items
            ],
        )

    async def update_status(self, order_id: str, status: OrderStatus) -> None:
        stmt = (
            update(orders_tbl)
            .where(orders_tbl.c.id == order_id)
            .values(
                status=status,
                updated_at=_now()
            )
        )
        await self._session.execute(stmt)

    async def count(self) -> int:
        result = await self._session.execute(select(func.count()).select_from(orders_tbl))
        return result.scalar_one()

    async def revenue(self) -> Decimal:
        result = await self._session.execute(
            select(func.coalesce(func.sum(orders_tbl.c.total), 0))
            .where(orders_tbl.c.status != OrderStatus.CANCELLED)
        )
        return Decimal(str(result.scalar_one()))

    async def _with_items(self, rows) -> List[Order]:
        items = await self._load_items([row.id for row in rows])
        return [self._to_domain(row, items.get(row.id, [])) for row in rows]

    async def _load_items(self, order_ids: List[str]) -> dict:
        if not order_ids:
            return {}
        result = await self._session.execute(
            select(order_items_tbl, menu_items_tbl.c.name)
            .join(menu_items_tbl, order_items_tbl.c.menu_item_id == menu_items_tbl.c.id, isouter=True)
            .where(order_items_tbl.c.order_id.in_(order_ids))
        )
        items = {}
        for row in result.fetchall():
            items.setdefault(row.order_id, []).append(
                LineItem(
                    menu_item_id=row.menu_item_id,
                    quantity=row.quantity,
                    unit_price=Decimal(str(row.price)),
                    name=row.name,
                )
            )
        return items

    def _to_domain(self, row, items: List[LineItem]) -> Order:
        """Трансформация DB → Domain"""
        return Order(
            id=row.id,
            user_id=row.user_id,
            guest_name=row.guest_name,
            guest_email=row.guest_email,
            guest_phone=row.guest_phone,
            items=items,
            promotion_id=row.promotion_id,
            subtotal=Decimal(str(row.subtotal)),
            discount=Decimal(str(row.discount)),
            total=Decimal(str(row.total)),
            status=OrderStatus(row.status),
            created_at=row.created_at,
            updated_at=row.updated_at
        )


class SQLAlchemyBookingRepository(BookingRepository):
    def __init__(self, session: AsyncSession):
        self._session = session

    async def get_by_id(self, booking_id: str) -> Optional[Booking]:
        result = await self._session.execute(
            select(bookings_tbl).where(bookings_tbl.c.id == booking_id)
        )
        row = result.fetchone()
        return self._to_domain(row) if row else None

    async def list_by_user(self, user_id: str) -> List[Booking]:
        result = await self._session.execute(
            select(bookings_tbl)
            .where(bookings_tbl.c.user_id == user_id)
            .order_by(bookings_tbl.c.date.asc(), bookings_tbl.c.time.asc())
        )
        return [self._to_domain(row) for row in result.fetchall()]

    async def list_filtered(
        self,
        status: Optional[BookingStatus] = None,
        on_date: Optional[date] = None,
        limit: Optional[int] = None,
    ) -> List[Booking]:
        stmt = select(bookings_tbl).order_by(bookings_tbl.c.created_at.desc())
        if status:
            stmt = stmt.where(bookings_tbl.c.status == status)
        if on_date:
            stmt = stmt.where(bookings_tbl.c.date == on_date)
        if limit:
            stmt = stmt.limit(limit)
        result = await self._session.execute(stmt)
        return [self._to_domain(row) for row in result.fetchall()]

    async def count_active_in_slot(self, on_date: date, time: str) -> int:
        result = await self._session.execute(
            select(func.count()).select_from(bookings_tbl).where(
                bookings_tbl.c.date == on_date,
                bookings_tbl.c.time == time,
                bookings_tbl.c.status != BookingStatus.CANCELLED,
            )
        )
        return result.scalar_one()

    async def create(self, booking: Booking) -> None:
        await self._session.execute(
            insert(bookings_tbl).values(
                id=booking.id,
                user_id=booking.user_id,
                customer_name=booking.customer_name,
                phone_number=booking.phone_number,
                date=booking.date,
                time=booking.time,
                number_of_people=booking.number_of_people,
                status=booking.status,
                created_at=booking.created_at,
                updated_at=booking.updated_at,
            )
        )

    async def update_status(self, booking_id: str, status: BookingStatus) -> None:
        await self._session.execute(
            update(bookings_tbl)
            .where(bookings_tbl.c.id == booking_id)
            .values(status=status, updated_at=_now())
        )

    async def count(self) -> int:
        result = await self._session.execute(select(func.count()).select_from(bookings_tbl))
        return result.scalar_one()

    def _to_domain(self, row) -> Booking:
        return Booking(
            id=row.id,
            user_id=row.user_id,
            customer_name=row.customer_name,
            phone_number=row.phone_number,
            date=row.date,
            time=row.time,
            number_of_people=row.number_of_people,
            status=BookingStatus(row.status),
            created_at=row.created_at,
            updated_at=row.updated_at,
        )


class SQLAlchemyUserRepository(UserRepository):
    def __init__(self, session: AsyncSession):
        self._session = session

    async def get_by_id(self, user_id: str) -> Optional[User]:
        result = await self._session.execute(
            select(users_tbl).where(users_tbl.c.id == user_id)
        )
        row = result.fetchone()
        return self._to_domain(row) if row else None

    async def get_by_email(self, email: str) -> Optional[User]:
        result = await self._session.execute(
            select(users_tbl).where(users_tbl.c.email == email)
        )
        row = result.fetchone()
        return self._to_domain(row) if row else None

    async def list_all(self) -> List[User]:
        result = await self._session.execute(
            select(users_tbl).order_by(users_tbl.c.created_at.desc())
        )
        return [self._to_domain(row) for row in result.fetchall()]

    async def create(self, user: User) -> None:
        await self._session.execute(
            insert(users_tbl).values(
                id=user.id,
                name=user.name,
                email=user.email,
                phone=user.phone,
                role=user.role,
                status=user.status,
                created_at=user.created_at or _now(),
            )
        )

    async def update(self, user: User) -> None:
        await self._session.execute(
            update(users_tbl)
            .where(users_tbl.c.id == user.id)
            .values(
                name=user.name,
                email=user.email,
                phone=user.phone,
                role=user.role,
                status=user.status,
            )
        )

    async def delete(self, user_id: str) -> None:
        await self._session.execute(delete(users_tbl).where(users_tbl.c.id == user_id))

    async def count(self) -> int:
        result = await self._session.execute(select(func.count()).select_from(users_tbl))
        return result.scalar_one()

    def _to_domain(self, row) -> User:
        return User(
            id=row.id,
            name=row.name,
            email=row.email,
            phone=row.phone,
            role=row.role,
            status=row.status,
            created_at=row.created_at,
        )


class SQLAlchemyRestaurantProfileRepository(RestaurantProfileRepository):
    def __init__(self, session: AsyncSession):
        self._session = session

    async def get(self) -> Optional[RestaurantProfile]:
        result = await self._session.execute(select(restaurant_profile_tbl).limit(1))
        row = result.fetchone()
        return RestaurantProfile.model_validate(dict(row._mapping)) if row else None

    async def save(self, profile: RestaurantProfile) -> None:
        values = profile.model_dump(exclude={"id", "updated_at"})
        values["updated_at"] = _now()
        result = await self._session.execute(
            update(restaurant_profile_tbl)
            .where(restaurant_profile_tbl.c.id == profile.id)
            .values(**values)
        )
        if result.rowcount == 0:
            await self._session.execute(
                insert(restaurant_profile_tbl).values(id=profile.id, **values)
            )


class SQLAlchemyOutboxRepository(OutboxRepository):
    def __init__(self, session: AsyncSession):
        self._session = session

    async def create(self, event_type: str, event_data: dict, order_id: str) -> str:
        event_id = str(uuid.uuid4())
        stmt = insert(outbox_events_tbl).values(
            id=event_id,
            event_type=event_type,
            event_data=event_data,
            order_id=order_id,
            status="pending",
            created_at=_now(),
        )
        await self._session.execute(stmt)
        return event_id

    async def get_pending(self, limit: int = 10) -> List[dict]:
        result = await self._session.execute(
            select(outbox_events_tbl)
            .where(outbox_events_tbl.c.status == "pending")
            .order_by(outbox_events_tbl.c.created_at.asc())
            .limit(limit)
        )
        rows = result.fetchall()

        return [
            {
                "id": row.id,
                "event_type": row.event_type,
                "event_data": row.event_data,
                "order_id": row.order_id
            }
            for row in rows
        ]

    async def mark_as_published(self, event_id: str) -> None:
        stmt = (
            update(outbox_events_tbl)
            .where(outbox_events_tbl.c.id == event_id)
            .values(status="published")
        )
        await self._session.execute(stmt)
