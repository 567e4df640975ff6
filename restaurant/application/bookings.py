import logging
import uuid
from datetime import date, datetime, timedelta, timezone
from typing import List, Optional
from pydantic import BaseModel

from restaurant.domain.models import Booking, BookingStatus, RestaurantProfile
from restaurant.domain.exceptions import (
    BookingNotFoundError, BookingRuleError, InvalidStatusTransitionError, UserNotFoundError,
)

logger = logging.getLogger(__name__)


class CreateBookingDTO(BaseModel):
    user_id: Optional[str] = None
    customer_name: str
    phone_number: str
    date: date
    time: str
    number_of_people: int


class CreateBookingUseCase:
    """Бронирование столика.

    Лимиты берутся из профиля ресторана: размер стола, горизонт бронирования
    и число броней на один слот (дата + время).
    """

    def __init__(self, unit_of_work, today=date.today):
        self._uow = unit_of_work
        self._today = today

    async def __call__(self, data: CreateBookingDTO) -> Booking:
        logger.info(f"Бронирование на {data.date} {data.time}, гостей: {data.number_of_people}")

        async with self._uow() as uow:
            if data.user_id and not await uow.users.get_by_id(data.user_id):
                raise UserNotFoundError(data.user_id)

            profile = await uow.profile.get() or RestaurantProfile(id="default", name="")
            self._check_rules(data, profile)

            booked = await uow.bookings.count_active_in_slot(data.date, data.time)
            if booked >= profile.max_booking_per_slot:
                raise BookingRuleError(f"На {data.date} {data.time} свободных столиков нет")

            now = datetime.now(timezone.utc)
            booking = Booking(
                id=str(uuid.uuid4()),
                status=BookingStatus.PENDING,
                created_at=now,
                updated_at=now,
                **data.model_dump(),
            )
            await uow.bookings.create(booking)
            await uow.commit()

        logger.info(f"Бронь создана: {booking.id}")
        return booking

    def _check_rules(self, data: CreateBookingDTO, profile: RestaurantProfile) -> None:
        if data.number_of_people > profile.max_table_size:
            raise BookingRuleError(
                f"Максимальное количество гостей за столом: {profile.max_table_size}"
            )
        today = self._today()
        if data.date < today:
            raise BookingRuleError("Нельзя забронировать столик на прошедшую дату")
        if data.date > today + timedelta(days=profile.max_booking_days):
            raise BookingRuleError(
                f"Бронирование доступно не более чем на {profile.max_booking_days} дней вперед"
            )


class ListUserBookingsUseCase:
    def __init__(self, unit_of_work):
        self._uow = unit_of_work

    async def __call__(self, user_id: str) -> List[Booking]:
        async with self._uow() as uow:
            return await uow.bookings.list_by_user(user_id)


class ListBookingsUseCase:
    def __init__(self, unit_of_work):
        self._uow = unit_of_work

    async def __call__(
        self, status: Optional[BookingStatus] = None, on_date: Optional[date] = None
    ) -> List[Booking]:
        async with self._uow() as uow:
            return await uow.bookings.list_filtered(status=status, on_date=on_date)


class UpdateBookingStatusUseCase:
    def __init__(self, unit_of_work):
        self._uow = unit_of_work

    async def __call__(self, booking_id: str, status: BookingStatus) -> Booking:
        async with self._uow() as uow:
            booking = await uow.bookings.get_by_id(booking_id)
            if not booking:
                raise BookingNotFoundError(f"Бронь {booking_id} не найдена")
            if booking.status == status:
                return booking
            if not booking.can_transition_to(status):
                raise InvalidStatusTransitionError(booking.status.value, status.value)

            await uow.bookings.update_status(booking_id, status)
            await uow.commit()
            logger.info(f"Бронь {booking_id}: {booking.status.value} -> {status.value}")
            return await uow.bookings.get_by_id(booking_id)
