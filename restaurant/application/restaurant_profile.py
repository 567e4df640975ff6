import logging
import uuid
from typing import List, Optional
from pydantic import BaseModel

from restaurant.domain.models import Category, MenuItem, Promotion, RestaurantProfile
from restaurant.domain.exceptions import RestaurantProfileNotFoundError

logger = logging.getLogger(__name__)


class CategoryWithItems(BaseModel):
    category: Optional[Category]
    items: List[MenuItem]


class RestaurantOverview(BaseModel):
    """Профиль ресторана вместе с меню по категориям и акциями"""
    profile: RestaurantProfile
    categories: List[CategoryWithItems]
    promotions: List[Promotion]


class GetRestaurantProfileUseCase:
    def __init__(self, unit_of_work):
        self._uow = unit_of_work

    async def __call__(self) -> RestaurantProfile:
        async with self._uow() as uow:
            profile = await uow.profile.get()
            if not profile:
                raise RestaurantProfileNotFoundError("Профиль ресторана не найден")
            return profile


class GetRestaurantOverviewUseCase:
    def __init__(self, unit_of_work):
        self._uow = unit_of_work

    async def __call__(self) -> RestaurantOverview:
        async with self._uow() as uow:
            profile = await uow.profile.get()
            if not profile:
                raise RestaurantProfileNotFoundError("Профиль ресторана не найден")

            categories = await uow.menu.list_categories()
            items = await uow.menu.list_items(only_available=True)
            grouped = [
                CategoryWithItems(
                    category=category,
                    items=[i for i in items if i.category_id == category.id],
                )
                for category in categories
            ]
            uncategorized = [i for i in items if i.category_id is None]
            if uncategorized:
                grouped.append(CategoryWithItems(category=None, items=uncategorized))

            return RestaurantOverview(
                profile=profile,
                categories=grouped,
                promotions=await uow.promotions.list_all(),
            )


class UpdateRestaurantProfileUseCase:
    def __init__(self, unit_of_work):
        self._uow = unit_of_work

    async def __call__(self, changes: dict) -> RestaurantProfile:
        async with self._uow() as uow:
            profile = await uow.profile.get()
            if not profile:
                # Первое сохранение настроек создает запись профиля
                profile = RestaurantProfile(id=str(uuid.uuid4()), name="")
                logger.info(f"Создается профиль ресторана {profile.id}")

            updated = RestaurantProfile.model_validate({**profile.model_dump(), **changes})
            await uow.profile.save(updated)
            await uow.commit()
            logger.info(f"Профиль ресторана обновлен: {sorted(changes)}")
            return await uow.profile.get()
