import logging
import uuid
from decimal import Decimal
from typing import List, Optional
from pydantic import BaseModel

from restaurant.domain.models import Category, MenuItem
from restaurant.domain.exceptions import (
    CategoryNotEmptyError, CategoryNotFoundError, DuplicateNameError, MenuItemInUseError,
    MenuItemNotFoundError,
)

logger = logging.getLogger(__name__)


class MenuItemDTO(BaseModel):
    name: str
    description: str = ""
    price: Decimal
    category_id: Optional[str] = None
    image_url: Optional[str] = None
    is_available: bool = True


class GetMenuUseCase:
    def __init__(self, unit_of_work, only_available: bool = True):
        self._uow = unit_of_work
        self._only_available = only_available

    async def __call__(self) -> List[MenuItem]:
        async with self._uow() as uow:
            return await uow.menu.list_items(only_available=self._only_available)


class CreateMenuItemUseCase:
    def __init__(self, unit_of_work):
        self._uow = unit_of_work

    async def __call__(self, data: MenuItemDTO) -> MenuItem:
        async with self._uow() as uow:
            if data.category_id and not await uow.menu.get_category(data.category_id):
                raise CategoryNotFoundError(data.category_id)

            item = MenuItem(id=str(uuid.uuid4()), **data.model_dump())
            await uow.menu.create_item(item)
            await uow.commit()
            logger.info(f"Добавлена позиция меню {item.id}: {item.name}")
            return await uow.menu.get_item(item.id)


class UpdateMenuItemUseCase:
    def __init__(self, unit_of_work):
        self._uow = unit_of_work

    async def __call__(self, menu_item_id: str, data: MenuItemDTO) -> MenuItem:
        async with self._uow() as uow:
            existing = await uow.menu.get_item(menu_item_id)
            if not existing:
                raise MenuItemNotFoundError(menu_item_id)
            if data.category_id and not await uow.menu.get_category(data.category_id):
                raise CategoryNotFoundError(data.category_id)

            await uow.menu.update_item(existing.model_copy(update=data.model_dump()))
            await uow.commit()
            logger.info(f"Обновлена позиция меню {menu_item_id}")
            return await uow.menu.get_item(menu_item_id)


class DeleteMenuItemUseCase:
    def __init__(self, unit_of_work):
        self._uow = unit_of_work

    async def __call__(self, menu_item_id: str) -> None:
        async with self._uow() as uow:
            if not await uow.menu.get_item(menu_item_id):
                raise MenuItemNotFoundError(menu_item_id)
            # Строки заказов ссылаются на позицию меню
            if await uow.menu.is_item_ordered(menu_item_id):
                raise MenuItemInUseError(menu_item_id)

            await uow.menu.delete_item(menu_item_id)
            await uow.commit()
            logger.info(f"Удалена позиция меню {menu_item_id}")


class ListCategoriesUseCase:
    def __init__(self, unit_of_work):
        self._uow = unit_of_work

    async def __call__(self) -> List[Category]:
        async with self._uow() as uow:
            return await uow.menu.list_categories()


class SaveCategoryUseCase:
    """Создание категории, либо переименование если передан category_id"""

    def __init__(self, unit_of_work):
        self._uow = unit_of_work

    async def __call__(self, name: str, category_id: Optional[str] = None) -> Category:
        async with self._uow() as uow:
            if category_id and not await uow.menu.get_category(category_id):
                raise CategoryNotFoundError(category_id)

            same_name = await uow.menu.get_category_by_name(name)
            if same_name and same_name.id != category_id:
                raise DuplicateNameError(f"Категория {name} уже существует")

            if category_id:
                await uow.menu.rename_category(category_id, name)
                category = Category(id=category_id, name=name)
            else:
                category = Category(id=str(uuid.uuid4()), name=name)
                await uow.menu.create_category(category)
            await uow.commit()
            return category


class DeleteCategoryUseCase:
    def __init__(self, unit_of_work):
        self._uow = unit_of_work

    async def __call__(self, category_id: str) -> None:
        async with self._uow() as uow:
            if not await uow.menu.get_category(category_id):
                raise CategoryNotFoundError(category_id)
            if await uow.menu.count_items_in_category(category_id):
                raise CategoryNotEmptyError(category_id)

            await uow.menu.delete_category(category_id)
            await uow.commit()
