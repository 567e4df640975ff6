import logging
import uuid
from decimal import Decimal
from typing import List
from pydantic import BaseModel

from restaurant.domain.models import Promotion
from restaurant.domain.exceptions import PromotionInUseError, PromotionNotFoundError

logger = logging.getLogger(__name__)


class PromotionDTO(BaseModel):
    description: str
    discount_percentage: Decimal
    minimum_order: Decimal
    is_auto_applied: bool = False


class ListPromotionsUseCase:
    def __init__(self, unit_of_work):
        self._uow = unit_of_work

    async def __call__(self) -> List[Promotion]:
        async with self._uow() as uow:
            return await uow.promotions.list_all()


class GetPromotionUseCase:
    def __init__(self, unit_of_work):
        self._uow = unit_of_work

    async def __call__(self, promotion_id: str) -> Promotion:
        async with self._uow() as uow:
            promotion = await uow.promotions.get_by_id(promotion_id)
            if not promotion:
                raise PromotionNotFoundError(promotion_id)
            return promotion


class CreatePromotionUseCase:
    def __init__(self, unit_of_work):
        self._uow = unit_of_work

    async def __call__(self, data: PromotionDTO) -> Promotion:
        promotion = Promotion(id=str(uuid.uuid4()), **data.model_dump())
        async with self._uow() as uow:
            await uow.promotions.create(promotion)
            await uow.commit()
            logger.info(f"Создана акция {promotion.id}: {promotion.description}")
            return await uow.promotions.get_by_id(promotion.id)


class UpdatePromotionUseCase:
    def __init__(self, unit_of_work):
        self._uow = unit_of_work

    async def __call__(self, promotion_id: str, data: PromotionDTO) -> Promotion:
        async with self._uow() as uow:
            existing = await uow.promotions.get_by_id(promotion_id)
            if not existing:
                raise PromotionNotFoundError(promotion_id)

            await uow.promotions.update(existing.model_copy(update=data.model_dump()))
            await uow.commit()
            return await uow.promotions.get_by_id(promotion_id)


class DeletePromotionsUseCase:
    """Удаление одной или нескольких акций.

    Акции, на которые ссылаются заказы, не удаляются: запрос отклоняется целиком.
    """

    def __init__(self, unit_of_work):
        self._uow = unit_of_work

    async def __call__(self, promotion_ids: List[str]) -> None:
        async with self._uow() as uow:
            used = await uow.promotions.get_used_ids(promotion_ids)
            if used:
                raise PromotionInUseError(used)

            if len(promotion_ids) == 1 and not await uow.promotions.get_by_id(promotion_ids[0]):
                raise PromotionNotFoundError(promotion_ids[0])

            await uow.promotions.delete_many(promotion_ids)
            await uow.commit()
            logger.info(f"Удалены акции: {promotion_ids}")
