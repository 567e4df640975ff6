from decimal import Decimal
from typing import List


class DomainException(Exception):
    pass


# 404
class NotFoundError(DomainException):
    pass


class MenuItemNotFoundError(NotFoundError):
    def __init__(self, menu_item_id: str):
        self.menu_item_id = menu_item_id
        super().__init__(f"Позиция меню {menu_item_id} не найдена")


class CategoryNotFoundError(NotFoundError):
    def __init__(self, category_id: str):
        self.category_id = category_id
        super().__init__(f"Категория {category_id} не найдена")


class PromotionNotFoundError(NotFoundError):
    def __init__(self, promotion_id: str):
        self.promotion_id = promotion_id
        super().__init__(f"Акция {promotion_id} не найдена")


class UserNotFoundError(NotFoundError):
    def __init__(self, user_id: str):
        self.user_id = user_id
        super().__init__(f"Пользователь {user_id} не найден")


class OrderNotFoundError(NotFoundError):
    pass


class BookingNotFoundError(NotFoundError):
    pass


class RestaurantProfileNotFoundError(NotFoundError):
    pass


# 400
class DomainViolationError(DomainException):
    pass


class EmptyOrderError(DomainViolationError):
    def __init__(self):
        super().__init__("Заказ должен содержать хотя бы одну позицию")


class MissingCustomerError(DomainViolationError):
    def __init__(self):
        super().__init__("Укажите userId или guestName, guestEmail и guestPhone")


class MinimumOrderNotMetError(DomainViolationError):
    def __init__(self, minimum_order: Decimal, subtotal: Decimal):
        self.minimum_order = minimum_order
        self.subtotal = subtotal
        super().__init__(
            f"Минимальная сумма заказа для акции: {minimum_order}, сумма заказа: {subtotal}"
        )


class TotalsMismatchError(DomainViolationError):
    """Присланная сумма расходится с пересчитанной больше допуска"""

    def __init__(self, field: str, submitted: Decimal, expected: Decimal):
        self.field = field
        self.submitted = submitted
        self.expected = expected
        super().__init__(
            f"Неверный расчет {field}: получено {submitted}, ожидается {expected}"
        )


class InvalidStatusTransitionError(DomainViolationError):
    def __init__(self, current: str, requested: str):
        self.current = current
        self.requested = requested
        super().__init__(f"Нельзя перевести статус из {current} в {requested}")


class BookingRuleError(DomainViolationError):
    pass


# 409
class ConflictError(DomainException):
    pass


class PromotionInUseError(ConflictError):
    def __init__(self, promotion_ids: List[str]):
        self.promotion_ids = promotion_ids
        super().__init__(
            f"Акции используются в заказах и не могут быть удалены: {', '.join(promotion_ids)}"
        )


class MenuItemInUseError(ConflictError):
    def __init__(self, menu_item_id: str):
        self.menu_item_id = menu_item_id
        super().__init__(f"Позиция меню {menu_item_id} используется в заказах")


class CategoryNotEmptyError(ConflictError):
    def __init__(self, category_id: str):
        self.category_id = category_id
        super().__init__(f"Категория {category_id} содержит позиции меню")


class DuplicateNameError(ConflictError):
    pass


class EmailAlreadyExistsError(ConflictError):
    def __init__(self, email: str):
        self.email = email
        super().__init__(f"Email {email} уже зарегистрирован")


# 500
class PersistenceError(DomainException):
    pass
