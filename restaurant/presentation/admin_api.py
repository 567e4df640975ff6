from datetime import date, datetime
from typing import List, Optional
from fastapi import APIRouter, Depends, Query, Response, status

from restaurant.presentation.schemas import (
    BookingResponse, BookingStatusUpdateRequest, CategoryRequest, CategoryResponse,
    DashboardResponse, DeletePromotionsRequest, ErrorResponse, MenuItemRequest, MenuItemResponse,
    OrderResponse, OrderStatusUpdateRequest, PromotionRequest, PromotionResponse,
    RestaurantProfileResponse, RestaurantProfileUpdateRequest, UserRequest, UserResponse,
)
from restaurant.presentation.dependencies import require_admin, to_http_exception, use_case
from restaurant.application.dashboard import GetDashboardUseCase
from restaurant.application.manage_orders import ListOrdersUseCase, UpdateOrderStatusUseCase
from restaurant.application.menu import (
    CreateMenuItemUseCase, DeleteCategoryUseCase, DeleteMenuItemUseCase, GetMenuUseCase,
    ListCategoriesUseCase, MenuItemDTO, SaveCategoryUseCase, UpdateMenuItemUseCase,
)
from restaurant.application.promotions import (
    CreatePromotionUseCase, DeletePromotionsUseCase, GetPromotionUseCase, ListPromotionsUseCase,
    PromotionDTO, UpdatePromotionUseCase,
)
from restaurant.application.bookings import ListBookingsUseCase, UpdateBookingStatusUseCase
from restaurant.application.users import (
    CreateUserUseCase, DeleteUserUseCase, GetUserUseCase, ListUsersUseCase, UpdateUserUseCase,
    UserDTO,
)
from restaurant.application.restaurant_profile import (
    GetRestaurantProfileUseCase, UpdateRestaurantProfileUseCase,
)
from restaurant.domain.exceptions import DomainException
from restaurant.domain.models import BookingStatus, OrderStatus

router = APIRouter(dependencies=[Depends(require_admin)])

ERRORS = {
    400: {"model": ErrorResponse},
    401: {"model": ErrorResponse},
    404: {"model": ErrorResponse},
    409: {"model": ErrorResponse},
}


def _menu_admin_use_case(uow):
    return GetMenuUseCase(uow, only_available=False)


# Dashboard

@router.get("/dashboard", response_model=DashboardResponse)
async def dashboard(get_stats: GetDashboardUseCase = Depends(use_case(GetDashboardUseCase))):
    return DashboardResponse.from_stats(await get_stats())


# Menu

@router.get("/menu", response_model=List[MenuItemResponse])
async def list_menu_items(get_menu: GetMenuUseCase = Depends(use_case(_menu_admin_use_case))):
    """Все позиции меню, включая недоступные"""
    return [MenuItemResponse.from_domain(item) for item in await get_menu()]


@router.post(
    "/menu", response_model=MenuItemResponse, responses=ERRORS, status_code=status.HTTP_201_CREATED
)
async def create_menu_item(
    request: MenuItemRequest,
    create: CreateMenuItemUseCase = Depends(use_case(CreateMenuItemUseCase))
):
    try:
        item = await create(MenuItemDTO(**request.model_dump()))
        return MenuItemResponse.from_domain(item)
    except DomainException as e:
        raise to_http_exception(e)


@router.put("/menu/{menu_item_id}", response_model=MenuItemResponse, responses=ERRORS)
async def update_menu_item(
    menu_item_id: str,
    request: MenuItemRequest,
    update: UpdateMenuItemUseCase = Depends(use_case(UpdateMenuItemUseCase))
):
    try:
        item = await update(menu_item_id, MenuItemDTO(**request.model_dump()))
        return MenuItemResponse.from_domain(item)
    except DomainException as e:
        raise to_http_exception(e)


@router.delete("/menu/{menu_item_id}", responses=ERRORS)
async def delete_menu_item(
    menu_item_id: str,
    delete: DeleteMenuItemUseCase = Depends(use_case(DeleteMenuItemUseCase))
):
    try:
        await delete(menu_item_id)
        return {"success": True}
    except DomainException as e:
        raise to_http_exception(e)


@router.get("/menu/categories", response_model=List[CategoryResponse])
async def list_categories(
    list_all: ListCategoriesUseCase = Depends(use_case(ListCategoriesUseCase))
):
    return [CategoryResponse(**c.model_dump()) for c in await list_all()]


@router.post(
    "/menu/categories",
    response_model=CategoryResponse,
    responses=ERRORS,
    status_code=status.HTTP_201_CREATED
)
async def create_category(
    request: CategoryRequest,
    save: SaveCategoryUseCase = Depends(use_case(SaveCategoryUseCase))
):
    try:
        category = await save(request.name)
        return CategoryResponse(**category.model_dump())
    except DomainException as e:
        raise to_http_exception(e)


@router.put("/menu/categories/{category_id}", response_model=CategoryResponse, responses=ERRORS)
async def rename_category(
    category_id: str,
    request: CategoryRequest,
    save: SaveCategoryUseCase = Depends(use_case(SaveCategoryUseCase))
):
    try:
        category = await save(request.name, category_id=category_id)
        return CategoryResponse(**category.model_dump())
    except DomainException as e:
        raise to_http_exception(e)


@router.delete("/menu/categories/{category_id}", responses=ERRORS)
async def delete_category(
    category_id: str,
    delete: DeleteCategoryUseCase = Depends(use_case(DeleteCategoryUseCase))
):
    try:
        await delete(category_id)
        return {"success": True}
    except DomainException as e:
        raise to_http_exception(e)


# Orders

@router.get("/orders", response_model=List[OrderResponse])
async def list_orders(
    status_filter: Optional[OrderStatus] = Query(default=None, alias="status"),
    start_date: Optional[datetime] = Query(default=None, alias="startDate"),
    end_date: Optional[datetime] = Query(default=None, alias="endDate"),
    list_filtered: ListOrdersUseCase = Depends(use_case(ListOrdersUseCase))
):
    """Заказы с фильтрами по статусу и периоду, новые первыми"""
    orders = await list_filtered(status=status_filter, start=start_date, end=end_date)
    return [OrderResponse.from_domain(order) for order in orders]


@router.patch("/orders/{order_id}", response_model=OrderResponse, responses=ERRORS)
async def update_order_status(
    order_id: str,
    request: OrderStatusUpdateRequest,
    update: UpdateOrderStatusUseCase = Depends(use_case(UpdateOrderStatusUseCase))
):
    try:
        order = await update(order_id, request.status)
        return OrderResponse.from_domain(order)
    except DomainException as e:
        raise to_http_exception(e)


# Bookings

@router.get("/bookings", response_model=List[BookingResponse])
async def list_bookings(
    status_filter: Optional[BookingStatus] = Query(default=None, alias="status"),
    on_date: Optional[date] = Query(default=None, alias="date"),
    list_filtered: ListBookingsUseCase = Depends(use_case(ListBookingsUseCase))
):
    bookings = await list_filtered(status=status_filter, on_date=on_date)
    return [BookingResponse.from_domain(booking) for booking in bookings]


@router.patch("/bookings/{booking_id}", response_model=BookingResponse, responses=ERRORS)
async def update_booking_status(
    booking_id: str,
    request: BookingStatusUpdateRequest,
    update: UpdateBookingStatusUseCase = Depends(use_case(UpdateBookingStatusUseCase))
):
    try:
        booking = await update(booking_id, request.status)
        return BookingResponse.from_domain(booking)
    except DomainException as e:
        raise to_http_exception(e)


# Promotions

@router.get("/promotions", response_model=List[PromotionResponse])
async def list_promotions(
    list_all: ListPromotionsUseCase = Depends(use_case(ListPromotionsUseCase))
):
    return [PromotionResponse.from_domain(p) for p in await list_all()]


@router.post(
    "/promotions",
    response_model=PromotionResponse,
    responses=ERRORS,
    status_code=status.HTTP_201_CREATED
)
async def create_promotion(
    request: PromotionRequest,
    create: CreatePromotionUseCase = Depends(use_case(CreatePromotionUseCase))
):
    try:
        promotion = await create(PromotionDTO(**request.model_dump()))
        return PromotionResponse.from_domain(promotion)
    except DomainException as e:
        raise to_http_exception(e)


@router.delete("/promotions", responses=ERRORS)
async def delete_promotions(
    request: DeletePromotionsRequest,
    delete: DeletePromotionsUseCase = Depends(use_case(DeletePromotionsUseCase))
):
    """Массовое удаление акций"""
    try:
        await delete(request.ids)
        return {"success": True}
    except DomainException as e:
        raise to_http_exception(e)


@router.get("/promotions/{promotion_id}", response_model=PromotionResponse, responses=ERRORS)
async def get_promotion(
    promotion_id: str,
    get: GetPromotionUseCase = Depends(use_case(GetPromotionUseCase))
):
    try:
        return PromotionResponse.from_domain(await get(promotion_id))
    except DomainException as e:
        raise to_http_exception(e)


@router.put("/promotions/{promotion_id}", response_model=PromotionResponse, responses=ERRORS)
async def update_promotion(
    promotion_id: str,
    request: PromotionRequest,
    update: UpdatePromotionUseCase = Depends(use_case(UpdatePromotionUseCase))
):
    try:
        promotion = await update(promotion_id, PromotionDTO(**request.model_dump()))
        return PromotionResponse.from_domain(promotion)
    except DomainException as e:
        raise to_http_exception(e)


@router.delete("/promotions/{promotion_id}", responses=ERRORS)
async def delete_promotion(
    promotion_id: str,
    delete: DeletePromotionsUseCase = Depends(use_case(DeletePromotionsUseCase))
):
    try:
        await delete([promotion_id])
        return {"success": True}
    except DomainException as e:
        raise to_http_exception(e)


# Users

@router.get("/users", response_model=List[UserResponse])
async def list_users(list_all: ListUsersUseCase = Depends(use_case(ListUsersUseCase))):
    return [UserResponse.from_domain(user) for user in await list_all()]


@router.post(
    "/users", response_model=UserResponse, responses=ERRORS, status_code=status.HTTP_201_CREATED
)
async def create_user(
    request: UserRequest,
    create: CreateUserUseCase = Depends(use_case(CreateUserUseCase))
):
    try:
        return UserResponse.from_domain(await create(UserDTO(**request.model_dump())))
    except DomainException as e:
        raise to_http_exception(e)


@router.get("/users/{user_id}", response_model=UserResponse, responses=ERRORS)
async def get_user(user_id: str, get: GetUserUseCase = Depends(use_case(GetUserUseCase))):
    try:
        return UserResponse.from_domain(await get(user_id))
    except DomainException as e:
        raise to_http_exception(e)


@router.put("/users/{user_id}", response_model=UserResponse, responses=ERRORS)
async def update_user(
    user_id: str,
    request: UserRequest,
    update: UpdateUserUseCase = Depends(use_case(UpdateUserUseCase))
):
    try:
        return UserResponse.from_domain(await update(user_id, UserDTO(**request.model_dump())))
    except DomainException as e:
        raise to_http_exception(e)


@router.delete("/users/{user_id}", responses=ERRORS)
async def delete_user(
    user_id: str,
    delete: DeleteUserUseCase = Depends(use_case(DeleteUserUseCase))
):
    try:
        await delete(user_id)
        return Response(status_code=status.HTTP_204_NO_CONTENT)
    except DomainException as e:
        raise to_http_exception(e)


# Restaurant profile

@router.get("/restaurant-profile", response_model=RestaurantProfileResponse, responses=ERRORS)
async def get_restaurant_profile(
    get: GetRestaurantProfileUseCase = Depends(use_case(GetRestaurantProfileUseCase))
):
    try:
        return RestaurantProfileResponse.from_domain(await get())
    except DomainException as e:
        raise to_http_exception(e)


@router.put("/restaurant-profile", response_model=RestaurantProfileResponse, responses=ERRORS)
async def update_restaurant_profile(
    request: RestaurantProfileUpdateRequest,
    update: UpdateRestaurantProfileUseCase = Depends(use_case(UpdateRestaurantProfileUseCase))
):
    """Обновляются только переданные поля"""
    try:
        profile = await update(request.model_dump(exclude_unset=True))
        return RestaurantProfileResponse.from_domain(profile)
    except DomainException as e:
        raise to_http_exception(e)
