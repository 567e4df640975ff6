import logging
from typing import List
from fastapi import APIRouter, Depends, status

from restaurant.presentation.schemas import (
    BookingRequest, BookingResponse, CartQuoteRequest, CartQuoteResponse, CreateOrderRequest,
    ErrorResponse, MenuItemResponse, OrderResponse, RestaurantResponse,
)
from restaurant.presentation.dependencies import to_http_exception, use_case
from restaurant.application.create_order import CreateOrderUseCase, CreateOrderDTO, OrderItemDTO
from restaurant.application.get_order import GetOrderUseCase, ListUserOrdersUseCase
from restaurant.application.quote_cart import QuoteCartUseCase, CartLineDTO
from restaurant.application.menu import GetMenuUseCase
from restaurant.application.bookings import (
    CreateBookingUseCase, CreateBookingDTO, ListUserBookingsUseCase,
)
from restaurant.application.restaurant_profile import GetRestaurantOverviewUseCase
from restaurant.domain.exceptions import DomainException

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post(
    "/orders",
    response_model=OrderResponse,
    responses={
        400: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    },
    status_code=status.HTTP_201_CREATED
)
async def create_order(
    request: CreateOrderRequest,
    create: CreateOrderUseCase = Depends(use_case(CreateOrderUseCase))
):
    """Создать заказ. Суммы пересчитываются и сверяются на сервере."""
    try:
        dto = CreateOrderDTO(
            user_id=request.user_id,
            guest_name=request.guest_name,
            guest_email=request.guest_email,
            guest_phone=request.guest_phone,
            items=[
                OrderItemDTO(menu_item_id=i.menu_item_id, quantity=i.quantity, price=i.price)
                for i in request.items
            ],
            promotion_id=request.promotion_id,
            subtotal=request.subtotal,
            discount=request.discount,
            total=request.total
        )
        order = await create(dto)
        return OrderResponse.from_domain(order)

    except DomainException as e:
        logger.warning(f"Заказ отклонен: {e}")
        raise to_http_exception(e)


@router.get(
    "/orders/user/{user_id}",
    response_model=List[OrderResponse]
)
async def list_user_orders(
    user_id: str,
    list_orders: ListUserOrdersUseCase = Depends(use_case(ListUserOrdersUseCase))
):
    """Заказы пользователя, новые первыми"""
    orders = await list_orders(user_id)
    return [OrderResponse.from_domain(order) for order in orders]


@router.get(
    "/orders/{order_id}",
    response_model=OrderResponse,
    responses={404: {"model": ErrorResponse}}
)
async def get_order(
    order_id: str,
    get: GetOrderUseCase = Depends(use_case(GetOrderUseCase))
):
    """Получить заказ по ID"""
    try:
        order = await get(order_id)
        return OrderResponse.from_domain(order)
    except DomainException as e:
        raise to_http_exception(e)


@router.post(
    "/cart/quote",
    response_model=CartQuoteResponse,
    responses={404: {"model": ErrorResponse}}
)
async def quote_cart(
    request: CartQuoteRequest,
    quote: QuoteCartUseCase = Depends(use_case(QuoteCartUseCase))
):
    """Расчет корзины по ценам меню с лучшей доступной акцией"""
    try:
        cart = await quote([
            CartLineDTO(menu_item_id=line.menu_item_id, quantity=line.quantity)
            for line in request.items
        ])
        return CartQuoteResponse.from_cart(cart)
    except DomainException as e:
        raise to_http_exception(e)


@router.get("/menu", response_model=List[MenuItemResponse])
async def get_menu(get_menu: GetMenuUseCase = Depends(use_case(GetMenuUseCase))):
    items = await get_menu()
    return [MenuItemResponse.from_domain(item) for item in items]


@router.get(
    "/restaurant",
    response_model=RestaurantResponse,
    responses={404: {"model": ErrorResponse}}
)
async def get_restaurant(
    get_overview: GetRestaurantOverviewUseCase = Depends(use_case(GetRestaurantOverviewUseCase))
):
    """Профиль ресторана с меню по категориям и акциями"""
    try:
        overview = await get_overview()
        return RestaurantResponse.from_overview(overview)
    except DomainException as e:
        raise to_http_exception(e)


@router.post(
    "/bookings",
    response_model=BookingResponse,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
    status_code=status.HTTP_201_CREATED
)
async def create_booking(
    request: BookingRequest,
    book: CreateBookingUseCase = Depends(use_case(CreateBookingUseCase))
):
    """Забронировать столик"""
    try:
        booking = await book(CreateBookingDTO(**request.model_dump()))
        return BookingResponse.from_domain(booking)
    except DomainException as e:
        raise to_http_exception(e)


@router.get("/bookings/user/{user_id}", response_model=List[BookingResponse])
async def list_user_bookings(
    user_id: str,
    list_bookings: ListUserBookingsUseCase = Depends(use_case(ListUserBookingsUseCase))
):
    bookings = await list_bookings(user_id)
    return [BookingResponse.from_domain(booking) for booking in bookings]
