"""FastAPI routes: orders, payments and users."""

from fastapi import APIRouter, BackgroundTasks, Depends
from protean.exceptions import ValidationError
from protean.utils.globals import current_domain

from storefront.api.deps import (
    admin_caller,
    current_caller,
    get_checkout,
    get_notifier,
    get_payments,
    get_settings,
    get_token_service,
)
from storefront.api.schemas import (
    IncomeResponse,
    LoginRequest,
    OrderDetailResponse,
    OrderResponse,
    PaymentRequest,
    PlaceOrderRequest,
    RegisterRequest,
    StatusResponse,
    TokenResponse,
    UpdateOrderRequest,
    UserIdResponse,
)
from storefront.config import Settings
from storefront.exceptions import OrderNotFound, PermissionDenied
from storefront.identity.registration import RegisterUser, authenticate
from storefront.identity.tokens import Caller, TokenService
from storefront.identity.user import Role
from storefront.notifications.payment_confirmation import PaymentConfirmationNotifier
from storefront.ordering.checkout import CheckoutService, RequestedLine, ShippingDetails
from storefront.ordering.income import income_report
from storefront.ordering.management import DeleteOrder, UpdateOrder
from storefront.ordering.order import Order
from storefront.ordering.views import order_detail
from storefront.payments.capture import PaymentService
from storefront.utils.ids import is_valid_identifier


def _accessible_order(order_id: str, caller: Caller) -> Order:
    if not is_valid_identifier(order_id):
        raise ValidationError({"orderId": ["Order id is not valid"]})
    order = current_domain.repository_for(Order).find(order_id)
    if order is None:
        raise OrderNotFound()
    if not caller.can_access(order.user_id):
        raise PermissionDenied("Order belongs to another user")
    return order


# ---------------------------------------------------------------------------
# Order Router
# ---------------------------------------------------------------------------
order_router = APIRouter(prefix="/order", tags=["orders"])


@order_router.post("", status_code=201, response_model=OrderResponse)
async def place_order(
    body: PlaceOrderRequest,
    caller: Caller = Depends(current_caller),
    checkout: CheckoutService = Depends(get_checkout),
) -> OrderResponse:
    order = checkout.place_order(
        user_id=caller.user_id,
        shipping=ShippingDetails(
            country=body.country,
            city=body.city,
            address=body.address,
            reference=body.reference,
        ),
        lines=[RequestedLine(product_id=line.product_id, quantity=line.quantity) for line in body.products],
    )
    return OrderResponse.from_order(order)


@order_router.get("", response_model=list[OrderResponse])
async def list_orders(caller: Caller = Depends(admin_caller)) -> list[OrderResponse]:
    orders = current_domain.repository_for(Order).everything()
    return [OrderResponse.from_order(order) for order in orders]


# Fixed paths are declared before /{order_id} so they are not read as ids
@order_router.get("/user", response_model=list[OrderResponse])
async def list_my_orders(caller: Caller = Depends(current_caller)) -> list[OrderResponse]:
    orders = current_domain.repository_for(Order).owned_by(caller.user_id)
    return [OrderResponse.from_order(order) for order in orders]


@order_router.get("/income", response_model=list[IncomeResponse])
async def monthly_income(caller: Caller = Depends(admin_caller)) -> list[IncomeResponse]:
    return [IncomeResponse(year=row.year, month=row.month, total=row.total) for row in income_report()]


@order_router.get("/{order_id}", response_model=OrderDetailResponse)
async def get_order(order_id: str, caller: Caller = Depends(current_caller)) -> OrderDetailResponse:
    order = _accessible_order(order_id, caller)
    return OrderDetailResponse.from_detail(order_detail(order))


@order_router.put("/{order_id}", response_model=OrderResponse)
async def update_order(
    order_id: str,
    body: UpdateOrderRequest,
    caller: Caller = Depends(admin_caller),
) -> OrderResponse:
    if not is_valid_identifier(order_id):
        raise ValidationError({"orderId": ["Order id is not valid"]})

    command = UpdateOrder(order_id=order_id, **body.model_dump(exclude_none=True))
    current_domain.process(command, asynchronous=False)
    return OrderResponse.from_order(current_domain.repository_for(Order).get(order_id))


@order_router.delete("/{order_id}", response_model=StatusResponse)
async def delete_order(order_id: str, caller: Caller = Depends(current_caller)) -> StatusResponse:
    _accessible_order(order_id, caller)
    current_domain.process(DeleteOrder(order_id=order_id), asynchronous=False)
    return StatusResponse(status="deleted")


# ---------------------------------------------------------------------------
# Payment Router
# ---------------------------------------------------------------------------
payment_router = APIRouter(prefix="/payment", tags=["payments"])


# Plain def: the processor round-trip blocks, so FastAPI runs this in its threadpool
@payment_router.post("", response_model=str)
def pay_order(
    body: PaymentRequest,
    background_tasks: BackgroundTasks,
    caller: Caller = Depends(current_caller),
    payments: PaymentService = Depends(get_payments),
    notifier: PaymentConfirmationNotifier = Depends(get_notifier),
    settings: Settings = Depends(get_settings),
) -> str:
    order = payments.capture(caller, body.order_id, body.process_id)
    background_tasks.add_task(notifier.notify, str(order.id))
    return settings.payment_success_message


# ---------------------------------------------------------------------------
# User Router
# ---------------------------------------------------------------------------
user_router = APIRouter(tags=["users"])


# Plain def: bcrypt hashing and checking run in the threadpool
@user_router.post("/users", status_code=201, response_model=UserIdResponse)
def register_user(body: RegisterRequest, settings: Settings = Depends(get_settings)) -> UserIdResponse:
    command = RegisterUser(
        email=body.email,
        password=body.password,
        name=body.name,
        lastname=body.lastname,
        role=Role.REGULAR.value,
        hash_rounds=settings.bcrypt_rounds,
    )
    user_id = current_domain.process(command, asynchronous=False)
    return UserIdResponse(user_id=user_id)


@user_router.post("/auth", response_model=TokenResponse)
def login(body: LoginRequest, tokens: TokenService = Depends(get_token_service)) -> TokenResponse:
    user = authenticate(body.email, body.password)
    return TokenResponse(token=tokens.issue(user))
