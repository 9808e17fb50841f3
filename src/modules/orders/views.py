"""Order API views.

Exposes ``CheckoutService`` and ``OrderService`` via HTTP using DRF
ViewSets.  Domain exceptions are caught and translated into appropriate
HTTP status codes — the view never swallows generic exceptions.
"""

from __future__ import annotations

from django_filters.rest_framework import DjangoFilterBackend
from pydantic import ValidationError as PydanticValidationError
from rest_framework import status
from rest_framework.decorators import action
from rest_framework.filters import OrderingFilter
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.throttling import BaseThrottle
from rest_framework.viewsets import GenericViewSet

from modules.cart.repositories.django_repository import CartDjangoRepository
from modules.cart.views import insufficient_stock_response
from modules.core.exceptions import UserNotFound
from modules.core.repositories.users import UserDjangoRepository
from modules.inventory.exceptions import InsufficientStock
from modules.inventory.services import InventoryLedger
from modules.orders.checkout import CheckoutService
from modules.orders.constants import OrderStatus
from modules.orders.dtos import CreateOrderDTO, CreateOrderItemDTO
from modules.orders.exceptions import EmptyCart, InvalidTransition, OrderNotFound
from modules.orders.filters import OrderFilter
from modules.orders.models import Order
from modules.orders.repositories.django_repository import OrderDjangoRepository
from modules.orders.serializers import (
    CreateOrderSerializer,
    OrderListSerializer,
    OrderSerializer,
    TransitionSerializer,
    UpdateStatusSerializer,
)
from modules.orders.services import OrderService
from modules.products.exceptions import ProductNotFound
from modules.products.repositories.django_repository import ProductDjangoRepository

_NOT_FOUND = {"detail": "Order not found."}


def invalid_transition_response(exc: InvalidTransition) -> Response:
    return Response(
        {
            "detail": str(exc),
            "from_status": exc.from_status,
            "to_status": exc.to_status,
        },
        status=status.HTTP_400_BAD_REQUEST,
    )


class OrderViewSet(GenericViewSet):
    """ViewSet for Order operations.

    Uses ``CheckoutService`` and ``OrderService`` with injected
    repositories (DIP).  Does **not** extend ``ModelViewSet`` — all ORM
    access goes through the service/repository layer.
    """

    queryset = Order.objects.all()
    serializer_class = OrderSerializer
    lookup_value_regex = r"[0-9a-fA-F-]{32,36}"
    filterset_class = OrderFilter
    ordering_fields = ["created_at", "total_amount", "status"]
    ordering = ["-created_at", "-id"]
    filter_backends = [DjangoFilterBackend, OrderingFilter]

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        order_repository = OrderDjangoRepository()
        product_repository = ProductDjangoRepository()
        ledger = InventoryLedger(product_repository=product_repository)
        self._checkout = CheckoutService(
            order_repository=order_repository,
            cart_repository=CartDjangoRepository(),
            product_repository=product_repository,
            user_repository=UserDjangoRepository(),
            inventory_ledger=ledger,
        )
        self._service = OrderService(
            order_repository=order_repository,
            inventory_ledger=ledger,
        )

    def get_throttles(self) -> list[BaseThrottle]:
        """Per-action throttling scopes."""
        throttle_scope: str | None
        if self.action == "create":
            throttle_scope = "order_creation"
        elif self.action in {"list", "retrieve", "by_number", "for_user"}:
            throttle_scope = "order_listing"
        else:
            throttle_scope = None
        self.throttle_scope = throttle_scope
        return super().get_throttles()

    # ------------------------------------------------------------------
    # Create
    # ------------------------------------------------------------------

    def create(self, request: Request) -> Response:
        """POST /api/v1/orders/

        Supports idempotency via the ``Idempotency-Key`` header: replaying
        a key returns the original order with 200, new orders get 201.
        """
        create_serializer = CreateOrderSerializer(data=request.data)
        create_serializer.is_valid(raise_exception=True)

        data = create_serializer.validated_data
        idempotency_key = request.headers.get("Idempotency-Key") or None
        try:
            dto = CreateOrderDTO(
                user_id=data["user_id"],
                items=[
                    CreateOrderItemDTO(
                        product_id=item["product_id"],
                        quantity=item["quantity"],
                    )
                    for item in data["items"]
                ],
                shipping_address=data["shipping_address"],
                remark=data["remark"],
                idempotency_key=idempotency_key,
            )
        except PydanticValidationError as exc:
            return Response(
                {"detail": "; ".join(err["msg"] for err in exc.errors())},
                status=status.HTTP_400_BAD_REQUEST,
            )

        replayed = bool(
            idempotency_key
            and OrderDjangoRepository().get_by_idempotency_key(idempotency_key)
        )
        try:
            order = self._checkout.create_order(dto)
        except (UserNotFound, ProductNotFound) as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_404_NOT_FOUND)
        except EmptyCart as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)
        except InsufficientStock as exc:
            return insufficient_stock_response(exc)

        http_status = status.HTTP_200_OK if replayed else status.HTTP_201_CREATED
        return Response(OrderSerializer(order).data, status=http_status)

    # ------------------------------------------------------------------
    # List / Retrieve
    # ------------------------------------------------------------------

    def get_queryset(self):
        return self._service.list_orders()

    def list(self, request: Request) -> Response:
        """GET /api/v1/orders/

        Filtering (status, user, date range, total range) is handled
        by ``OrderFilter`` via ``filter_backends``.  Ordering is handled
        by ``OrderingFilter``.  Results are paginated.
        """
        queryset = self.filter_queryset(self.get_queryset())
        page = self.paginate_queryset(queryset)
        serializer = OrderListSerializer(page, many=True)
        return self.get_paginated_response(serializer.data)

    def retrieve(self, request: Request, pk: str | None = None) -> Response:
        """GET /api/v1/orders/{pk}/"""
        try:
            order = self._service.get_order(pk)
        except OrderNotFound:
            return Response(_NOT_FOUND, status=status.HTTP_404_NOT_FOUND)
        return Response(OrderSerializer(order).data)

    @action(detail=False, methods=["get"], url_path=r"number/(?P<order_number>[^/.]+)")
    def by_number(self, request: Request, order_number: str | None = None) -> Response:
        """GET /api/v1/orders/number/{order_number}/"""
        try:
            order = self._service.get_order_by_number(order_number)
        except OrderNotFound:
            return Response(_NOT_FOUND, status=status.HTTP_404_NOT_FOUND)
        return Response(OrderSerializer(order).data)

    @action(detail=False, methods=["get"], url_path=r"user/(?P<user_id>\d+)")
    def for_user(self, request: Request, user_id: str | None = None) -> Response:
        """GET /api/v1/orders/user/{user_id}/ (newest first, paginated)"""
        queryset = self._service.list_user_orders(int(user_id))
        page = self.paginate_queryset(queryset)
        serializer = OrderListSerializer(page, many=True)
        return self.get_paginated_response(serializer.data)

    # ------------------------------------------------------------------
    # Status Update
    # ------------------------------------------------------------------

    def partial_update(self, request: Request, pk: str | None = None) -> Response:
        """PATCH /api/v1/orders/{pk}/  ``{"status": ..., "notes": ...}``"""
        serializer = UpdateStatusSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        return self._transition(
            pk,
            serializer.validated_data["status"],
            serializer.validated_data["notes"],
        )

    @action(detail=True, methods=["post"])
    def cancel(self, request: Request, pk: str | None = None) -> Response:
        """POST /api/v1/orders/{pk}/cancel/ (releases reserved stock)"""
        return self._transition_action(request, pk, OrderStatus.CANCELLED)

    @action(detail=True, methods=["post"])
    def pay(self, request: Request, pk: str | None = None) -> Response:
        """POST /api/v1/orders/{pk}/pay/"""
        return self._transition_action(request, pk, OrderStatus.PAID)

    @action(detail=True, methods=["post"])
    def ship(self, request: Request, pk: str | None = None) -> Response:
        """POST /api/v1/orders/{pk}/ship/"""
        return self._transition_action(request, pk, OrderStatus.SHIPPED)

    @action(detail=True, methods=["post"])
    def deliver(self, request: Request, pk: str | None = None) -> Response:
        """POST /api/v1/orders/{pk}/deliver/"""
        return self._transition_action(request, pk, OrderStatus.DELIVERED)

    def _transition_action(self, request: Request, pk: str, new_status: str) -> Response:
        serializer = TransitionSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        notes = serializer.validated_data["notes"]
        if new_status == OrderStatus.CANCELLED:
            notes = notes or "Order cancelled"
        return self._transition(pk, new_status, notes)

    def _transition(self, pk: str, new_status: str, notes: str) -> Response:
        try:
            order = self._service.update_status(
                order_id=pk,
                new_status=new_status,
                notes=notes,
            )
        except OrderNotFound:
            return Response(_NOT_FOUND, status=status.HTTP_404_NOT_FOUND)
        except InvalidTransition as exc:
            return invalid_transition_response(exc)

        return Response(OrderSerializer(order).data)
