"""Cart API views.

Exposes ``CartService`` under ``/api/v1/cart/{user_id}/``.  Domain
exceptions are translated into HTTP status codes here.
"""

from __future__ import annotations

from rest_framework import status
from rest_framework.decorators import action
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.viewsets import GenericViewSet

from modules.cart.exceptions import CartLineNotFound
from modules.cart.repositories.django_repository import CartDjangoRepository
from modules.cart.serializers import (
    AddCartItemSerializer,
    CartLineSerializer,
    SetCartQuantitySerializer,
    serialize_cart,
)
from modules.cart.services import CartService
from modules.core.exceptions import UserNotFound
from modules.core.repositories.users import UserDjangoRepository
from modules.inventory.exceptions import InsufficientStock
from modules.products.exceptions import ProductNotFound
from modules.products.repositories.django_repository import ProductDjangoRepository


def insufficient_stock_response(exc: InsufficientStock) -> Response:
    return Response(
        {
            "detail": str(exc),
            "product_id": str(exc.product_id),
            "requested": exc.requested,
            "available": exc.available,
        },
        status=status.HTTP_409_CONFLICT,
    )


class CartViewSet(GenericViewSet):
    """ViewSet for a single user's cart.

    The lookup value is the owning user's id; there is no cart listing.
    """

    lookup_field = "user_id"
    lookup_value_regex = r"\d+"
    serializer_class = CartLineSerializer

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._service = CartService(
            cart_repository=CartDjangoRepository(),
            product_repository=ProductDjangoRepository(),
            user_repository=UserDjangoRepository(),
        )

    def get_queryset(self):
        return CartDjangoRepository().list()

    def _cart_response(self, user_id: int, http_status=status.HTTP_200_OK) -> Response:
        lines = self._service.get_cart(user_id)
        return Response(serialize_cart(user_id, lines), status=http_status)

    # ------------------------------------------------------------------
    # Cart
    # ------------------------------------------------------------------

    def retrieve(self, request: Request, user_id: str | None = None) -> Response:
        """GET /api/v1/cart/{user_id}/"""
        try:
            return self._cart_response(int(user_id))
        except UserNotFound as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_404_NOT_FOUND)

    def destroy(self, request: Request, user_id: str | None = None) -> Response:
        """DELETE /api/v1/cart/{user_id}/"""
        try:
            removed = self._service.clear_cart(int(user_id))
        except UserNotFound as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_404_NOT_FOUND)
        return Response({"removed": removed})

    # ------------------------------------------------------------------
    # Lines
    # ------------------------------------------------------------------

    @action(detail=True, methods=["post"], url_path="items")
    def add_item(self, request: Request, user_id: str | None = None) -> Response:
        """POST /api/v1/cart/{user_id}/items/"""
        serializer = AddCartItemSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        try:
            self._service.add_item(int(user_id), data["product_id"], data["quantity"])
        except (UserNotFound, ProductNotFound) as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_404_NOT_FOUND)
        except InsufficientStock as exc:
            return insufficient_stock_response(exc)

        return self._cart_response(int(user_id), status.HTTP_201_CREATED)

    @action(
        detail=True,
        methods=["put", "delete"],
        url_path=r"items/(?P<product_id>[0-9a-fA-F-]+)",
    )
    def item(
        self,
        request: Request,
        user_id: str | None = None,
        product_id: str | None = None,
    ) -> Response:
        """PUT/DELETE /api/v1/cart/{user_id}/items/{product_id}/"""
        try:
            if request.method == "DELETE":
                self._service.remove_item(int(user_id), product_id)
                return Response(status=status.HTTP_204_NO_CONTENT)

            serializer = SetCartQuantitySerializer(data=request.data)
            serializer.is_valid(raise_exception=True)
            self._service.set_quantity(
                int(user_id), product_id, serializer.validated_data["quantity"]
            )
        except (UserNotFound, ProductNotFound, CartLineNotFound) as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_404_NOT_FOUND)
        except InsufficientStock as exc:
            return insufficient_stock_response(exc)

        return self._cart_response(int(user_id))
