"""Product API views.

Exposes the ``ProductService`` via HTTP using DRF ViewSets.
Domain exceptions are caught and translated into appropriate
HTTP status codes — the view never swallows generic exceptions.
"""

from __future__ import annotations

from django_filters.rest_framework import DjangoFilterBackend
from pydantic import ValidationError as PydanticValidationError
from rest_framework import status
from rest_framework.decorators import action
from rest_framework.filters import OrderingFilter, SearchFilter
from rest_framework.mixins import ListModelMixin
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.viewsets import GenericViewSet

from modules.products.dtos import CreateProductDTO, UpdateProductDTO
from modules.products.exceptions import ProductNotFound
from modules.products.filters import ProductFilter
from modules.products.models import Product
from modules.products.repositories.django_repository import ProductDjangoRepository
from modules.products.serializers import (
    CategoryCountSerializer,
    ProductSerializer,
    StockUpdateSerializer,
)
from modules.products.services import DEFAULT_LOW_STOCK_THRESHOLD, ProductService

_NOT_FOUND = {"detail": "Product not found."}


def _validation_error(exc: Exception) -> Response:
    if isinstance(exc, PydanticValidationError):
        detail = "; ".join(err["msg"] for err in exc.errors())
    else:
        detail = str(exc)
    return Response({"detail": detail}, status=status.HTTP_400_BAD_REQUEST)


class ProductViewSet(ListModelMixin, GenericViewSet):
    """ViewSet for Product CRUD operations.

    Uses ``ProductService`` with ``ProductDjangoRepository`` (DIP).
    Does **not** extend ``ModelViewSet`` — all ORM access goes through
    the service/repository layer.
    """

    filterset_class = ProductFilter
    search_fields = ["name", "description", "category"]
    ordering_fields = ["name", "price", "stock_quantity", "created_at"]
    ordering = ["name", "id"]
    filter_backends = [DjangoFilterBackend, SearchFilter, OrderingFilter]
    queryset = Product.objects.all()
    serializer_class = ProductSerializer

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._service = ProductService(repository=ProductDjangoRepository())

    # ------------------------------------------------------------------
    # List / Retrieve
    # ------------------------------------------------------------------

    def get_queryset(self):
        return self._service.list_products()

    def retrieve(self, request: Request, pk: str | None = None) -> Response:
        """GET /api/v1/products/{pk}/"""
        try:
            product = self._service.get_product(pk)
        except ProductNotFound:
            return Response(_NOT_FOUND, status=status.HTTP_404_NOT_FOUND)
        return Response(ProductSerializer(product).data)

    @action(detail=False, methods=["get"], url_path="low-stock")
    def low_stock(self, request: Request) -> Response:
        """GET /api/v1/products/low-stock/?threshold=N"""
        raw = request.query_params.get("threshold", DEFAULT_LOW_STOCK_THRESHOLD)
        try:
            products = self._service.list_low_stock(int(raw))
        except ValueError as exc:
            return _validation_error(exc)
        return Response(ProductSerializer(products, many=True).data)

    @action(detail=False, methods=["get"], url_path="categories")
    def categories(self, request: Request) -> Response:
        """GET /api/v1/products/categories/"""
        stats = self._service.category_statistics()
        return Response(CategoryCountSerializer(stats, many=True).data)

    # ------------------------------------------------------------------
    # Create / Update / Destroy
    # ------------------------------------------------------------------

    def create(self, request: Request) -> Response:
        """POST /api/v1/products/"""
        data = request.data

        try:
            dto = CreateProductDTO(
                name=data.get("name", ""),
                price=data.get("price"),
                description=data.get("description", ""),
                stock_quantity=data.get("stock_quantity", 0),
                category=data.get("category", ""),
                image_url=data.get("image_url", ""),
                status=data.get("status", "active"),
            )
        except (PydanticValidationError, ValueError) as exc:
            return _validation_error(exc)

        product = self._service.create_product(dto)
        return Response(ProductSerializer(product).data, status=status.HTTP_201_CREATED)

    def update(self, request: Request, pk: str | None = None) -> Response:
        """PUT/PATCH /api/v1/products/{pk}/"""
        data = request.data

        try:
            dto = UpdateProductDTO(
                name=data.get("name"),
                price=data.get("price"),
                description=data.get("description"),
                stock_quantity=data.get("stock_quantity"),
                category=data.get("category"),
                image_url=data.get("image_url"),
                status=data.get("status"),
            )
        except (PydanticValidationError, ValueError) as exc:
            return _validation_error(exc)

        try:
            product = self._service.update_product(pk, dto)
        except ProductNotFound:
            return Response(_NOT_FOUND, status=status.HTTP_404_NOT_FOUND)

        return Response(ProductSerializer(product).data)

    def partial_update(self, request: Request, pk: str | None = None) -> Response:
        """PATCH /api/v1/products/{pk}/"""
        return self.update(request, pk)

    @action(detail=True, methods=["patch"], url_path="stock")
    def update_stock(self, request: Request, pk: str | None = None) -> Response:
        """PATCH /api/v1/products/{pk}/stock/

        Sets the absolute stock level: ``{"stock_quantity": N}``.
        """
        serializer = StockUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        dto = UpdateProductDTO(
            stock_quantity=serializer.validated_data["stock_quantity"]
        )

        try:
            product = self._service.update_product(pk, dto)
        except ProductNotFound:
            return Response(_NOT_FOUND, status=status.HTTP_404_NOT_FOUND)

        return Response(ProductSerializer(product).data)

    def destroy(self, request: Request, pk: str | None = None) -> Response:
        """DELETE /api/v1/products/{pk}/"""
        try:
            self._service.delete_product(pk)
        except ProductNotFound:
            return Response(_NOT_FOUND, status=status.HTTP_404_NOT_FOUND)
        return Response(status=status.HTTP_204_NO_CONTENT)
