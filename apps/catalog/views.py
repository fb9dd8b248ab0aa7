from rest_framework import viewsets, status
from rest_framework.decorators import action
from rest_framework.parsers import MultiPartParser, FormParser
from rest_framework.response import Response
from rest_framework.pagination import PageNumberPagination
from drf_spectacular.utils import extend_schema, OpenApiParameter

from apps.accounts.permissions import IsAdminStaff
from apps.realtime.services import broadcast
from .models import Product
from .serializers import (
    ProductSerializer,
    ProductCreateSerializer,
    ProductUpdateSerializer,
    ProductFilterSerializer,
    CSVImportSerializer,
    CSVImportResultSerializer,
    AuditTrailEntrySerializer,
)
from .services import (
    create_product,
    update_product,
    delete_product,
    get_product_by_barcode,
    search_products,
    import_products_csv,
    get_product_audit_trail,
    ProductNotFoundError,
    DuplicateProductError,
    ProductInUseError,
    CSVImportError,
)


class ProductPagination(PageNumberPagination):
    """Custom pagination for the catalog."""
    page_size = 20
    page_size_query_param = 'page_size'
    max_page_size = 100


class ProductViewSet(viewsets.ModelViewSet):
    """
    ViewSet for the product catalog.

    list: Search products (name, barcode, AccPac code)
    create: Register a product
    retrieve: Get a product
    partial_update: Edit product details (not stock)
    destroy: Delete a product without history (admin only)
    """

    queryset = Product.objects.all()
    serializer_class = ProductSerializer
    pagination_class = ProductPagination
    lookup_field = 'internal_id'

    def get_permissions(self):
        """Deleting products and bulk imports are admin-only."""
        if self.action in ['destroy', 'import_csv']:
            return [IsAdminStaff()]
        return super().get_permissions()

    def get_queryset(self):
        filter_serializer = ProductFilterSerializer(data=self.request.query_params)
        filter_serializer.is_valid(raise_exception=True)
        params = filter_serializer.validated_data

        return search_products(
            search=params.get('search'),
            low_stock_only=params.get('low_stock', False),
        )

    @extend_schema(parameters=[ProductFilterSerializer])
    def list(self, request, *args, **kwargs):
        return super().list(request, *args, **kwargs)

    @extend_schema(request=ProductCreateSerializer, responses={201: ProductSerializer})
    def create(self, request, *args, **kwargs):
        serializer = ProductCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            product = create_product(**serializer.validated_data)
        except DuplicateProductError as e:
            return Response({'error': str(e)}, status=status.HTTP_409_CONFLICT)

        return Response(ProductSerializer(product).data, status=status.HTTP_201_CREATED)

    @extend_schema(request=ProductUpdateSerializer, responses={200: ProductSerializer})
    def update(self, request, *args, **kwargs):
        serializer = ProductUpdateSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)

        try:
            product = update_product(
                product_id=kwargs['internal_id'],
                data=serializer.validated_data,
            )
        except ProductNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        except DuplicateProductError as e:
            return Response({'error': str(e)}, status=status.HTTP_409_CONFLICT)

        return Response(ProductSerializer(product).data)

    def destroy(self, request, *args, **kwargs):
        try:
            delete_product(product_id=kwargs['internal_id'])
        except ProductNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        except ProductInUseError as e:
            return Response({'error': str(e)}, status=status.HTTP_409_CONFLICT)

        return Response(status=status.HTTP_204_NO_CONTENT)

    @extend_schema(responses={200: AuditTrailEntrySerializer(many=True)})
    @action(detail=True, methods=['get'])
    def history(self, request, internal_id=None):
        """
        Movement history of one product, newest first.

        GET /api/catalog/products/{internal_id}/history/
        """
        try:
            trail = get_product_audit_trail(product_id=internal_id)
        except ProductNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)

        return Response(AuditTrailEntrySerializer(trail, many=True).data)

    @extend_schema(
        parameters=[OpenApiParameter('barcode', str, location=OpenApiParameter.PATH)],
        responses={200: ProductSerializer},
    )
    @action(detail=False, methods=['get'], url_path=r'barcode/(?P<barcode>[^/]+)')
    def by_barcode(self, request, barcode=None):
        """
        Resolve a scanned barcode.

        GET /api/catalog/products/barcode/{barcode}/
        """
        try:
            product = get_product_by_barcode(barcode=barcode)
        except ProductNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)

        return Response(ProductSerializer(product).data)

    @extend_schema(request=CSVImportSerializer, responses={200: CSVImportResultSerializer})
    @action(detail=False, methods=['post'], url_path='import', parser_classes=[MultiPartParser, FormParser])
    def import_csv(self, request):
        """
        Import an AccPac item export.

        POST /api/catalog/products/import/
        """
        serializer = CSVImportSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            result = import_products_csv(file=serializer.validated_data['file'])
        except CSVImportError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

        # bulk_create sends no post_save signals
        broadcast(payload={'source': 'product_import', 'inserted': result['inserted']})
        return Response(CSVImportResultSerializer(result).data)
