from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from rest_framework import status
from drf_spectacular.utils import extend_schema, OpenApiParameter
from drf_spectacular.types import OpenApiTypes

from apps.accounts.permissions import IsActiveStaff
from .analytics import AnalyticsQueries
from .serializers import (
    # Input serializers
    DateRangeQuerySerializer,
    LowStockQuerySerializer,
    # Response serializers
    PeriodStatsSerializer,
    InventorySummarySerializer,
    StockOverviewSerializer,
    LowStockProductSerializer,
    ErrorSerializer,
)
from .exceptions import AnalyticsServiceError

DATE_RANGE_PARAMETERS = [
    OpenApiParameter('start_date', OpenApiTypes.DATE, description='Start date (YYYY-MM-DD)'),
    OpenApiParameter('end_date', OpenApiTypes.DATE, description='End date (YYYY-MM-DD)'),
]


@extend_schema(
    parameters=DATE_RANGE_PARAMETERS,
    responses={
        200: PeriodStatsSerializer,
        400: ErrorSerializer,
    },
    description="Inflow, outflow, COGS and sales revenue for a date range.",
    tags=['analytics'],
)
@api_view(['GET'])
@permission_classes([IsActiveStaff])
def period_stats(request):
    """Movement totals for a date range - thin HTTP handler."""
    query_serializer = DateRangeQuerySerializer(data=request.query_params)
    query_serializer.is_valid(raise_exception=True)
    params = query_serializer.validated_data

    try:
        data = AnalyticsQueries.get_period_stats(
            start_date=params.get('start_date'),
            end_date=params.get('end_date'),
        )
    except AnalyticsServiceError as e:
        return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

    return Response(PeriodStatsSerializer(data).data)


@extend_schema(
    parameters=DATE_RANGE_PARAMETERS,
    responses={
        200: InventorySummarySerializer,
        400: ErrorSerializer,
    },
    description="Beginning, inflow, outflow and ending inventory. Defaults to this month.",
    tags=['analytics'],
)
@api_view(['GET'])
@permission_classes([IsActiveStaff])
def inventory_summary(request):
    """Inventory summary - thin HTTP handler."""
    query_serializer = DateRangeQuerySerializer(data=request.query_params)
    query_serializer.is_valid(raise_exception=True)
    params = query_serializer.validated_data

    try:
        data = AnalyticsQueries.get_inventory_summary(
            start_date=params.get('start_date'),
            end_date=params.get('end_date'),
        )
    except AnalyticsServiceError as e:
        return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

    return Response(InventorySummarySerializer(data).data)


@extend_schema(
    responses={200: StockOverviewSerializer},
    description="Units on hand, their value and the number of low stock alerts.",
    tags=['analytics'],
)
@api_view(['GET'])
@permission_classes([IsActiveStaff])
def stock_overview(request):
    data = AnalyticsQueries.get_stock_overview()
    return Response(StockOverviewSerializer(data).data)


@extend_schema(
    parameters=[
        OpenApiParameter('limit', OpenApiTypes.INT, description='Number of results (1-100)'),
    ],
    responses={200: LowStockProductSerializer(many=True)},
    description="Products at or below their minimum stock level.",
    tags=['analytics'],
)
@api_view(['GET'])
@permission_classes([IsActiveStaff])
def low_stock(request):
    query_serializer = LowStockQuerySerializer(data=request.query_params)
    query_serializer.is_valid(raise_exception=True)

    data = AnalyticsQueries.low_stock_products(limit=query_serializer.validated_data['limit'])
    return Response(LowStockProductSerializer(data, many=True).data)
