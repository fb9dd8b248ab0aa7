from rest_framework import viewsets, status
from rest_framework.decorators import action
from rest_framework.response import Response
from rest_framework.pagination import PageNumberPagination
from drf_spectacular.utils import extend_schema, OpenApiParameter

from apps.realtime.services import broadcast

from .permissions import CanVoidReceipt
from .serializers import (
    TransactionSerializer,
    BatchInputSerializer,
    VoidInputSerializer,
    LedgerFilterSerializer,
    HistoryFilterSerializer,
    ReceiptSerializer,
    LedgerPageSerializer,
    TodayHistorySerializer,
    ReceiptLookupSerializer,
)
from .services import (
    ledger_queryset,
    get_ledger_page,
    get_today_history,
    get_receipt,
    process_inventory_batch,
    void_transaction_by_ref,
    InvalidBatchError,
    ProductNotFoundError,
    InsufficientStockError,
    DuplicateReferenceError,
    ReceiptNotFoundError,
    AlreadyVoidedError,
    InvalidVoidRequestError,
    InvalidCursorError,
)


class TransactionPagination(PageNumberPagination):
    """Custom pagination for raw transaction rows."""
    page_size = 20
    page_size_query_param = 'page_size'
    max_page_size = 100


class TransactionViewSet(viewsets.ReadOnlyModelViewSet):
    """
    ViewSet for inventory transactions.

    list: Raw ledger rows (period/type/mode/search filters)
    retrieve: One row
    batch: Record a receipt
    void: Reverse a receipt (admin only)
    ledger: Row-paginated ledger reconstructed into receipts
    today: Today's history with "load older" cursor
    receipt: Printable receipt lookup by reference number
    """

    serializer_class = TransactionSerializer
    pagination_class = TransactionPagination

    def get_permissions(self):
        if self.action == 'void':
            return [CanVoidReceipt()]
        return super().get_permissions()

    def get_queryset(self):
        if self.action != 'list':
            return ledger_queryset(period='ALL')

        filter_serializer = LedgerFilterSerializer(data=self.request.query_params)
        filter_serializer.is_valid(raise_exception=True)
        params = filter_serializer.validated_data

        return ledger_queryset(
            period=params['period'],
            type=params['type'],
            mode=params['mode'],
            search=params['search'],
        )

    @extend_schema(parameters=[LedgerFilterSerializer])
    def list(self, request, *args, **kwargs):
        return super().list(request, *args, **kwargs)

    @extend_schema(request=BatchInputSerializer, responses={201: ReceiptSerializer})
    @action(detail=False, methods=['post'])
    def batch(self, request):
        """
        Record one receipt and move stock.

        POST /api/transactions/batch/
        Body: {"header": {...}, "items": [{"barcode": "...", "qty": 1}]}
        """
        serializer = BatchInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            receipt = process_inventory_batch(
                header=serializer.validated_data['header'],
                items=serializer.validated_data['items'],
                user=request.user,
            )
        except InvalidBatchError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)
        except ProductNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        except (InsufficientStockError, DuplicateReferenceError) as e:
            return Response({'error': str(e)}, status=status.HTTP_409_CONFLICT)

        return Response(ReceiptSerializer(receipt).data, status=status.HTTP_201_CREATED)

    @extend_schema(request=VoidInputSerializer, responses={200: ReceiptSerializer})
    @action(detail=False, methods=['post'])
    def void(self, request):
        """
        Void a receipt by reference number.

        POST /api/transactions/void/
        Body: {"reference_number": "REF-...", "reason": "..."}
        """
        serializer = VoidInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            receipt = void_transaction_by_ref(
                reference_number=serializer.validated_data['reference_number'],
                reason=serializer.validated_data['reason'],
                user=request.user,
            )
        except InvalidVoidRequestError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)
        except ReceiptNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        except (AlreadyVoidedError, InsufficientStockError) as e:
            return Response({'error': str(e)}, status=status.HTTP_409_CONFLICT)

        # Voided lines are flagged with a queryset update, which sends no signals
        broadcast(payload={'source': 'void', 'reference_number': receipt['reference_number']})
        return Response(ReceiptSerializer(receipt).data)

    @extend_schema(parameters=[LedgerFilterSerializer], responses={200: LedgerPageSerializer})
    @action(detail=False, methods=['get'])
    def ledger(self, request):
        """
        Ledger page grouped into receipts.

        GET /api/transactions/ledger/?period=7DAYS&type=ALL&mode=ALL&search=&page=1&seq=3

        The seq value is echoed back so clients can drop responses that
        arrive after a newer request.
        """
        filter_serializer = LedgerFilterSerializer(data=request.query_params)
        filter_serializer.is_valid(raise_exception=True)
        params = filter_serializer.validated_data

        data = get_ledger_page(
            period=params['period'],
            type=params['type'],
            mode=params['mode'],
            search=params['search'],
            page=params['page'],
            page_size=params.get('page_size'),
        )
        data['seq'] = params.get('seq')
        return Response(LedgerPageSerializer(data).data)

    @extend_schema(parameters=[HistoryFilterSerializer], responses={200: TodayHistorySerializer})
    @action(detail=False, methods=['get'])
    def today(self, request):
        """
        Today's movements, newest first.

        GET /api/transactions/today/?limit=10&cursor=...
        """
        filter_serializer = HistoryFilterSerializer(data=request.query_params)
        filter_serializer.is_valid(raise_exception=True)
        params = filter_serializer.validated_data

        try:
            data = get_today_history(cursor=params['cursor'] or None, limit=params['limit'])
        except InvalidCursorError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

        return Response(TodayHistorySerializer(data).data)

    @extend_schema(
        parameters=[OpenApiParameter('reference_number', str, location=OpenApiParameter.PATH)],
        responses={200: ReceiptLookupSerializer},
    )
    @action(detail=False, methods=['get'], url_path=r'receipts/(?P<reference_number>[^/]+)')
    def receipt(self, request, reference_number=None):
        """
        Look up a receipt for reprinting.

        GET /api/transactions/receipts/{reference_number}/
        """
        try:
            data = get_receipt(reference_number=reference_number)
        except ReceiptNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)

        return Response(ReceiptLookupSerializer(data).data)
