from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from rest_framework import status
from drf_spectacular.utils import extend_schema

from apps.accounts.permissions import IsActiveStaff
from .serializers import (
    ChangesQuerySerializer,
    BroadcastSerializer,
    ChangeEventSerializer,
    ChangeFeedSerializer,
    ErrorSerializer,
)
from .services import changes_since, broadcast, event_to_row


@extend_schema(
    parameters=[ChangesQuerySerializer],
    responses={200: ChangeFeedSerializer},
    description="Change events after the given ID, with one refresh hint per table.",
    tags=['realtime'],
)
@api_view(['GET'])
@permission_classes([IsActiveStaff])
def changes(request):
    """Poll the change feed - thin HTTP handler."""
    query_serializer = ChangesQuerySerializer(data=request.query_params)
    query_serializer.is_valid(raise_exception=True)
    params = query_serializer.validated_data

    data = changes_since(after_id=params['after_id'], limit=params['limit'])
    return Response(ChangeFeedSerializer(data).data)


@extend_schema(
    request=BroadcastSerializer,
    responses={201: ChangeEventSerializer, 503: ErrorSerializer},
    description="Tell other clients to refresh (app_updates channel).",
    tags=['realtime'],
)
@api_view(['POST'])
@permission_classes([IsActiveStaff])
def broadcast_update(request):
    serializer = BroadcastSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    change = broadcast(**serializer.validated_data)
    if change is None:
        return Response(
            {'error': 'Change feed is unavailable.'},
            status=status.HTTP_503_SERVICE_UNAVAILABLE
        )
    return Response(ChangeEventSerializer(event_to_row(change)).data, status=status.HTTP_201_CREATED)
