from django.conf import settings
from rest_framework import status, serializers as drf_serializers
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from drf_spectacular.utils import extend_schema

from apps.accounts.services import InvalidCredentialsError, InactiveAccountError
from apps.ledger.serializers import DepositResultSerializer
from apps.ledger.services import UnknownMaterialError, InvalidQuantityError

from .serializers import (
    PairingSessionCreatedSerializer,
    PairingSessionStatusSerializer,
    StationConfigSerializer,
    StationActivitySerializer,
    # Input serializers
    SessionRequestInputSerializer,
    SessionTokenInputSerializer,
    SessionConnectInputSerializer,
    SessionDepositInputSerializer,
    StationActivityFilterSerializer,
)
from .services import (
    create_session,
    check_session,
    bind_session,
    end_session,
    record_session_deposit,
    get_station_config,
    get_station_activity,
    # Exceptions
    InvalidInputError,
    SessionNotFoundError,
    SessionExpiredError,
    SessionClosedError,
    SessionAlreadyBoundError,
    SessionForbiddenError,
)


class ErrorResponseSerializer(drf_serializers.Serializer):
    error = drf_serializers.CharField()
    code = drf_serializers.CharField()


class MessageResponseSerializer(drf_serializers.Serializer):
    message = drf_serializers.CharField()
    session = PairingSessionStatusSerializer()


def _error(exc, status_code):
    return Response({'error': str(exc), 'code': exc.code}, status=status_code)


@extend_schema(
    request=SessionRequestInputSerializer,
    responses={201: PairingSessionCreatedSerializer},
    description="Station requests a new pairing session and its QR code.",
    tags=['stations'],
)
@api_view(['POST'])
@permission_classes([AllowAny])
def request_session(request):
    """Create a pending pairing session."""
    serializer = SessionRequestInputSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    session = create_session(station_id=serializer.validated_data.get('station_id'))

    return Response(
        PairingSessionCreatedSerializer(session).data,
        status=status.HTTP_201_CREATED
    )


@extend_schema(
    request=SessionTokenInputSerializer,
    responses={
        200: PairingSessionStatusSerializer,
        404: ErrorResponseSerializer,
    },
    description="Station polls a session; expired sessions report status 'expired'.",
    tags=['stations'],
)
@api_view(['POST'])
@permission_classes([AllowAny])
def check_session_status(request):
    """Report the state of a pairing session."""
    serializer = SessionTokenInputSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    try:
        session = check_session(token=serializer.validated_data['session_token'])
    except SessionNotFoundError as e:
        return _error(e, status.HTTP_404_NOT_FOUND)

    return Response(PairingSessionStatusSerializer(session).data)


@extend_schema(
    request=SessionConnectInputSerializer,
    responses={
        200: MessageResponseSerializer,
        401: ErrorResponseSerializer,
        404: ErrorResponseSerializer,
        409: ErrorResponseSerializer,
        410: ErrorResponseSerializer,
    },
    description="App binds a scanned session to the user owning the credential.",
    tags=['stations'],
)
@api_view(['POST'])
@permission_classes([AllowAny])
def connect_session(request):
    """Bind a pending session to a user."""
    serializer = SessionConnectInputSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    try:
        session = bind_session(
            token=serializer.validated_data['session_token'],
            credential=serializer.validated_data['auth_token'],
        )
    except (InvalidCredentialsError, InactiveAccountError) as e:
        return _error(e, status.HTTP_401_UNAUTHORIZED)
    except SessionNotFoundError as e:
        return _error(e, status.HTTP_404_NOT_FOUND)
    except SessionExpiredError as e:
        return _error(e, status.HTTP_410_GONE)
    except (SessionAlreadyBoundError, SessionClosedError) as e:
        return _error(e, status.HTTP_409_CONFLICT)

    return Response({
        'message': 'Connected successfully',
        'session': PairingSessionStatusSerializer(session).data,
    })


@extend_schema(
    request=SessionTokenInputSerializer,
    responses={
        200: PairingSessionStatusSerializer,
        404: ErrorResponseSerializer,
    },
    description="Either side ends a live session.",
    tags=['stations'],
)
@api_view(['POST'])
@permission_classes([AllowAny])
def end_session_view(request):
    """End a pairing session."""
    serializer = SessionTokenInputSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    try:
        session = end_session(token=serializer.validated_data['session_token'])
    except SessionNotFoundError as e:
        return _error(e, status.HTTP_404_NOT_FOUND)

    return Response(PairingSessionStatusSerializer(session).data)


@extend_schema(
    request=SessionDepositInputSerializer,
    responses={
        201: DepositResultSerializer,
        400: ErrorResponseSerializer,
        403: ErrorResponseSerializer,
        404: ErrorResponseSerializer,
        409: ErrorResponseSerializer,
        410: ErrorResponseSerializer,
    },
    description="Bound user records a weighed deposit and earns points.",
    tags=['stations'],
)
@api_view(['POST'])
@permission_classes([IsAuthenticated])
def session_deposit(request):
    """Record a deposit through a pairing session."""
    serializer = SessionDepositInputSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    try:
        entry = record_session_deposit(
            token=serializer.validated_data['session_token'],
            user=request.user,
            material=serializer.validated_data['material'],
            weight_kg=serializer.validated_data['weight_kg'],
        )
    except (InvalidInputError, UnknownMaterialError, InvalidQuantityError) as e:
        return _error(e, status.HTTP_400_BAD_REQUEST)
    except SessionNotFoundError as e:
        return _error(e, status.HTTP_404_NOT_FOUND)
    except SessionExpiredError as e:
        return _error(e, status.HTTP_410_GONE)
    except SessionClosedError as e:
        return _error(e, status.HTTP_409_CONFLICT)
    except SessionForbiddenError as e:
        return _error(e, status.HTTP_403_FORBIDDEN)

    return Response(DepositResultSerializer(entry).data, status=status.HTTP_201_CREATED)


@extend_schema(
    responses={200: StationConfigSerializer},
    description="Material rates, operating hours and session lifetime.",
    tags=['stations'],
)
@api_view(['GET'])
@permission_classes([AllowAny])
def station_config(request):
    """Get station configuration."""
    return Response(StationConfigSerializer(get_station_config()).data)


@extend_schema(
    parameters=[StationActivityFilterSerializer],
    responses={200: StationActivitySerializer},
    description="Today's deposits and open sessions for a station.",
    tags=['stations'],
)
@api_view(['GET'])
@permission_classes([AllowAny])
def station_activity(request):
    """Get today's activity for a station."""
    serializer = StationActivityFilterSerializer(data=request.query_params)
    serializer.is_valid(raise_exception=True)
    station_id = serializer.validated_data.get('station_id') or settings.DEFAULT_STATION_ID

    return Response(StationActivitySerializer(get_station_activity(station_id=station_id)).data)
