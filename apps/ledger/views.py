from rest_framework import viewsets, status, serializers as drf_serializers
from rest_framework.decorators import action, api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.pagination import PageNumberPagination
from drf_spectacular.utils import extend_schema

from .serializers import (
    LedgerEntrySerializer,
    DepositResultSerializer,
    RedemptionSerializer,
    BalanceSerializer,
    DepositStatsSerializer,
    RedemptionOptionsSerializer,
    # Input serializers
    LedgerEntryFilterSerializer,
    EarnInputSerializer,
    RedeemInputSerializer,
)
from .services import (
    earn,
    spend,
    balance_of,
    get_owner_entries,
    get_owner_entry,
    get_redemption_history,
    get_redemption_options,
    get_deposit_stats,
    # Exceptions
    InvalidQuantityError,
    UnknownMaterialError,
    InsufficientBalanceError,
    InvalidRedemptionMethodError,
    LedgerEntryNotFoundError,
)


class ErrorResponseSerializer(drf_serializers.Serializer):
    error = drf_serializers.CharField()
    code = drf_serializers.CharField()


def _error(exc, status_code):
    return Response({'error': str(exc), 'code': exc.code}, status=status_code)


class LedgerPagination(PageNumberPagination):
    """Custom pagination for ledger history."""
    page_size = 50
    page_size_query_param = 'page_size'
    max_page_size = 200


class LedgerEntryViewSet(viewsets.GenericViewSet):
    """
    The current user's points ledger.

    list: Entry history, newest first (filter with ?kind=deposit|redemption)
    retrieve: One entry
    create: Record a manual deposit and credit its points
    """

    serializer_class = LedgerEntrySerializer
    permission_classes = [IsAuthenticated]
    pagination_class = LedgerPagination
    lookup_value_regex = r'\d+'

    def get_queryset(self):
        filter_serializer = LedgerEntryFilterSerializer(data=self.request.query_params)
        filter_serializer.is_valid(raise_exception=True)
        return get_owner_entries(
            owner=self.request.user,
            kind=filter_serializer.validated_data.get('kind'),
        )

    def list(self, request):
        queryset = self.get_queryset()
        page = self.paginate_queryset(queryset)
        if page is not None:
            serializer = LedgerEntrySerializer(page, many=True)
            return self.get_paginated_response(serializer.data)
        return Response(LedgerEntrySerializer(queryset, many=True).data)

    @extend_schema(responses={200: LedgerEntrySerializer, 404: ErrorResponseSerializer})
    def retrieve(self, request, pk=None):
        try:
            entry = get_owner_entry(owner=request.user, entry_id=pk)
        except LedgerEntryNotFoundError as e:
            return _error(e, status.HTTP_404_NOT_FOUND)
        return Response(LedgerEntrySerializer(entry).data)

    @extend_schema(
        request=EarnInputSerializer,
        responses={201: DepositResultSerializer, 400: ErrorResponseSerializer},
    )
    def create(self, request):
        serializer = EarnInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            entry = earn(
                owner=request.user,
                material=serializer.validated_data['material'],
                weight_kg=serializer.validated_data['weight_kg'],
                station_id=serializer.validated_data.get('station_id', ''),
            )
        except (UnknownMaterialError, InvalidQuantityError) as e:
            return _error(e, status.HTTP_400_BAD_REQUEST)

        return Response(DepositResultSerializer(entry).data, status=status.HTTP_201_CREATED)


class RedemptionViewSet(viewsets.GenericViewSet):
    """
    Cash-out of points.

    list: Redemption history
    create: Redeem points (writes a negative ledger entry)
    options: Redemption catalog with the current balance
    """

    serializer_class = RedemptionSerializer
    permission_classes = [IsAuthenticated]
    pagination_class = LedgerPagination

    def get_queryset(self):
        return get_redemption_history(owner=self.request.user)

    def list(self, request):
        queryset = self.get_queryset()
        page = self.paginate_queryset(queryset)
        if page is not None:
            serializer = RedemptionSerializer(page, many=True)
            return self.get_paginated_response(serializer.data)
        return Response(RedemptionSerializer(queryset, many=True).data)

    @extend_schema(
        request=RedeemInputSerializer,
        responses={201: RedemptionSerializer, 400: ErrorResponseSerializer},
    )
    def create(self, request):
        serializer = RedeemInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            redemption = spend(
                owner=request.user,
                points=serializer.validated_data['points'],
                method=serializer.validated_data['method'],
                account_info=serializer.validated_data['account_info'],
            )
        except (
            InvalidQuantityError,
            InvalidRedemptionMethodError,
            InsufficientBalanceError,
        ) as e:
            return _error(e, status.HTTP_400_BAD_REQUEST)

        return Response(RedemptionSerializer(redemption).data, status=status.HTTP_201_CREATED)

    @extend_schema(responses={200: RedemptionOptionsSerializer})
    @action(detail=False, methods=['get'], url_path='options', url_name='options')
    def redemption_options(self, request):
        """Available redemption methods and whether the balance qualifies."""
        data = get_redemption_options(owner=request.user)
        return Response(RedemptionOptionsSerializer(data).data)


@extend_schema(
    responses={200: BalanceSerializer},
    description="Current committed points balance.",
    tags=['ledger'],
)
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def balance(request):
    """Get the current user's points balance."""
    return Response({'points': balance_of(owner=request.user)})


@extend_schema(
    responses={200: DepositStatsSerializer},
    description="Deposit totals and per-material breakdown for the current user.",
    tags=['ledger'],
)
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def deposit_stats(request):
    """Get the current user's deposit statistics."""
    stats = get_deposit_stats(owner=request.user)
    return Response(DepositStatsSerializer(stats).data)
