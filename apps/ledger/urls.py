from django.urls import path, include
from rest_framework.routers import DefaultRouter
from . import views

app_name = 'ledger'

router = DefaultRouter()
router.register(r'entries', views.LedgerEntryViewSet, basename='entry')
router.register(r'redemptions', views.RedemptionViewSet, basename='redemption')

urlpatterns = [
    # GET    /api/ledger/entries/                - Entry history
    # POST   /api/ledger/entries/                - Manual deposit
    # GET    /api/ledger/entries/{id}/           - Entry detail
    # GET    /api/ledger/redemptions/            - Redemption history
    # POST   /api/ledger/redemptions/            - Redeem points
    # GET    /api/ledger/redemptions/options/    - Redemption catalog
    path('balance/', views.balance, name='balance'),
    path('stats/', views.deposit_stats, name='stats'),

    path('', include(router.urls)),
]
