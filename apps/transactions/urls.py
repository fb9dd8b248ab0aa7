from django.urls import path, include
from rest_framework.routers import SimpleRouter
from . import views

app_name = 'transactions'

# No API root view: it would shadow the list route at the empty prefix
router = SimpleRouter()
router.register(r'', views.TransactionViewSet, basename='transaction')

urlpatterns = [
    # Transaction ViewSet routes
    # GET    /api/transactions/                              - Ledger rows
    # GET    /api/transactions/{id}/                         - One row

    # Custom actions
    # POST   /api/transactions/batch/                        - Record receipt
    # POST   /api/transactions/void/                         - Void receipt (admin)
    # GET    /api/transactions/ledger/                       - Receipts page
    # GET    /api/transactions/today/                        - Today's history
    # GET    /api/transactions/receipts/{reference_number}/  - Receipt lookup

    path('', include(router.urls)),
]
