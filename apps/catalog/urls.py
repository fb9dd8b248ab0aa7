from django.urls import path, include
from rest_framework.routers import DefaultRouter
from . import views

app_name = 'catalog'

router = DefaultRouter()
router.register(r'products', views.ProductViewSet, basename='product')

urlpatterns = [
    # Product ViewSet routes
    # GET    /api/catalog/products/                        - Search products
    # POST   /api/catalog/products/                        - Register product
    # GET    /api/catalog/products/{internal_id}/          - Get product
    # PATCH  /api/catalog/products/{internal_id}/          - Edit product
    # DELETE /api/catalog/products/{internal_id}/          - Delete product

    # Custom actions
    # GET    /api/catalog/products/{internal_id}/history/  - Audit trail
    # GET    /api/catalog/products/barcode/{barcode}/      - Barcode lookup
    # POST   /api/catalog/products/import/                 - AccPac CSV import

    path('', include(router.urls)),
]
