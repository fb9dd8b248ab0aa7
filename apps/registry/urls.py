from django.urls import path, include
from rest_framework.routers import DefaultRouter
from . import views

app_name = 'registry'

router = DefaultRouter()
router.register(r'students', views.StudentViewSet, basename='student')
router.register(r'suppliers', views.SupplierViewSet, basename='supplier')

urlpatterns = [
    # Student routes
    # GET    /api/registry/students/                - Search students
    # POST   /api/registry/students/                - Register student
    # GET    /api/registry/students/{student_id}/   - Get student
    # PATCH  /api/registry/students/{student_id}/   - Edit student
    # POST   /api/registry/students/import/         - CSV import

    # Supplier routes
    # GET    /api/registry/suppliers/               - List/search suppliers
    # POST   /api/registry/suppliers/               - Add supplier
    # PATCH  /api/registry/suppliers/{id}/          - Edit supplier
    # DELETE /api/registry/suppliers/{id}/          - Delete supplier
    # POST   /api/registry/suppliers/import/        - CSV import

    path('', include(router.urls)),
]
