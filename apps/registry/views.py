from rest_framework import viewsets, status
from rest_framework.decorators import action
from rest_framework.parsers import MultiPartParser, FormParser
from rest_framework.response import Response
from rest_framework.pagination import PageNumberPagination
from drf_spectacular.utils import extend_schema, OpenApiParameter

from .models import Student, Supplier
from .serializers import (
    StudentSerializer,
    StudentUpdateSerializer,
    SupplierSerializer,
    CSVUploadSerializer,
)
from .services import (
    search_students,
    create_student,
    update_student,
    import_students_csv,
    search_suppliers,
    create_supplier,
    update_supplier,
    delete_supplier,
    import_suppliers_csv,
    StudentNotFoundError,
    DuplicateStudentError,
    SupplierNotFoundError,
    DuplicateSupplierError,
    RegistryImportError,
)


class RegistryPagination(PageNumberPagination):
    """Custom pagination for registry tables."""
    page_size = 20
    page_size_query_param = 'page_size'
    max_page_size = 100


SEARCH_PARAMETER = OpenApiParameter('search', str, description='Case-insensitive search term')


class StudentViewSet(viewsets.ModelViewSet):
    """
    ViewSet for the student registry.

    list: Search students by name or ID
    create: Register a student
    retrieve: Get a student by student ID
    partial_update: Edit name, course, year level
    import_csv: Upsert students from CSV
    """

    queryset = Student.objects.all()
    serializer_class = StudentSerializer
    pagination_class = RegistryPagination
    lookup_field = 'student_id'
    lookup_value_regex = '[^/]+'
    http_method_names = ['get', 'post', 'put', 'patch', 'head', 'options']

    def get_queryset(self):
        return search_students(search=self.request.query_params.get('search'))

    @extend_schema(parameters=[SEARCH_PARAMETER])
    def list(self, request, *args, **kwargs):
        return super().list(request, *args, **kwargs)

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            student = create_student(**serializer.validated_data)
        except DuplicateStudentError as e:
            return Response({'error': str(e)}, status=status.HTTP_409_CONFLICT)

        return Response(StudentSerializer(student).data, status=status.HTTP_201_CREATED)

    @extend_schema(request=StudentUpdateSerializer, responses={200: StudentSerializer})
    def update(self, request, *args, **kwargs):
        serializer = StudentUpdateSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)

        try:
            student = update_student(
                student_id=kwargs['student_id'],
                data=serializer.validated_data,
            )
        except StudentNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)

        return Response(StudentSerializer(student).data)

    @extend_schema(request=CSVUploadSerializer)
    @action(detail=False, methods=['post'], url_path='import', parser_classes=[MultiPartParser, FormParser])
    def import_csv(self, request):
        """Upsert students from a student_id,name,course,year_level CSV."""
        serializer = CSVUploadSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            result = import_students_csv(file=serializer.validated_data['file'])
        except RegistryImportError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

        return Response(result)


class SupplierViewSet(viewsets.ModelViewSet):
    """
    ViewSet for the supplier registry.

    Names are stored trimmed and upper-cased and must be unique.
    """

    queryset = Supplier.objects.all()
    serializer_class = SupplierSerializer
    pagination_class = RegistryPagination
    lookup_value_regex = r'\d+'

    def get_queryset(self):
        return search_suppliers(search=self.request.query_params.get('search'))

    @extend_schema(parameters=[SEARCH_PARAMETER])
    def list(self, request, *args, **kwargs):
        return super().list(request, *args, **kwargs)

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            supplier = create_supplier(**serializer.validated_data)
        except DuplicateSupplierError as e:
            return Response({'error': str(e)}, status=status.HTTP_409_CONFLICT)

        return Response(SupplierSerializer(supplier).data, status=status.HTTP_201_CREATED)

    def update(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)

        try:
            supplier = update_supplier(supplier_id=kwargs['pk'], data=serializer.validated_data)
        except SupplierNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        except DuplicateSupplierError as e:
            return Response({'error': str(e)}, status=status.HTTP_409_CONFLICT)

        return Response(SupplierSerializer(supplier).data)

    def destroy(self, request, *args, **kwargs):
        try:
            delete_supplier(supplier_id=kwargs['pk'])
        except SupplierNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)

        return Response(status=status.HTTP_204_NO_CONTENT)

    @extend_schema(request=CSVUploadSerializer)
    @action(detail=False, methods=['post'], url_path='import', parser_classes=[MultiPartParser, FormParser])
    def import_csv(self, request):
        """Add suppliers from a name,contact_info CSV."""
        serializer = CSVUploadSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            result = import_suppliers_csv(file=serializer.validated_data['file'])
        except RegistryImportError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

        return Response(result)
