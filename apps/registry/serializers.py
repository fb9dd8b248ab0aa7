from rest_framework import serializers
from .models import Student, Supplier


class StudentSerializer(serializers.ModelSerializer):

    class Meta:
        model = Student
        fields = ['student_id', 'name', 'course', 'year_level', 'last_updated']
        read_only_fields = ['last_updated']
        extra_kwargs = {'student_id': {'validators': []}}


class StudentUpdateSerializer(serializers.ModelSerializer):
    """Student ID is the key and cannot be changed."""

    class Meta:
        model = Student
        fields = ['name', 'course', 'year_level']
        extra_kwargs = {field: {'required': False} for field in fields}


class SupplierSerializer(serializers.ModelSerializer):

    class Meta:
        model = Supplier
        fields = ['id', 'name', 'contact_info', 'created_at', 'updated_at']
        read_only_fields = ['id', 'created_at', 'updated_at']
        # Uniqueness is checked case-insensitively by the service
        extra_kwargs = {'name': {'validators': []}}


class CSVUploadSerializer(serializers.Serializer):
    file = serializers.FileField()
