"""Student registry service."""

import logging

from django.db import transaction
from django.db.models import Q, QuerySet
from typing import Optional, Dict, Any

from ..models import Student
from .csv_rows import read_csv_rows
from .exceptions import StudentNotFoundError, DuplicateStudentError

logger = logging.getLogger(__name__)

STUDENT_COLUMNS = ('student_id', 'name', 'course', 'year_level')
EDITABLE_FIELDS = ['name', 'course', 'year_level']


def search_students(*, search: Optional[str] = None) -> QuerySet[Student]:
    """Students whose name or ID contains the term, ordered by name."""
    queryset = Student.objects.all()
    if search:
        term = search.strip()
        queryset = queryset.filter(
            Q(name__icontains=term) |
            Q(student_id__icontains=term)
        )
    return queryset.order_by('name')


def get_student(*, student_id: str) -> Student:
    try:
        return Student.objects.get(student_id=student_id)
    except Student.DoesNotExist:
        raise StudentNotFoundError(f"Student {student_id} not found")


@transaction.atomic
def create_student(
    *,
    student_id: str,
    name: str,
    course: str = '',
    year_level: str = ''
) -> Student:
    """
    Raises:
        DuplicateStudentError: If the student ID is already registered
    """
    student_id = student_id.strip()
    if Student.objects.filter(student_id=student_id).exists():
        raise DuplicateStudentError(f"Student {student_id} already exists")

    return Student.objects.create(
        student_id=student_id,
        name=name.strip().upper(),
        course=course.strip().upper(),
        year_level=str(year_level).strip(),
    )


@transaction.atomic
def update_student(*, student_id: str, data: Dict[str, Any]) -> Student:
    """
    Update name, course and year level; the student ID is fixed.

    Raises:
        StudentNotFoundError: If the student doesn't exist
    """
    try:
        student = Student.objects.select_for_update().get(student_id=student_id)
    except Student.DoesNotExist:
        raise StudentNotFoundError(f"Student {student_id} not found")

    for field, value in data.items():
        if field in EDITABLE_FIELDS:
            value = str(value).strip()
            setattr(student, field, value.upper() if field != 'year_level' else value)

    student.save()
    return student


def upsert_student(
    *,
    student_id: str,
    name: str,
    course: str = '',
    year_level: str = ''
) -> Student:
    """Create the student or refresh their details from the latest issuance."""
    student, created = Student.objects.update_or_create(
        student_id=student_id.strip(),
        defaults={
            'name': name.strip().upper(),
            'course': course.strip().upper(),
            'year_level': str(year_level).strip(),
        },
    )
    if created:
        logger.info("Student %s registered from issuance", student.student_id)
    return student


def import_students_csv(*, file) -> dict:
    """
    Upsert students from a student_id,name,course,year_level CSV.

    Returns:
        {'created': int, 'updated': int}
    """
    created = updated = 0
    with transaction.atomic():
        for row in read_csv_rows(file, STUDENT_COLUMNS):
            if not row['name']:
                continue
            _, was_created = Student.objects.update_or_create(
                student_id=row['student_id'],
                defaults={
                    'name': row['name'].upper(),
                    'course': row['course'].upper(),
                    'year_level': row['year_level'],
                },
            )
            if was_created:
                created += 1
            else:
                updated += 1

    logger.info("Student import: %s created, %s updated", created, updated)
    return {'created': created, 'updated': updated}
