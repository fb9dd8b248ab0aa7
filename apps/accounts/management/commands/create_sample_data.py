"""
Management command to create sample data for trying out the API.

Usage:
    python manage.py create_sample_data
    python manage.py create_sample_data --clear

This creates:
- 3 staff accounts (super admin, admin, employee) and 1 pending invite
- 8 products, two of them low on stock
- 4 students and 3 suppliers
- Receipts of every movement type, one of them voided
"""

from django.core.management.base import BaseCommand
from django.db import transaction
from decimal import Decimal

from apps.accounts.models import User, StaffRole, StaffStatus
from apps.catalog.models import Product
from apps.registry.models import Student, Supplier
from apps.realtime.models import ChangeEvent
from apps.transactions.models import Transaction, DocumentSequence, ReceiptReference
from apps.transactions.services import process_inventory_batch, void_transaction_by_ref

SAMPLE_PASSWORD = 'password123'

PRODUCTS = [
    # barcode, accpac, name, price, unit cost, min stock, opening stock, location
    ('9789712345001', 'BK-ENG101', 'Purposive Communication', '420.00', '310.00', 10, 40, 'Shelf A1'),
    ('9789712345002', 'BK-MTH101', 'Mathematics in the Modern World', '450.00', '330.00', 10, 35, 'Shelf A2'),
    ('9789712345003', 'BK-CS101', 'Introduction to Computing', '520.00', '380.00', 8, 25, 'Shelf B1'),
    ('9789712345004', 'BK-HIS101', 'Readings in Philippine History', '390.00', '280.00', 10, 6, 'Shelf B2'),
    ('UNI-PE-M', 'UN-PE-M', 'PE Uniform Medium', '350.00', '240.00', 15, 30, 'Rack 1'),
    ('UNI-PE-L', 'UN-PE-L', 'PE Uniform Large', '350.00', '240.00', 15, 4, 'Rack 1'),
    ('SUP-NB80', 'SP-NB80', 'Notebook 80 Leaves', '45.00', '30.00', 50, 200, 'Counter'),
    ('SUP-LAN', 'SP-LAN', 'University Lanyard', '80.00', '45.00', 20, 60, 'Counter'),
]

STUDENTS = [
    ('2024-00011', 'Juan Dela Cruz', 'BSIT', '2'),
    ('2024-00012', 'Maria Santos', 'BSED', '2'),
    ('2023-00105', 'Jose Rizal Mercado', 'BSCS', '3'),
    ('2025-00007', 'Andrea Bautista', 'BSN', '1'),
]

SUPPLIERS = [
    ('Rex Book Store', 'orders@rex.example'),
    ('C&E Publishing', 'sales@cande.example'),
    ('Campus Uniform Supply', '0917-555-0101'),
]


class Command(BaseCommand):
    help = 'Create sample data for trying out the API'

    def add_arguments(self, parser):
        parser.add_argument(
            '--clear',
            action='store_true',
            help='Clear existing data before creating new sample data',
        )

    @transaction.atomic
    def handle(self, *args, **options):
        if options['clear']:
            self.stdout.write('Clearing existing data...')
            self.clear_data()

        self.stdout.write('Creating sample data...')

        staff = self.create_staff()
        self.create_products()
        self.create_registry()
        self.create_receipts(staff)

        self.stdout.write(self.style.SUCCESS('Sample data created successfully!'))
        self.stdout.write('')
        self.stdout.write('Staff accounts:')
        self.stdout.write(f'  root@bookstore.example / {SAMPLE_PASSWORD} (super admin)')
        self.stdout.write(f'  admin@bookstore.example / {SAMPLE_PASSWORD} (admin)')
        self.stdout.write(f'  clerk@bookstore.example / {SAMPLE_PASSWORD} (employee)')
        self.stdout.write('  newhire@bookstore.example (invited, not registered)')

    def clear_data(self):
        """Clear inventory data and the sample staff."""
        ChangeEvent.objects.all().delete()
        Transaction.objects.all().delete()
        DocumentSequence.objects.all().delete()
        ReceiptReference.objects.all().delete()
        Product.objects.all().delete()
        Student.objects.all().delete()
        Supplier.objects.all().delete()
        User.objects.filter(email__endswith='@bookstore.example').delete()

    def create_staff(self):
        """Create staff accounts."""
        self.stdout.write('  Creating staff...')

        accounts = {}
        for key, email, name, role in [
            ('root', 'root@bookstore.example', 'Rosa Root', StaffRole.SUPER_ADMIN),
            ('admin', 'admin@bookstore.example', 'Ada Admin', StaffRole.ADMIN),
            ('clerk', 'clerk@bookstore.example', 'Carl Clerk', StaffRole.EMPLOYEE),
        ]:
            user, _ = User.objects.get_or_create(
                email=email,
                defaults={
                    'full_name': name,
                    'role': role,
                    'status': StaffStatus.REGISTERED,
                    'is_staff': role == StaffRole.SUPER_ADMIN,
                    'is_superuser': role == StaffRole.SUPER_ADMIN,
                }
            )
            user.set_password(SAMPLE_PASSWORD)
            user.save()
            accounts[key] = user

        if not User.objects.filter(email='newhire@bookstore.example').exists():
            User.objects.create_user(
                email='newhire@bookstore.example',
                full_name='Nina Newhire',
                role=StaffRole.EMPLOYEE,
                invited_by=accounts['admin'],
            )
        return accounts

    def create_products(self):
        """Create catalog items with opening stock."""
        self.stdout.write('  Creating products...')

        for barcode, accpac, name, price, cost, min_level, stock, location in PRODUCTS:
            Product.objects.get_or_create(
                barcode=barcode,
                defaults={
                    'accpac_code': accpac,
                    'name': name.upper(),
                    'price': Decimal(price),
                    'unit_cost': Decimal(cost),
                    'min_stock_level': min_level,
                    'current_stock': stock,
                    'location': location.upper(),
                }
            )

    def create_registry(self):
        """Create students and suppliers."""
        self.stdout.write('  Creating students and suppliers...')

        for student_id, name, course, year_level in STUDENTS:
            Student.objects.get_or_create(
                student_id=student_id,
                defaults={'name': name.upper(), 'course': course, 'year_level': year_level}
            )

        for name, contact_info in SUPPLIERS:
            Supplier.objects.get_or_create(
                name=name.upper(),
                defaults={'contact_info': contact_info}
            )

    def create_receipts(self, staff):
        """Record one receipt per movement type and void the last issuance."""
        self.stdout.write('  Creating receipts...')

        def student_header(index, mode):
            student_id, name, course, year_level = STUDENTS[index]
            return {
                'transaction_mode': mode,
                'student_id': student_id,
                'student_name': name,
                'course': course,
                'year_level': year_level,
            }

        process_inventory_batch(
            header={'type': 'RECEIVING', 'supplier': 'Rex Book Store', 'remarks': 'DR 10452'},
            items=[
                {'barcode': '9789712345001', 'qty': 20},
                {'barcode': '9789712345003', 'qty': 10},
            ],
            user=staff['clerk'],
        )
        process_inventory_batch(
            header={'type': 'ISSUANCE', **student_header(0, 'CASH')},
            items=[
                {'barcode': '9789712345001', 'qty': 1},
                {'barcode': '9789712345002', 'qty': 1},
                {'barcode': 'UNI-PE-M', 'qty': 2},
            ],
            user=staff['clerk'],
        )
        process_inventory_batch(
            header={'type': 'ISSUANCE', **student_header(1, 'CHARGED')},
            items=[{'barcode': 'SUP-NB80', 'qty': 5}],
            user=staff['clerk'],
        )
        process_inventory_batch(
            header={'type': 'ISSUANCE_RETURN', **student_header(0, 'CASH'), 'remarks': 'Wrong size'},
            items=[{'barcode': 'UNI-PE-M', 'qty': 1}],
            user=staff['clerk'],
        )
        process_inventory_batch(
            header={'type': 'PULL_OUT', 'remarks': 'Water damaged'},
            items=[{'barcode': 'SUP-LAN', 'qty': 3}],
            user=staff['admin'],
        )
        mistaken = process_inventory_batch(
            header={'type': 'ISSUANCE', **student_header(2, 'SIP')},
            items=[{'barcode': '9789712345003', 'qty': 1}],
            user=staff['clerk'],
        )
        void_transaction_by_ref(
            reference_number=mistaken['reference_number'],
            reason='Issued to the wrong student',
            user=staff['admin'],
        )
