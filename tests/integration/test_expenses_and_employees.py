"""
Expense Tracking and Employees Integration Tests

SCENARIO:
=========
The farm keeps a small crew. During the season it books seed and feed
purchases against Pond A, an electricity bill against the whole season and
the monthly salary of its pond technician. The season summary shows where
the money went.
"""

from datetime import timedelta
from decimal import Decimal

import pytest
from rest_framework import status

from employees.models import Employee

pytestmark = pytest.mark.django_db


@pytest.fixture
def technician(farm, today):
    return Employee.objects.create(
        farm=farm, name='Ravi Kumar', role='Pond Technician',
        hire_date=today - timedelta(days=400), salary=Decimal('30000.00'),
        email='ravi@example.com',
    )


def expense_payload(season, category, sub_category, amount, day, **extra):
    payload = {
        'season': str(season.id),
        'main_category': category,
        'sub_category': sub_category,
        'amount': amount,
        'date': day.isoformat(),
    }
    payload.update(extra)
    return payload


class TestEmployees:

    def test_create(self, admin_client, today):
        response = admin_client.post('/api/employees/', {
            'name': '  Meena  ',
            'role': 'Feeder',
            'hire_date': today.isoformat(),
            'salary': '18000.00',
        }, format='json')

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['name'] == 'Meena'
        assert response.data['status'] == 'Active'

    def test_filter_search_and_ordering(self, admin_client, farm, technician, today):
        Employee.objects.create(
            farm=farm, name='Arun', role='Guard', hire_date=today,
            status='Inactive', salary=Decimal('15000.00'),
        )

        active = admin_client.get('/api/employees/?status=Active')
        assert [row['name'] for row in active.data['results']] == ['Ravi Kumar']

        search = admin_client.get('/api/employees/?search=guard')
        assert [row['name'] for row in search.data['results']] == ['Arun']

        by_salary = admin_client.get('/api/employees/?ordering=-salary')
        assert [row['name'] for row in by_salary.data['results']] == ['Ravi Kumar', 'Arun']

        default = admin_client.get('/api/employees/')
        assert [row['name'] for row in default.data['results']] == ['Arun', 'Ravi Kumar']

    def test_other_farm_isolated(self, other_farm_client, technician):
        assert other_farm_client.get('/api/employees/').data['count'] == 0
        assert other_farm_client.get(f'/api/employees/{technician.id}/').status_code == 404


class TestExpenses:

    def test_create_pond_expense(self, admin_client, season, pond, today):
        response = admin_client.post('/api/expenses/', expense_payload(
            season, 'Culture', 'Seed', '45000.00', today, pond=str(pond.id),
            description='PL12 from Coastal Hatchery',
        ), format='json')

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['pond_name'] == 'Pond A'
        assert response.data['season_name'] == 'Season 2024'

    def test_salary_needs_employee(self, admin_client, season, today):
        response = admin_client.post('/api/expenses/', expense_payload(
            season, 'Salary', 'Monthly Salary', '30000.00', today,
        ), format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data['employee'] == ['Salary expenses must reference an employee']

    def test_salary_with_employee(self, admin_client, season, technician, today):
        response = admin_client.post('/api/expenses/', expense_payload(
            season, 'Salary', 'Monthly Salary', '30000.00', today, employee=str(technician.id),
        ), format='json')

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['employee_name'] == 'Ravi Kumar'

    def test_pond_from_other_season(self, admin_client, farm, season, today):
        from ponds.models import Pond, Season

        other = Season.objects.create(
            farm=farm, name={'en': 'Old'}, start_date=today - timedelta(days=300),
            end_date=today - timedelta(days=200),
        )
        old_pond = Pond.objects.create(farm=farm, season=other, name={'en': 'Old Pond'}, size=1, capacity=1)

        response = admin_client.post('/api/expenses/', expense_payload(
            season, 'Culture', 'Feed', '100.00', today, pond=str(old_pond.id),
        ), format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'pond' in response.data

    def test_blank_sub_category(self, admin_client, season, today):
        response = admin_client.post('/api/expenses/', expense_payload(
            season, 'Farm', '   ', '100.00', today,
        ), format='json')
        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_categories(self, admin_client):
        response = admin_client.get('/api/expenses/categories/')

        assert [row['value'] for row in response.data] == ['Culture', 'Farm', 'Salary']
        assert 'Seed' in response.data[0]['sub_categories']


class TestExpenseSummary:

    @pytest.fixture
    def expenses(self, admin_client, season, pond, technician, today):
        rows = [
            expense_payload(season, 'Culture', 'Seed', '4000.00', today, pond=str(pond.id)),
            expense_payload(season, 'Culture', 'Feed', '2000.00', today, pond=str(pond.id)),
            expense_payload(season, 'Farm', 'Electricity', '1000.00', today - timedelta(days=1)),
            expense_payload(season, 'Salary', 'Monthly Salary', '3000.00', today,
                            employee=str(technician.id)),
        ]
        for row in rows:
            assert admin_client.post('/api/expenses/', row, format='json').status_code == 201

    def test_summary(self, admin_client, season, expenses):
        response = admin_client.get(f'/api/expenses/summary/?season={season.id}')

        assert response.status_code == status.HTTP_200_OK
        assert response.data['total'] == 10000.0
        assert response.data['count'] == 4
        assert response.data['by_category'] == [
            {'main_category': 'Culture', 'total': 6000.0, 'count': 2, 'percentage': 60.0},
            {'main_category': 'Salary', 'total': 3000.0, 'count': 1, 'percentage': 30.0},
            {'main_category': 'Farm', 'total': 1000.0, 'count': 1, 'percentage': 10.0},
        ]
        assert response.data['by_sub_category'][0]['sub_category'] == 'Seed'
        assert sum(row['count'] for row in response.data['monthly']) == 4

    def test_summary_refreshes_after_new_expense(self, admin_client, season, expenses, today):
        admin_client.get(f'/api/expenses/summary/?season={season.id}')
        admin_client.post('/api/expenses/', expense_payload(
            season, 'Farm', 'Fuel', '500.00', today,
        ), format='json')

        response = admin_client.get(f'/api/expenses/summary/?season={season.id}')
        assert response.data['total'] == 10500.0

    def test_unknown_season(self, admin_client):
        import uuid

        response = admin_client.get(f'/api/expenses/summary/?season={uuid.uuid4()}')
        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_list_filters_and_sorting(self, admin_client, pond, technician, expenses):
        by_amount = admin_client.get('/api/expenses/?sort_by=-amount')
        assert [row['amount'] for row in by_amount.data['results']] == [
            '4000.00', '3000.00', '2000.00', '1000.00',
        ]

        unsafe_sort = admin_client.get('/api/expenses/?sort_by=farm__owner__password')
        assert unsafe_sort.status_code == status.HTTP_200_OK

        for_pond = admin_client.get(f'/api/expenses/?pond={pond.id}')
        assert for_pond.data['count'] == 2

        salaries = admin_client.get(f'/api/expenses/?employee={technician.id}')
        assert salaries.data['count'] == 1

        electricity = admin_client.get('/api/expenses/?search=electric')
        assert electricity.data['count'] == 1
