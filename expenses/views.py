"""
Views for Expense Tracking.

All views are farm-scoped to ensure data isolation between farms.

API Endpoints:
- /api/expenses/ - List/create expenses
- /api/expenses/{id}/ - Retrieve/update/delete expense
- /api/expenses/summary/ - Totals by category, sub-category and month
- /api/expenses/categories/ - Expense categories (constants)
"""

import logging

from django.db.models import Q
from rest_framework import generics
from rest_framework.response import Response
from rest_framework.views import APIView

from farms.filters import filter_date_range, filter_uuid
from farms.permissions import FarmScopedMixin
from ponds.models import Season
from .models import Expense, ExpenseCategory, SUGGESTED_SUB_CATEGORIES
from .serializers import ExpenseListSerializer, ExpenseSerializer
from .services import ExpenseSummaryService

logger = logging.getLogger(__name__)

SORT_FIELDS = {'date', 'amount', 'main_category', 'sub_category', 'created_at'}


# =============================================================================
# EXPENSE CATEGORY VIEWS (Constants)
# =============================================================================

class ExpenseCategoryListView(FarmScopedMixin, APIView):
    """
    GET /api/expenses/categories/

    List expense categories with suggested sub-categories.
    """

    def get(self, request):
        categories = [
            {
                'value': value,
                'label': label,
                'description': self._get_category_description(value),
                'sub_categories': SUGGESTED_SUB_CATEGORIES.get(value, []),
            }
            for value, label in ExpenseCategory.choices
        ]
        return Response(categories)

    def _get_category_description(self, category):
        descriptions = {
            'Culture': 'Seed, feed, chemicals, probiotics and harvest costs',
            'Farm': 'Electricity, fuel, repairs, equipment and land lease',
            'Salary': 'Wages and bonuses paid to farm employees',
        }
        return descriptions.get(category, '')


# =============================================================================
# EXPENSE VIEWS
# =============================================================================

class ExpenseListCreateView(FarmScopedMixin, generics.ListCreateAPIView):
    """
    GET  /api/expenses/
    POST /api/expenses/

    Filters: season, pond, employee, main_category, start_date, end_date,
    search (description or sub-category), sort_by (e.g. -amount).
    """
    queryset = Expense.objects.select_related('season', 'pond', 'employee', 'created_by')

    def get_serializer_class(self):
        if self.request.method == 'POST':
            return ExpenseSerializer
        return ExpenseListSerializer

    def get_queryset(self):
        queryset = super().get_queryset()
        params = self.request.query_params

        queryset = filter_uuid(queryset, 'season_id', params.get('season'))
        queryset = filter_uuid(queryset, 'pond_id', params.get('pond'))
        queryset = filter_uuid(queryset, 'employee_id', params.get('employee'))

        main_category = params.get('main_category')
        if main_category:
            queryset = queryset.filter(main_category=main_category)

        search = params.get('search')
        if search:
            queryset = queryset.filter(
                Q(description__icontains=search) | Q(sub_category__icontains=search)
            )

        queryset = filter_date_range(queryset, params)

        sort_by = params.get('sort_by', '-date')
        if sort_by.lstrip('-') not in SORT_FIELDS:
            sort_by = '-date'
        return queryset.order_by(sort_by, '-created_at')

    def perform_create(self, serializer):
        expense = serializer.save(farm=self.get_farm(), created_by=self.request.user)
        logger.info(
            f"Expense created: {expense.main_category}/{expense.sub_category} "
            f"{expense.amount} for farm {expense.farm_id}"
        )


class ExpenseDetailView(FarmScopedMixin, generics.RetrieveUpdateDestroyAPIView):
    """
    GET/PUT/PATCH/DELETE /api/expenses/{id}/
    """
    queryset = Expense.objects.select_related('season', 'pond', 'employee', 'created_by')
    serializer_class = ExpenseSerializer


class ExpenseSummaryView(FarmScopedMixin, APIView):
    """
    GET /api/expenses/summary/?season=
    """

    def get(self, request):
        season = None
        season_id = request.query_params.get('season')
        if season_id:
            season = self.get_farm_object(Season, season_id)
        return Response(ExpenseSummaryService(self.get_farm()).get_summary(season))
