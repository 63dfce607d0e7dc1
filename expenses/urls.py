"""
URL configuration for Expense Tracking app.

All endpoints are prefixed with /api/expenses/
"""

from django.urls import path
from .views import (
    ExpenseCategoryListView,
    ExpenseListCreateView,
    ExpenseDetailView,
    ExpenseSummaryView,
)

app_name = 'expenses'

urlpatterns = [
    path('', ExpenseListCreateView.as_view(), name='expense-list'),
    path('categories/', ExpenseCategoryListView.as_view(), name='category-list'),
    path('summary/', ExpenseSummaryView.as_view(), name='expense-summary'),
    path('<uuid:pk>/', ExpenseDetailView.as_view(), name='expense-detail'),
]
