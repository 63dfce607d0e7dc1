from django.urls import path
from .views import EmployeeListCreateView, EmployeeDetailView

app_name = 'employees'

urlpatterns = [
    path('', EmployeeListCreateView.as_view(), name='employee-list'),
    path('<uuid:pk>/', EmployeeDetailView.as_view(), name='employee-detail'),
]
