from django.contrib import admin

from .models import Employee


@admin.register(Employee)
class EmployeeAdmin(admin.ModelAdmin):
    list_display = ['name', 'role', 'farm', 'hire_date', 'status', 'salary']
    list_filter = ['status', 'role']
    search_fields = ['name', 'email', 'phone']
    raw_id_fields = ['farm']
