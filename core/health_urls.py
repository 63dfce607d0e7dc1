from django.urls import path

from .health import DatabaseHealthView, HealthView, LivenessView, ReadinessView

urlpatterns = [
    path('', HealthView.as_view(), name='health'),
    path('live/', LivenessView.as_view(), name='health-live'),
    path('ready/', ReadinessView.as_view(), name='health-ready'),
    path('database/', DatabaseHealthView.as_view(), name='health-database'),
]
