from django.urls import path

from .views import FarmDetailView

app_name = 'farms'

urlpatterns = [
    path('', FarmDetailView.as_view(), name='farm-detail'),
]
