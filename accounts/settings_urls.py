from django.urls import path

from .views import LanguageSettingView

app_name = 'settings'

urlpatterns = [
    path('language/', LanguageSettingView.as_view(), name='language'),
]
