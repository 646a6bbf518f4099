"""URL routing for report endpoints."""

from django.urls import path  # type: ignore

from .views import DashboardView, ExportView


urlpatterns = [
    path('dashboard/', DashboardView.as_view(), name='reports-dashboard'),
    path('export/', ExportView.as_view(), name='reports-export'),
]
