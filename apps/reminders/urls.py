"""
URL configuration for reminders app.
"""

from django.urls import path

from . import views

app_name = 'reminders'

urlpatterns = [
    path('', views.reminder_list_view, name='reminder_list'),
    path('run/', views.trigger_run_view, name='trigger_run'),
]
