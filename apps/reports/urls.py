"""
URL configuration for reports app.
"""

from django.urls import path

from . import views

app_name = 'reports'

urlpatterns = [
    path('health-score/', views.health_score_view, name='health_score'),
    path('ranking/', views.department_ranking_view, name='ranking'),
    path('trends/', views.trends_view, name='trends'),
]
