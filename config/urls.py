"""
URL configuration for contact_monitor project.
"""

from django.contrib import admin
from django.urls import path, include
from django.conf import settings

urlpatterns = [
    path('admin/', admin.site.urls),

    # App URLs
    path('reminders/', include('apps.reminders.urls', namespace='reminders')),
    path('reports/', include('apps.reports.urls', namespace='reports')),
]

if settings.DEBUG and 'debug_toolbar' in settings.INSTALLED_APPS:
    import debug_toolbar
    urlpatterns = [
        path('__debug__/', include(debug_toolbar.urls)),
    ] + urlpatterns

# Admin site customization
admin.site.site_header = 'Contact Monitor Administration'
admin.site.site_title = 'Contact Monitor Admin'
admin.site.index_title = 'Leave contact monitoring'
