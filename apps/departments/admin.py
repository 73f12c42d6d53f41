"""
Admin configuration for departments app.
"""

from django.contrib import admin
from django.db.models import Count

from .models import Department


@admin.register(Department)
class DepartmentAdmin(admin.ModelAdmin):
    """Departments listed in tree order with their monitored headcount."""

    list_display = ('hierarchy', 'code', 'level', 'person_count', 'is_active')
    list_filter = ('is_active', 'level')
    search_fields = ('name', 'code', 'path')
    ordering = ('path',)
    readonly_fields = ('level', 'path', 'created_at', 'updated_at')
    fields = ('name', 'code', 'description', 'parent', 'sort_order', 'is_active',
              'level', 'path', 'created_at', 'updated_at')

    def get_queryset(self, request):
        return (
            super().get_queryset(request)
            .select_related('parent')
            .annotate(person_total=Count('persons'))
        )

    @admin.display(description='Department', ordering='path')
    def hierarchy(self, obj):
        return obj.get_hierarchy_display()

    @admin.display(description='Persons', ordering='person_total')
    def person_count(self, obj):
        return obj.person_total
