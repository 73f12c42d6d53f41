"""
Service layer for departments app.

Scope helpers used by the reminder and reporting endpoints:
- list_departments: active departments in tree order
- get_accessible_department_ids: departments a user may see
- can_access_department: single-department check
"""

from .models import Department


def list_departments(active_only=True):
    """Return departments ordered by level then sort order."""
    departments = Department.objects.all()
    if active_only:
        departments = departments.filter(is_active=True)
    return departments.order_by('level', 'sort_order', 'name')


def get_accessible_department_ids(user):
    """
    Get ids of departments visible to this user.

    Rules:
    - Admin: every active department
    - Others: their own department plus everything below it
    - No department assigned: nothing
    """
    if user.can_view_all_departments():
        return list(list_departments().values_list('id', flat=True))

    if not user.department_id:
        return []

    department = user.department
    if not department.is_active:
        return []

    return department.get_descendant_ids()


def can_access_department(user, department_id):
    """Check if user can view data scoped to the given department."""
    return department_id in get_accessible_department_ids(user)
