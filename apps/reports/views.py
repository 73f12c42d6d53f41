"""
Views for reports app.

JSON endpoints over the report services. Admins may report on any
department or on all of them; other users only on the departments they
can access, defaulting to their own.
"""

from django.contrib.auth.decorators import login_required
from django.core.exceptions import PermissionDenied
from django.http import JsonResponse
from django.views.decorators.http import require_GET

from apps.departments.services import get_accessible_department_ids
from .forms import HealthScoreForm, ReportPeriodForm
from .services import ALL_DEPARTMENTS, get_department_ranking, get_health_score, get_trends


def form_errors_response(form):
    return JsonResponse({'errors': form.errors.get_json_data()}, status=400)


def resolve_scope(user, department):
    """
    Pick the department a report covers.

    Raises:
        PermissionDenied: Department outside the user's scope, or a
            non-admin without a department asking for everything
    """
    if department is None:
        if user.can_view_all_departments():
            return ALL_DEPARTMENTS
        if not user.department_id:
            raise PermissionDenied("You are not assigned to any department.")
        return user.department_id

    if department.pk not in get_accessible_department_ids(user):
        raise PermissionDenied("You don't have access to this department.")
    return department.pk


@login_required
@require_GET
def health_score_view(request):
    """Health score for one department or all of them as of a date."""
    form = HealthScoreForm(request.GET)
    if not form.is_valid():
        return form_errors_response(form)

    scope = resolve_scope(request.user, form.cleaned_data.get('department'))
    return JsonResponse(get_health_score(scope, form.cleaned_data.get('as_of')))


@login_required
@require_GET
def department_ranking_view(request):
    """Departments ordered by health score, limited to what the user can see."""
    form = ReportPeriodForm(request.GET)
    if not form.is_valid():
        return form_errors_response(form)

    result = get_department_ranking(form.cleaned_data['start'], form.cleaned_data['end'])

    if not request.user.can_view_all_departments():
        visible = set(get_accessible_department_ids(request.user))
        result['ranking'] = [
            entry for entry in result['ranking'] if entry['department_id'] in visible
        ]
        result['errors'] = [
            error for error in result['errors'] if error['department_id'] in visible
        ]

    return JsonResponse(result)


@login_required
@require_GET
def trends_view(request):
    """Period-over-period trend for each report metric."""
    form = ReportPeriodForm(request.GET)
    if not form.is_valid():
        return form_errors_response(form)

    start, end = form.cleaned_data['start'], form.cleaned_data['end']
    scope = resolve_scope(request.user, form.cleaned_data.get('department'))
    trends, errors = get_trends(start, end, scope)

    return JsonResponse({
        'scope': scope,
        'start': start.isoformat(),
        'end': end.isoformat(),
        'metrics': {metric: trend.as_dict() for metric, trend in trends.items()},
        'errors': errors,
    })
