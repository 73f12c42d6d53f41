"""
Views for reminders app.

JSON endpoints:
- reminder_list_view: reminders visible to the current user, filterable
- trigger_run_view: admin-only manual run of the daily batch
"""

import logging

from django.contrib.auth.decorators import login_required, user_passes_test
from django.core.paginator import EmptyPage, PageNotAnInteger, Paginator
from django.http import JsonResponse
from django.views.decorators.http import require_GET, require_POST

from apps.departments.services import get_accessible_department_ids
from .filters import ReminderFilter
from .models import Reminder
from .scheduler import ReminderScheduler

logger = logging.getLogger(__name__)

PAGE_SIZE = 50


def can_trigger_run(user):
    """Check if user may start a manual reminder run."""
    return user.is_authenticated and user.can_trigger_reminder_run()


def serialize_reminder(reminder):
    person = reminder.person
    return {
        'id': reminder.pk,
        'person_id': reminder.person_id,
        'person_name': person.name if person else None,
        'department_id': person.department_id if person else None,
        'leave_period_id': reminder.leave_period_id,
        'reminder_type': reminder.reminder_type,
        'reminder_date': reminder.reminder_date.isoformat(),
        'priority': reminder.priority,
        'is_urgent': reminder.is_urgent,
        'is_handled': reminder.is_handled,
        'handled_at': reminder.handled_at.isoformat() if reminder.handled_at else None,
    }


@login_required
@require_GET
def reminder_list_view(request):
    """
    Reminders for persons in the departments the user can see.

    Query params are handled by ReminderFilter; `page` selects the page.
    """
    department_ids = get_accessible_department_ids(request.user)

    queryset = (
        Reminder.objects.non_system()
        .filter(person__department_id__in=department_ids)
        .select_related('person')
        .by_urgency()
    )

    filterset = ReminderFilter(request.GET, queryset=queryset)
    if not filterset.is_valid():
        return JsonResponse({'errors': filterset.errors.get_json_data()}, status=400)

    paginator = Paginator(filterset.qs, PAGE_SIZE)
    page = request.GET.get('page', 1)

    try:
        reminders = paginator.page(page)
    except PageNotAnInteger:
        reminders = paginator.page(1)
    except EmptyPage:
        reminders = paginator.page(paginator.num_pages)

    return JsonResponse({
        'count': paginator.count,
        'page': reminders.number,
        'num_pages': paginator.num_pages,
        'results': [serialize_reminder(reminder) for reminder in reminders],
    })


@login_required
@user_passes_test(can_trigger_run)
@require_POST
def trigger_run_view(request):
    """
    Regenerate today's reminders now (Admin only).

    Returns 200 with the run result, or 503 when the run rolled back.
    """
    scheduler = ReminderScheduler.from_settings()
    result = scheduler.trigger_manual_run()

    logger.info("Manual reminder run by %s: %s", request.user.email, result.as_dict())

    status = 200 if result.ok else 503
    return JsonResponse(result.as_dict(), status=status)
