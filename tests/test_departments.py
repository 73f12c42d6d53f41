import pytest
from django.core.exceptions import ValidationError

from apps.accounts.models import User
from apps.departments.models import Department
from apps.departments.services import can_access_department, get_accessible_department_ids

pytestmark = pytest.mark.django_db


@pytest.fixture
def tree(db):
    root = Department.objects.create(name='Headquarters', code='hq')
    ops = Department.objects.create(name='Operations', code='ops', parent=root)
    field_team = Department.objects.create(name='Field Team', code='field', parent=ops)
    finance = Department.objects.create(name='Finance', code='fin', parent=root)
    return root, ops, field_team, finance


def test_path_and_level(tree):
    root, ops, field_team, _ = tree

    assert root.path == '/HQ'
    assert field_team.path == '/HQ/OPS/FIELD'
    assert field_team.level == 3
    assert field_team.get_hierarchy_display() == 'Headquarters > Operations > Field Team'


def test_moving_department_updates_subtree(tree):
    root, ops, field_team, finance = tree

    ops.parent = finance
    ops.save()

    field_team.refresh_from_db()
    assert field_team.path == '/HQ/FIN/OPS/FIELD'
    assert field_team.level == 4


def test_cycle_rejected(tree):
    root, ops, field_team, _ = tree

    root.parent = field_team
    with pytest.raises(ValidationError):
        root.clean()


def test_descendant_ids(tree):
    root, ops, field_team, finance = tree

    assert set(ops.get_descendant_ids()) == {ops.pk, field_team.pk}
    assert set(ops.get_descendant_ids(include_self=False)) == {field_team.pk}


def test_accessible_department_ids(tree):
    root, ops, field_team, finance = tree
    admin = User.objects.create_user(email='boss@example.com', role=User.Role.ADMIN)
    liaison = User.objects.create_user(email='ops@example.com', department=ops)
    unassigned = User.objects.create_user(email='nobody@example.com')

    assert set(get_accessible_department_ids(admin)) == {root.pk, ops.pk, field_team.pk, finance.pk}
    assert set(get_accessible_department_ids(liaison)) == {ops.pk, field_team.pk}
    assert get_accessible_department_ids(unassigned) == []
    assert can_access_department(liaison, field_team.pk)
    assert not can_access_department(liaison, finance.pk)
