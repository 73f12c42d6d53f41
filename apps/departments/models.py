"""
Department model for organizational structure.

Departments form a tree. Each row caches its depth (`level`) and a
materialized `path` of codes (e.g. "/HQ/OPS/FIELD") so that every
descendant of a department can be found with a single prefix query.
"""

from django.core.exceptions import ValidationError
from django.db import models

MAX_DEPARTMENT_LEVEL = 10


class Department(models.Model):
    """
    Represents an organizational department.

    Notes:
    - `parent` is optional; top-level departments have level 1
    - `path` and `level` are recomputed on every save
    - Code is a short identifier (e.g., "OPS", "HR")
    """

    name = models.CharField(
        max_length=100,
        help_text='Full department name'
    )
    code = models.CharField(
        max_length=50,
        unique=True,
        help_text='Short identifier (e.g., OPS, HR, FIN)'
    )
    description = models.TextField(blank=True)
    parent = models.ForeignKey(
        'self',
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name='children',
    )
    level = models.PositiveSmallIntegerField(default=1, editable=False)
    path = models.CharField(max_length=500, editable=False, db_index=True)
    is_active = models.BooleanField(default=True)
    sort_order = models.IntegerField(default=0)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = 'department'
        verbose_name_plural = 'departments'
        ordering = ['level', 'sort_order', 'name']
        indexes = [
            models.Index(fields=['code'], name='departments_code_idx'),
            models.Index(fields=['parent'], name='departments_parent_idx'),
        ]

    def __str__(self):
        return f"{self.name} ({self.code})"

    def clean(self):
        """Reject cycles and over-deep trees."""
        if self.parent_id:
            if not validate_department_hierarchy(self, self.parent):
                raise ValidationError({
                    'parent': 'A department cannot be placed under itself or one of its descendants.'
                })
            if self.parent.level + 1 > MAX_DEPARTMENT_LEVEL:
                raise ValidationError({
                    'parent': f'Departments cannot be nested more than {MAX_DEPARTMENT_LEVEL} levels deep.'
                })

    def save(self, *args, **kwargs):
        # Ensure code is uppercase
        if self.code:
            self.code = self.code.upper()

        old_path = None
        if self.pk:
            old_path = Department.objects.filter(pk=self.pk).values_list('path', flat=True).first()

        self._refresh_path()
        super().save(*args, **kwargs)

        # Moving or renaming a department re-roots its whole subtree
        if old_path and old_path != self.path:
            for child in self.children.all():
                child.save()

    def _refresh_path(self):
        if self.parent_id:
            parent = self.parent
            self.level = parent.level + 1
            self.path = f"{parent.path}/{self.code}"
        else:
            self.level = 1
            self.path = f"/{self.code}"

    def get_descendant_ids(self, include_self=True):
        """Return ids of every active department below this one."""
        ids = list(
            Department.objects.filter(
                path__startswith=f"{self.path}/",
                is_active=True,
            ).values_list('id', flat=True)
        )
        if include_self:
            ids.insert(0, self.pk)
        return ids

    def get_hierarchy_display(self):
        """Full path for display, e.g. "Headquarters > Operations"."""
        names = []
        node = self
        while node is not None:
            names.append(node.name)
            node = node.parent
        return ' > '.join(reversed(names))


def validate_department_hierarchy(department, parent):
    """
    Check that `parent` may become the parent of `department`.

    Walks up from the proposed parent; meeting the department itself (or
    revisiting a node) means the move would create a cycle.
    """
    if department.pk is None:
        return True
    if parent.pk == department.pk:
        return False

    visited = set()
    node = parent
    while node is not None:
        if node.pk in visited or node.pk == department.pk:
            return False
        visited.add(node.pk)
        node = node.parent
    return True
