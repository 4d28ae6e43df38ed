"""Declarative cache policy per entity type.

Every cache key that can hold data derived from a record is listed here,
next to the entity's TTL. Repositories never build invalidation lists by
hand: they ask the policy for the keys affected by a record, so adding a
secondary lookup key (or a derived aggregate) in one place is enough for
every mutation path to invalidate it.
"""

from collections.abc import Callable, Iterable
from dataclasses import dataclass
from functools import lru_cache
from typing import Any

from orgdesk.application.dtos import (
    AttendanceResult,
    DepartmentResult,
    DocumentResult,
    InvitationResult,
    LeaveRequestResult,
    NotificationResult,
    OrganizationResult,
    ProjectResult,
    ReportResult,
    ReportTemplateResult,
    StaffResult,
    TaskResult,
    UserResult,
    WorkspaceResult,
)
from orgdesk.core.config import Settings, get_settings
from orgdesk.infrastructure.cache import keys
from orgdesk.shared.utils.datetime import utc_day


@dataclass(frozen=True)
class EntityCachePolicy[R]:
    """Key naming and TTL for one entity type.

    Attributes:
        entity: Lowercase entity prefix (first key segment).
        result_type: Read-model type stored under the entity keys.
        ttl: Seconds an entity entry may be served before expiring.
        id_key: Builds the primary key from an id (used before a record is known).
        lookup_keys: Keys under which a record is cached (primary first, then
            secondary lookups such as slug or email). A derivation may return
            None when the record has no value for that lookup.
        aggregate_keys: Keys of derived views (counts, lists, summaries) that
            include the record and must be dropped whenever it changes.
    """

    entity: str
    result_type: type[R]
    ttl: int
    id_key: Callable[[str], str]
    lookup_keys: tuple[Callable[[R], str | None], ...]
    aggregate_keys: tuple[Callable[[R], Iterable[str]], ...] = ()

    def entity_keys(self, record: R) -> list[str]:
        """Primary and secondary keys that hold record itself."""
        return _unique(derive(record) for derive in self.lookup_keys)

    def derived_keys(self, record: R) -> list[str]:
        """Aggregate keys whose value depends on record."""
        return _unique(key for derive in self.aggregate_keys for key in derive(record))

    def affected_keys(self, record: R) -> list[str]:
        """Every key that could return stale data once record changes."""
        return _unique([*self.entity_keys(record), *self.derived_keys(record)])


def _unique(candidates: Iterable[str | None]) -> list[str]:
    seen: dict[str, None] = {}
    for key in candidates:
        if key:
            seen.setdefault(key, None)
    return list(seen)


def _dashboard(record: Any) -> list[str]:
    # summaries are only cached for the current UTC day
    return [keys.dashboard_key(record.organization_id, utc_day())]


def _optional_email_key(staff: StaffResult) -> str | None:
    return keys.staff_email_key(staff.organization_id, staff.email) if staff.email else None


def _task_aggregates(task: TaskResult) -> list[str]:
    derived = _dashboard(task)
    if task.project_id:
        derived.append(keys.project_task_summary_key(task.project_id))
    return derived


@dataclass(frozen=True)
class CachePolicies:
    """All entity policies plus the TTLs of aggregate views."""

    organization: EntityCachePolicy[OrganizationResult]
    workspace: EntityCachePolicy[WorkspaceResult]
    user: EntityCachePolicy[UserResult]
    staff: EntityCachePolicy[StaffResult]
    department: EntityCachePolicy[DepartmentResult]
    attendance: EntityCachePolicy[AttendanceResult]
    leave_request: EntityCachePolicy[LeaveRequestResult]
    project: EntityCachePolicy[ProjectResult]
    task: EntityCachePolicy[TaskResult]
    report: EntityCachePolicy[ReportResult]
    report_template: EntityCachePolicy[ReportTemplateResult]
    document: EntityCachePolicy[DocumentResult]
    notification: EntityCachePolicy[NotificationResult]
    invitation: EntityCachePolicy[InvitationResult]

    ttl_unread_count: int
    ttl_today_attendance: int
    ttl_recent_attendance: int
    ttl_department_list: int
    ttl_task_summary: int
    ttl_dashboard: int

    def all(self) -> list[EntityCachePolicy[Any]]:
        return [
            self.organization,
            self.workspace,
            self.user,
            self.staff,
            self.department,
            self.attendance,
            self.leave_request,
            self.project,
            self.task,
            self.report,
            self.report_template,
            self.document,
            self.notification,
            self.invitation,
        ]


def build_cache_policies(settings: Settings) -> CachePolicies:
    """Build the policy registry from settings (TTLs are configurable)."""
    return CachePolicies(
        organization=EntityCachePolicy(
            entity="organization",
            result_type=OrganizationResult,
            ttl=settings.cache_ttl_organization,
            id_key=keys.organization_key,
            lookup_keys=(
                lambda o: keys.organization_key(o.id),
                lambda o: keys.organization_slug_key(o.slug),
            ),
        ),
        workspace=EntityCachePolicy(
            entity="workspace",
            result_type=WorkspaceResult,
            ttl=settings.cache_ttl_workspace,
            id_key=keys.workspace_key,
            lookup_keys=(
                lambda w: keys.workspace_key(w.id),
                lambda w: keys.workspace_slug_key(w.slug),
            ),
        ),
        user=EntityCachePolicy(
            entity="user",
            result_type=UserResult,
            ttl=settings.cache_ttl_user,
            id_key=keys.user_key,
            lookup_keys=(
                lambda u: keys.user_key(u.id),
                lambda u: keys.user_email_key(u.email),
            ),
        ),
        staff=EntityCachePolicy(
            entity="staff",
            result_type=StaffResult,
            ttl=settings.cache_ttl_staff,
            id_key=keys.staff_key,
            lookup_keys=(
                lambda s: keys.staff_key(s.id),
                _optional_email_key,
                lambda s: keys.staff_employee_key(s.organization_id, s.employee_id),
            ),
            aggregate_keys=(_dashboard,),
        ),
        department=EntityCachePolicy(
            entity="department",
            result_type=DepartmentResult,
            ttl=settings.cache_ttl_department,
            id_key=keys.department_key,
            lookup_keys=(lambda d: keys.department_key(d.id),),
            aggregate_keys=(lambda d: [keys.department_list_key(d.organization_id)],),
        ),
        attendance=EntityCachePolicy(
            entity="attendance",
            result_type=AttendanceResult,
            ttl=settings.cache_ttl_attendance,
            id_key=keys.attendance_key,
            lookup_keys=(lambda a: keys.attendance_key(a.id),),
            aggregate_keys=(
                lambda a: [
                    keys.attendance_day_key(a.organization_id, utc_day(a.check_in)),
                    keys.attendance_recent_key(a.staff_id),
                ],
                _dashboard,
            ),
        ),
        leave_request=EntityCachePolicy(
            entity="leave",
            result_type=LeaveRequestResult,
            ttl=settings.cache_ttl_leave_request,
            id_key=keys.leave_request_key,
            lookup_keys=(lambda r: keys.leave_request_key(r.id),),
            aggregate_keys=(_dashboard,),
        ),
        project=EntityCachePolicy(
            entity="project",
            result_type=ProjectResult,
            ttl=settings.cache_ttl_project,
            id_key=keys.project_key,
            lookup_keys=(
                lambda p: keys.project_key(p.id),
                lambda p: keys.project_slug_key(p.workspace_id, p.slug),
            ),
            aggregate_keys=(lambda p: [keys.project_task_summary_key(p.id)],),
        ),
        task=EntityCachePolicy(
            entity="task",
            result_type=TaskResult,
            ttl=settings.cache_ttl_task,
            id_key=keys.task_key,
            lookup_keys=(lambda t: keys.task_key(t.id),),
            aggregate_keys=(_task_aggregates,),
        ),
        report=EntityCachePolicy(
            entity="report",
            result_type=ReportResult,
            ttl=settings.cache_ttl_report,
            id_key=keys.report_key,
            lookup_keys=(lambda r: keys.report_key(r.id),),
            aggregate_keys=(_dashboard,),
        ),
        report_template=EntityCachePolicy(
            entity="template",
            result_type=ReportTemplateResult,
            ttl=settings.cache_ttl_report_template,
            id_key=keys.report_template_key,
            lookup_keys=(lambda t: keys.report_template_key(t.id),),
        ),
        document=EntityCachePolicy(
            entity="document",
            result_type=DocumentResult,
            ttl=settings.cache_ttl_document,
            id_key=keys.document_key,
            lookup_keys=(lambda d: keys.document_key(d.id),),
        ),
        notification=EntityCachePolicy(
            entity="notification",
            result_type=NotificationResult,
            ttl=settings.cache_ttl_notification,
            id_key=keys.notification_key,
            lookup_keys=(lambda n: keys.notification_key(n.id),),
            aggregate_keys=(lambda n: [keys.unread_count_key(n.user_id)],),
        ),
        invitation=EntityCachePolicy(
            entity="invitation",
            result_type=InvitationResult,
            ttl=settings.cache_ttl_invitation,
            id_key=keys.invitation_key,
            lookup_keys=(
                lambda i: keys.invitation_key(i.id),
                lambda i: keys.invitation_token_key(i.token),
            ),
        ),
        ttl_unread_count=settings.cache_ttl_unread_count,
        ttl_today_attendance=settings.cache_ttl_today_attendance,
        ttl_recent_attendance=settings.cache_ttl_recent_attendance,
        ttl_department_list=settings.cache_ttl_department_list,
        ttl_task_summary=settings.cache_ttl_task_summary,
        ttl_dashboard=settings.cache_ttl_dashboard,
    )


@lru_cache
def get_cache_policies() -> CachePolicies:
    """Return the process-wide policy registry built from get_settings()."""
    return build_cache_policies(get_settings())
