"""Business operations available to a signed-in user.

Each operation builds a remote payload, runs it through the mutation applier and
returns the applier's outcome. Privileged operations check the acting profile's role
permissions first and refuse without touching the gateway.
"""

from __future__ import annotations

from dataclasses import replace
from datetime import UTC, datetime
from logging import getLogger
from typing import TYPE_CHECKING, Final
from uuid import uuid4

from internsync.domain.mapping import AVATAR_BASE_URL, avatar_url
from internsync.domain.mirror import MutationKind
from internsync.domain.model import (
    BROADCAST_RECIPIENT,
    DEFAULT_HOURS_REQUIRED,
    Collection,
    GoalStatus,
    LeaveStatus,
    LogStatus,
    MessageChannel,
    NotificationType,
    ResourceType,
    Role,
    TaskDeliverable,
    TaskFeedback,
    TaskPriority,
    TaskStatus,
    UserStatus,
)
from internsync.domain.permissions import Permission, has_permission

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable, Mapping
    from datetime import date

    from internsync.domain.mirror import MirrorStore, MutationApplier, MutationOutcome
    from internsync.domain.model import (
        AttendanceExceptionType,
        Entity,
        EvaluationScore,
        EvaluationType,
        FeedbackType,
        LeaveType,
        Notification,
        Profile,
        ReportType,
        SkillRating,
    )


log = getLogger(__name__)

PERMISSION_DENIED_MESSAGE: Final = "You do not have permission to do that."

SELF_EDITABLE_PROFILE_FIELDS: Final = frozenset(
    {
        "name",
        "phone",
        "institution",
        "department",
        "bio",
        "hobbies",
        "profile_skills",
        "achievements",
        "future_goals",
    }
)
MANAGED_PROFILE_FIELDS: Final = SELF_EDITABLE_PROFILE_FIELDS | {
    "role",
    "status",
    "supervisor_notes",
    "assigned_supervisor_id",
    "total_hours_required",
    "internship_start_date",
    "internship_end_date",
}
NEW_PROFILE_FIELDS: Final = MANAGED_PROFILE_FIELDS - {"role", "status"}
GOAL_FIELDS: Final = frozenset({"description", "category", "alignment", "status", "progress"})
SITE_VISIT_FIELDS: Final = frozenset({"date", "location", "purpose", "notes"})


def _utcnow() -> datetime:
    return datetime.now(UTC)


def _unsupported_fields(
    fields: Mapping[str, object], allowed: frozenset[str]
) -> str | None:
    unknown = set(fields) - allowed
    if not unknown:
        return None
    return f"Unsupported fields: {', '.join(sorted(unknown))}"


class Workspace:
    """Operations the UI calls on behalf of the signed-in profile ``actor_id``."""

    def __init__(
        self,
        applier: MutationApplier,
        actor_id: str,
        *,
        hours_required: int = DEFAULT_HOURS_REQUIRED,
        avatar_base_url: str = AVATAR_BASE_URL,
        clock: Callable[[], datetime] = _utcnow,
        id_factory: Callable[[], str] = lambda: str(uuid4()),
    ) -> None:
        self._applier = applier
        self._actor_id = actor_id
        self._hours_required = hours_required
        self._avatar_base_url = avatar_base_url
        self._clock = clock
        self._id_factory = id_factory

    @property
    def store(self) -> MirrorStore:
        return self._applier.store

    @property
    def actor(self) -> Profile | None:
        return self.store.profile(self._actor_id)

    def can(self, permission: Permission) -> bool:
        return has_permission(self.actor, permission)

    def _denied(self, kind: MutationKind, collection: Collection) -> MutationOutcome[Entity]:
        return self._applier.refuse(kind, collection, PERMISSION_DENIED_MESSAGE)

    # -- notifications ----------------------------------------------------------------

    def my_notifications(self) -> list[Notification]:
        return self.store.notifications_for(self._actor_id)

    def unread_count(self) -> int:
        return self.store.unread_count(self._actor_id)

    async def send_notification(
        self,
        *,
        recipient_id: str,
        title: str,
        message: str,
        type: NotificationType = NotificationType.INFO,  # noqa: A002
    ) -> MutationOutcome[Entity]:
        announcement = recipient_id == BROADCAST_RECIPIENT or type is NotificationType.ANNOUNCEMENT
        if announcement and not self.can(Permission.POST_ANNOUNCEMENT):
            return self._denied(MutationKind.CREATE, Collection.NOTIFICATIONS)
        return await self._applier.create(
            Collection.NOTIFICATIONS,
            {
                "recipient_id": recipient_id,
                "sender_id": self._actor_id,
                "title": title,
                "message": message,
                "type": type,
                "timestamp": self._clock(),
                "read": False,
            },
        )

    async def mark_notification_read(self, notification_id: str) -> MutationOutcome[Entity]:
        return await self._applier.update(
            Collection.NOTIFICATIONS, notification_id, {"read": True}
        )

    async def mark_all_notifications_read(self) -> int:
        """Mark every unread notification read in the mirror first, then remotely.

        The remote updates are best effort; a failure leaves the local read flag set.
        Returns how many notifications were marked.
        """

        unread = [notification for notification in self.my_notifications() if not notification.read]
        for notification in unread:
            self._applier.apply_optimistic(replace(notification, read=True))
        for notification in unread:
            await self._applier.update(
                Collection.NOTIFICATIONS, notification.id, {"read": True}, best_effort=True
            )
        log.debug("Marked %d notifications read", len(unread))
        return len(unread)

    # -- logs -------------------------------------------------------------------------

    async def add_log(
        self,
        *,
        date: date,
        hours_worked: float,
        activity_description: str,
        challenges: str | None = None,
        student_id: str | None = None,
    ) -> MutationOutcome[Entity]:
        return await self._applier.create(
            Collection.LOGS,
            {
                "student_id": student_id or self._actor_id,
                "date": date,
                "hours_worked": hours_worked,
                "activity_description": activity_description,
                "challenges": challenges,
                "status": LogStatus.PENDING,
            },
        )

    async def approve_log(
        self, log_id: str, *, approved: bool, comment: str | None = None
    ) -> MutationOutcome[Entity]:
        if not self.can(Permission.APPROVE_LOGS):
            return self._denied(MutationKind.UPDATE, Collection.LOGS)
        return await self._applier.update(
            Collection.LOGS,
            log_id,
            {
                "status": LogStatus.APPROVED if approved else LogStatus.REJECTED,
                "supervisor_comment": comment,
            },
        )

    # -- tasks ------------------------------------------------------------------------

    async def add_task(
        self,
        *,
        title: str,
        description: str,
        assigned_to_id: str,
        priority: TaskPriority = TaskPriority.MEDIUM,
        due_date: date | None = None,
        linked_goal_id: str | None = None,
    ) -> MutationOutcome[Entity]:
        if not self.can(Permission.ASSIGN_TASKS):
            return self._denied(MutationKind.CREATE, Collection.TASKS)
        return await self._applier.create(
            Collection.TASKS,
            {
                "title": title,
                "description": description,
                "assigned_to_id": assigned_to_id,
                "assigned_by_id": self._actor_id,
                "status": TaskStatus.TODO,
                "priority": priority,
                "due_date": due_date,
                "linked_goal_id": linked_goal_id or None,
                "created_at": self._clock(),
            },
        )

    async def update_task_status(
        self, task_id: str, status: TaskStatus
    ) -> MutationOutcome[Entity]:
        return await self._applier.update(Collection.TASKS, task_id, {"status": status})

    async def submit_deliverable(
        self, task_id: str, *, description: str, url: str | None = None
    ) -> MutationOutcome[Entity]:
        deliverable = TaskDeliverable(description=description, url=url, submitted_at=self._clock())
        return await self._applier.update(
            Collection.TASKS,
            task_id,
            {"deliverable": deliverable, "status": TaskStatus.COMPLETED},
        )

    async def give_feedback(
        self, task_id: str, *, type: FeedbackType, comment: str  # noqa: A002
    ) -> MutationOutcome[Entity]:
        feedback = TaskFeedback(type=type, comment=comment, given_at=self._clock())
        return await self._applier.update(Collection.TASKS, task_id, {"feedback": feedback})

    # -- meetings and messages --------------------------------------------------------

    async def schedule_meeting(
        self,
        *,
        title: str,
        date: date,
        time: str,
        attendees: Iterable[str],
        link: str | None = None,
    ) -> MutationOutcome[Entity]:
        if not self.can(Permission.SCHEDULE_MEETING):
            return self._denied(MutationKind.CREATE, Collection.MEETINGS)
        return await self._applier.create(
            Collection.MEETINGS,
            {
                "title": title,
                "organizer_id": self._actor_id,
                "date": date,
                "time": time,
                "attendees": tuple(dict.fromkeys(attendees)),
                "link": link,
            },
        )

    async def send_message(
        self,
        *,
        content: str,
        related_student_id: str,
        channel: MessageChannel = MessageChannel.DIRECT,
    ) -> MutationOutcome[Entity]:
        return await self._applier.create(
            Collection.MESSAGES,
            {
                "sender_id": self._actor_id,
                "content": content,
                "channel": channel,
                "related_student_id": related_student_id,
                "timestamp": self._clock(),
            },
        )

    # -- profiles ---------------------------------------------------------------------

    def _new_profile_payload(
        self,
        *,
        email: str,
        name: str,
        role: Role,
        details: Mapping[str, object],
    ) -> dict[str, object]:
        payload: dict[str, object] = {
            "hobbies": (),
            "profile_skills": (),
            "achievements": (),
            "future_goals": (),
            "total_hours_required": self._hours_required,
        }
        payload.update(details)
        payload.update(
            {
                "id": self._id_factory(),
                "email": email,
                "name": name,
                "role": role,
                "status": UserStatus.ACTIVE,
                "avatar": avatar_url(name, base_url=self._avatar_base_url),
            }
        )
        return payload

    async def add_user(
        self, *, email: str, name: str, role: Role, **details: object
    ) -> MutationOutcome[Entity]:
        """Create an ACTIVE profile; the person links to it by registering with ``email``."""

        if not self.can(Permission.MANAGE_ALL_USERS):
            return self._denied(MutationKind.CREATE, Collection.USERS)
        notice = _unsupported_fields(details, NEW_PROFILE_FIELDS)
        if notice is not None:
            return self._applier.refuse(MutationKind.CREATE, Collection.USERS, notice)
        payload = self._new_profile_payload(email=email, name=name, role=role, details=details)
        return await self._applier.create(Collection.USERS, payload)

    async def add_intern(
        self, *, email: str, name: str, **details: object
    ) -> MutationOutcome[Entity]:
        if not self.can(Permission.CREATE_INTERN_ACCOUNT):
            return self._denied(MutationKind.CREATE, Collection.USERS)
        actor = self.actor
        if actor is not None and actor.role is Role.SUPERVISOR:
            details.setdefault("assigned_supervisor_id", actor.id)
        notice = _unsupported_fields(details, NEW_PROFILE_FIELDS)
        if notice is not None:
            return self._applier.refuse(MutationKind.CREATE, Collection.USERS, notice)
        payload = self._new_profile_payload(
            email=email, name=name, role=Role.STUDENT, details=details
        )
        return await self._applier.create(Collection.USERS, payload)

    async def update_user(self, user_id: str, **changes: object) -> MutationOutcome[Entity]:
        if not (
            self.can(Permission.MANAGE_ALL_USERS) or self.can(Permission.CREATE_INTERN_ACCOUNT)
        ):
            return self._denied(MutationKind.UPDATE, Collection.USERS)
        notice = _unsupported_fields(changes, MANAGED_PROFILE_FIELDS)
        if notice is not None:
            return self._applier.refuse(MutationKind.UPDATE, Collection.USERS, notice)
        return await self._applier.update(Collection.USERS, user_id, changes)

    async def update_profile(self, **changes: object) -> MutationOutcome[Entity]:
        """Edit the signed-in profile's own details."""

        notice = _unsupported_fields(changes, SELF_EDITABLE_PROFILE_FIELDS)
        if notice is not None:
            return self._applier.refuse(MutationKind.UPDATE, Collection.USERS, notice)
        return await self._applier.update(Collection.USERS, self._actor_id, changes)

    async def approve_user(self, user_id: str, status: UserStatus) -> MutationOutcome[Entity]:
        if not self.can(Permission.MANAGE_ALL_USERS):
            return self._denied(MutationKind.UPDATE, Collection.USERS)
        return await self._applier.update(Collection.USERS, user_id, {"status": status})

    async def delete_user(self, user_id: str) -> MutationOutcome[Entity]:
        if not self.can(Permission.DELETE_USER):
            return self._denied(MutationKind.DELETE, Collection.USERS)
        return await self._applier.delete(Collection.USERS, user_id)

    # -- goals and reports ------------------------------------------------------------

    async def add_goal(
        self, *, description: str, category: str, alignment: str = ""
    ) -> MutationOutcome[Entity]:
        return await self._applier.create(
            Collection.GOALS,
            {
                "student_id": self._actor_id,
                "description": description,
                "category": category,
                "alignment": alignment,
                "status": GoalStatus.NOT_STARTED,
                "progress": 0,
            },
        )

    async def update_goal(self, goal_id: str, **changes: object) -> MutationOutcome[Entity]:
        notice = _unsupported_fields(changes, GOAL_FIELDS)
        if notice is not None:
            return self._applier.refuse(MutationKind.UPDATE, Collection.GOALS, notice)
        return await self._applier.update(Collection.GOALS, goal_id, changes)

    async def delete_goal(self, goal_id: str) -> MutationOutcome[Entity]:
        return await self._applier.delete(Collection.GOALS, goal_id)

    async def add_report(
        self,
        *,
        type: ReportType,  # noqa: A002
        period_start: date,
        period_end: date,
        summary: str,
        key_learnings: str = "",
        next_steps: str = "",
    ) -> MutationOutcome[Entity]:
        return await self._applier.create(
            Collection.REPORTS,
            {
                "student_id": self._actor_id,
                "type": type,
                "period_start": period_start,
                "period_end": period_end,
                "summary": summary,
                "key_learnings": key_learnings,
                "next_steps": next_steps,
                "submitted_at": self._clock(),
            },
        )

    # -- resources, evaluations, skills -----------------------------------------------

    async def add_resource(
        self,
        *,
        title: str,
        url: str,
        type: ResourceType = ResourceType.LINK,  # noqa: A002
    ) -> MutationOutcome[Entity]:
        if not self.can(Permission.MANAGE_RESOURCES):
            return self._denied(MutationKind.CREATE, Collection.RESOURCES)
        return await self._applier.create(
            Collection.RESOURCES,
            {
                "title": title,
                "type": type,
                "url": url,
                "uploaded_by": self._actor_id,
                "upload_date": self._clock(),
            },
        )

    async def add_evaluation(
        self,
        *,
        student_id: str,
        type: EvaluationType,  # noqa: A002
        scores: Iterable[EvaluationScore],
        overall_feedback: str,
    ) -> MutationOutcome[Entity]:
        if not self.can(Permission.EVALUATE_STUDENT):
            return self._denied(MutationKind.CREATE, Collection.EVALUATIONS)
        return await self._applier.create(
            Collection.EVALUATIONS,
            {
                "student_id": student_id,
                "supervisor_id": self._actor_id,
                "type": type,
                "date": self._clock(),
                "scores": tuple(scores),
                "overall_feedback": overall_feedback,
            },
        )

    async def add_skill(self, *, name: str, category: str = "Technical") -> MutationOutcome[Entity]:
        return await self._applier.create(Collection.SKILLS, {"name": name, "category": category})

    async def add_skill_assessment(
        self, *, student_id: str, ratings: Iterable[SkillRating]
    ) -> MutationOutcome[Entity]:
        actor = self.actor
        return await self._applier.create(
            Collection.SKILL_ASSESSMENTS,
            {
                "student_id": student_id,
                "rater_id": self._actor_id,
                "role": actor.role if actor is not None else Role.STUDENT,
                "date": self._clock(),
                "ratings": tuple(ratings),
            },
        )

    # -- attendance -------------------------------------------------------------------

    async def add_leave_request(
        self,
        *,
        start_date: date,
        end_date: date,
        type: LeaveType,  # noqa: A002
        reason: str,
    ) -> MutationOutcome[Entity]:
        return await self._applier.create(
            Collection.LEAVE_REQUESTS,
            {
                "student_id": self._actor_id,
                "start_date": start_date,
                "end_date": end_date,
                "type": type,
                "reason": reason,
                "status": LeaveStatus.PENDING,
            },
        )

    async def update_leave_status(
        self, request_id: str, status: LeaveStatus
    ) -> MutationOutcome[Entity]:
        return await self._applier.update(Collection.LEAVE_REQUESTS, request_id, {"status": status})

    async def add_site_visit(
        self,
        *,
        student_id: str,
        date: date,
        location: str,
        purpose: str,
        notes: str = "",
    ) -> MutationOutcome[Entity]:
        return await self._applier.create(
            Collection.SITE_VISITS,
            {
                "student_id": student_id,
                "visitor_id": self._actor_id,
                "date": date,
                "location": location,
                "purpose": purpose,
                "notes": notes,
            },
        )

    async def update_site_visit(self, visit_id: str, **changes: object) -> MutationOutcome[Entity]:
        notice = _unsupported_fields(changes, SITE_VISIT_FIELDS)
        if notice is not None:
            return self._applier.refuse(MutationKind.UPDATE, Collection.SITE_VISITS, notice)
        return await self._applier.update(Collection.SITE_VISITS, visit_id, changes)

    async def delete_site_visit(self, visit_id: str) -> MutationOutcome[Entity]:
        return await self._applier.delete(Collection.SITE_VISITS, visit_id)

    async def add_attendance_exception(
        self,
        *,
        student_id: str,
        date: date,
        reason: str,
        type: AttendanceExceptionType,  # noqa: A002
    ) -> MutationOutcome[Entity]:
        return await self._applier.create(
            Collection.ATTENDANCE_EXCEPTIONS,
            {"student_id": student_id, "date": date, "reason": reason, "type": type},
        )

    async def delete_attendance_exception(self, exception_id: str) -> MutationOutcome[Entity]:
        return await self._applier.delete(Collection.ATTENDANCE_EXCEPTIONS, exception_id)
