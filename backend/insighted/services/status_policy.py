"""Status-driven field visibility and editability.

One lookup decides, for each field group, whether it is shown and whether it
is editable:

  NotYetStarted / UnderProcurement:  basic, timelines, funds editable; progress hidden
  Ongoing / ForFinalInspection:      basic editable; timelines, funds read-only;
                                     accomplishment editable; ongoing extras shown
  Completed:                         everything read-only; completion extras shown

Realign mode is checked before the status rule and always unlocks basic info.
Locks on an update follow the stored status. A move to a later stage (see
_STAGE) also admits the fields the new status unlocks; a move back does not.
"""

import logging
from dataclasses import dataclass

from insighted.models.enums import FieldGroup, ProjectStatus
from insighted.schemas.project import Project

logger = logging.getLogger(__name__)


FIELD_GROUPS: dict[FieldGroup, tuple[str, ...]] = {
    FieldGroup.BASIC_INFO: (
        "region",
        "division",
        "barangay",
        "school_id",
        "school_name",
        "project_name",
        "project_id",
    ),
    FieldGroup.TIMELINES: (
        "invitation_to_bid",
        "pre_submission_conference",
        "bid_opening",
        "resolution_to_award",
        "notice_to_proceed",
        "target_completion_date",
    ),
    FieldGroup.CONTRACT_FUNDS: (
        "year",
        "batch_of_funds",
        "project_allocation",
        "contractor_name",
        "contract_id",
    ),
    FieldGroup.ACCOMPLISHMENT: (
        "accomplishment_percentage",
        "status_as_of_date",
    ),
    FieldGroup.ONGOING_EXTRAS: (
        "photos",
        "documents",
        "coordinates",
    ),
    FieldGroup.COMPLETION_EXTRAS: (
        "actual_completion_date",
        "certificate_url",
        "coordinates",
    ),
}

# Not governed by any group
UNGOVERNED_FIELDS = ("id", "status", "other_remarks")


@dataclass(frozen=True)
class GroupAccess:
    shown: bool
    editable: bool


EDITABLE = GroupAccess(shown=True, editable=True)
READ_ONLY = GroupAccess(shown=True, editable=False)
HIDDEN = GroupAccess(shown=False, editable=False)


_STATUS_TABLE: dict[ProjectStatus, dict[FieldGroup, GroupAccess]] = {
    ProjectStatus.NOT_YET_STARTED: {
        FieldGroup.BASIC_INFO: EDITABLE,
        FieldGroup.TIMELINES: EDITABLE,
        FieldGroup.CONTRACT_FUNDS: EDITABLE,
        FieldGroup.ACCOMPLISHMENT: HIDDEN,
        FieldGroup.ONGOING_EXTRAS: HIDDEN,
        FieldGroup.COMPLETION_EXTRAS: HIDDEN,
    },
    ProjectStatus.UNDER_PROCUREMENT: {
        FieldGroup.BASIC_INFO: EDITABLE,
        FieldGroup.TIMELINES: EDITABLE,
        FieldGroup.CONTRACT_FUNDS: EDITABLE,
        FieldGroup.ACCOMPLISHMENT: HIDDEN,
        FieldGroup.ONGOING_EXTRAS: HIDDEN,
        FieldGroup.COMPLETION_EXTRAS: HIDDEN,
    },
    ProjectStatus.ONGOING: {
        FieldGroup.BASIC_INFO: EDITABLE,
        FieldGroup.TIMELINES: READ_ONLY,
        FieldGroup.CONTRACT_FUNDS: READ_ONLY,
        FieldGroup.ACCOMPLISHMENT: EDITABLE,
        FieldGroup.ONGOING_EXTRAS: EDITABLE,
        FieldGroup.COMPLETION_EXTRAS: HIDDEN,
    },
    ProjectStatus.FOR_FINAL_INSPECTION: {
        FieldGroup.BASIC_INFO: EDITABLE,
        FieldGroup.TIMELINES: READ_ONLY,
        FieldGroup.CONTRACT_FUNDS: READ_ONLY,
        FieldGroup.ACCOMPLISHMENT: EDITABLE,
        FieldGroup.ONGOING_EXTRAS: EDITABLE,
        FieldGroup.COMPLETION_EXTRAS: HIDDEN,
    },
    ProjectStatus.COMPLETED: {
        FieldGroup.BASIC_INFO: READ_ONLY,
        FieldGroup.TIMELINES: READ_ONLY,
        FieldGroup.CONTRACT_FUNDS: READ_ONLY,
        FieldGroup.ACCOMPLISHMENT: READ_ONLY,
        FieldGroup.ONGOING_EXTRAS: HIDDEN,
        FieldGroup.COMPLETION_EXTRAS: EDITABLE,
    },
}


# Lifecycle stage of each status; procurement and not-yet-started are interchangeable
_STAGE: dict[ProjectStatus, int] = {
    ProjectStatus.UNDER_PROCUREMENT: 0,
    ProjectStatus.NOT_YET_STARTED: 0,
    ProjectStatus.ONGOING: 1,
    ProjectStatus.FOR_FINAL_INSPECTION: 2,
    ProjectStatus.COMPLETED: 3,
}


@dataclass(frozen=True)
class VisibilityProfile:
    status: ProjectStatus
    realigning: bool
    groups: dict[FieldGroup, GroupAccess]

    def access(self, group: FieldGroup) -> GroupAccess:
        return self.groups[group]

    def is_shown(self, field_name: str) -> bool:
        if field_name in UNGOVERNED_FIELDS:
            return True
        return any(self.groups[g].shown for g in groups_for_field(field_name))

    def is_editable(self, field_name: str) -> bool:
        if field_name in UNGOVERNED_FIELDS:
            return True
        return any(self.groups[g].editable for g in groups_for_field(field_name))

    def editable_fields(self) -> set[str]:
        fields = set(UNGOVERNED_FIELDS)
        for group, names in FIELD_GROUPS.items():
            if self.groups[group].editable:
                fields.update(names)
        return fields

    def to_dict(self) -> dict:
        return {
            "status": self.status.value,
            "realigning": self.realigning,
            "groups": {
                group.value: {"shown": access.shown, "editable": access.editable}
                for group, access in self.groups.items()
            },
        }


def groups_for_field(field_name: str) -> tuple[FieldGroup, ...]:
    """Return the groups a field belongs to (coordinates sits in two)."""
    return tuple(g for g, names in FIELD_GROUPS.items() if field_name in names)


def visibility_profile(status: ProjectStatus, realigning: bool = False) -> VisibilityProfile:
    """Map a status (and the realign flag) to per-group shown/editable access."""
    groups = dict(_STATUS_TABLE[ProjectStatus(status)])
    if realigning:
        groups[FieldGroup.BASIC_INFO] = EDITABLE
    return VisibilityProfile(status=ProjectStatus(status), realigning=realigning, groups=groups)


def is_forward_transition(current: ProjectStatus, target: ProjectStatus) -> bool:
    return _STAGE[ProjectStatus(target)] > _STAGE[ProjectStatus(current)]


def apply_status_policy(current: Project, draft: Project, realigning: bool = False) -> Project:
    """Return the record an update of ``current`` with ``draft`` may produce.

    A changed field is accepted when it is editable under the stored status.
    When the draft moves the project forward (say Ongoing to Completed) the
    fields editable under the draft's status are accepted too. Everything else
    keeps the stored value.
    """
    allowed = visibility_profile(current.status, realigning).editable_fields()
    if is_forward_transition(current.status, draft.status):
        allowed |= visibility_profile(draft.status, realigning).editable_fields()

    reverted: dict = {}
    for name in Project.model_fields:
        if name in allowed:
            continue
        stored = getattr(current, name)
        if getattr(draft, name) != stored:
            reverted[name] = stored

    if reverted:
        logger.info(
            "Ignored locked fields on project %s (%s): %s",
            current.id,
            draft.status.value,
            ", ".join(sorted(reverted)),
        )
    return draft.model_copy(update=reverted, deep=True)


def check_consistency(project: Project) -> list[str]:
    """Advisory warnings about accomplishment vs. status. Never enforced."""
    warnings: list[str] = []
    if project.accomplishment_percentage == 100 and project.status not in (
        ProjectStatus.COMPLETED,
        ProjectStatus.FOR_FINAL_INSPECTION,
    ):
        warnings.append(
            f"Accomplishment is 100% but status is {project.status.value}"
        )
    if project.status == ProjectStatus.COMPLETED and project.accomplishment_percentage < 100:
        warnings.append(
            f"Status is Completed but accomplishment is {project.accomplishment_percentage}%"
        )
    return warnings
