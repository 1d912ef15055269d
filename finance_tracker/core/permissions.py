"""Role-gated permission checks for mutating operations."""

from enum import Enum as PyEnum

from finance_tracker.core.exceptions import ForbiddenException
from finance_tracker.models.role import OrganizationRole


class Action(str, PyEnum):
    """Operation classes gated by role."""

    CREATE = "create"
    EDIT = "edit"
    DELETE = "delete"
    INVITE = "invite"
    REVOKE_INVITE = "revokeInvite"
    MANAGE_ORGANIZATION = "manageOrganization"


# Minimum role required for each action. Reads are open to every role.
REQUIRED_ROLE: dict[Action, OrganizationRole] = {
    Action.CREATE: OrganizationRole.MEMBER,
    Action.EDIT: OrganizationRole.MEMBER,
    Action.DELETE: OrganizationRole.ADMIN,
    Action.INVITE: OrganizationRole.ADMIN,
    Action.REVOKE_INVITE: OrganizationRole.ADMIN,
    Action.MANAGE_ORGANIZATION: OrganizationRole.OWNER,
}


def can_perform(role: OrganizationRole, action: Action) -> bool:
    """
    Check whether a role is allowed to perform an action.

    | action             | OWNER | ADMIN | MEMBER | VIEWER |
    |--------------------|-------|-------|--------|--------|
    | create / edit      | yes   | yes   | yes    | no     |
    | delete             | yes   | yes   | no     | no     |
    | invite / revoke    | yes   | yes   | no     | no     |
    | manageOrganization | yes   | no    | no     | no     |
    """
    return role >= REQUIRED_ROLE[action]


def require_permission(role: OrganizationRole, action: Action) -> None:
    """
    Raise unless ``role`` may perform ``action``.

    The error names the action and the minimum role only; it never says
    anything about the record the caller was trying to touch.

    Raises:
        ForbiddenException: If the role is below the required minimum
    """
    if can_perform(role, action):
        return
    required = REQUIRED_ROLE[action]
    raise ForbiddenException(
        f"Action '{action.value}' requires {required.value} role or higher",
        action=action,
        required_role=required,
    )
