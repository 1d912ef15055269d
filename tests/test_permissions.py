import pytest
from finance_tracker.core.exceptions import ForbiddenException
from finance_tracker.core.permissions import Action, REQUIRED_ROLE, can_perform, require_permission
from finance_tracker.models.role import OrganizationRole

OWNER = OrganizationRole.OWNER
ADMIN = OrganizationRole.ADMIN
MEMBER = OrganizationRole.MEMBER
VIEWER = OrganizationRole.VIEWER

EXPECTED = {
    Action.CREATE: {OWNER, ADMIN, MEMBER},
    Action.EDIT: {OWNER, ADMIN, MEMBER},
    Action.DELETE: {OWNER, ADMIN},
    Action.INVITE: {OWNER, ADMIN},
    Action.REVOKE_INVITE: {OWNER, ADMIN},
    Action.MANAGE_ORGANIZATION: {OWNER},
}


class TestRoleOrdering:
    """Roles are totally ordered by privilege"""

    def test_hierarchy(self):
        assert OWNER > ADMIN > MEMBER > VIEWER
        assert sorted([VIEWER, OWNER, MEMBER, ADMIN]) == [VIEWER, MEMBER, ADMIN, OWNER]

    def test_role_is_stored_as_uppercase_value(self):
        assert OrganizationRole("ADMIN") is ADMIN
        assert ADMIN == "ADMIN"


class TestCanPerform:
    """Permission table"""

    @pytest.mark.parametrize("action", list(Action))
    @pytest.mark.parametrize("role", list(OrganizationRole))
    def test_matches_table(self, role, action):
        assert can_perform(role, action) is (role in EXPECTED[action])

    def test_every_action_has_a_required_role(self):
        assert set(REQUIRED_ROLE) == set(Action)

    def test_viewer_cannot_mutate(self):
        assert not any(can_perform(VIEWER, action) for action in Action)

    def test_member_can_create_and_edit_but_not_delete_or_invite(self):
        assert can_perform(MEMBER, Action.CREATE)
        assert can_perform(MEMBER, Action.EDIT)
        assert not can_perform(MEMBER, Action.DELETE)
        assert not can_perform(MEMBER, Action.INVITE)


class TestRequirePermission:
    def test_allowed_returns_none(self):
        assert require_permission(ADMIN, Action.DELETE) is None

    def test_denied_carries_action_and_required_role(self):
        with pytest.raises(ForbiddenException) as exc_info:
            require_permission(MEMBER, Action.DELETE)

        assert exc_info.value.action == Action.DELETE
        assert exc_info.value.required_role == ADMIN
        assert "requires ADMIN" in str(exc_info.value)
