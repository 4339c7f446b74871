"""Tests for actor roles and permissions."""

import pytest

from rentrack.core.entities.actor import ActorContext, Permission, Role, permissions_for


class TestPermissions:
    """Tests for the role permission table."""

    def test_admin_has_everything(self):
        assert permissions_for(Role.ADMIN) == frozenset(Permission)

    def test_user_permissions(self):
        perms = permissions_for(Role.USER)
        assert Permission.INVENTORY_MOVEMENT in perms
        assert Permission.REPORTS_VIEW in perms
        assert Permission.USER_MANAGEMENT not in perms

    def test_operator_cannot_view_reports(self):
        perms = permissions_for(Role.OPERATOR)
        assert Permission.INVENTORY_MOVEMENT in perms
        assert Permission.REPORTS_VIEW not in perms


class TestActorContext:
    """Tests for ActorContext."""

    def test_create(self):
        actor = ActorContext(user_id="u1", role=Role.OPERATOR)
        assert actor.location_id is None
        assert actor.has(Permission.INVENTORY_MOVEMENT) is True
        assert actor.has(Permission.SETTINGS) is False

    def test_role_from_string(self):
        actor = ActorContext(user_id="u1", role="admin", location_id="CL-TOY")
        assert actor.role is Role.ADMIN
        assert actor.location_id == "CL-TOY"

    def test_unknown_role_rejected(self):
        with pytest.raises(ValueError):
            ActorContext(user_id="u1", role="guest")
