"""Tests for the deny-by-default authorization table."""
import dataclasses

import pytest

from marketplace.errors import AuthorizationError
from marketplace.models.account import AccountRole, AccountStatus
from marketplace.services import policy
from marketplace.services.context import AuthenticatedContext
from marketplace.services.policy import POLICY, Action, Resource


def _ctx(role: AccountRole, profile_id: int = 1, account_id: int = 10) -> AuthenticatedContext:
    return AuthenticatedContext(account_id=account_id, role=role, profile_id=profile_id, status=AccountStatus.active)


# A resource every ownership predicate would accept for profile 1 / account 10.
_OWNED = Resource(
    customer_profile_id=1,
    provider_profile_id=1,
    author_role=None,
    author_profile_id=1,
    account_id=10,
)


class TestDenyByDefault:

    @pytest.mark.parametrize("role", list(AccountRole))
    @pytest.mark.parametrize("action", list(Action))
    def test_unlisted_pairs_denied(self, role, action):
        if (role, action) in POLICY:
            pytest.skip("listed pair")
        ctx = _ctx(role)
        resource = dataclasses.replace(_OWNED, author_role=role)
        assert policy.allow(ctx, action, resource) is False

    def test_require_raises(self):
        with pytest.raises(AuthorizationError):
            policy.require(_ctx(AccountRole.provider), Action.event_create)

    def test_provider_has_no_event_access(self):
        ctx = _ctx(AccountRole.provider)
        for action in (Action.event_list, Action.event_read, Action.event_create, Action.event_update):
            assert not policy.allow(ctx, action, _OWNED)

    def test_only_admin_manages_accounts(self):
        for role in AccountRole:
            expected = role == AccountRole.admin
            assert policy.allow(_ctx(role), Action.account_set_status) is expected
            assert policy.allow(_ctx(role), Action.account_create) is expected


class TestOwnership:

    def test_customer_reads_only_own_event(self):
        ctx = _ctx(AccountRole.customer, profile_id=1)
        assert policy.allow(ctx, Action.event_read, Resource(customer_profile_id=1))
        assert not policy.allow(ctx, Action.event_read, Resource(customer_profile_id=2))
        assert not policy.allow(ctx, Action.event_read, Resource())

    def test_customer_cannot_see_drafts(self):
        ctx = _ctx(AccountRole.customer, profile_id=1)
        assert policy.allow(ctx, Action.proposal_read, Resource(customer_profile_id=1))
        assert not policy.allow(ctx, Action.proposal_read, Resource(customer_profile_id=1, is_draft=True))
        assert not policy.allow(ctx, Action.proposal_decide, Resource(customer_profile_id=1, is_draft=True))

    def test_provider_responds_only_to_own_bookings(self):
        ctx = _ctx(AccountRole.provider, profile_id=7)
        assert policy.allow(ctx, Action.booking_respond, Resource(provider_profile_id=7))
        assert not policy.allow(ctx, Action.booking_respond, Resource(provider_profile_id=8))

    def test_customer_never_responds_to_bookings(self):
        ctx = _ctx(AccountRole.customer, profile_id=1)
        assert not policy.allow(ctx, Action.booking_respond, Resource(customer_profile_id=1))

    def test_only_author_sends(self):
        author = _ctx(AccountRole.employee, profile_id=3)
        other_employee = _ctx(AccountRole.employee, profile_id=4)
        admin_same_id = _ctx(AccountRole.admin, profile_id=3)
        res = Resource(author_role=AccountRole.employee, author_profile_id=3)
        assert policy.allow(author, Action.proposal_send, res)
        assert not policy.allow(other_employee, Action.proposal_send, res)
        assert not policy.allow(admin_same_id, Action.proposal_send, res)

    def test_staff_see_everything_readable(self):
        for role in (AccountRole.admin, AccountRole.employee):
            ctx = _ctx(role)
            for action in (Action.event_read, Action.proposal_read, Action.booking_read, Action.activity_list):
                assert policy.allow(ctx, action, Resource(customer_profile_id=99, provider_profile_id=99))

    def test_notifications_are_private(self):
        ctx = _ctx(AccountRole.customer, account_id=10)
        assert policy.allow(ctx, Action.notification_read, Resource(account_id=10))
        assert not policy.allow(ctx, Action.notification_read, Resource(account_id=11))
