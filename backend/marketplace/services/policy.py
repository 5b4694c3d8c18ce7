"""Authorization policy — one deny-by-default table for the whole core.

Each entry maps ``(role, action)`` to either ``True`` (unconditional allow)
or a predicate over the caller's context and the resource's ownership.
Pairs missing from ``POLICY`` are denied. Decisions are recomputed on every
call; nothing is cached between requests.
"""
import enum
import logging
from dataclasses import dataclass
from typing import Callable, Optional, Union

from marketplace.errors import AuthorizationError
from marketplace.models.account import AccountRole
from marketplace.services.context import AuthenticatedContext

logger = logging.getLogger(__name__)


class Action(str, enum.Enum):
    event_list = "event.list"
    event_read = "event.read"
    event_create = "event.create"
    event_update = "event.update"

    proposal_list = "proposal.list"
    proposal_read = "proposal.read"
    proposal_create = "proposal.create"
    proposal_edit = "proposal.edit"
    proposal_send = "proposal.send"
    proposal_decide = "proposal.decide"

    booking_list = "booking.list"
    booking_read = "booking.read"
    booking_request = "booking.request"
    booking_respond = "booking.respond"
    booking_cancel = "booking.cancel"
    booking_complete = "booking.complete"

    service_list = "service.list"
    service_create = "service.create"
    service_update = "service.update"

    portfolio_list = "portfolio.list"
    portfolio_create = "portfolio.create"
    review_list = "review.list"
    review_create = "review.create"

    profile_read = "profile.read"
    profile_update = "profile.update"

    account_list = "account.list"
    account_create = "account.create"
    account_set_status = "account.set_status"

    activity_list = "activity.list"
    dashboard_read = "dashboard.read"
    notification_read = "notification.read"


@dataclass(frozen=True)
class Resource:
    """Ownership facts about the target of an action. Unset fields are unknown."""

    customer_profile_id: Optional[int] = None
    provider_profile_id: Optional[int] = None
    author_role: Optional[AccountRole] = None
    author_profile_id: Optional[int] = None
    account_id: Optional[int] = None
    is_draft: bool = False


Predicate = Callable[[AuthenticatedContext, Resource], bool]
Rule = Union[bool, Predicate]


def _customer_owns(ctx: AuthenticatedContext, res: Resource) -> bool:
    return res.customer_profile_id is not None and res.customer_profile_id == ctx.profile_id


def _provider_owns(ctx: AuthenticatedContext, res: Resource) -> bool:
    return res.provider_profile_id is not None and res.provider_profile_id == ctx.profile_id


def _customer_owns_sent(ctx: AuthenticatedContext, res: Resource) -> bool:
    return _customer_owns(ctx, res) and not res.is_draft


def _is_author(ctx: AuthenticatedContext, res: Resource) -> bool:
    return res.author_role == ctx.role and res.author_profile_id == ctx.profile_id


def _own_account(ctx: AuthenticatedContext, res: Resource) -> bool:
    return res.account_id is not None and res.account_id == ctx.account_id


_STAFF_RULES: dict[Action, Rule] = {
    Action.event_list: True,
    Action.event_read: True,
    Action.event_update: True,
    Action.proposal_list: True,
    Action.proposal_read: True,
    Action.proposal_create: True,
    Action.proposal_edit: True,
    Action.proposal_send: _is_author,
    Action.booking_list: True,
    Action.booking_read: True,
    Action.booking_complete: True,
    Action.service_list: True,
    Action.portfolio_list: True,
    Action.review_list: True,
    Action.profile_read: _own_account,
    Action.profile_update: _own_account,
    Action.account_list: True,
    Action.activity_list: True,
    Action.dashboard_read: True,
    Action.notification_read: _own_account,
}

POLICY: dict[tuple[AccountRole, Action], Rule] = {
    **{(AccountRole.admin, action): rule for action, rule in _STAFF_RULES.items()},
    **{(AccountRole.employee, action): rule for action, rule in _STAFF_RULES.items()},
    (AccountRole.admin, Action.account_create): True,
    (AccountRole.admin, Action.account_set_status): True,

    (AccountRole.customer, Action.event_list): True,
    (AccountRole.customer, Action.event_create): True,
    (AccountRole.customer, Action.event_read): _customer_owns,
    (AccountRole.customer, Action.event_update): _customer_owns,
    (AccountRole.customer, Action.proposal_list): _customer_owns,
    (AccountRole.customer, Action.proposal_read): _customer_owns_sent,
    (AccountRole.customer, Action.proposal_decide): _customer_owns_sent,
    (AccountRole.customer, Action.booking_list): True,
    (AccountRole.customer, Action.booking_read): _customer_owns,
    (AccountRole.customer, Action.booking_request): _customer_owns,
    (AccountRole.customer, Action.booking_cancel): _customer_owns,
    (AccountRole.customer, Action.service_list): True,
    (AccountRole.customer, Action.portfolio_list): True,
    (AccountRole.customer, Action.review_list): True,
    (AccountRole.customer, Action.review_create): _customer_owns,
    (AccountRole.customer, Action.profile_read): _own_account,
    (AccountRole.customer, Action.profile_update): _own_account,
    (AccountRole.customer, Action.notification_read): _own_account,

    (AccountRole.provider, Action.booking_list): True,
    (AccountRole.provider, Action.booking_read): _provider_owns,
    (AccountRole.provider, Action.booking_respond): _provider_owns,
    (AccountRole.provider, Action.booking_cancel): _provider_owns,
    (AccountRole.provider, Action.service_list): True,
    (AccountRole.provider, Action.service_create): True,
    (AccountRole.provider, Action.service_update): _provider_owns,
    (AccountRole.provider, Action.portfolio_list): True,
    (AccountRole.provider, Action.portfolio_create): True,
    (AccountRole.provider, Action.review_list): True,
    (AccountRole.provider, Action.profile_read): _own_account,
    (AccountRole.provider, Action.profile_update): _own_account,
    (AccountRole.provider, Action.notification_read): _own_account,
}


def allow(ctx: AuthenticatedContext, action: Action, resource: Optional[Resource] = None) -> bool:
    rule = POLICY.get((ctx.role, action), False)
    if isinstance(rule, bool):
        return rule
    return rule(ctx, resource or Resource())


def require(ctx: AuthenticatedContext, action: Action, resource: Optional[Resource] = None) -> None:
    """Raise AuthorizationError unless ``ctx`` may perform ``action`` on ``resource``."""
    if not allow(ctx, action, resource):
        logger.warning(
            "Denied %s for %s account %s (%s)", action.value, ctx.role.value, ctx.account_id, resource,
        )
        raise AuthorizationError()
