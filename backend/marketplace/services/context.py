"""The resolved caller identity handed to every policy and workflow call."""
from dataclasses import dataclass

from marketplace.models.account import AccountRole, AccountStatus


@dataclass(frozen=True)
class AuthenticatedContext:
    account_id: int
    role: AccountRole
    profile_id: int
    status: AccountStatus
