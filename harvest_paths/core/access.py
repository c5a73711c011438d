from __future__ import annotations

import functools
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from eth_utils import to_checksum_address


class Role(str, Enum):
    MANAGEMENT = "management"
    KEEPER = "keeper"
    EMERGENCY_AUTHORIZED = "emergency_authorized"
    AUCTION = "auction"


class UnauthorizedError(PermissionError):
    def __init__(self, caller: str, role: Role):
        self.caller = caller
        self.role = role
        super().__init__(f"{caller} is not authorized as {role.value}")


@dataclass(frozen=True)
class AuthorizationContext:
    """Identity of whoever is invoking a privileged entry point."""

    caller: str

    def __post_init__(self) -> None:
        object.__setattr__(self, "caller", to_checksum_address(self.caller))


@dataclass(frozen=True)
class AccessPolicy:
    management: str
    keepers: frozenset[str] = field(default_factory=frozenset)
    emergency_admin: str | None = None
    auction: str | None = None

    @classmethod
    def build(
        cls,
        *,
        management: str,
        keepers: Iterable[str] = (),
        emergency_admin: str | None = None,
        auction: str | None = None,
    ) -> AccessPolicy:
        return cls(
            management=to_checksum_address(management),
            keepers=frozenset(to_checksum_address(k) for k in keepers),
            emergency_admin=(
                to_checksum_address(emergency_admin) if emergency_admin else None
            ),
            auction=to_checksum_address(auction) if auction else None,
        )

    def has_role(self, caller: str, role: Role) -> bool:
        if role is Role.MANAGEMENT:
            return caller == self.management
        # Management holds every operator role except acting as the auction.
        if role is Role.KEEPER:
            return caller == self.management or caller in self.keepers
        if role is Role.EMERGENCY_AUTHORIZED:
            return caller == self.management or caller == self.emergency_admin
        if role is Role.AUCTION:
            return self.auction is not None and caller == self.auction
        return False

    def check(self, ctx: AuthorizationContext, role: Role) -> None:
        if not self.has_role(ctx.caller, role):
            raise UnauthorizedError(ctx.caller, role)


def requires_role(role: Role) -> Callable:
    """Guard an async entry point on ``self.access_policy``.

    The wrapped method must take the caller's context as keyword ``auth``.
    """

    def decorator(fn: Callable) -> Callable:
        @functools.wraps(fn)
        async def wrapper(
            self: Any, *args: Any, auth: AuthorizationContext, **kwargs: Any
        ) -> Any:
            self.access_policy.check(auth, role)
            return await fn(self, *args, auth=auth, **kwargs)

        return wrapper

    return decorator
