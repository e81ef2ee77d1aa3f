"""Caller identity as resolved by the authenticating gateway."""

from __future__ import annotations

from dataclasses import dataclass

from hotel_listings.models.enums import Role


@dataclass(frozen=True)
class Identity:
    """
    Authenticated caller.

    The service trusts this pair as given; credentials are verified upstream.
    """

    user_id: int
    role: Role

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN

    @property
    def is_merchant(self) -> bool:
        return self.role == Role.MERCHANT
