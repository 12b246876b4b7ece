"""Bearer-token authorization gate.

The gate turns a raw ``Authorization`` header value into a user ID and
checks resource ownership.  It never reads ambient request state; the
header is passed in explicitly by whoever drives the OrderEngine.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from storefront.domain.exceptions import Forbidden, Unauthenticated
from storefront.domain.model.order import Order
from storefront.domain.model.user import User

BEARER_PREFIX = "Bearer "


class TokenService(ABC):
    """Issues and verifies opaque bearer tokens bound to a user."""

    @abstractmethod
    def issue(self, user: User) -> str:
        """Return a new token for *user*."""

    @abstractmethod
    def verify(self, token: str) -> int | None:
        """Return the user ID bound to *token*, or None if it is not valid."""


class AuthorizationGate:

    def __init__(self, token_service: TokenService) -> None:
        self._token_service = token_service

    def authenticate(self, authorization: str | None) -> int:
        """Resolve the caller's user ID from an ``Authorization`` header."""
        token = extract_bearer_token(authorization)
        if token is None:
            raise Unauthenticated("Token is required")

        user_id = self._token_service.verify(token)
        if user_id is None:
            raise Unauthenticated("Invalid token")
        return user_id

    @staticmethod
    def ensure_owner(user_id: int, order: Order) -> None:
        if user_id != order.user_id:
            raise Forbidden(f"Order {order.order_number} belongs to another user")


def extract_bearer_token(authorization: str | None) -> str | None:
    """Return the token from ``"Bearer <token>"``, or None if malformed."""
    if not authorization or not authorization.startswith(BEARER_PREFIX):
        return None
    token = authorization[len(BEARER_PREFIX):].strip()
    return token or None
