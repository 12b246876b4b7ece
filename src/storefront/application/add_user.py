"""Application service: users and their tokens."""

from __future__ import annotations

import logging

from storefront.application.auth import TokenService
from storefront.domain.exceptions import EntityNotFoundError, ValidationError
from storefront.domain.model.user import User
from storefront.domain.repository.user_repository import UserRepository

logger = logging.getLogger(__name__)


class AddUserHandler:

    def __init__(self, user_repo: UserRepository) -> None:
        self._user_repo = user_repo

    def handle(self, name: str, email: str) -> User:
        if not name or not name.strip():
            raise ValidationError("User name is required")
        if not email or "@" not in email:
            raise ValidationError(f"Invalid email address {email!r}")

        email = email.strip().lower()
        if any(u.email == email for u in self._user_repo.list_all()):
            raise ValidationError("Email already exists")

        user = User(id=None, name=name.strip(), email=email)
        self._user_repo.save(user)
        return user


class IssueTokenHandler:
    """Hands out a bearer token for an active user."""

    def __init__(self, user_repo: UserRepository, token_service: TokenService) -> None:
        self._user_repo = user_repo
        self._token_service = token_service

    def handle(self, user_id: int) -> str:
        user = self._user_repo.get_by_id(user_id)
        if user is None or not user.is_active:
            raise EntityNotFoundError(f"User #{user_id} not found")
        token = self._token_service.issue(user)
        logger.info("Issued token for user %s", user_id)
        return token
