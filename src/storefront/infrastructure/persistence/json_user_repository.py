"""JSON-file-backed implementation of UserRepository."""

from __future__ import annotations

from pathlib import Path

from storefront.domain.model.user import User
from storefront.domain.repository.user_repository import UserRepository
from storefront.infrastructure.persistence.json_file import JsonFile


class JsonUserRepository(UserRepository):

    def __init__(self, file_path: Path) -> None:
        self._file = JsonFile(file_path)

    def get_by_id(self, user_id: int) -> User | None:
        for raw in self._file.read():
            if raw["id"] == user_id:
                return User(**raw)
        return None

    def list_all(self) -> list[User]:
        return [User(**raw) for raw in self._file.read()]

    def save(self, user: User) -> None:
        with self._file.locked():
            users = self._file.read()
            if user.id is None:
                user.id = max((u["id"] for u in users), default=0) + 1
            raw_user = {
                "id": user.id,
                "name": user.name,
                "email": user.email,
                "is_active": user.is_active,
            }
            for i, raw in enumerate(users):
                if raw["id"] == user.id:
                    users[i] = raw_user
                    break
            else:
                users.append(raw_user)
            self._file.write(users)
