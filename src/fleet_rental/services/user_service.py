"""Current-user role lookups."""

from __future__ import annotations

from typing import Optional

from fleet_rental.db.document_store import DocumentStore
from fleet_rental.domain.models import User, UserRole
from fleet_rental.repositories.user_repo import UserRepo


class UserService:
    """Resolve application users and their roles."""

    def __init__(self, store: DocumentStore) -> None:
        self._repo = UserRepo(store)

    def find_user(self, user_id: Optional[str], email: Optional[str] = None) -> Optional[User]:
        """Look a user up by id, falling back to the email address."""
        if user_id:
            user = self._repo.get_by_id(user_id)
            if user is not None:
                return user
        if email:
            return self._repo.get_by_email(email)
        return None

    def is_admin(self, user_id: Optional[str], email: Optional[str] = None) -> bool:
        user = self.find_user(user_id, email)
        return user is not None and user.role == UserRole.ADMIN

    def add_user(self, user: User) -> User:
        return self._repo.create(user)
