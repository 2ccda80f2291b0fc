"""
User Repository Interface.
Defines the credential store contract.
"""

from typing import Optional

from userhub.domain.repositories.base import BaseRepository
from userhub.domain.models.user import User


class UserRepository(BaseRepository[User]):
    """Interface for User-specific operations.

    ``create`` raises ``ConflictException`` when the email is taken,
    ``update`` raises ``EntityNotFoundException`` when the id is absent.
    """

    def get_by_email(self, email: str) -> Optional[User]:
        """Get the user registered under ``email``."""
        ...
