import logging
from typing import Any, Dict, List

from .auth_service import public_user
from .validators import validate_document_id
from ..core.exceptions import AuthorizationError, InvalidInputError, NotFoundError
from ..core.store import DocumentStore, Filter
from ..models.constants import Collection, Messages, SessionState, UserRole

logger = logging.getLogger(__name__)

USERS = Collection.USERS.value


class UserService:
    def __init__(self, store: DocumentStore):
        self.store = store

    def list_users(self) -> List[Dict[str, Any]]:
        return [public_user(user) for user in self.store.query(USERS)]

    def list_active_users(self) -> List[Dict[str, Any]]:
        """Users whose session is currently open."""
        users = self.store.query(USERS, filters=[Filter("state", "==", SessionState.OPEN.value)])
        return [public_user(user) for user in users]

    def list_by_role(self, role: str) -> List[Dict[str, Any]]:
        try:
            role = UserRole(role)
        except ValueError:
            raise InvalidInputError(Messages.INVALID_ROLE)
        users = self.store.query(USERS, filters=[Filter("role", "==", role.value)])
        return [public_user(user) for user in users]

    def get_user(self, user_id: str) -> Dict[str, Any]:
        validate_document_id(user_id)
        user = self.store.get(USERS, user_id)
        if user is None:
            raise NotFoundError(Messages.USER_NOT_FOUND)
        return public_user(user)

    def delete_user(self, user_id: str) -> None:
        user = self.get_user(user_id)
        if user.get("role") == UserRole.PROFESSIONAL.value:
            raise AuthorizationError(Messages.CANNOT_DELETE_PROFESSIONAL)
        self.store.delete(USERS, user_id)
        logger.info(f"User {user_id} deleted")
