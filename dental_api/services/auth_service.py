import logging
from typing import Any, Dict, Tuple

from ..core.exceptions import AuthenticationError, InvalidInputError, NotFoundError
from ..core.security import create_access_token, hash_password, verify_password
from ..core.store import DocumentStore, Filter, utc_timestamp
from ..models.constants import Collection, Messages, SessionState
from ..schemas.user import UserLogin, UserRegister

logger = logging.getLogger(__name__)

USERS = Collection.USERS.value


def public_user(user: Dict[str, Any]) -> Dict[str, Any]:
    """Strip the password hash from a user record."""
    return {key: value for key, value in user.items() if key != "password"}


class AuthService:
    def __init__(self, store: DocumentStore):
        self.store = store

    def register_user(self, user_data: UserRegister) -> Tuple[Dict[str, Any], str]:
        """Register a new user and issue an access token."""
        if self._find_by_email(user_data.email) is not None:
            raise InvalidInputError(Messages.USER_ALREADY_EXISTS)

        now = utc_timestamp()
        user = self.store.add(USERS, {
            "name": user_data.name,
            "lastname": user_data.lastname,
            "email": user_data.email,
            "password": hash_password(user_data.password),
            "phone": user_data.phone,
            "birthdate": user_data.birthdate,
            "role": user_data.role.value,
            "state": SessionState.CLOSED.value,
            "createdAt": now,
            "updatedAt": now,
        })
        logger.info(f"Registered user {user['id']} with role {user['role']}")

        return public_user(user), self._token_for(user)

    def authenticate_user(self, login_data: UserLogin) -> Tuple[Dict[str, Any], str]:
        """Check credentials, open the session and issue an access token."""
        user = self._find_by_email(login_data.email)
        if user is None or not verify_password(login_data.password, user.get("password", "")):
            raise AuthenticationError(Messages.INVALID_CREDENTIALS)

        user = self._set_session_state(user["id"], SessionState.OPEN)
        return public_user(user), self._token_for(user)

    def logout_user(self, user_id: str) -> None:
        self._set_session_state(user_id, SessionState.CLOSED)

    def get_profile(self, user_id: str) -> Dict[str, Any]:
        user = self.store.get(USERS, user_id)
        if user is None:
            raise NotFoundError(Messages.USER_NOT_FOUND)
        return public_user(user)

    def _find_by_email(self, email: str):
        matches = self.store.query(USERS, filters=[Filter("email", "==", email)], limit=1)
        return matches[0] if matches else None

    def _set_session_state(self, user_id: str, state: SessionState) -> Dict[str, Any]:
        user = self.store.update(USERS, user_id, {
            "state": state.value,
            "updatedAt": utc_timestamp(),
        })
        if user is None:
            raise NotFoundError(Messages.USER_NOT_FOUND)
        return user

    @staticmethod
    def _token_for(user: Dict[str, Any]) -> str:
        return create_access_token(user["id"], user["email"], user["role"])
