from typing import Any, Dict

from fastapi import APIRouter, Depends, status

from ...api.deps import get_current_user, get_current_user_token, get_store
from ...core.security import TokenPayload
from ...core.store import DocumentStore
from ...models.constants import Messages
from ...schemas.common import DataResponse, MessageResponse
from ...schemas.user import AuthResponse, UserLogin, UserOut, UserRegister, VerifyResponse
from ...services.auth_service import AuthService

router = APIRouter(prefix="/auth", tags=["Authentication"])


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
async def register(
    user_data: UserRegister,
    store: DocumentStore = Depends(get_store)
):
    """Register a new user."""
    auth_service = AuthService(store)
    user, token = auth_service.register_user(user_data)
    return {"message": Messages.REGISTER_SUCCESS, "user": user, "token": token}


@router.post("/login", response_model=AuthResponse)
async def login(
    login_data: UserLogin,
    store: DocumentStore = Depends(get_store)
):
    """Authenticate user and return an access token."""
    auth_service = AuthService(store)
    user, token = auth_service.authenticate_user(login_data)
    return {"message": Messages.LOGIN_SUCCESS, "user": user, "token": token}


@router.post("/logout", response_model=MessageResponse)
async def logout(
    current_user: Dict[str, Any] = Depends(get_current_user),
    store: DocumentStore = Depends(get_store)
):
    """Close the current user's session."""
    AuthService(store).logout_user(current_user["id"])
    return {"message": Messages.LOGOUT_SUCCESS}


@router.get("/profile", response_model=DataResponse[UserOut])
async def profile(
    current_user: Dict[str, Any] = Depends(get_current_user),
    store: DocumentStore = Depends(get_store)
):
    """Get current user information."""
    return {"data": AuthService(store).get_profile(current_user["id"])}


@router.get("/verify", response_model=VerifyResponse)
async def verify(
    token_payload: TokenPayload = Depends(get_current_user_token),
    current_user: Dict[str, Any] = Depends(get_current_user)
):
    """Check that the bearer token is still valid."""
    return {
        "message": Messages.TOKEN_VALID,
        "user": {
            "id": token_payload.sub,
            "email": token_payload.email,
            "role": token_payload.role,
        },
    }
