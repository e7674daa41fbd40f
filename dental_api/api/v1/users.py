from fastapi import APIRouter, Depends

from ...api.deps import get_professional_user, get_store
from ...core.store import DocumentStore
from ...models.constants import Messages
from ...schemas.common import DataResponse, ListResponse, MessageResponse
from ...schemas.user import UserOut
from ...services.user_service import UserService

router = APIRouter(
    prefix="/users",
    tags=["Users"],
    dependencies=[Depends(get_professional_user)],
)


@router.get("", response_model=ListResponse[UserOut])
async def list_users(store: DocumentStore = Depends(get_store)):
    users = UserService(store).list_users()
    return {"data": users, "count": len(users)}


@router.get("/active", response_model=ListResponse[UserOut])
async def list_active_users(store: DocumentStore = Depends(get_store)):
    """Users with an open session."""
    users = UserService(store).list_active_users()
    return {"data": users, "count": len(users)}


@router.get("/role/{role}", response_model=ListResponse[UserOut])
async def list_users_by_role(role: str, store: DocumentStore = Depends(get_store)):
    users = UserService(store).list_by_role(role)
    return {"data": users, "count": len(users)}


@router.get("/{user_id}", response_model=DataResponse[UserOut])
async def get_user(user_id: str, store: DocumentStore = Depends(get_store)):
    return {"data": UserService(store).get_user(user_id)}


@router.delete("/{user_id}", response_model=MessageResponse)
async def delete_user(user_id: str, store: DocumentStore = Depends(get_store)):
    """Delete a patient account. Professionals cannot be deleted."""
    UserService(store).delete_user(user_id)
    return {"message": Messages.USER_DELETED}
