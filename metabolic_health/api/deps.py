"""Request-scoped dependencies: the storage handle from app.state and the signed-in user."""
from fastapi import Depends, Request

from metabolic_health.core.auth_utils import get_bearer_token
from metabolic_health.core.errors import Unauthenticated
from metabolic_health.db.storage import Storage
from metabolic_health.schemas.user import UserPublic
from metabolic_health.services.authenticator import Authenticator


def get_storage(request: Request) -> Storage:
    return request.app.state.storage


def get_authenticator(storage: Storage = Depends(get_storage)) -> Authenticator:
    return Authenticator(storage)


def get_current_user(request: Request, auth: Authenticator = Depends(get_authenticator)) -> UserPublic:
    token = get_bearer_token(request)
    if not token:
        raise Unauthenticated("Access token required")
    return auth.verify(token)
