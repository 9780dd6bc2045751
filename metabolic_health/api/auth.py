"""
Auth API: register, login, verify. Bearer JWT in the Authorization header;
the client keeps the token and deletes it to log out.
"""
import logging

from fastapi import APIRouter, Depends, Response

from metabolic_health.api.deps import get_authenticator, get_current_user
from metabolic_health.schemas.user import AuthResponse, LoginRequest, RegisterRequest, UserPublic, VerifyResponse
from metabolic_health.services.authenticator import Authenticator

router = APIRouter()
logger = logging.getLogger(__name__)


@router.post("/register", status_code=201, response_model=AuthResponse)
def register(body: RegisterRequest, auth: Authenticator = Depends(get_authenticator)):
    session = auth.register(body)
    return AuthResponse(message="User created successfully", **session.model_dump())


@router.post("/login", response_model=AuthResponse)
def login(body: LoginRequest, auth: Authenticator = Depends(get_authenticator)):
    session = auth.login(body)
    return AuthResponse(message="Login successful", **session.model_dump())


@router.get("/verify", response_model=VerifyResponse)
async def verify(response: Response, user: UserPublic = Depends(get_current_user)):
    """Return the current user for the bearer token, or 401/404."""
    response.headers["Cache-Control"] = "no-store"
    return VerifyResponse(user=user)
