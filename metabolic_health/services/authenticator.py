"""
Registration, login and session verification.
Passwords only ever pass through hash_password/verify_password; they are never stored or logged.
"""
import logging

from metabolic_health.core.auth_utils import (
    burn_password_check,
    create_jwt,
    decode_jwt,
    hash_password,
    verify_password,
)
from metabolic_health.core.errors import DuplicateUser, InvalidCredentials, UserNotFound
from metabolic_health.db.storage import CredentialStore
from metabolic_health.schemas.user import AuthSession, LoginRequest, RegisterRequest, UserPublic

logger = logging.getLogger(__name__)


class Authenticator:
    def __init__(self, credentials: CredentialStore):
        self.credentials = credentials

    def register(self, req: RegisterRequest) -> AuthSession:
        if self.credentials.get_user_by_email(req.email):
            raise DuplicateUser()
        # The store also rejects duplicates, for two registrations racing past the check above
        user = self.credentials.create_user(
            email=req.email,
            password_hash=hash_password(req.password),
            first_name=req.first_name,
            last_name=req.last_name,
            condition=req.condition,
            preferences=req.preferences,
        )
        logger.info("Registered user %s", user.id)
        return AuthSession(token=create_jwt(user.id, user.email), user=user.public())

    def login(self, req: LoginRequest) -> AuthSession:
        user = self.credentials.get_user_by_email(req.email)
        if user is None:
            burn_password_check(req.password)
            logger.info("Failed login for %s", req.email)
            raise InvalidCredentials()
        if not verify_password(req.password, user.password_hash):
            logger.info("Failed login for %s", req.email)
            raise InvalidCredentials()
        return AuthSession(token=create_jwt(user.id, user.email), user=user.public())

    def verify(self, token: str) -> UserPublic:
        """Check the token, then re-read the user so deleted accounts lose access."""
        payload = decode_jwt(token)
        user = self.credentials.get_user(payload["sub"])
        if user is None:
            raise UserNotFound()
        return user.public()
