"""
Authentication for the API.

Bearer tokens are HS256 JWTs carrying ``customer_id``, ``email``, ``name``,
``role`` and ``exp``. The signing secret and token lifetime come from
``Settings``; the issue time comes from the injected ``Clock`` so tests can
freeze it.
"""

from datetime import timedelta
from enum import Enum
from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt
from passlib.context import CryptContext
from pydantic import BaseModel
import logging

from .clock import Clock, get_clock
from .config import Settings, get_settings
from .exceptions import ForbiddenError, UnauthorizedError

logger = logging.getLogger(__name__)

pwd_context = CryptContext(schemes=["argon2"], deprecated="auto")
security = HTTPBearer(auto_error=False)


class Role(str, Enum):
    ADMIN = "admin"
    CASHIER = "cashier"
    KITCHEN = "kitchen"
    WAITRESS = "waitress"
    CUSTOMER = "customer"


STAFF_ROLES = (Role.ADMIN, Role.CASHIER, Role.KITCHEN, Role.WAITRESS)


class AuthUser(BaseModel):
    customer_id: int
    email: str
    name: str
    role: Role

    @property
    def is_staff(self) -> bool:
        return self.role in STAFF_ROLES

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except ValueError:
        logger.warning("Stored password hash could not be parsed")
        return False


def create_access_token(
    user: AuthUser, settings: Settings, clock: Clock
) -> str:
    expire = clock.now() + timedelta(hours=settings.JWT_EXPIRE_HOURS)
    claims = {
        "customer_id": user.customer_id,
        "email": user.email,
        "name": user.name,
        "role": user.role.value,
        "exp": expire,
    }
    return jwt.encode(claims, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


def decode_access_token(token: str, settings: Settings) -> AuthUser:
    try:
        payload = jwt.decode(
            token, settings.JWT_SECRET, algorithms=[settings.JWT_ALGORITHM]
        )
    except JWTError as e:
        logger.info(f"Rejected bearer token: {e}")
        raise UnauthorizedError("Invalid or expired token")

    try:
        return AuthUser(
            customer_id=payload["customer_id"],
            email=payload["email"],
            name=payload.get("name", ""),
            role=payload.get("role", Role.CUSTOMER.value),
        )
    except (KeyError, ValueError):
        raise UnauthorizedError("Invalid token claims")


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    settings: Settings = Depends(get_settings),
) -> AuthUser:
    if credentials is None or not credentials.credentials:
        raise UnauthorizedError("Missing bearer token")
    return decode_access_token(credentials.credentials, settings)


def require_roles(*roles: Role):
    """Dependency factory that admits only callers holding one of ``roles``."""

    async def check(user: AuthUser = Depends(get_current_user)) -> AuthUser:
        if user.role not in roles:
            raise ForbiddenError(
                f"Role '{user.role.value}' is not allowed to perform this action"
            )
        return user

    return check


require_admin = require_roles(Role.ADMIN)
require_staff = require_roles(*STAFF_ROLES)
