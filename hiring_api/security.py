# 🔹 FILE: hiring_api/security.py
from datetime import datetime, timedelta, timezone
from typing import Callable, Iterable, Optional

import jwt  # PyJWT
from jwt.exceptions import ExpiredSignatureError, InvalidTokenError
from passlib.context import CryptContext
from fastapi import Depends
from fastapi.security import OAuth2PasswordBearer
from sqlmodel import Session, select

from .config import settings
from .db import get_session
from .errors import AccountInactiveError, AuthError, ForbiddenError
from .models import Role, User

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=settings.SALT_ROUNDS)
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/auth/login", auto_error=False)
JWT_ALG = "HS256"

STAFF_ROLES = (Role.ADMIN, Role.HR)


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain: str, hashed: str) -> bool:
    return pwd_context.verify(plain, hashed)


def create_token(data: dict, secret: str, expires_minutes: int) -> str:
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + timedelta(minutes=expires_minutes)
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, secret, algorithm=JWT_ALG)


def create_access_token(data: dict) -> str:
    return create_token(data, settings.SIGN_IN_TOKEN_SECRET, settings.ACCESS_TOKEN_EXPIRE_MINUTES)


def decode_token(token: str, secret: str, verify_exp: bool = True) -> dict:
    try:
        return jwt.decode(token, secret, algorithms=[JWT_ALG], options={"verify_exp": verify_exp})
    except ExpiredSignatureError:
        raise AuthError("Token expired")
    except InvalidTokenError:
        raise AuthError("Invalid token")


def get_current_user(
    token: Optional[str] = Depends(oauth2_scheme),
    session: Session = Depends(get_session),
) -> User:
    if not token:
        raise AuthError("Please login first")

    payload = decode_token(token, settings.SIGN_IN_TOKEN_SECRET)
    email: Optional[str] = payload.get("email")
    if not email:
        raise AuthError("Invalid token payload")

    user = session.exec(select(User).where(User.email == email)).first()
    if not user:
        raise AuthError("User not found")
    # logout clears the stored token, so an old token stops working
    if user.token != token:
        raise AuthError("Token revoked, please login again")
    if not user.is_active:
        raise AccountInactiveError()

    return user


def has_role(user: User, roles: Iterable[Role]) -> bool:
    return user.role in set(roles)


def require_roles(*roles: Role) -> Callable[..., User]:
    """Dependency factory: the current user must hold one of `roles`."""

    def checker(user: User = Depends(get_current_user)) -> User:
        if not has_role(user, roles):
            raise ForbiddenError("You are not authorized to access this resource")
        return user

    return checker


require_staff = require_roles(*STAFF_ROLES)
require_admin = require_roles(Role.ADMIN)
