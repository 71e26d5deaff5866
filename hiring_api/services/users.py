# 🔹 FILE: hiring_api/services/users.py
# ==============================================================
# Users & authentication
# - register / login / logout
# - forgot + reset password (one-time code hash inside a reset JWT)
# - admin CRUD with optional profile image
# ==============================================================
import logging
import secrets
from typing import List, Optional

from sqlmodel import Session, select

from ..config import settings
from ..errors import AccountInactiveError, AuthError, ConflictError, NotFoundError, ValidationError
from ..models import Role, User, utcnow
from ..security import create_access_token, create_token, decode_token, hash_password, verify_password
from ..uploads import IncomingFile
from ..utils.ids import parse_ids, short_id
from .attachments import AttachmentStore, project_folder, release
from .notifications import send_reset_link

logger = logging.getLogger(__name__)


def _by_email(session: Session, email: str) -> Optional[User]:
    return session.exec(select(User).where(User.email == email.strip().lower())).first()


def _save(session: Session, user: User) -> User:
    user.updated_at = utcnow()
    session.add(user)
    session.commit()
    session.refresh(user)
    return user


# 📝 Register
def register_user(session: Session, user_name: str, email: str, password: str) -> User:
    if _by_email(session, email):
        raise ConflictError("Email Already Existed")
    user = User(
        user_name=user_name,
        email=email.strip().lower(),
        hashed_password=hash_password(password),
        role=Role.USER,
        custom_id=short_id(),
    )
    return _save(session, user)


# 🔐 Login → JWT
def login_user(session: Session, email: str, password: str) -> User:
    if not email or not password:
        raise ValidationError("Email And Password Is Required")

    user = _by_email(session, email)
    if not user:
        raise AuthError("user not found")
    if not user.is_active:
        raise AccountInactiveError()
    if not verify_password(password, user.hashed_password):
        raise AuthError("password incorrect")

    user.token = create_access_token({"email": user.email, "id": user.id, "role": user.role.value})
    logger.info("User %s logged in", user.id)
    return _save(session, user)


def logout_user(session: Session, token: Optional[str]) -> None:
    if not token:
        raise ValidationError("Token is required")

    # an expired session token may still log out
    payload = decode_token(token, settings.SIGN_IN_TOKEN_SECRET, verify_exp=False)
    email = payload.get("email")
    if not email:
        raise AuthError("Invalid token payload")

    user = _by_email(session, email)
    if user:
        user.token = None
        _save(session, user)


# 🔁 Forgot / reset password
def forgot_password(session: Session, email: str, base_url: str) -> User:
    user = _by_email(session, email)
    if not user:
        raise NotFoundError("Email not found")

    code_hash = hash_password(secrets.token_urlsafe(16))
    token = create_token(
        {"email": user.email, "send_code": code_hash},
        settings.RESET_TOKEN_SECRET,
        settings.RESET_TOKEN_EXPIRE_MINUTES,
    )
    send_reset_link(user.email, f"{base_url.rstrip('/')}/auth/reset-password/{token}")

    user.forget_code = code_hash
    return _save(session, user)


def reset_password(session: Session, token: str, new_password: str) -> User:
    try:
        payload = decode_token(token, settings.RESET_TOKEN_SECRET)
    except AuthError:
        raise ValidationError("Invalid token or link expired")

    user = session.exec(
        select(User).where(User.email == payload.get("email"), User.forget_code == payload.get("send_code"))
    ).first()
    if not user or not payload.get("send_code"):
        raise ValidationError("Invalid token or link expired")

    user.hashed_password = hash_password(new_password)
    user.forget_code = None
    user.token = None
    return _save(session, user)


def change_password(session: Session, user: User, new_password: str) -> User:
    user.hashed_password = hash_password(new_password)
    return _save(session, user)


# 👥 Admin CRUD
def create_user(
    session: Session,
    store: AttachmentStore,
    user_name: Optional[str],
    email: Optional[str],
    password: Optional[str],
    role: Optional[Role],
    image: Optional[IncomingFile] = None,
) -> User:
    if not user_name or not email or not password or not role:
        raise ValidationError("All fields are required")
    if _by_email(session, email):
        raise ConflictError("Email is already existed")

    user = User(
        user_name=user_name,
        email=email.strip().lower(),
        hashed_password=hash_password(password),
        role=role,
        is_active=True,
        custom_id=short_id(),
    )
    if image is not None:
        stored = store.upload(image, project_folder("User", user.custom_id))
        user.image_url, user.image_file_id = stored.url, stored.file_id
    return _save(session, user)


def update_user(
    session: Session,
    store: AttachmentStore,
    user_id: int,
    user_name: Optional[str] = None,
    email: Optional[str] = None,
    password: Optional[str] = None,
    role: Optional[Role] = None,
    is_active: Optional[bool] = None,
    image: Optional[IncomingFile] = None,
) -> User:
    user = get_user(session, user_id)

    if email:
        email = email.strip().lower()
        other = _by_email(session, email)
        if other and other.id != user.id:
            raise ConflictError("Email is already existed")

    replaced = None
    if image is not None:
        stored = store.upload(image, project_folder("User", user.custom_id))
        replaced = user.image_file_id
        user.image_url, user.image_file_id = stored.url, stored.file_id

    if user_name:
        user.user_name = user_name
    if email:
        user.email = email
    if role:
        user.role = role
    if is_active is not None:
        user.is_active = is_active
    if password:
        user.hashed_password = hash_password(password)

    user = _save(session, user)
    # the old image stays referenced until the new one is saved
    release(store, replaced, f"user {user.id}")
    return user


def list_users(session: Session) -> List[User]:
    return list(session.exec(select(User).order_by(User.id)).all())


def get_user(session: Session, user_id: int) -> User:
    user = session.get(User, user_id)
    if not user:
        raise NotFoundError("User not found")
    return user


def delete_user(session: Session, store: AttachmentStore, user_id: int) -> None:
    user = get_user(session, user_id)
    release(store, user.image_file_id, f"user {user.id}")
    session.delete(user)
    session.commit()


def bulk_delete_users(session: Session, store: AttachmentStore, ids) -> int:
    parsed = parse_ids(ids)
    users = session.exec(select(User).where(User.id.in_(parsed))).all()
    if not users:
        raise NotFoundError("No Users found for the provided IDs")

    for user in users:
        release(store, user.image_file_id, f"user {user.id}")
        session.delete(user)
    session.commit()
    return len(users)
