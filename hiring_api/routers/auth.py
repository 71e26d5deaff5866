# 🔹 FILE: hiring_api/routers/auth.py
# ----------------------------
# 🧩 Imports
from typing import Optional

from fastapi import APIRouter, Depends, Request, status
from sqlmodel import Session

from .. import schemas
from ..db import get_session
from ..models import User
from ..security import get_current_user, oauth2_scheme
from ..services import users as user_service

router = APIRouter()


# 📝 Register
@router.post("/register", status_code=status.HTTP_201_CREATED)
def register(payload: schemas.RegisterIn, session: Session = Depends(get_session)):
    user = user_service.register_user(session, payload.user_name, payload.email, payload.password)
    return {
        "success": True,
        "message": "User registered successfully",
        "user": schemas.UserOut.from_model(user).model_dump(mode="json"),
    }


# 🔐 Login → JWT
@router.post("/login")
def login(payload: schemas.LoginIn, session: Session = Depends(get_session)):
    user = user_service.login_user(session, payload.email, payload.password)
    return {
        "success": True,
        "message": "Login successfully",
        "token": user.token,
        "token_type": "bearer",
        "user": schemas.UserOut.from_model(user).model_dump(mode="json"),
    }


# 🚪 Logout
@router.post("/logout")
def logout(token: Optional[str] = Depends(oauth2_scheme), session: Session = Depends(get_session)):
    user_service.logout_user(session, token)
    return {"success": True, "message": "Logged out successfully"}


# 👤 Me
@router.get("/me")
def me(current_user: User = Depends(get_current_user)):
    return {"success": True, "user": schemas.UserOut.from_model(current_user).model_dump(mode="json")}


# 🔁 Forgot / reset password
@router.post("/forgot-password")
def forgot_password(payload: schemas.ForgotPasswordIn, request: Request, session: Session = Depends(get_session)):
    user_service.forgot_password(session, payload.email, str(request.base_url))
    return {"success": True, "message": "Reset link sent, check your email"}


@router.post("/reset-password/{token}")
def reset_password(token: str, payload: schemas.NewPasswordIn, session: Session = Depends(get_session)):
    user_service.reset_password(session, token, payload.new_password)
    return {"success": True, "message": "Password reset successfully"}


@router.patch("/change-password")
def change_password(
    payload: schemas.NewPasswordIn,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    user_service.change_password(session, current_user, payload.new_password)
    return {"success": True, "message": "Password changed successfully"}
