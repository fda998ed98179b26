"""
Registration and login endpoints.

There is no session or token: a successful login simply returns the
stored user record, and later calls identify the user by its id.
"""

from typing import Optional

from fastapi import APIRouter, Depends, status

from natewerks_api.app.api.deps import get_user_service
from natewerks_api.app.schemas.common import MessageResponse
from natewerks_api.app.schemas.user import LoginRequest, LoginResponse, RegisterRequest
from natewerks_api.app.services.user_service import UserService


router = APIRouter()


@router.post("/register", response_model=MessageResponse, status_code=status.HTTP_201_CREATED)
def register_user(body: Optional[RegisterRequest] = None, service: UserService = Depends(get_user_service)) -> MessageResponse:
    """Register a new user with the default ``user`` role and an inactive subscription."""
    body = body or RegisterRequest()
    service.register(body.name, body.email, body.password)
    return MessageResponse(message="User registered successfully")


@router.post("/login", response_model=LoginResponse)
def login_user(body: Optional[LoginRequest] = None, service: UserService = Depends(get_user_service)) -> LoginResponse:
    """Return the user matching the email and password, or 400 ``Invalid credentials``."""
    body = body or LoginRequest()
    user = service.login(body.email, body.password)
    return LoginResponse(message="Login successful", user=user)
