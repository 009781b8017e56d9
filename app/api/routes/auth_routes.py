"""
Authentication Routes

POST /auth/login - Login and get JWT token
GET /auth/profile - Get current user info
"""

from fastapi import APIRouter, Depends

from app.api.deps import get_auth_service
from app.core.auth import get_current_user
from app.models.domain import Actor, User
from app.schemas.schemas import ApiResponse, LoginRequest, LoginResponse
from app.services.auth_service import AuthService

router = APIRouter(prefix="/auth", tags=["Authentication"])


@router.post("/login", response_model=ApiResponse[LoginResponse])
def login(request: LoginRequest, service: AuthService = Depends(get_auth_service)):
    """
    Login with username or email and receive a JWT access token.

    Include token in requests: Authorization: Bearer <token>
    """
    user, token = service.authenticate(request.username, request.password)
    return ApiResponse(message="Login successful", data=LoginResponse(user=user, token=token))


@router.get("/profile", response_model=ApiResponse[User])
def get_profile(
    actor: Actor = Depends(get_current_user),
    service: AuthService = Depends(get_auth_service),
):
    """Get current authenticated user's info."""
    user = service.get_profile(actor.user_id)
    return ApiResponse(message="Profile retrieved", data=user)
