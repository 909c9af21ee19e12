"""
Authentication API endpoints.

Sessions are JWTs stored in an httpOnly cookie; the token is also returned
in the body for API clients that send it as a bearer header.
"""

from beanie import PydanticObjectId
from bson import ObjectId
from fastapi import APIRouter, Depends

from ...auth.dependencies import require_auth
from ...core.config import settings
from ...core.exceptions import ConflictError, NotFoundError
from ...models.user import AdminUser
from ...schemas.auth import AdminInitRequest, LoginRequest, LoginResponse, UserResponse
from ...schemas.common import ApiResponse
from ...services.auth_service import AuthService
from ..responses import success_response

router = APIRouter()


@router.post("/login", response_model=ApiResponse)
async def login(login_data: LoginRequest):
    """Authenticate an admin and set the session cookie"""
    user = await AuthService.authenticate_user(login_data.email, login_data.password)
    token = AuthService.token_for_user(user)

    response = success_response(
        LoginResponse(user=UserResponse.from_document(user), token=token),
        message="Login successful",
    )
    response.set_cookie(
        key=settings.AUTH_COOKIE_NAME,
        value=token,
        httponly=True,
        secure=settings.AUTH_COOKIE_SECURE,
        samesite="lax",
        max_age=settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
        path="/",
    )
    return response


@router.post("/logout", response_model=ApiResponse)
async def logout():
    response = success_response(message="Logout successful")
    response.delete_cookie(settings.AUTH_COOKIE_NAME, path="/")
    return response


@router.get("/me", response_model=ApiResponse)
async def me(payload: dict = Depends(require_auth)):
    """Current admin user"""
    user_id = payload["sub"]
    user = await AdminUser.get(PydanticObjectId(user_id)) if ObjectId.is_valid(user_id) else None
    if not user:
        raise NotFoundError("User not found")
    return success_response({"user": UserResponse.from_document(user).model_dump(by_alias=True)})


@router.post("/init", response_model=ApiResponse)
async def init_admin(init_data: AdminInitRequest):
    """Create the first admin user; refused once any admin exists"""
    if await AdminUser.find_one({}):
        raise ConflictError("Admin user already exists")

    user = await AuthService.create_admin_user(init_data.name, init_data.email, init_data.password)
    return success_response(UserResponse.from_document(user), message="Admin user created successfully")
