"""Authentication endpoints."""
from fastapi import APIRouter, HTTPException, Request, Response

from app.schemas import AdminLoginRequest, SuccessResponse
from app.core.security import verify_admin_password, create_access_token
from app.core.rate_limit import limiter, RATE_LIMITS
from app.core import config

router = APIRouter()


@router.post("/login", response_model=SuccessResponse)
@limiter.limit(RATE_LIMITS["login"])
async def login(request: Request, credentials: AdminLoginRequest, response: Response) -> SuccessResponse:
    """
    Authenticate the organizer and set the JWT in an httpOnly cookie.

    The same cookie authorizes organizer endpoints and door devices, so staff
    log in once per device at the start of a shift.

    Example:
        Request:
            POST /api/v1/auth/login
            {
                "password": "your-secure-password"
            }

        Response (200):
            {
                "success": true,
                "message": "Logged in successfully"
            }
            Set-Cookie: admin_token=eyJhbGc...; HttpOnly; SameSite=Lax

        Response (401):
            {
                "detail": "Invalid password"
            }
    """
    if not verify_admin_password(credentials.password):
        raise HTTPException(status_code=401, detail="Invalid password")

    access_token = create_access_token(data={"is_admin": True})

    response.set_cookie(
        key="admin_token",
        value=access_token,
        httponly=True,
        secure=config.settings.ENVIRONMENT == "production",
        samesite="lax",
        max_age=config.settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
    )

    return SuccessResponse(success=True, message="Logged in successfully")


@router.post("/logout", response_model=SuccessResponse)
async def logout(response: Response) -> SuccessResponse:
    """Clear the authentication cookie. Safe to call when not logged in."""
    response.delete_cookie(key="admin_token")
    return SuccessResponse(success=True, message="Logged out successfully")
