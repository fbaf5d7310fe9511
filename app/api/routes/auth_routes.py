"""
Authentication Routes

POST /auth/register - Register new user
POST /auth/login - Login and get JWT token
PUT /auth/change-password - Change own password
GET /auth/me - Get current user info
"""

import logging

from fastapi import APIRouter, HTTPException, Depends
from sqlalchemy import text
from sqlalchemy.exc import IntegrityError

from app.db.postgres import get_db_session
from app.core.auth import hash_password, verify_password, create_access_token, get_current_user
from app.api.routes.users_routes import USER_COLUMNS
from app.schemas.schemas import (
    RegisterRequest, RegisterResponse, LoginRequest, ChangePasswordRequest,
    TokenResponse, UserResponse, MessageResponse
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["Authentication"])

WELCOME_MESSAGE = "Welcome to ForsaLink! Start exploring opportunities."
EMAIL_TAKEN = "Email already registered"


@router.post("/register", response_model=RegisterResponse, status_code=201)
def register(request: RegisterRequest):
    """
    Register a new student or company account.

    A welcome notification is created alongside the user.
    """
    try:
        with get_db_session() as db:
            # Check email exists
            result = db.execute(
                text("SELECT id FROM users WHERE email = :email"),
                {"email": request.email}
            )
            if result.fetchone():
                raise HTTPException(status_code=400, detail=EMAIL_TAKEN)

            result = db.execute(
                text("""
                    INSERT INTO users (full_name, email, password_hash, role, bio, level_of_study, company_description)
                    VALUES (:full_name, :email, :password_hash, :role, :bio, :level_of_study, :company_description)
                    RETURNING id
                """),
                {
                    "full_name": request.full_name,
                    "email": request.email,
                    "password_hash": hash_password(request.password),
                    "role": request.role.value,
                    "bio": request.bio,
                    "level_of_study": request.level_of_study,
                    "company_description": request.company_description
                }
            )
            user_id = result.scalar_one()

            db.execute(
                text("INSERT INTO notifications (user_id, message) VALUES (:uid, :message)"),
                {"uid": user_id, "message": WELCOME_MESSAGE}
            )
    except IntegrityError:
        # A concurrent registration took the email first
        raise HTTPException(status_code=400, detail=EMAIL_TAKEN)

    logger.info("Registered user %s as %s", user_id, request.role.value)
    return RegisterResponse(message="Registration successful", user_id=user_id, role=request.role.value)


@router.post("/login", response_model=TokenResponse)
def login(request: LoginRequest):
    """
    Login and receive JWT access token plus the user profile.

    Include token in requests: Authorization: Bearer <token>
    """
    with get_db_session() as db:
        result = db.execute(
            text(f"SELECT {USER_COLUMNS}, password_hash FROM users WHERE email = :email"),
            {"email": request.email}
        )
        row = result.mappings().fetchone()

    if not row or not verify_password(request.password, row["password_hash"]):
        logger.info("Failed login for %s", request.email)
        raise HTTPException(status_code=401, detail="Invalid email or password")

    user = dict(row)
    user.pop("password_hash")
    token = create_access_token(data={"sub": str(user["id"]), "role": user["role"]})

    return TokenResponse(access_token=token, user=UserResponse(**user))


@router.put("/change-password", response_model=MessageResponse)
def change_password(request: ChangePasswordRequest, user: dict = Depends(get_current_user)):
    """Change the current user's password. The old password must match."""
    with get_db_session() as db:
        result = db.execute(
            text("SELECT password_hash FROM users WHERE id = :id"),
            {"id": user["user_id"]}
        )
        row = result.fetchone()
        if not row:
            raise HTTPException(status_code=404, detail="User not found")

        if not verify_password(request.old_password, row[0]):
            raise HTTPException(status_code=401, detail="Current password is incorrect")

        db.execute(
            text("UPDATE users SET password_hash = :password_hash WHERE id = :id"),
            {"password_hash": hash_password(request.new_password), "id": user["user_id"]}
        )

    return MessageResponse(message="Password changed successfully")


@router.get("/me", response_model=UserResponse)
def get_me(user: dict = Depends(get_current_user)):
    """Get current authenticated user's info."""
    with get_db_session() as db:
        result = db.execute(
            text(f"SELECT {USER_COLUMNS} FROM users WHERE id = :id"),
            {"id": user["user_id"]}
        )
        row = result.mappings().fetchone()

    return UserResponse(**row)
