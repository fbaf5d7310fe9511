"""
User Routes

GET /users/{user_id} - Get a user's public profile
PUT /users/{user_id} - Update own profile
GET /users/{user_id}/applications - Get own applications (students)
"""

from fastapi import APIRouter, HTTPException, Depends
from sqlalchemy import text
from typing import List

from app.db.postgres import get_db_session, execute_raw_sql
from app.core.auth import get_current_user
from app.schemas.schemas import UserResponse, UserUpdate, StudentApplicationResponse, MessageResponse

router = APIRouter(prefix="/users", tags=["Users"])

# Everything about a user except the password hash
USER_COLUMNS = (
    "id, full_name, email, role, bio, level_of_study, cv_link, interests, "
    "company_description, company_logo, created_at"
)

PROFILE_FIELDS = [
    "full_name", "bio", "level_of_study", "cv_link", "interests",
    "company_description", "company_logo"
]


def require_self(user_id: int, user: dict) -> None:
    if user["user_id"] != user_id:
        raise HTTPException(status_code=403, detail="You can only access your own account")


@router.get("/{user_id}", response_model=UserResponse)
def get_user(user_id: int, user: dict = Depends(get_current_user)):
    """Get a user's profile by id."""
    results = execute_raw_sql(f"SELECT {USER_COLUMNS} FROM users WHERE id = :id", {"id": user_id})

    if not results:
        raise HTTPException(status_code=404, detail="User not found")

    return UserResponse(**results[0])


@router.put("/{user_id}", response_model=MessageResponse)
def update_user(user_id: int, data: UserUpdate, user: dict = Depends(get_current_user)):
    """Update own profile. Only provided fields are updated."""
    require_self(user_id, user)

    updates = []
    params = {"id": user_id}

    for field in PROFILE_FIELDS:
        value = getattr(data, field)
        if value is not None:
            updates.append(f"{field} = :{field}")
            params[field] = value

    if not updates:
        raise HTTPException(status_code=400, detail="No fields to update")

    with get_db_session() as db:
        db.execute(
            text(f"UPDATE users SET {', '.join(updates)} WHERE id = :id"),
            params
        )

    return MessageResponse(message="Profile updated successfully")


@router.get("/{user_id}/applications", response_model=List[StudentApplicationResponse])
def get_user_applications(user_id: int, user: dict = Depends(get_current_user)):
    """Get all job applications of a student, newest first."""
    require_self(user_id, user)

    results = execute_raw_sql("""
        SELECT a.id, a.job_id, a.student_id, a.status, a.applied_at,
               j.title, j.job_type, j.location, c.full_name AS company_name
        FROM applications a
        JOIN jobs j ON a.job_id = j.id
        JOIN users c ON j.company_id = c.id
        WHERE a.student_id = :sid
        ORDER BY a.applied_at DESC, a.id DESC
    """, {"sid": user_id})

    return [StudentApplicationResponse(**r) for r in results]
