"""
Bookmark Routes (students only)

GET /bookmarks - List bookmarked jobs
POST /bookmarks - Bookmark a job
DELETE /bookmarks/{job_id} - Remove a bookmark
GET /bookmarks/check/{job_id} - Is this job bookmarked?
"""

from fastapi import APIRouter, HTTPException, Depends
from sqlalchemy import text
from sqlalchemy.exc import IntegrityError
from typing import List

from app.db.postgres import get_db_session, execute_raw_sql
from app.core.auth import get_current_student
from app.api.routes.job_routes import JOB_COLUMNS
from app.schemas.schemas import (
    BookmarkCreate, BookmarkResponse, BookmarkCheckResponse, JobResponse, MessageResponse
)

router = APIRouter(prefix="/bookmarks", tags=["Bookmarks"])

ALREADY_BOOKMARKED = "Already bookmarked"


@router.get("", response_model=List[BookmarkResponse])
def get_bookmarks(student: dict = Depends(get_current_student)):
    """Get the student's bookmarked jobs, most recent bookmark first."""
    results = execute_raw_sql(f"""
        SELECT b.id AS bookmark_id, b.created_at AS bookmarked_at, {JOB_COLUMNS}
        FROM bookmarks b
        JOIN jobs j ON b.job_id = j.id
        JOIN users c ON j.company_id = c.id
        WHERE b.student_id = :sid
        ORDER BY b.created_at DESC, b.id DESC
    """, {"sid": student["user_id"]})

    return [
        BookmarkResponse(
            bookmark_id=r.pop("bookmark_id"),
            bookmarked_at=r.pop("bookmarked_at"),
            job=JobResponse(**r)
        ) for r in results
    ]


@router.post("", response_model=MessageResponse, status_code=201)
def add_bookmark(bookmark: BookmarkCreate, student: dict = Depends(get_current_student)):
    """Bookmark a job."""
    try:
        with get_db_session() as db:
            result = db.execute(text("SELECT id FROM jobs WHERE id = :jid"), {"jid": bookmark.job_id})
            if not result.fetchone():
                raise HTTPException(status_code=404, detail="Job not found")

            result = db.execute(
                text("SELECT id FROM bookmarks WHERE student_id = :sid AND job_id = :jid"),
                {"sid": student["user_id"], "jid": bookmark.job_id}
            )
            if result.fetchone():
                raise HTTPException(status_code=400, detail=ALREADY_BOOKMARKED)

            db.execute(
                text("INSERT INTO bookmarks (student_id, job_id) VALUES (:sid, :jid)"),
                {"sid": student["user_id"], "jid": bookmark.job_id}
            )
    except IntegrityError:
        raise HTTPException(status_code=400, detail=ALREADY_BOOKMARKED)

    return MessageResponse(message="Job bookmarked successfully")


@router.delete("/{job_id}", response_model=MessageResponse)
def remove_bookmark(job_id: int, student: dict = Depends(get_current_student)):
    """Remove a bookmark. Removing one that doesn't exist is not an error."""
    with get_db_session() as db:
        db.execute(
            text("DELETE FROM bookmarks WHERE student_id = :sid AND job_id = :jid"),
            {"sid": student["user_id"], "jid": job_id}
        )

    return MessageResponse(message="Bookmark removed successfully")


@router.get("/check/{job_id}", response_model=BookmarkCheckResponse)
def check_bookmark(job_id: int, student: dict = Depends(get_current_student)):
    results = execute_raw_sql(
        "SELECT id FROM bookmarks WHERE student_id = :sid AND job_id = :jid",
        {"sid": student["user_id"], "jid": job_id}
    )
    return BookmarkCheckResponse(is_bookmarked=bool(results))
