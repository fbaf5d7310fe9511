"""
Application Routes

PUT /applications/{application_id}/status - Accept/reject an application (owning company only)
"""

import logging

from fastapi import APIRouter, HTTPException, Depends
from sqlalchemy import text

from app.db.postgres import get_db_session
from app.core.auth import get_current_company
from app.schemas.schemas import ApplicationStatus, ApplicationStatusUpdate, MessageResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/applications", tags=["Applications"])

ALLOWED_STATUSES = {s.value for s in ApplicationStatus}


def status_change_message(status: str, title: str, company_name: str) -> str:
    if status == ApplicationStatus.accepted.value:
        return f'Congratulations! 🎉 Your application for "{title}" has been accepted by {company_name}.'
    return f'Update on your application: "{title}" status has been changed to {status}.'


@router.put("/{application_id}/status", response_model=MessageResponse)
def update_application_status(
    application_id: int,
    update: ApplicationStatusUpdate,
    company: dict = Depends(get_current_company)
):
    """Update status of a job application and notify the student."""
    if update.status not in ALLOWED_STATUSES:
        raise HTTPException(status_code=400, detail="Invalid status")

    with get_db_session() as db:
        # Verify ownership and collect what the notification needs
        result = db.execute(
            text("""
                SELECT a.student_id, j.title, c.full_name
                FROM applications a
                JOIN jobs j ON a.job_id = j.id
                JOIN users c ON j.company_id = c.id
                WHERE a.id = :aid AND j.company_id = :cid
            """),
            {"aid": application_id, "cid": company["user_id"]}
        )
        row = result.fetchone()
        if not row:
            raise HTTPException(status_code=404, detail="Application not found")
        student_id, title, company_name = row

        db.execute(
            text("UPDATE applications SET status = :status WHERE id = :aid"),
            {"aid": application_id, "status": update.status}
        )

        db.execute(
            text("INSERT INTO notifications (user_id, message) VALUES (:uid, :message)"),
            {"uid": student_id, "message": status_change_message(update.status, title, company_name)}
        )

    logger.info("Application %s set to %s by company %s", application_id, update.status, company["user_id"])
    return MessageResponse(message="Application status updated and student notified")
