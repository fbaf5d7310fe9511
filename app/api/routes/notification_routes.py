"""
Notification Routes

GET /notifications - List own notifications
GET /notifications/unread-count - Count unread notifications
PUT /notifications/read-all - Mark all as read
PUT /notifications/{notification_id}/read - Mark one as read
DELETE /notifications/{notification_id} - Delete one
"""

from fastapi import APIRouter, HTTPException, Depends
from sqlalchemy import text
from typing import List

from app.db.postgres import get_db_session, execute_raw_sql
from app.core.auth import get_current_user
from app.schemas.schemas import NotificationResponse, UnreadCountResponse, MessageResponse

router = APIRouter(prefix="/notifications", tags=["Notifications"])


@router.get("", response_model=List[NotificationResponse])
def get_notifications(user: dict = Depends(get_current_user)):
    """Get the current user's notifications, newest first."""
    results = execute_raw_sql("""
        SELECT id, user_id, message, is_read, created_at
        FROM notifications
        WHERE user_id = :uid
        ORDER BY created_at DESC, id DESC
    """, {"uid": user["user_id"]})

    return [NotificationResponse(**r) for r in results]


@router.get("/unread-count", response_model=UnreadCountResponse)
def get_unread_count(user: dict = Depends(get_current_user)):
    results = execute_raw_sql(
        "SELECT COUNT(*) AS count FROM notifications WHERE user_id = :uid AND is_read = FALSE",
        {"uid": user["user_id"]}
    )
    return UnreadCountResponse(count=results[0]["count"])


@router.put("/read-all", response_model=MessageResponse)
def mark_all_read(user: dict = Depends(get_current_user)):
    with get_db_session() as db:
        db.execute(
            text("UPDATE notifications SET is_read = TRUE WHERE user_id = :uid"),
            {"uid": user["user_id"]}
        )

    return MessageResponse(message="All notifications marked as read")


@router.put("/{notification_id}/read", response_model=MessageResponse)
def mark_read(notification_id: int, user: dict = Depends(get_current_user)):
    with get_db_session() as db:
        result = db.execute(
            text("UPDATE notifications SET is_read = TRUE WHERE id = :nid AND user_id = :uid"),
            {"nid": notification_id, "uid": user["user_id"]}
        )
        if result.rowcount == 0:
            raise HTTPException(status_code=404, detail="Notification not found")

    return MessageResponse(message="Notification marked as read")


@router.delete("/{notification_id}", response_model=MessageResponse)
def delete_notification(notification_id: int, user: dict = Depends(get_current_user)):
    with get_db_session() as db:
        result = db.execute(
            text("DELETE FROM notifications WHERE id = :nid AND user_id = :uid"),
            {"nid": notification_id, "uid": user["user_id"]}
        )
        if result.rowcount == 0:
            raise HTTPException(status_code=404, detail="Notification not found")

    return MessageResponse(message="Notification deleted")
