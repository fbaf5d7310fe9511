"""
Conversation Routes

Messaging opens only between a company and a student whose application
to one of the company's jobs was accepted.

GET /conversations - List own conversations
POST /conversations - Create (or fetch existing) conversation
GET /conversations/{conversation_id}/messages - List messages (optionally after a given id)
POST /conversations/{conversation_id}/messages - Send a message
PUT /conversations/{conversation_id}/read - Mark the other party's messages as read
"""

import logging

from fastapi import APIRouter, HTTPException, Depends, Query, Response
from sqlalchemy import text
from sqlalchemy.exc import IntegrityError
from typing import List, Optional

from app.db.postgres import get_db_session, execute_raw_sql
from app.core.auth import get_current_user
from app.schemas.schemas import (
    ConversationCreate, ConversationCreatedResponse, ConversationResponse,
    MessageCreate, MessageSentResponse, ChatMessageResponse, MessageResponse
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/conversations", tags=["Conversations"])


def require_participant(db, conversation_id: int, user_id: int) -> None:
    result = db.execute(
        text("""
            SELECT id FROM conversations
            WHERE id = :cid AND (student_id = :uid OR company_id = :uid)
        """),
        {"cid": conversation_id, "uid": user_id}
    )
    if not result.fetchone():
        raise HTTPException(status_code=403, detail="Not a participant in this conversation")


def find_conversation(db, data: ConversationCreate) -> Optional[int]:
    result = db.execute(
        text("""
            SELECT id FROM conversations
            WHERE student_id = :sid AND company_id = :cid AND job_id = :jid
        """),
        {"sid": data.student_id, "cid": data.company_id, "jid": data.job_id}
    )
    row = result.fetchone()
    return row[0] if row else None


@router.get("", response_model=List[ConversationResponse])
def get_conversations(user: dict = Depends(get_current_user)):
    """
    Get the user's conversations, most recent activity first.

    Only conversations backed by an accepted application are listed, so a
    student whose acceptance is revoked loses the thread.
    """
    results = execute_raw_sql("""
        SELECT c.id, c.student_id, c.company_id, c.job_id, c.last_message,
               c.last_message_time, c.created_at,
               s.full_name AS student_name, co.full_name AS company_name, j.title AS job_title,
               (SELECT COUNT(*) FROM messages m
                WHERE m.conversation_id = c.id AND m.sender_id != :uid AND m.is_read = FALSE) AS unread_count
        FROM conversations c
        JOIN users s ON c.student_id = s.id
        JOIN users co ON c.company_id = co.id
        LEFT JOIN jobs j ON c.job_id = j.id
        WHERE (c.student_id = :uid OR c.company_id = :uid)
          AND EXISTS (
              SELECT 1 FROM applications a
              WHERE a.student_id = c.student_id AND a.job_id = c.job_id AND a.status = 'accepted'
          )
        ORDER BY c.last_message_time DESC, c.id DESC
    """, {"uid": user["user_id"]})

    return [ConversationResponse(**r) for r in results]


@router.post("", response_model=ConversationCreatedResponse, status_code=201)
def create_conversation(
    data: ConversationCreate,
    response: Response,
    user: dict = Depends(get_current_user)
):
    """Create a conversation for an accepted application, or return the existing one."""
    if user["user_id"] not in (data.student_id, data.company_id):
        raise HTTPException(status_code=403, detail="Not a participant in this conversation")

    try:
        with get_db_session() as db:
            result = db.execute(
                text("""
                    SELECT a.id FROM applications a
                    JOIN jobs j ON a.job_id = j.id
                    WHERE a.student_id = :sid AND a.job_id = :jid AND j.company_id = :cid
                      AND a.status = 'accepted'
                """),
                {"sid": data.student_id, "jid": data.job_id, "cid": data.company_id}
            )
            if not result.fetchone():
                raise HTTPException(
                    status_code=403,
                    detail="Cannot create conversation. Application must be accepted first."
                )

            existing_id = find_conversation(db, data)
            if existing_id is not None:
                response.status_code = 200
                return ConversationCreatedResponse(message="Conversation already exists", conversation_id=existing_id)

            result = db.execute(
                text("""
                    INSERT INTO conversations (student_id, company_id, job_id)
                    VALUES (:sid, :cid, :jid)
                    RETURNING id
                """),
                {"sid": data.student_id, "cid": data.company_id, "jid": data.job_id}
            )
            conversation_id = result.scalar_one()
    except IntegrityError:
        # A concurrent request opened the same conversation first
        with get_db_session() as db:
            existing_id = find_conversation(db, data)
        response.status_code = 200
        return ConversationCreatedResponse(message="Conversation already exists", conversation_id=existing_id)

    logger.info("Conversation %s opened for job %s", conversation_id, data.job_id)
    return ConversationCreatedResponse(message="Conversation created successfully", conversation_id=conversation_id)


@router.get("/{conversation_id}/messages", response_model=List[ChatMessageResponse])
def get_messages(
    conversation_id: int,
    after_id: Optional[int] = Query(None, description="Only return messages newer than this id (for polling)"),
    user: dict = Depends(get_current_user)
):
    """Get messages in a conversation, oldest first."""
    sql = """
        SELECT m.id, m.conversation_id, m.sender_id, m.message, m.is_read, m.created_at,
               u.full_name AS sender_name, u.role AS sender_role
        FROM messages m
        JOIN users u ON m.sender_id = u.id
        WHERE m.conversation_id = :cid
    """
    params = {"cid": conversation_id}

    if after_id is not None:
        sql += " AND m.id > :after_id"
        params["after_id"] = after_id

    sql += " ORDER BY m.created_at ASC, m.id ASC"

    with get_db_session() as db:
        require_participant(db, conversation_id, user["user_id"])
        rows = db.execute(text(sql), params).mappings().fetchall()

    return [ChatMessageResponse(**r) for r in rows]


@router.post("/{conversation_id}/messages", response_model=MessageSentResponse, status_code=201)
def send_message(conversation_id: int, data: MessageCreate, user: dict = Depends(get_current_user)):
    """Send a message and record it as the conversation's latest."""
    body = data.message.strip()
    if not body:
        raise HTTPException(status_code=400, detail="Message cannot be empty")

    with get_db_session() as db:
        require_participant(db, conversation_id, user["user_id"])

        result = db.execute(
            text("""
                INSERT INTO messages (conversation_id, sender_id, message)
                VALUES (:cid, :uid, :message)
                RETURNING id
            """),
            {"cid": conversation_id, "uid": user["user_id"], "message": body}
        )
        message_id = result.scalar_one()

        db.execute(
            text("""
                UPDATE conversations SET last_message = :message, last_message_time = CURRENT_TIMESTAMP
                WHERE id = :cid
            """),
            {"cid": conversation_id, "message": body}
        )

    return MessageSentResponse(message="Message sent successfully", message_id=message_id)


@router.put("/{conversation_id}/read", response_model=MessageResponse)
def mark_messages_read(conversation_id: int, user: dict = Depends(get_current_user)):
    """Mark every message the other party sent in this conversation as read."""
    with get_db_session() as db:
        require_participant(db, conversation_id, user["user_id"])
        db.execute(
            text("""
                UPDATE messages SET is_read = TRUE
                WHERE conversation_id = :cid AND sender_id != :uid
            """),
            {"cid": conversation_id, "uid": user["user_id"]}
        )

    return MessageResponse(message="Messages marked as read")
