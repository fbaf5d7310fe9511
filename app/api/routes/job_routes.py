"""
Job Routes

GET /jobs - List active jobs with search/type filters
GET /jobs/company/{company_id} - List a company's jobs
GET /jobs/{job_id} - Get job details
POST /jobs - Create job posting (company only)
PUT /jobs/{job_id} - Update job (owning company only)
DELETE /jobs/{job_id} - Delete job (owning company only)
POST /jobs/{job_id}/apply - Apply to job (student only)
GET /jobs/{job_id}/applications - List applicants (owning company only)
"""

import logging

from fastapi import APIRouter, HTTPException, Depends, Query
from sqlalchemy import text
from sqlalchemy.exc import IntegrityError
from typing import List, Optional

from app.db.postgres import get_db_session, execute_raw_sql
from app.core.auth import get_current_student, get_current_company
from app.schemas.schemas import (
    JobCreate, JobUpdate, JobResponse, JobDetailResponse, JobCreatedResponse,
    JobType, JobSort, ApplicantResponse, MessageResponse
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/jobs", tags=["Jobs"])

JOB_COLUMNS = """
    j.id, j.company_id, c.full_name AS company_name, c.company_logo, j.title, j.description,
    j.job_type, j.location, j.salary, j.requirements, j.status, j.created_at
"""

ALREADY_APPLIED = "Already applied to this job"


def escape_like(value: str) -> str:
    """Make %, _ and \\ match literally inside a LIKE pattern."""
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


@router.get("", response_model=List[JobResponse])
def list_jobs(
    search: Optional[str] = Query(None, description="Search in title and location"),
    job_type: Optional[JobType] = Query(None),
    sort: JobSort = Query(JobSort.date_desc)
):
    """List all active job postings, newest first by default."""
    sql = f"""
        SELECT {JOB_COLUMNS}
        FROM jobs j
        JOIN users c ON j.company_id = c.id
        WHERE j.status = 'active'
    """
    params = {}

    if search:
        sql += " AND (LOWER(j.title) LIKE :search ESCAPE '\\' OR LOWER(j.location) LIKE :search ESCAPE '\\')"
        params["search"] = f"%{escape_like(search.lower())}%"
    if job_type:
        sql += " AND j.job_type = :job_type"
        params["job_type"] = job_type.value

    direction = "ASC" if sort == JobSort.date_asc else "DESC"
    sql += f" ORDER BY j.created_at {direction}, j.id {direction}"

    return [JobResponse(**r) for r in execute_raw_sql(sql, params)]


@router.get("/company/{company_id}", response_model=List[JobResponse])
def get_company_jobs(company_id: int):
    """Get every job posted by a company, whatever its status."""
    results = execute_raw_sql(f"""
        SELECT {JOB_COLUMNS}
        FROM jobs j JOIN users c ON j.company_id = c.id
        WHERE j.company_id = :cid
        ORDER BY j.created_at DESC, j.id DESC
    """, {"cid": company_id})

    return [JobResponse(**r) for r in results]


@router.get("/{job_id}", response_model=JobDetailResponse)
def get_job(job_id: int):
    """Get details of a specific job with its company's contact info."""
    results = execute_raw_sql(f"""
        SELECT {JOB_COLUMNS}, c.email AS company_email, c.company_description
        FROM jobs j JOIN users c ON j.company_id = c.id
        WHERE j.id = :jid
    """, {"jid": job_id})

    if not results:
        raise HTTPException(status_code=404, detail="Job not found")

    return JobDetailResponse(**results[0])


@router.post("", response_model=JobCreatedResponse, status_code=201)
def create_job(job: JobCreate, company: dict = Depends(get_current_company)):
    """Create a new job posting. Only companies can create jobs."""
    with get_db_session() as db:
        result = db.execute(
            text("""
                INSERT INTO jobs (company_id, title, description, job_type, location, salary, requirements, status)
                VALUES (:company_id, :title, :description, :job_type, :location, :salary, :requirements, 'active')
                RETURNING id
            """),
            {
                "company_id": company["user_id"], "title": job.title, "description": job.description,
                "job_type": job.job_type.value, "location": job.location, "salary": job.salary,
                "requirements": job.requirements
            }
        )
        job_id = result.scalar_one()

    logger.info("Company %s posted job %s", company["user_id"], job_id)
    return JobCreatedResponse(message="Job created successfully", job_id=job_id)


@router.put("/{job_id}", response_model=MessageResponse)
def update_job(job_id: int, update: JobUpdate, company: dict = Depends(get_current_company)):
    """Update a job posting. Only the owning company can update."""
    with get_db_session() as db:
        result = db.execute(
            text("SELECT id FROM jobs WHERE id = :jid AND company_id = :cid"),
            {"jid": job_id, "cid": company["user_id"]}
        )
        if not result.fetchone():
            raise HTTPException(status_code=404, detail="Job not found or access denied")

        updates = []
        params = {"jid": job_id}

        for field in ["title", "description", "location", "salary", "requirements"]:
            value = getattr(update, field, None)
            if value is not None:
                updates.append(f"{field} = :{field}")
                params[field] = value

        if update.job_type:
            updates.append("job_type = :job_type")
            params["job_type"] = update.job_type.value
        if update.status:
            updates.append("status = :status")
            params["status"] = update.status.value

        if updates:
            db.execute(
                text(f"UPDATE jobs SET {', '.join(updates)} WHERE id = :jid"),
                params
            )

    return MessageResponse(message="Job updated successfully")


@router.delete("/{job_id}", response_model=MessageResponse)
def delete_job(job_id: int, company: dict = Depends(get_current_company)):
    """Delete a job posting. Cascades to applications, bookmarks and conversations."""
    with get_db_session() as db:
        result = db.execute(
            text("DELETE FROM jobs WHERE id = :jid AND company_id = :cid"),
            {"jid": job_id, "cid": company["user_id"]}
        )
        if result.rowcount == 0:
            raise HTTPException(status_code=404, detail="Job not found or access denied")

    logger.info("Company %s deleted job %s", company["user_id"], job_id)
    return MessageResponse(message="Job deleted successfully")


@router.post("/{job_id}/apply", response_model=MessageResponse, status_code=201)
def apply_to_job(job_id: int, student: dict = Depends(get_current_student)):
    """
    Apply to a job. Students only. Cannot apply twice to same job.

    The company is notified in the same transaction as the application.
    """
    try:
        with get_db_session() as db:
            result = db.execute(
                text("SELECT title, company_id, status FROM jobs WHERE id = :jid"),
                {"jid": job_id}
            )
            job = result.fetchone()
            if not job:
                raise HTTPException(status_code=404, detail="Job not found")
            title, company_id, status = job
            if status != "active":
                raise HTTPException(status_code=400, detail="Job is not accepting applications")

            result = db.execute(
                text("SELECT id FROM applications WHERE student_id = :sid AND job_id = :jid"),
                {"sid": student["user_id"], "jid": job_id}
            )
            if result.fetchone():
                raise HTTPException(status_code=400, detail=ALREADY_APPLIED)

            db.execute(
                text("INSERT INTO applications (job_id, student_id, status) VALUES (:jid, :sid, 'pending')"),
                {"jid": job_id, "sid": student["user_id"]}
            )

            db.execute(
                text("INSERT INTO notifications (user_id, message) VALUES (:uid, :message)"),
                {"uid": company_id, "message": f'{student["full_name"]} applied to "{title}"'}
            )
    except IntegrityError:
        # A concurrent request inserted the same application first
        raise HTTPException(status_code=400, detail=ALREADY_APPLIED)

    logger.info("Student %s applied to job %s", student["user_id"], job_id)
    return MessageResponse(message="Application submitted successfully")


@router.get("/{job_id}/applications", response_model=List[ApplicantResponse])
def get_job_applications(job_id: int, company: dict = Depends(get_current_company)):
    """List the students who applied to one of the company's jobs."""
    with get_db_session() as db:
        result = db.execute(
            text("SELECT id FROM jobs WHERE id = :jid AND company_id = :cid"),
            {"jid": job_id, "cid": company["user_id"]}
        )
        if not result.fetchone():
            raise HTTPException(status_code=404, detail="Job not found or access denied")

        result = db.execute(
            text("""
                SELECT a.id, a.job_id, a.student_id, a.status, a.applied_at,
                       s.full_name AS student_name, s.email AS student_email,
                       s.level_of_study, s.cv_link, s.bio
                FROM applications a
                JOIN users s ON a.student_id = s.id
                WHERE a.job_id = :jid
                ORDER BY a.applied_at DESC, a.id DESC
            """),
            {"jid": job_id}
        )
        rows = result.mappings().fetchall()

    return [ApplicantResponse(**r) for r in rows]
