"""Jobs outbox service for outbound side effects.

Notifications are never sent inline; they are written to jobs_outbox in the
same transaction as the change that triggers them.
"""

import uuid
from datetime import datetime
from typing import Any, Optional

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import get_settings
from app.models.jobs import JobsOutbox
from app.models.enums import JobStatus

SEND_EMAIL = "send_email"


class JobsService:
    """Service for managing jobs via the outbox pattern."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def enqueue(
        self,
        job_type: str,
        payload: dict[str, Any],
        unique_scope: str,
        run_after: Optional[datetime] = None,
    ) -> Optional[uuid.UUID]:
        """Enqueue a job with unique_scope de-duplication.

        Returns the new job ID, or None if a job with the same unique_scope
        already exists.
        """
        existing = await self.db.execute(
            select(JobsOutbox.id).where(JobsOutbox.unique_scope == unique_scope)
        )
        if existing.scalar_one_or_none() is not None:
            return None

        job = JobsOutbox(
            type=job_type,
            payload=payload,
            status=JobStatus.PENDING,
            unique_scope=unique_scope,
            run_after=run_after or datetime.utcnow(),
        )
        self.db.add(job)
        await self.db.flush()
        return job.id

    async def enqueue_email(
        self,
        to: str,
        template: str,
        context: dict[str, Any],
        unique_scope: str,
    ) -> Optional[uuid.UUID]:
        """Enqueue a templated notification e-mail."""
        return await self.enqueue(
            job_type=SEND_EMAIL,
            payload={
                "to": to,
                "from": get_settings().notification_from_email,
                "template": template,
                "context": context,
            },
            unique_scope=unique_scope,
        )

    async def list_jobs(
        self,
        status: Optional[JobStatus] = None,
        limit: int = 100,
    ) -> list[JobsOutbox]:
        """List outbox rows, newest first."""
        query = select(JobsOutbox)
        if status:
            query = query.where(JobsOutbox.status == status)
        result = await self.db.execute(query.order_by(JobsOutbox.created_at.desc()).limit(limit))
        return list(result.scalars().all())

    async def claim_pending_jobs(
        self,
        job_type: Optional[str] = None,
        limit: int = 10,
    ) -> list[JobsOutbox]:
        """Claim due pending jobs, moving them to PROCESSING."""
        query = (
            select(JobsOutbox)
            .where(
                JobsOutbox.status == JobStatus.PENDING,
                JobsOutbox.run_after <= datetime.utcnow(),
            )
        )

        if job_type:
            query = query.where(JobsOutbox.type == job_type)

        query = query.order_by(JobsOutbox.run_after).limit(limit)

        result = await self.db.execute(query)
        jobs = list(result.scalars().all())

        now = datetime.utcnow()
        for job in jobs:
            job.status = JobStatus.PROCESSING
            job.started_at = now
            job.attempts = (job.attempts or 0) + 1
        await self.db.flush()

        return jobs

    async def complete_job(self, job_id: uuid.UUID) -> None:
        """Mark job as completed."""
        await self.db.execute(
            update(JobsOutbox)
            .where(JobsOutbox.id == job_id)
            .values(
                status=JobStatus.COMPLETED,
                completed_at=datetime.utcnow(),
            )
        )

    async def fail_job(
        self,
        job_id: uuid.UUID,
        error: str,
        dead_letter: bool = False,
    ) -> Optional[JobStatus]:
        """Mark job as failed.

        Moves to DEAD_LETTER when asked to or when attempts are exhausted,
        otherwise back to PENDING for retry. Returns the new status.
        """
        result = await self.db.execute(
            select(JobsOutbox).where(JobsOutbox.id == job_id)
        )
        job = result.scalar_one_or_none()

        if not job:
            return None

        if dead_letter or job.attempts >= job.max_attempts:
            job.status = JobStatus.DEAD_LETTER
        else:
            job.status = JobStatus.PENDING
        job.last_error = error
        await self.db.flush()
        return job.status
