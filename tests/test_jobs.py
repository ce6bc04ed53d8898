"""Outbox enqueue, claim and retry behaviour."""

import uuid
from datetime import datetime, timedelta

from sqlalchemy import select

from app.models.enums import JobStatus
from app.models.jobs import JobsOutbox
from app.services.jobs import SEND_EMAIL, JobsService


async def test_enqueue_dedups_on_unique_scope(db):
    jobs = JobsService(db)
    first = await jobs.enqueue("reindex", {"id": 1}, unique_scope="reindex:1")
    second = await jobs.enqueue("reindex", {"id": 1}, unique_scope="reindex:1")

    assert first is not None
    assert second is None
    assert len(await jobs.list_jobs()) == 1


async def test_enqueue_email_payload(db):
    job_id = await JobsService(db).enqueue_email(
        to="tenant@example.com",
        template="tenant_portal_invite",
        context={"first_name": "Sam"},
        unique_scope="tenant_portal_invite:1",
    )
    job = await db.get(JobsOutbox, job_id)
    assert job.type == SEND_EMAIL
    assert job.status == JobStatus.PENDING
    assert job.payload["to"] == "tenant@example.com"
    assert job.payload["template"] == "tenant_portal_invite"
    assert job.payload["context"] == {"first_name": "Sam"}


async def test_claim_only_due_jobs(db):
    jobs = JobsService(db)
    await jobs.enqueue("due", {}, unique_scope="due:1")
    await jobs.enqueue(
        "later", {}, unique_scope="later:1", run_after=datetime.utcnow() + timedelta(hours=1)
    )

    claimed = await jobs.claim_pending_jobs()

    assert [job.type for job in claimed] == ["due"]
    assert claimed[0].status == JobStatus.PROCESSING
    assert claimed[0].attempts == 1
    assert claimed[0].started_at is not None


async def test_failed_job_retries_until_attempts_exhausted(db):
    jobs = JobsService(db)
    job_id = await jobs.enqueue("flaky", {}, unique_scope="flaky:1")

    for expected in (JobStatus.PENDING, JobStatus.PENDING, JobStatus.DEAD_LETTER):
        claimed = await jobs.claim_pending_jobs(job_type="flaky")
        assert [job.id for job in claimed] == [job_id]
        assert await jobs.fail_job(job_id, "SMTP timeout") == expected

    job = await db.get(JobsOutbox, job_id)
    assert job.attempts == 3
    assert job.last_error == "SMTP timeout"
    assert await jobs.claim_pending_jobs(job_type="flaky") == []


async def test_dead_letter_on_request_and_completion(db):
    jobs = JobsService(db)
    poisoned = await jobs.enqueue("bad", {}, unique_scope="bad:1")
    done = await jobs.enqueue("good", {}, unique_scope="good:1")
    await jobs.claim_pending_jobs()

    assert await jobs.fail_job(poisoned, "invalid payload", dead_letter=True) == JobStatus.DEAD_LETTER
    await jobs.complete_job(done)

    result = await db.execute(select(JobsOutbox.status).where(JobsOutbox.id == done))
    assert result.scalar_one() == JobStatus.COMPLETED
    assert await jobs.fail_job(uuid.uuid4(), "missing") is None
