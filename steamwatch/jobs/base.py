"""Base job class."""
import logging
from abc import ABC, abstractmethod
from collections.abc import Callable
from datetime import datetime

from sqlalchemy import update
from sqlalchemy.ext.asyncio import AsyncSession

from steamwatch.models import JobRun
from steamwatch.timeutils import utcnow

logger = logging.getLogger(__name__)


class BaseJob(ABC):
    """Base class for batch jobs that record each invocation in ``job_runs``."""

    name: str = "base"

    def __init__(self, session: AsyncSession, clock: Callable[[], datetime] = utcnow):
        self.db = session
        self.clock = clock
        self.run_id = None

    async def start_run(self) -> JobRun:
        """Record the start of a job run."""
        run = JobRun(
            job_name=self.name,
            started_at=self.clock(),
            status="running",
        )
        self.db.add(run)
        await self.db.flush()
        self.run_id = run.id
        await self.db.commit()
        logger.info(f"Started job run: {self.name} ({self.run_id})")
        return run

    async def complete_run(self, records: int, errors: int, error: str | None = None):
        """Record the completion of a job run."""
        status = "failed" if error else "completed"
        await self.db.execute(
            update(JobRun)
            .where(JobRun.id == self.run_id)
            .values(
                completed_at=self.clock(),
                status=status,
                records_processed=records,
                error_count=errors,
                error_message=error,
            )
        )
        await self.db.commit()
        logger.info(f"Completed job run: {self.name} - {status} ({records} records, {errors} errors)")

    @abstractmethod
    async def run(self):
        """Run the job once and return its counters."""
