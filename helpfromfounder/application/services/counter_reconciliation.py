"""Recompute denormalized counters from source documents.

totalIssues, closedIssues and every responseCount are derived by counting
threads and responses, then written back in batches. Running it twice in
a row changes nothing the second time.
"""

from __future__ import annotations

import logging

from helpfromfounder.application.dtos.thread import ReconciliationResult
from helpfromfounder.application.interfaces.repositories import (
    IProjectRepository,
    IResponseRepository,
    IThreadRepository,
)
from helpfromfounder.application.services.store_errors import MAX_BATCH_WRITES, store_errors
from helpfromfounder.domain.enums import ThreadStatus
from helpfromfounder.domain.exceptions import ResourceNotFoundException
from helpfromfounder.shared.telemetry.tracing import add_span_attributes, traced

logger = logging.getLogger(__name__)


class CounterReconciliationService:
    def __init__(
        self,
        projects: IProjectRepository,
        threads: IThreadRepository,
        responses: IResponseRepository,
    ) -> None:
        self._projects = projects
        self._threads = threads
        self._responses = responses

    @traced("counter_reconciliation.reconcile_project")
    async def reconcile_project(self, project_id: str, dry_run: bool = False) -> ReconciliationResult:
        with store_errors("Failed to reconcile counters. Please try again."):
            project = await self._projects.get_by_id(project_id)
            if project is None:
                raise ResourceNotFoundException("project", project_id)
            threads = await self._threads.list_by_project(project.id)
            total = len(threads)
            closed = sum(1 for t in threads if t.status == ThreadStatus.CLOSED)

            batch = self._projects.new_batch()
            threads_fixed = 0
            for thread in threads:
                actual = len(await self._responses.list_ids_by_thread(thread.id))
                if actual == thread.response_count:
                    continue
                threads_fixed += 1
                logger.info(
                    "Thread %s responseCount %d -> %d", thread.id, thread.response_count, actual
                )
                self._threads.stage_set_response_count(batch, thread.id, actual)
                if len(batch) >= MAX_BATCH_WRITES - 1:
                    if not dry_run:
                        await batch.commit()
                    batch = self._projects.new_batch()

            if total != project.total_issues or closed != project.closed_issues:
                logger.info(
                    "Project %s counters total %d -> %d, closed %d -> %d",
                    project.id, project.total_issues, total, project.closed_issues, closed,
                )
                self._projects.stage_set_counters(
                    batch, project.id, total_issues=total, closed_issues=closed
                )
            if not dry_run and len(batch):
                await batch.commit()

        add_span_attributes(threads_fixed=threads_fixed, total_issues=total)
        return ReconciliationResult(
            project_id=project.id,
            total_issues_before=project.total_issues,
            total_issues_after=total,
            closed_issues_before=project.closed_issues,
            closed_issues_after=closed,
            threads_fixed=threads_fixed,
        )

    async def reconcile_all(self, dry_run: bool = False) -> list[ReconciliationResult]:
        with store_errors("Failed to list projects. Please try again."):
            project_ids = await self._projects.list_ids()
        return [await self.reconcile_project(pid, dry_run=dry_run) for pid in project_ids]
