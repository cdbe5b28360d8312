"""Daily report persistence rules."""

import logging
from dataclasses import dataclass
from datetime import date
from typing import Protocol
from uuid import UUID

from slimfit.domain.reports import AiFeedback, DailyReport, Meal, ReportDraft
from slimfit.services.aggregation import with_meals

_logger = logging.getLogger(__name__)


class ReportNotFoundError(LookupError):
    """Raised when a report for the requested day does not exist."""


class ReportRepository(Protocol):
    """Persistence interface for daily reports."""

    def get(self, user_id: UUID, report_date: date) -> DailyReport | None:
        """Return the report for a user and day, if present."""

    def upsert(self, report: DailyReport) -> DailyReport:
        """Insert or replace the report keyed by user and day."""

    def list_reports(
        self,
        user_id: UUID,
        start: date | None,
        end: date | None,
        limit: int,
        offset: int,
    ) -> list[DailyReport]:
        """Return reports newest first within an optional date range."""

    def delete(self, user_id: UUID, report_date: date) -> bool:
        """Delete a report and return true when a row was removed."""


@dataclass
class ReportService:
    """Application service enforcing report uniqueness and totals."""

    repository: ReportRepository

    def submit_report(
        self, user_id: UUID, report_date: date, draft: ReportDraft
    ) -> DailyReport:
        """Persist a finished dialogue draft for the day."""
        report = self.upsert_report(user_id, report_date, draft)
        _logger.info(
            "Daily report saved",
            extra={"user_id": str(user_id), "report_date": report_date.isoformat()},
        )
        return report

    def upsert_report(
        self, user_id: UUID, report_date: date, draft: ReportDraft
    ) -> DailyReport:
        """Create the day's report or merge new values onto the existing one."""
        existing = self.repository.get(user_id, report_date)
        base = existing or DailyReport(user_id=user_id, report_date=report_date)
        return self.repository.upsert(_merge(base, draft))

    def update_report(
        self, user_id: UUID, report_date: date, draft: ReportDraft
    ) -> DailyReport:
        """Merge values onto an existing report; raise when it is missing."""
        existing = self._require(user_id, report_date)
        return self.repository.upsert(_merge(existing, draft))

    def get_report(self, user_id: UUID, report_date: date) -> DailyReport | None:
        """Return the report for the day, if present."""
        return self.repository.get(user_id, report_date)

    def list_reports(
        self,
        user_id: UUID,
        start: date | None = None,
        end: date | None = None,
        limit: int = 30,
        offset: int = 0,
    ) -> list[DailyReport]:
        """Return reports newest first."""
        return self.repository.list_reports(user_id, start, end, limit, offset)

    def delete_report(self, user_id: UUID, report_date: date) -> bool:
        """Delete the report for the day."""
        return self.repository.delete(user_id, report_date)

    def add_meal(self, user_id: UUID, report_date: date, meal: Meal) -> DailyReport:
        """Append a meal, creating the day's report when needed."""
        existing = self.repository.get(user_id, report_date)
        base = existing or DailyReport(user_id=user_id, report_date=report_date)
        return self.repository.upsert(with_meals(base, [*base.meals, meal]))

    def remove_meal(
        self, user_id: UUID, report_date: date, meal_id: UUID
    ) -> DailyReport:
        """Remove a meal by id; raise when the report or meal is missing."""
        existing = self._require(user_id, report_date)
        remaining = [meal for meal in existing.meals if meal.id != meal_id]
        if len(remaining) == len(existing.meals):
            raise ReportNotFoundError(f"Meal {meal_id} not found")
        return self.repository.upsert(with_meals(existing, remaining))

    def replace_meals(
        self, user_id: UUID, report_date: date, meals: list[Meal]
    ) -> DailyReport:
        """Replace the full meal list of an existing report."""
        existing = self._require(user_id, report_date)
        return self.repository.upsert(with_meals(existing, meals))

    def attach_feedback(
        self, user_id: UUID, report_date: date, feedback: AiFeedback
    ) -> DailyReport:
        """Store AI feedback on an existing report."""
        existing = self._require(user_id, report_date)
        return self.repository.upsert(
            existing.model_copy(update={"ai_feedback": feedback})
        )

    def _require(self, user_id: UUID, report_date: date) -> DailyReport:
        existing = self.repository.get(user_id, report_date)
        if existing is None:
            raise ReportNotFoundError(
                f"Report for {report_date.isoformat()} not found"
            )
        return existing


def _merge(report: DailyReport, draft: ReportDraft) -> DailyReport:
    """Apply set draft fields; stale feedback is dropped and totals recomputed."""
    values: dict[str, object] = {
        name: getattr(draft, name)
        for name in ("weight", "steps", "sleep", "training", "mood", "comments")
        if getattr(draft, name) is not None
    }
    values["ai_feedback"] = None
    merged = report.model_copy(update=values)
    meals = draft.meals if draft.meals is not None else merged.meals
    return with_meals(merged, meals)
