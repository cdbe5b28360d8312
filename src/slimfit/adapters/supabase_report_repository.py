"""Supabase-backed daily report repository."""

from dataclasses import dataclass
from datetime import UTC, date, datetime
from uuid import UUID

from supabase import Client

from slimfit.domain.reports import DailyReport
from slimfit.services.reports import ReportRepository

_TABLE = "daily_reports"
_CONFLICT_KEY = "user_id,report_date"
_JSON_COLUMNS = (
    "weight",
    "steps",
    "sleep",
    "training",
    "mood",
    "meals",
    "total_nutrition",
    "ai_feedback",
)


def _to_row(report: DailyReport) -> dict[str, object]:
    row = report.model_dump(mode="json", exclude={"created_at", "updated_at"})
    row["updated_at"] = datetime.now(tz=UTC).isoformat()
    return row


def _to_report(row: dict[str, object]) -> DailyReport:
    values = {key: row.get(key) for key in ("user_id", "report_date", "comments")}
    values.update({column: row.get(column) for column in _JSON_COLUMNS})
    values["created_at"] = row.get("created_at")
    values["updated_at"] = row.get("updated_at")
    if values["meals"] is None:
        values["meals"] = []
    if values["total_nutrition"] is None:
        values.pop("total_nutrition")
    return DailyReport.model_validate(values)


@dataclass
class SupabaseReportRepository(ReportRepository):
    """Supabase implementation for daily reports."""

    client: Client

    def get(self, user_id: UUID, report_date: date) -> DailyReport | None:
        """Return the report for a user and day, if present."""
        response = (
            self.client.table(_TABLE)
            .select("*")
            .eq("user_id", str(user_id))
            .eq("report_date", report_date.isoformat())
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _to_report(response.data[0])

    def upsert(self, report: DailyReport) -> DailyReport:
        """Insert or update on the unique (user_id, report_date) key."""
        response = (
            self.client.table(_TABLE)
            .upsert(_to_row(report), on_conflict=_CONFLICT_KEY)
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to upsert daily report")
        return _to_report(response.data[0])

    def list_reports(
        self,
        user_id: UUID,
        start: date | None,
        end: date | None,
        limit: int,
        offset: int,
    ) -> list[DailyReport]:
        """Return reports newest first within an optional date range."""
        query = self.client.table(_TABLE).select("*").eq("user_id", str(user_id))
        if start is not None:
            query = query.gte("report_date", start.isoformat())
        if end is not None:
            query = query.lte("report_date", end.isoformat())
        response = (
            query.order("report_date", desc=True)
            .range(offset, offset + limit - 1)
            .execute()
        )
        return [_to_report(row) for row in response.data or []]

    def delete(self, user_id: UUID, report_date: date) -> bool:
        """Delete a report and return true when a row was removed."""
        response = (
            self.client.table(_TABLE)
            .delete()
            .eq("user_id", str(user_id))
            .eq("report_date", report_date.isoformat())
            .execute()
        )
        return bool(response.data)
