"""Request and response bodies for the reports API."""

from datetime import date

from pydantic import BaseModel, Field

from slimfit.domain.reports import (
    DailyReport,
    Meal,
    MoodEntry,
    ReportDraft,
    SleepEntry,
    StepsEntry,
    TrainingEntry,
    WeightEntry,
)


class ReportPayload(BaseModel):
    """Report fields accepted by create and update calls."""

    weight: WeightEntry | None = None
    steps: StepsEntry | None = None
    sleep: SleepEntry | None = None
    meals: list[Meal] | None = None
    training: TrainingEntry | None = None
    mood: MoodEntry | None = None
    comments: str | None = Field(default=None, max_length=2000)

    def to_draft(self) -> ReportDraft:
        """Return the payload as a report draft."""
        return ReportDraft(**self.model_dump(exclude_none=True, exclude={"report_date"}))


class CreateReportPayload(ReportPayload):
    """Create-or-merge body; the date defaults to today."""

    report_date: date | None = None


class ReportList(BaseModel):
    """Page of reports."""

    reports: list[DailyReport]
    limit: int
    offset: int
