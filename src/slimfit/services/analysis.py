"""AI feedback for saved daily reports."""

import asyncio
import logging
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Protocol

from pydantic import BaseModel, Field

from slimfit.domain.models import UserRecord
from slimfit.domain.reports import AiFeedback, DailyReport
from slimfit.services import locales

if TYPE_CHECKING:
    from slimfit.adapters.telegram_client import TelegramClient
    from slimfit.services.reports import ReportService

ANALYSIS_SCHEMA: dict[str, object] = {
    "type": "object",
    "properties": {
        "summary": {"type": "string"},
        "recommendations": {"type": "array", "items": {"type": "string"}},
        "health_score": {
            "anyOf": [{"type": "integer", "minimum": 0, "maximum": 100}, {"type": "null"}]
        },
        "goals": {"type": "array", "items": {"type": "string"}},
        "warnings": {"type": "array", "items": {"type": "string"}},
    },
    "required": ["summary", "recommendations", "health_score", "goals", "warnings"],
    "additionalProperties": False,
}

_LANGUAGE_NAMES = {"uk": "Ukrainian", "en": "English"}

_logger = logging.getLogger(__name__)


class AnalysisResult(BaseModel):
    """Structured payload returned by the analysis model."""

    summary: str
    recommendations: list[str] = Field(default_factory=list)
    health_score: int | None = Field(default=None, ge=0, le=100)
    goals: list[str] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)


class AnalysisClient(Protocol):
    """Interface for LLM report analysis."""

    async def analyze(
        self,
        *,
        model: str,
        store: bool,
        instructions: str,
        prompt: str,
        schema: dict[str, object],
    ) -> dict[str, object]:
        """Return structured analysis data."""


@dataclass
class AnalysisService:
    """Service that prepares analysis prompts and validates results."""

    client: AnalysisClient
    model: str
    store: bool

    async def analyze_daily_report(
        self, report: DailyReport, profile: UserRecord
    ) -> AiFeedback:
        """Ask the model for feedback on one report."""
        language = _LANGUAGE_NAMES.get(profile.language, _LANGUAGE_NAMES["uk"])
        instructions = (
            "You are a healthy lifestyle and fitness coach. "
            "Review the user's daily report and reply in "
            f"{language}. Keep the summary short, give practical "
            "recommendations for nutrition, training and sleep, "
            "list short-term goals, and add warnings only for real risks."
        )
        raw = await self.client.analyze(
            model=self.model,
            store=self.store,
            instructions=instructions,
            prompt=format_report(report),
            schema=ANALYSIS_SCHEMA,
        )
        result = AnalysisResult.model_validate(raw)
        return AiFeedback(
            **result.model_dump(),
            analyzed_at=datetime.now(tz=UTC),
        )


@dataclass
class FeedbackService:
    """Attach AI feedback to a report after it has been saved."""

    analysis_service: AnalysisService
    report_service: "ReportService"
    telegram_client: "TelegramClient"
    timeout_seconds: float = 20.0
    enabled: bool = True

    async def enrich(
        self, user: UserRecord, report: DailyReport, chat_id: int | None = None
    ) -> AiFeedback | None:
        """Analyze, store and send feedback; failures are logged only.

        Without a ``chat_id`` the feedback is stored but not sent.
        """
        if not self.enabled:
            return None
        log_extra = {
            "user_id": str(user.id),
            "report_date": report.report_date.isoformat(),
        }
        try:
            feedback = await asyncio.wait_for(
                self.analysis_service.analyze_daily_report(report, user),
                timeout=self.timeout_seconds,
            )
            self.report_service.attach_feedback(user.id, report.report_date, feedback)
        except Exception:
            _logger.exception("AI feedback failed", extra=log_extra)
            return None
        if chat_id is None:
            return feedback
        try:
            await self.telegram_client.send_message(
                chat_id=chat_id, text=format_feedback(feedback, user.language)
            )
        except Exception:
            _logger.exception("Failed to send AI feedback", extra=log_extra)
        return feedback


def format_report(report: DailyReport) -> str:
    """Render a report as plain text for the analysis prompt."""
    lines = [f"Date: {report.report_date.isoformat()}"]
    if report.weight:
        lines.append(f"Weight: {report.weight.value:.1f} kg")
    if report.steps:
        lines.append(f"Steps: {report.steps.count}")
    if report.sleep:
        lines.append(f"Sleep: {report.sleep.duration:.1f} h ({report.sleep.quality})")
    totals = report.total_nutrition
    if report.meals:
        lines.append(
            f"Nutrition: {totals.calories:.0f} kcal, protein {totals.protein:.0f} g, "
            f"carbs {totals.carbs:.0f} g, fat {totals.fat:.0f} g"
        )
        for meal in report.meals:
            if meal.name:
                lines.append(f"- {meal.type.value}: {meal.name} ({meal.calories:.0f} kcal)")
    if report.training:
        training = report.training
        lines.append(
            f"Training: {training.type.value}, {training.duration} min, "
            f"{training.intensity} intensity"
        )
    if report.mood:
        lines.append(f"Mood: {report.mood.value.value}")
    if report.comments:
        lines.append(f"Comments: {report.comments}")
    return "\n".join(lines)


def format_feedback(feedback: AiFeedback, language: str) -> str:
    """Render feedback as a Telegram message."""
    parts = [locales.text(language, "feedback", summary=feedback.summary)]
    for key, items in (
        ("feedback_recommendations", feedback.recommendations),
        ("feedback_goals", feedback.goals),
        ("feedback_warnings", feedback.warnings),
    ):
        if items:
            lines = [locales.text(language, key)]
            lines.extend(f"• {item}" for item in items)
            parts.append("\n".join(lines))
    return "\n\n".join(parts)
