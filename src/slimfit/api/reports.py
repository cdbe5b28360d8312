"""REST endpoints over daily reports with simple token auth."""

from datetime import date
from uuid import UUID

from fastapi import (
    APIRouter,
    BackgroundTasks,
    Depends,
    Header,
    HTTPException,
    Query,
    Request,
    status,
)

from slimfit.api.report_models import CreateReportPayload, ReportList, ReportPayload
from slimfit.containers import AppContainer
from slimfit.domain.models import UserRecord
from slimfit.domain.reports import DailyReport, Meal, ReportDraft
from slimfit.domain.stats import ReportStats
from slimfit.services.reports import ReportNotFoundError


def _get_container(request: Request) -> AppContainer:
    return request.app.state.container


async def require_api_token(
    x_api_token: str | None = Header(default=None),
    container: AppContainer = Depends(_get_container),
) -> None:
    """Ensure requests include a valid API token."""
    if not x_api_token or x_api_token != container.settings.api_token:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED)


router = APIRouter(
    prefix="/users/{telegram_user_id}/reports",
    tags=["reports"],
    dependencies=[Depends(require_api_token)],
)


def _get_user(
    telegram_user_id: str, container: AppContainer = Depends(_get_container)
) -> UserRecord:
    user = container.user_service.find_user(telegram_user_id)
    if user is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    return user


def _not_found(exc: ReportNotFoundError) -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))


async def _with_image_estimates(
    container: AppContainer, draft: ReportDraft
) -> ReportDraft:
    if not draft.meals:
        return draft
    meals = await container.meal_image_service.enrich_meals(draft.meals)
    return draft.model_copy(update={"meals": meals})


@router.get("")
async def list_reports(  # noqa: PLR0913
    user: UserRecord = Depends(_get_user),
    container: AppContainer = Depends(_get_container),
    start: date | None = None,
    end: date | None = None,
    limit: int = Query(default=30, ge=1, le=100),
    offset: int = Query(default=0, ge=0),
) -> ReportList:
    """Return the user's reports, newest first."""
    reports = container.report_service.list_reports(user.id, start, end, limit, offset)
    return ReportList(reports=reports, limit=limit, offset=offset)


@router.post("")
async def upsert_report(
    payload: CreateReportPayload,
    background_tasks: BackgroundTasks,
    user: UserRecord = Depends(_get_user),
    container: AppContainer = Depends(_get_container),
) -> DailyReport:
    """Create the day's report or merge into the existing one.

    Image meals are estimated first; AI feedback is stored in the background.
    """
    report_date = payload.report_date or date.today()
    draft = await _with_image_estimates(container, payload.to_draft())
    report = container.report_service.upsert_report(user.id, report_date, draft)
    background_tasks.add_task(container.feedback_service.enrich, user, report)
    return report


@router.get("/stats/summary")
async def stats_summary(
    user: UserRecord = Depends(_get_user),
    container: AppContainer = Depends(_get_container),
    days: int = Query(default=30, ge=1, le=365),
) -> ReportStats:
    """Return averages and trends for the last ``days`` days."""
    return container.stats_service.summary(user.id, days=days)


@router.get("/{report_date}")
async def get_report(
    report_date: date,
    user: UserRecord = Depends(_get_user),
    container: AppContainer = Depends(_get_container),
) -> DailyReport:
    """Return the report for one day."""
    report = container.report_service.get_report(user.id, report_date)
    if report is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Report not found")
    return report


@router.put("/{report_date}")
async def update_report(
    report_date: date,
    payload: ReportPayload,
    user: UserRecord = Depends(_get_user),
    container: AppContainer = Depends(_get_container),
) -> DailyReport:
    """Merge fields into an existing report."""
    draft = await _with_image_estimates(container, payload.to_draft())
    try:
        return container.report_service.update_report(user.id, report_date, draft)
    except ReportNotFoundError as exc:
        raise _not_found(exc) from exc


@router.delete("/{report_date}")
async def delete_report(
    report_date: date,
    user: UserRecord = Depends(_get_user),
    container: AppContainer = Depends(_get_container),
) -> dict[str, str]:
    """Delete the report for one day."""
    if not container.report_service.delete_report(user.id, report_date):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Report not found")
    return {"status": "deleted"}


@router.post("/{report_date}/meals")
async def add_meal(
    report_date: date,
    meal: Meal,
    user: UserRecord = Depends(_get_user),
    container: AppContainer = Depends(_get_container),
) -> DailyReport:
    """Append a meal; totals are recomputed."""
    (estimated,) = await container.meal_image_service.enrich_meals([meal])
    return container.report_service.add_meal(user.id, report_date, estimated)


@router.put("/{report_date}/meals")
async def replace_meals(
    report_date: date,
    meals: list[Meal],
    user: UserRecord = Depends(_get_user),
    container: AppContainer = Depends(_get_container),
) -> DailyReport:
    """Replace the report's meal list; totals are recomputed."""
    estimated = await container.meal_image_service.enrich_meals(meals)
    try:
        return container.report_service.replace_meals(user.id, report_date, estimated)
    except ReportNotFoundError as exc:
        raise _not_found(exc) from exc


@router.delete("/{report_date}/meals/{meal_id}")
async def remove_meal(
    report_date: date,
    meal_id: UUID,
    user: UserRecord = Depends(_get_user),
    container: AppContainer = Depends(_get_container),
) -> DailyReport:
    """Remove a meal; totals are recomputed."""
    try:
        return container.report_service.remove_meal(user.id, report_date, meal_id)
    except ReportNotFoundError as exc:
        raise _not_found(exc) from exc
