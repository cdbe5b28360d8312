"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import create_client

from slimfit.adapters.fatsecret_client import HttpxFatSecretClient
from slimfit.adapters.openai_analysis_client import OpenAIAnalysisClient
from slimfit.adapters.openai_vision_client import OpenAIVisionClient
from slimfit.adapters.supabase_conversation_repository import (
    SupabaseConversationRepository,
)
from slimfit.adapters.supabase_report_repository import SupabaseReportRepository
from slimfit.adapters.supabase_user_repository import SupabaseUserRepository
from slimfit.adapters.telegram_client import HttpxTelegramClient, TelegramClient
from slimfit.config import Settings
from slimfit.services.analysis import AnalysisService, FeedbackService
from slimfit.services.cache import InMemoryCache
from slimfit.services.commands import (
    FatSecretCommandHandler,
    StartCommandHandler,
    StatsCommandHandler,
)
from slimfit.services.dialogue import DialogueService
from slimfit.services.diary import DiaryService
from slimfit.services.images import PlaceholderImageHandler
from slimfit.services.reports import ReportService
from slimfit.services.stats import StatsService
from slimfit.services.users import UserService
from slimfit.services.vision import MealImageService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    telegram_client: TelegramClient
    user_service: UserService
    report_service: ReportService
    dialogue_service: DialogueService
    feedback_service: FeedbackService
    meal_image_service: MealImageService
    diary_service: DiaryService
    stats_service: StatsService
    start_command_handler: StartCommandHandler
    stats_command_handler: StatsCommandHandler
    fatsecret_command_handler: FatSecretCommandHandler
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    user_service = UserService(
        SupabaseUserRepository(supabase_client),
        default_language=resolved_settings.default_language,
    )
    report_repository = SupabaseReportRepository(supabase_client)
    report_service = ReportService(report_repository)
    stats_service = StatsService(report_repository)
    telegram_client = HttpxTelegramClient.create(resolved_settings.telegram_bot_token)
    fatsecret_client = HttpxFatSecretClient.create(
        consumer_key=resolved_settings.fatsecret_consumer_key,
        consumer_secret=resolved_settings.fatsecret_consumer_secret,
        base_url=resolved_settings.fatsecret_base_url,
    )
    diary_service = DiaryService(
        client=fatsecret_client,
        user_service=user_service,
        cache=InMemoryCache(),
    )
    openai_client = OpenAIAnalysisClient.create(resolved_settings.openai_api_key)
    analysis_service = AnalysisService(
        client=openai_client,
        model=resolved_settings.openai_model,
        store=resolved_settings.openai_store,
    )
    meal_image_service = MealImageService(
        client=OpenAIVisionClient(client=openai_client.client),
        model=resolved_settings.openai_model,
        store=resolved_settings.openai_store,
        enabled=resolved_settings.vision_enabled,
    )
    feedback_service = FeedbackService(
        analysis_service=analysis_service,
        report_service=report_service,
        telegram_client=telegram_client,
        timeout_seconds=resolved_settings.analysis_timeout_seconds,
        enabled=resolved_settings.analysis_enabled,
    )
    dialogue_service = DialogueService(
        conversations=SupabaseConversationRepository(supabase_client),
        report_service=report_service,
        diary_service=diary_service,
        image_handler=PlaceholderImageHandler(),
        telegram_client=telegram_client,
    )

    async def close_resources() -> None:
        await telegram_client.close()
        await fatsecret_client.close()
        await openai_client.close()

    return AppContainer(
        settings=resolved_settings,
        telegram_client=telegram_client,
        user_service=user_service,
        report_service=report_service,
        dialogue_service=dialogue_service,
        feedback_service=feedback_service,
        meal_image_service=meal_image_service,
        diary_service=diary_service,
        stats_service=stats_service,
        start_command_handler=StartCommandHandler(telegram_client),
        stats_command_handler=StatsCommandHandler(stats_service, telegram_client),
        fatsecret_command_handler=FatSecretCommandHandler(
            diary_service, telegram_client
        ),
        close_resources=close_resources,
    )
