"""Domain models for the daily report dialogue."""

from dataclasses import dataclass, field
from enum import Enum

from slimfit.domain.reports import Meal, ReportDraft


class ConversationState(str, Enum):
    """Steps of the daily report dialogue."""

    IDLE = "idle"
    WEIGHT = "weight"
    STEPS = "steps"
    SLEEP = "sleep"
    CALORIES = "calories"
    TRAINING = "training"
    MOOD = "mood"
    COMMENTS = "comments"


@dataclass(frozen=True)
class Conversation:
    """Per-user dialogue state persisted between messages."""

    state: ConversationState = ConversationState.IDLE
    draft: ReportDraft = field(default_factory=ReportDraft)

    @property
    def is_active(self) -> bool:
        """Return true while a report is being collected."""
        return self.state is not ConversationState.IDLE


@dataclass(frozen=True)
class TextInput:
    """Free-text reply from the user."""

    text: str


@dataclass(frozen=True)
class ImageInput:
    """Image reply from the user.

    ``extracted`` carries whatever the image handler could read from the
    picture; ``None`` means nothing was recognized.
    """

    file_id: str
    extracted: ReportDraft | None = None


@dataclass(frozen=True)
class StartReport:
    """User asked to begin a new report."""


@dataclass(frozen=True)
class Cancel:
    """User asked to abandon the report in progress."""


@dataclass(frozen=True)
class DiaryImported:
    """Nutrition diary import finished with meals."""

    meals: list[Meal]


@dataclass(frozen=True)
class DiaryImportFailed:
    """Nutrition diary import failed."""

    reason: str


@dataclass(frozen=True)
class FoodsResolved:
    """Free-text food list was resolved into meals."""

    meals: list[Meal]


@dataclass(frozen=True)
class FoodLookupFailed:
    """Free-text food list could not be resolved."""

    reason: str


ConversationEvent = (
    TextInput
    | ImageInput
    | StartReport
    | Cancel
    | DiaryImported
    | DiaryImportFailed
    | FoodsResolved
    | FoodLookupFailed
)


@dataclass(frozen=True)
class Prompt:
    """Ask the question for ``step``."""

    step: ConversationState


@dataclass(frozen=True)
class Reprompt:
    """Input for ``step`` was invalid; ask again with a hint."""

    step: ConversationState


@dataclass(frozen=True)
class Cancelled:
    """The report in progress was discarded."""


@dataclass(frozen=True)
class NothingToCancel:
    """Cancel arrived while no report was being collected."""


@dataclass(frozen=True)
class ImageAcknowledged:
    """An image arrived and was accepted without structured data."""


@dataclass(frozen=True)
class ImportDiary:
    """Fetch today's nutrition diary."""


@dataclass(frozen=True)
class LookupFoods:
    """Resolve a free-text food list."""

    query: str


@dataclass(frozen=True)
class NutritionAccepted:
    """Meals were accepted for the calories step.

    ``origin`` is one of ``manual``, ``diary`` or ``foods``.
    """

    meals: list[Meal]
    origin: str


@dataclass(frozen=True)
class LookupFailed:
    """A remote nutrition lookup failed; tell the user why."""

    origin: str
    reason: str


@dataclass(frozen=True)
class FinalizeReport:
    """Assemble and persist the collected report."""

    draft: ReportDraft


@dataclass(frozen=True)
class NotInDialogue:
    """Input arrived while no report was being collected."""


Effect = (
    Prompt
    | Reprompt
    | Cancelled
    | NothingToCancel
    | ImageAcknowledged
    | ImportDiary
    | LookupFoods
    | NutritionAccepted
    | LookupFailed
    | FinalizeReport
    | NotInDialogue
)


@dataclass(frozen=True)
class Transition:
    """Result of applying an event to a conversation."""

    conversation: Conversation
    effects: list[Effect] = field(default_factory=list)
