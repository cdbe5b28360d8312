"""Transition table for the daily report dialogue.

``advance`` is pure: it takes the current conversation and one event and
returns the next conversation plus the effects the caller must perform.
Persistence, messaging and remote lookups all happen outside this module.
"""

from collections.abc import Callable

from slimfit.domain.conversation import (
    Cancel,
    Cancelled,
    Conversation,
    ConversationEvent,
    ConversationState,
    DiaryImported,
    DiaryImportFailed,
    FinalizeReport,
    FoodLookupFailed,
    FoodsResolved,
    ImageAcknowledged,
    ImageInput,
    ImportDiary,
    LookupFailed,
    LookupFoods,
    NothingToCancel,
    NotInDialogue,
    NutritionAccepted,
    Prompt,
    Reprompt,
    StartReport,
    TextInput,
    Transition,
)
from slimfit.domain.reports import Meal, ReportDraft
from slimfit.services.parsing import ReportParser

FIRST_STEP = ConversationState.WEIGHT
MIN_FOOD_QUERY_LENGTH = 4

NEXT_STEP: dict[ConversationState, ConversationState] = {
    ConversationState.WEIGHT: ConversationState.STEPS,
    ConversationState.STEPS: ConversationState.SLEEP,
    ConversationState.SLEEP: ConversationState.CALORIES,
    ConversationState.CALORIES: ConversationState.TRAINING,
    ConversationState.TRAINING: ConversationState.MOOD,
    ConversationState.MOOD: ConversationState.COMMENTS,
    ConversationState.COMMENTS: ConversationState.IDLE,
}

STEP_FIELDS: dict[ConversationState, str] = {
    ConversationState.WEIGHT: "weight",
    ConversationState.STEPS: "steps",
    ConversationState.SLEEP: "sleep",
    ConversationState.CALORIES: "meals",
    ConversationState.TRAINING: "training",
    ConversationState.MOOD: "mood",
    ConversationState.COMMENTS: "comments",
}

SKIPPABLE_STEPS = frozenset({ConversationState.TRAINING, ConversationState.MOOD})

TextHandler = Callable[[Conversation, str, ReportParser], Transition]


def advance(
    conversation: Conversation, event: ConversationEvent, parser: ReportParser
) -> Transition:
    """Apply one event to a conversation."""
    if isinstance(event, StartReport):
        return _prompt(Conversation(state=FIRST_STEP, draft=ReportDraft()))
    if isinstance(event, Cancel):
        return _cancel(conversation)
    if isinstance(event, ImageInput):
        return _image(conversation, event)
    if isinstance(event, DiaryImported | FoodsResolved):
        return _nutrition_resolved(conversation, event)
    if isinstance(event, DiaryImportFailed | FoodLookupFailed):
        return _nutrition_failed(conversation, event)
    if isinstance(event, TextInput):
        return _text(conversation, event.text, parser)
    raise TypeError(f"Unsupported conversation event: {event!r}")


def _text(conversation: Conversation, text: str, parser: ReportParser) -> Transition:
    if not conversation.is_active:
        return Transition(conversation, [NotInDialogue()])
    if parser.is_cancel(text):
        return _cancel(conversation)
    if conversation.state in SKIPPABLE_STEPS and parser.is_skip(text):
        return _prompt(
            Conversation(state=NEXT_STEP[conversation.state], draft=conversation.draft)
        )
    handler = _TEXT_HANDLERS[conversation.state]
    return handler(conversation, text, parser)


def _accept(conversation: Conversation, update: ReportDraft) -> Transition:
    """Merge a parsed value and move to the next step."""
    return _prompt(
        Conversation(
            state=NEXT_STEP[conversation.state],
            draft=conversation.draft.merge(update),
        )
    )


def _prompt(conversation: Conversation) -> Transition:
    return Transition(conversation, [Prompt(conversation.state)])


def _reprompt(conversation: Conversation) -> Transition:
    return Transition(conversation, [Reprompt(conversation.state)])


def _cancel(conversation: Conversation) -> Transition:
    if not conversation.is_active:
        return Transition(conversation, [NothingToCancel()])
    return Transition(Conversation(), [Cancelled()])


def _image(conversation: Conversation, event: ImageInput) -> Transition:
    if event.extracted is not None:
        state = conversation.state if conversation.is_active else FIRST_STEP
        updated = Conversation(state=state, draft=conversation.draft.merge(event.extracted))
        return Transition(updated, [ImageAcknowledged(), Prompt(state)])
    restarted = Conversation(state=FIRST_STEP, draft=conversation.draft)
    return Transition(restarted, [ImageAcknowledged(), Prompt(FIRST_STEP)])


def _nutrition_resolved(
    conversation: Conversation, event: DiaryImported | FoodsResolved
) -> Transition:
    if conversation.state is not ConversationState.CALORIES:
        return Transition(conversation, [])
    origin = "diary" if isinstance(event, DiaryImported) else "foods"
    transition = _accept(conversation, ReportDraft(meals=list(event.meals)))
    return Transition(
        transition.conversation,
        [NutritionAccepted(meals=list(event.meals), origin=origin), *transition.effects],
    )


def _nutrition_failed(
    conversation: Conversation, event: DiaryImportFailed | FoodLookupFailed
) -> Transition:
    if conversation.state is not ConversationState.CALORIES:
        return Transition(conversation, [])
    origin = "diary" if isinstance(event, DiaryImportFailed) else "foods"
    return Transition(conversation, [LookupFailed(origin=origin, reason=event.reason)])


def _on_weight(conversation: Conversation, text: str, parser: ReportParser) -> Transition:
    weight = parser.parse_weight(text)
    if weight is not None:
        return _accept(conversation, ReportDraft(weight=weight))
    if ":" in text:
        return _on_full_report(conversation, text, parser)
    return _reprompt(conversation)


def _on_full_report(
    conversation: Conversation, text: str, parser: ReportParser
) -> Transition:
    """Accept a pasted ``key: value`` report and resume at the first missing step."""
    parsed = parser.parse_report(text)
    if parsed == ReportDraft():
        return _reprompt(conversation)
    draft = conversation.draft.merge(parsed)
    accepted = (
        [NutritionAccepted(meals=list(parsed.meals), origin="manual")]
        if parsed.meals
        else []
    )
    for step, field_name in STEP_FIELDS.items():
        if getattr(draft, field_name) is None:
            return Transition(
                Conversation(state=step, draft=draft), [*accepted, Prompt(step)]
            )
    return Transition(Conversation(), [*accepted, FinalizeReport(draft=draft)])


def _on_steps(conversation: Conversation, text: str, parser: ReportParser) -> Transition:
    steps = parser.parse_steps(text)
    if steps is None:
        return _reprompt(conversation)
    return _accept(conversation, ReportDraft(steps=steps))


def _on_sleep(conversation: Conversation, text: str, parser: ReportParser) -> Transition:
    sleep = parser.parse_sleep(text)
    if sleep is None:
        return _reprompt(conversation)
    return _accept(conversation, ReportDraft(sleep=sleep))


def _on_calories(
    conversation: Conversation, text: str, parser: ReportParser
) -> Transition:
    if parser.is_diary_import(text):
        return Transition(conversation, [ImportDiary()])
    calories = parser.parse_calories(text)
    if calories is not None:
        meals: list[Meal] = [parser.calories_meal(calories)]
        transition = _accept(conversation, ReportDraft(meals=meals))
        return Transition(
            transition.conversation,
            [NutritionAccepted(meals=meals, origin="manual"), *transition.effects],
        )
    query = text.strip()
    if len(query) >= MIN_FOOD_QUERY_LENGTH and not query.isdigit():
        return Transition(conversation, [LookupFoods(query=query)])
    return _reprompt(conversation)


def _on_training(
    conversation: Conversation, text: str, parser: ReportParser
) -> Transition:
    training = parser.parse_training(text)
    if training is None:
        return _reprompt(conversation)
    return _accept(conversation, ReportDraft(training=training))


def _on_mood(conversation: Conversation, text: str, parser: ReportParser) -> Transition:
    mood = parser.parse_mood(text)
    if mood is None:
        return _reprompt(conversation)
    return _accept(conversation, ReportDraft(mood=mood))


def _on_comments(
    conversation: Conversation, text: str, parser: ReportParser
) -> Transition:
    draft = conversation.draft
    if not parser.is_finish(text):
        comment = text.strip()
        if not comment:
            return _reprompt(conversation)
        draft = draft.merge(ReportDraft(comments=comment))
    return Transition(Conversation(), [FinalizeReport(draft=draft)])


_TEXT_HANDLERS: dict[ConversationState, TextHandler] = {
    ConversationState.WEIGHT: _on_weight,
    ConversationState.STEPS: _on_steps,
    ConversationState.SLEEP: _on_sleep,
    ConversationState.CALORIES: _on_calories,
    ConversationState.TRAINING: _on_training,
    ConversationState.MOOD: _on_mood,
    ConversationState.COMMENTS: _on_comments,
}
