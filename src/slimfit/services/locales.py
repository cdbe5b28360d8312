"""Locale tables: accepted keywords and user-facing texts.

Keyword tables map a canonical value to the surface forms accepted for it in
every supported language. Adding a language means adding forms here and a
``MESSAGES`` entry; parsers never need to change.
"""

from dataclasses import dataclass

SUPPORTED_LANGUAGES = ("uk", "en")
DEFAULT_LANGUAGE = "uk"


def normalize(text: str) -> str:
    """Lower-case, trim and drop leading emoji or punctuation."""
    cleaned = " ".join(text.strip().lower().split())
    index = 0
    while index < len(cleaned) and not cleaned[index].isalnum():
        index += 1
    return cleaned[index:]


@dataclass(frozen=True)
class LocaleTable:
    """Mapping of canonical values to their accepted surface forms."""

    entries: dict[str, frozenset[str]]

    @classmethod
    def build(cls, entries: dict[str, tuple[str, ...]]) -> "LocaleTable":
        """Create a table, normalizing every surface form."""
        return cls(
            entries={
                canonical: frozenset(normalize(form) for form in forms)
                for canonical, forms in entries.items()
            }
        )

    def lookup(self, text: str) -> str | None:
        """Return the canonical value for text, if any form matches exactly."""
        key = normalize(text)
        if not key:
            return None
        for canonical, forms in self.entries.items():
            if key in forms:
                return canonical
        return None

    def matches(self, text: str, canonical: str) -> bool:
        """Return true when text is a surface form of ``canonical``."""
        return self.lookup(text) == canonical


TRAINING_TYPES = LocaleTable.build(
    {
        "running": ("running", "run", "біг"),
        "cycling": ("cycling", "bike", "велосипед"),
        "gym": ("gym", "workout", "тренування", "зал"),
        "swimming": ("swimming", "swim", "плавання"),
        "walking": ("walking", "walk", "ходьба"),
        "other": ("other", "інше"),
    }
)

MOODS = LocaleTable.build(
    {
        "excellent": ("excellent", "чудово"),
        "good": ("good", "добре"),
        "neutral": ("neutral", "нормально"),
        "bad": ("bad", "погано"),
        "terrible": ("terrible", "дуже погано"),
    }
)

REPORT_KEYS = LocaleTable.build(
    {
        "weight": ("weight", "вага"),
        "steps": ("steps", "кроки"),
        "sleep": ("sleep", "сон"),
        "calories": ("calories", "калорії"),
        "training": ("training", "тренування"),
        "mood": ("mood", "настрій"),
        "comments": ("comments", "коментарі"),
    }
)

CONTROL_TOKENS = LocaleTable.build(
    {
        "skip": ("skip", "❌ Skip", "пропустити", "❌ Пропустити"),
        "cancel": ("cancel", "/cancel", "❌ Cancel", "скасувати", "❌ Скасувати"),
        "finish": (
            "✅ Finish without comments",
            "finish",
            "✅ Завершити без коментарів",
            "завершити",
        ),
        "diary_import": (
            "📱 Import from FatSecret",
            "📱 Імпорт з FatSecret",
        ),
    }
)

HOURS_KEYWORDS = ("годин", "години", "година", "год", "г", "hours", "hour", "hrs", "h")
WEIGHT_UNITS = ("kg", "кг")
CALORIE_UNITS = ("kcal", "ккал", "cal", "кал")

DIARY_PERIODS = LocaleTable.build(
    {
        "today": ("today", "сьогодні", "📅 Сьогодні"),
        "yesterday": ("yesterday", "вчора", "📅 Вчора"),
        "week": ("week", "тиждень", "📊 Цей тиждень"),
    }
)

MESSAGES: dict[str, dict[str, str]] = {
    "uk": {
        "prompt.weight": 'Введіть вашу вагу у кг (наприклад: 75.5)',
        "prompt.steps": "Чудово! Тепер введіть кількість кроків за день:",
        "prompt.sleep": (
            'Добре! Тепер введіть тривалість сну у форматі "X годин" '
            'або "X:XX" (години:хвилини):'
        ),
        "prompt.calories": (
            "Чудово! Тепер введіть кількість калорій за день, "
            "опишіть що ви їли або імпортуйте дані з FatSecret:"
        ),
        "prompt.training": "Виберіть тип тренування або пропустіть цей крок:",
        "prompt.mood": "Як ви себе почуваєте сьогодні?",
        "prompt.comments": "Чи хочете додати коментар до звіту? (необов'язково)",
        "reprompt.weight": "Будь ласка, введіть вашу вагу у кг (наприклад: 75.5)",
        "reprompt.steps": "Будь ласка, введіть коректну кількість кроків (ціле число)",
        "reprompt.sleep": (
            'Будь ласка, введіть тривалість сну у форматі "X годин" '
            'або "X:XX" (години:хвилини)'
        ),
        "reprompt.calories": (
            "Будь ласка, введіть:\n"
            "• Кількість калорій (число від 1 до 10000)\n"
            '• Або опишіть що ви їли (наприклад: "2 яблука, салат, 200г курка")\n'
            "• Або використайте кнопку нижче для імпорту з FatSecret"
        ),
        "reprompt.training": (
            "Будь ласка, виберіть тип тренування з клавіатури або пропустіть цей крок"
        ),
        "reprompt.mood": "Будь ласка, виберіть настрій з клавіатури або пропустіть цей крок",
        "reprompt.comments": 'Введіть коментар або натисніть "Завершити без коментарів"',
        "cancelled": "Звіт скасовано.",
        "image_received": (
            "Я отримав ваш скріншот. Наразі функція розпізнавання даних зі "
            "скріншотів знаходиться в розробці. Будь ласка, введіть дані вручну."
        ),
        "not_in_dialogue": "Будь ласка, використовуйте команди для взаємодії з ботом",
        "diary_importing": "🔍 Імпортую дані з FatSecret...",
        "diary_failed": (
            "❌ {reason}\n\nПереконайтеся, що ви додали продукти в FatSecret "
            "додаток на сьогодні.\n\nВи можете ввести дані вручну:"
        ),
        "diary_error.unavailable": "Не вдалося отримати дані з FatSecret",
        "diary_error.empty": "Немає даних у FatSecret за сьогодні",
        "diary_error.not_found": "Не вдалося знайти ці продукти у FatSecret",
        "diary_importing_week": "🔍 Імпортую дані з FatSecret за тиждень...",
        "diary_empty_day": "Немає даних у FatSecret за {day}",
        "diary_week_empty": "Немає даних у FatSecret за останній тиждень.",
        "diary_week_header": "📊 Тижневий звіт з FatSecret:",
        "diary_week_day": "{day}: {calories:.0f} ккал",
        "diary_week_average": (
            "📈 Середнє за день: {calories:.0f} ккал\n"
            "🥩 Білки: {protein:.0f}г\n"
            "🍞 Вуглеводи: {carbs:.0f}г\n"
            "🧈 Жири: {fat:.0f}г"
        ),
        "diary_period_unknown": (
            "Невідомий період. Використовуйте /fatsecret, /fatsecret вчора "
            "або /fatsecret тиждень."
        ),
        "foods_looking_up": "🔍 Аналізую продукти харчування через FatSecret...",
        "foods_failed": (
            "❌ {reason}\n\nВи можете ввести:\n"
            "• Просто число калорій (наприклад: 2000)\n"
            '• Список продуктів (наприклад: "2 яблука, 200г курка")\n'
            '• Або використати кнопку "📱 Імпорт з FatSecret"\n\nСпробуйте ще раз:'
        ),
        "calories_accepted": "✅ Калорії: {calories:.0f}",
        "report_saved": "✅ Звіт успішно збережено!",
        "feedback": "📊 Аналіз:\n{summary}",
        "feedback_recommendations": "💡 Рекомендації:",
        "feedback_goals": "🎯 Цілі:",
        "feedback_warnings": "⚠️ Застереження:",
        "generic_error": "❌ Сталася помилка при обробці повідомлення",
        "not_authorized": "Цей бот приватний.",
        "start": (
            "Вітаю в SlimFit, {name}! 🎉\n\n"
            "Я ваш AI-асистент для здорового способу життя.\n\n"
            "Використовуйте /report для відправки щоденного звіту\n"
            "Використовуйте /stats для перегляду прогресу\n"
            "Використовуйте /fatsecret для імпорту харчування\n"
            "Використовуйте /help для отримання довідки"
        ),
        "help": (
            "📚 Довідка SlimFit Bot\n\n"
            "• /start - Почати використання бота\n"
            "• /report - Відправити щоденний звіт\n"
            "• /fatsecret [вчора|тиждень] - Імпорт даних з FatSecret\n"
            "• /stats - Переглянути статистику\n"
            "• /cancel - Скасувати звіт\n\n"
            "Звіт містить вагу, кроки, сон, калорії, тренування, настрій "
            "та коментарі. Тренування і настрій можна пропустити.\n\n"
            "Після /report можна надіслати весь звіт одним повідомленням, "
            "по рядку на поле:\nвага: 80\nкроки: 9000\nсон: 7:30"
        ),
        "unknown_command": "Невідома команда. Використовуйте /help для списку команд.",
        "nothing_to_cancel": "Немає активного звіту для скасування.",
        "stats": (
            "📈 Статистика за {days} днів:\n"
            "Звітів: {total_reports}\n"
            "Середня вага: {average_weight:.1f} кг ({weight_trend})\n"
            "Середні калорії: {average_calories:.0f}\n"
            "Середні кроки: {average_steps:.0f}\n"
            "Середній сон: {average_sleep:.1f} год\n"
            "Середній настрій: {average_mood:.1f} з 5\n"
            "Найчастіший прийом їжі: {most_common_meal_type}\n"
            "Прийомів їжі: {total_meals}"
        ),
        "trend.increasing": "зростає",
        "trend.decreasing": "знижується",
        "trend.stable": "стабільна",
        "stats_empty": "Ще немає звітів за останні {days} днів.",
        "stats_no_meals": "немає прийомів їжі",
        "diary_header": "📊 Щоденник харчування з FatSecret:",
        "diary_total": "🔥 Загалом: {calories:.0f} ккал | 🥩 {protein:.0f}г | "
        "🍞 {carbs:.0f}г | 🧈 {fat:.0f}г",
        "meal.breakfast": "🌅 Сніданок",
        "meal.lunch": "🌞 Обід",
        "meal.dinner": "🌙 Вечеря",
        "meal.snack": "🍪 Перекус",
        "meal.other": "🍽️ Інше",
        "button.skip": "❌ Пропустити",
        "button.cancel": "❌ Скасувати",
        "button.finish": "✅ Завершити без коментарів",
        "button.diary_import": "📱 Імпорт з FatSecret",
        "button.training.running": "🏃 Біг",
        "button.training.cycling": "🚴 Велосипед",
        "button.training.gym": "🏋️ Тренування",
        "button.training.swimming": "🏊 Плавання",
        "button.training.walking": "🚶 Ходьба",
        "button.training.other": "⛹️ Інше",
        "button.mood.excellent": "😊 Чудово",
        "button.mood.good": "🙂 Добре",
        "button.mood.neutral": "😐 Нормально",
        "button.mood.bad": "😔 Погано",
        "button.mood.terrible": "😢 Дуже погано",
    },
    "en": {
        "prompt.weight": "Enter your weight in kg (for example: 75.5)",
        "prompt.steps": "Great! Now enter your step count for the day:",
        "prompt.sleep": 'Good! Now enter how long you slept, as "X hours" or "H:MM":',
        "prompt.calories": (
            "Great! Now enter your calories for the day, describe what you ate, "
            "or import from FatSecret:"
        ),
        "prompt.training": "Choose a training type or skip this step:",
        "prompt.mood": "How do you feel today?",
        "prompt.comments": "Would you like to add a comment? (optional)",
        "reprompt.weight": "Please enter your weight in kg (for example: 75.5)",
        "reprompt.steps": "Please enter a valid step count (whole number)",
        "reprompt.sleep": 'Please enter sleep as "X hours" or "H:MM"',
        "reprompt.calories": (
            "Please enter:\n"
            "• Calories (a number from 1 to 10000)\n"
            '• Or describe what you ate (for example: "2 apples, salad, 200g chicken")\n'
            "• Or use the button below to import from FatSecret"
        ),
        "reprompt.training": "Please choose a training type from the keyboard or skip",
        "reprompt.mood": "Please choose a mood from the keyboard or skip",
        "reprompt.comments": 'Type a comment or press "Finish without comments"',
        "cancelled": "Report cancelled.",
        "image_received": (
            "I received your screenshot. Reading data from screenshots is not "
            "available yet, please enter the values manually."
        ),
        "not_in_dialogue": "Please use the bot commands, for example /report",
        "diary_importing": "🔍 Importing from FatSecret...",
        "diary_failed": (
            "❌ {reason}\n\nMake sure you logged food in the FatSecret app "
            "today.\n\nYou can enter the data manually:"
        ),
        "diary_error.unavailable": "Could not get data from FatSecret",
        "diary_error.empty": "No FatSecret diary entries for today",
        "diary_error.not_found": "Could not find these foods in FatSecret",
        "diary_importing_week": "🔍 Importing the week from FatSecret...",
        "diary_empty_day": "No FatSecret diary entries for {day}",
        "diary_week_empty": "No FatSecret diary entries for the last week.",
        "diary_week_header": "📊 Weekly FatSecret summary:",
        "diary_week_day": "{day}: {calories:.0f} kcal",
        "diary_week_average": (
            "📈 Daily average: {calories:.0f} kcal\n"
            "🥩 Protein: {protein:.0f}g\n"
            "🍞 Carbs: {carbs:.0f}g\n"
            "🧈 Fat: {fat:.0f}g"
        ),
        "diary_period_unknown": (
            "Unknown period. Use /fatsecret, /fatsecret yesterday "
            "or /fatsecret week."
        ),
        "foods_looking_up": "🔍 Looking up your foods in FatSecret...",
        "foods_failed": (
            "❌ {reason}\n\nYou can enter:\n"
            "• Just the calories (for example: 2000)\n"
            '• A food list (for example: "2 apples, 200g chicken")\n'
            '• Or press "📱 Import from FatSecret"\n\nPlease try again:'
        ),
        "calories_accepted": "✅ Calories: {calories:.0f}",
        "report_saved": "✅ Report saved!",
        "feedback": "📊 Analysis:\n{summary}",
        "feedback_recommendations": "💡 Recommendations:",
        "feedback_goals": "🎯 Goals:",
        "feedback_warnings": "⚠️ Warnings:",
        "generic_error": "❌ Something went wrong while processing your message",
        "not_authorized": "This bot is private.",
        "start": (
            "Welcome to SlimFit, {name}! 🎉\n\n"
            "I am your AI assistant for a healthy lifestyle.\n\n"
            "Use /report to send your daily report\n"
            "Use /stats to see your progress\n"
            "Use /fatsecret to import nutrition\n"
            "Use /help for help"
        ),
        "help": (
            "📚 SlimFit Bot help\n\n"
            "• /start - Start using the bot\n"
            "• /report - Send a daily report\n"
            "• /fatsecret [yesterday|week] - Import from FatSecret\n"
            "• /stats - View statistics\n"
            "• /cancel - Cancel the report\n\n"
            "A report covers weight, steps, sleep, calories, training, mood "
            "and comments. Training and mood can be skipped.\n\n"
            "After /report you can paste the whole report in one message, "
            "one field per line:\nweight: 80\nsteps: 9000\nsleep: 7:30"
        ),
        "unknown_command": "Unknown command. Use /help for the list of commands.",
        "nothing_to_cancel": "No report in progress to cancel.",
        "stats": (
            "📈 Statistics for {days} days:\n"
            "Reports: {total_reports}\n"
            "Average weight: {average_weight:.1f} kg ({weight_trend})\n"
            "Average calories: {average_calories:.0f}\n"
            "Average steps: {average_steps:.0f}\n"
            "Average sleep: {average_sleep:.1f} h\n"
            "Average mood: {average_mood:.1f} of 5\n"
            "Most common meal: {most_common_meal_type}\n"
            "Meals logged: {total_meals}"
        ),
        "trend.increasing": "increasing",
        "trend.decreasing": "decreasing",
        "trend.stable": "stable",
        "stats_empty": "No reports in the last {days} days yet.",
        "stats_no_meals": "no meals logged",
        "diary_header": "📊 FatSecret food diary:",
        "diary_total": "🔥 Total: {calories:.0f} kcal | 🥩 {protein:.0f}g | "
        "🍞 {carbs:.0f}g | 🧈 {fat:.0f}g",
        "meal.breakfast": "🌅 Breakfast",
        "meal.lunch": "🌞 Lunch",
        "meal.dinner": "🌙 Dinner",
        "meal.snack": "🍪 Snack",
        "meal.other": "🍽️ Other",
        "button.skip": "❌ Skip",
        "button.cancel": "❌ Cancel",
        "button.finish": "✅ Finish without comments",
        "button.diary_import": "📱 Import from FatSecret",
        "button.training.running": "🏃 Running",
        "button.training.cycling": "🚴 Cycling",
        "button.training.gym": "🏋️ Gym",
        "button.training.swimming": "🏊 Swimming",
        "button.training.walking": "🚶 Walking",
        "button.training.other": "⛹️ Other",
        "button.mood.excellent": "😊 Excellent",
        "button.mood.good": "🙂 Good",
        "button.mood.neutral": "😐 Neutral",
        "button.mood.bad": "😔 Bad",
        "button.mood.terrible": "😢 Terrible",
    },
}


def resolve_language(language_code: str | None, default: str = DEFAULT_LANGUAGE) -> str:
    """Pick a supported language from a Telegram language code."""
    if language_code:
        short = language_code.split("-")[0].lower()
        if short in SUPPORTED_LANGUAGES:
            return short
    return default if default in SUPPORTED_LANGUAGES else DEFAULT_LANGUAGE


def text(language: str, key: str, **values: object) -> str:
    """Return a localized message, falling back to the default language."""
    catalog = MESSAGES.get(language, MESSAGES[DEFAULT_LANGUAGE])
    template = catalog.get(key, MESSAGES[DEFAULT_LANGUAGE][key])
    return template.format(**values) if values else template
