from __future__ import annotations
import logging
import os
from typing import Protocol

from google import genai

from db import SettingsRepository
from localization import translator
from models import WorkoutLog
from stats_service import StatisticsService

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "gemini-3-flash-preview"
DEFAULT_LANGUAGE = "Traditional Chinese (zh-TW)"
MAX_WORDS = 150

CREDENTIAL_MISSING = "Please configure an API key to use the AI coach."
EMPTY_RESPONSE = "Unable to generate advice, please try again later."
CONNECTION_ERROR = "AI connection error, please check your network or API key."

PROMPT_TEMPLATE = """You are an encouraging and knowledgeable fitness coach for a beginner.

Current Date: {current_date}

User's Recent Activity (Last {days} days):
{history}

Task:
1. Briefly analyze their recent consistency and volume.
2. Suggest a specific focus or a few exercises for today based on what they HAVEN'T done recently (muscle balance).
3. Keep it short, motivating, and under {max_words} words.
4. Use {language}.
"""


class TextGenerator(Protocol):
    async def generate(self, prompt: str) -> str: ...


class GeminiTextGenerator:
    """Generate text with the Gemini API."""

    def __init__(self, api_key: str, model: str = DEFAULT_MODEL) -> None:
        self.model = model
        self.client = genai.Client(api_key=api_key)

    async def generate(self, prompt: str) -> str:
        resp = await self.client.aio.models.generate_content(
            model=self.model,
            contents=prompt,
        )
        return resp.text or ""


class AdviceService:
    """Request coaching text for the user's recent history.

    Failures never propagate: a missing credential, an empty reply and any
    error raised by the generator each map to a fixed message.
    """

    def __init__(
        self,
        api_key: str | None,
        generator: TextGenerator | None = None,
        model: str = DEFAULT_MODEL,
        language: str = DEFAULT_LANGUAGE,
        summary_days: int = 7,
        weight_unit: str = "kg",
    ) -> None:
        self.api_key = api_key or None
        self.model = model
        self.language = language
        self.summary_days = summary_days
        self.weight_unit = weight_unit
        self._generator = generator

    @classmethod
    def from_settings(
        cls, settings: SettingsRepository, generator: TextGenerator | None = None
    ) -> "AdviceService":
        api_key = (
            settings.get_text("gemini_api_key", "")
            or os.environ.get("GEMINI_API_KEY")
            or os.environ.get("API_KEY")
        )
        return cls(
            api_key,
            generator,
            model=settings.get_text("ai_model", DEFAULT_MODEL),
            language=settings.get_text("advice_language", DEFAULT_LANGUAGE),
            summary_days=settings.get_int("summary_days", 7),
            weight_unit=settings.get_text("weight_unit", "kg"),
        )

    @property
    def generator(self) -> TextGenerator:
        if self._generator is None:
            self._generator = GeminiTextGenerator(self.api_key, self.model)
        return self._generator

    def build_prompt(self, log: WorkoutLog, current_date: str) -> str:
        history = StatisticsService.recent_summary_text(
            log, self.summary_days, self.weight_unit
        )
        return PROMPT_TEMPLATE.format(
            current_date=current_date,
            days=self.summary_days,
            history=history or "No recent history.",
            max_words=MAX_WORDS,
            language=self.language,
        )

    async def request_advice(self, log: WorkoutLog, current_date: str) -> str:
        if not self.api_key:
            logger.warning("API key is missing")
            return translator.gettext(CREDENTIAL_MISSING)
        prompt = self.build_prompt(log, current_date)
        try:
            text = await self.generator.generate(prompt)
        except Exception:
            logger.exception("Advice request failed")
            return translator.gettext(CONNECTION_ERROR)
        return text or translator.gettext(EMPTY_RESPONSE)
