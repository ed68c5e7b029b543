from typing import Optional, Union

from pydantic import BaseModel, Field, ValidationError


class SettingsSchema(BaseModel):
    language: str = "en"
    weight_unit: str = "kg"
    ai_model: str = "gemini-3-flash-preview"
    advice_language: str = "Traditional Chinese (zh-TW)"
    summary_days: int = Field(default=7, ge=1)
    gemini_api_key: Optional[Union[str, bool]] = None


def validate_settings(data: dict) -> None:
    try:
        SettingsSchema(**data)
    except ValidationError as e:
        raise ValueError(str(e))
