"""
CRUD operations for admin-editable runtime settings.
"""

from typing import Optional
from sqlalchemy.orm import Session
from app.models.app_setting import AppSetting

AI_PROVIDER_KEY = "ai_provider"
AI_PROVIDERS = ("openai", "gemini")


def get_value(db: Session, key: str) -> Optional[str]:
    setting = db.query(AppSetting).filter(AppSetting.key == key).first()
    return setting.value if setting else None


def set_value(db: Session, key: str, value: str) -> AppSetting:
    """Insert or update a setting."""
    setting = db.query(AppSetting).filter(AppSetting.key == key).first()
    if setting:
        setting.value = value
    else:
        setting = AppSetting(key=key, value=value)
        db.add(setting)
    db.commit()
    db.refresh(setting)
    return setting


def get_ai_provider(db: Session, default: str) -> str:
    """The admin-selected provider, or `default` when unset or unknown."""
    value = get_value(db, AI_PROVIDER_KEY)
    return value if value in AI_PROVIDERS else default


def set_ai_provider(db: Session, provider: str) -> str:
    provider = provider.strip().lower()
    if provider not in AI_PROVIDERS:
        raise ValueError(f"Unknown AI provider: {provider}")
    set_value(db, AI_PROVIDER_KEY, provider)
    return provider
