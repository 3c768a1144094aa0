"""
Key/value runtime settings editable by admins (e.g. the AI provider used
for interview scoring).
"""

from sqlalchemy import Column, String, DateTime, func
from app.core.database import Base


class AppSetting(Base):
    __tablename__ = "app_settings"

    key = Column(String, primary_key=True)
    value = Column(String, nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    def __repr__(self):
        return f"<AppSetting(key='{self.key}', value='{self.value}')>"
