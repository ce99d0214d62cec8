"""
PluginData: durable key/value storage for the settings document.

One row per storage key. `document` holds the whole
{behaviors, statusTiers, goals, records} aggregate as JSON text and is
rewritten in full on every save.
"""
from datetime import datetime
from sqlalchemy import Integer, String, Text, DateTime, func
from sqlalchemy.orm import Mapped, mapped_column

from yeartrace.db.base import Base


class PluginData(Base):
    __tablename__ = "plugin_data"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    key: Mapped[str] = mapped_column(String(128), nullable=False, unique=True, index=True)
    document: Mapped[str] = mapped_column(Text, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )
