import uuid

from datetime import datetime, timezone
from sqlalchemy import Column, DateTime, Uuid, text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class TimestampMixin:
    created_at = Column(DateTime(timezone=True),
                        default=lambda: datetime.now(timezone.utc),
                        server_default=text('CURRENT_TIMESTAMP'),
                        nullable=False)

    updated_at = Column(DateTime(timezone=True),
                        default=lambda: datetime.now(timezone.utc),
                        server_default=text('CURRENT_TIMESTAMP'),
                        onupdate=lambda: datetime.now(timezone.utc),
                        nullable=False)


class Base(DeclarativeBase, TimestampMixin):
    id: Mapped[uuid.UUID] = mapped_column(
        Uuid, primary_key=True, default=uuid.uuid4, sort_order=-1)

