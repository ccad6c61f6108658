"""Community event model and its registration list."""

import enum
import uuid
from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import CheckConstraint, DateTime, ForeignKey, Index, Integer, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from people_center_api.models.base import Base, JSONType, TimestampMixin, UUIDMixin, utcnow

if TYPE_CHECKING:
    from people_center_api.models.citizen import Citizen


class EventType(enum.StrEnum):
    MEETING = "meeting"
    WORKSHOP = "workshop"
    TOWN_HALL = "town-hall"
    HEARING = "hearing"
    OTHER = "other"


class EventStatus(enum.StrEnum):
    UPCOMING = "upcoming"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class Event(Base, UUIDMixin, TimestampMixin):
    """A scheduled community activity.

    ``registered_count`` mirrors the number of ``EventRegistration`` rows
    and is only changed by conditional UPDATEs, so the capacity ceiling
    holds under concurrent registrations.
    """

    __tablename__ = "events"

    title: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    event_type: Mapped[str] = mapped_column(String(20), nullable=False)
    date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    time: Mapped[str] = mapped_column(String(50), nullable=False)
    location: Mapped[dict] = mapped_column(JSONType, nullable=False)
    capacity: Mapped[int | None] = mapped_column(Integer, nullable=True)
    registered_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0, server_default="0")
    status: Mapped[str] = mapped_column(String(20), nullable=False, default=EventStatus.UPCOMING.value)
    created_by_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("citizens.id"), nullable=False)

    created_by: Mapped["Citizen"] = relationship(lazy="selectin")
    registrations: Mapped[list["EventRegistration"]] = relationship(
        back_populates="event",
        lazy="raise",
        order_by="EventRegistration.registered_at",
        cascade="all, delete-orphan",
    )

    __table_args__ = (
        CheckConstraint("capacity IS NULL OR capacity >= 1", name="ck_events_capacity_positive"),
        CheckConstraint(
            "capacity IS NULL OR registered_count <= capacity",
            name="ck_events_registered_within_capacity",
        ),
        Index("ix_events_date_status", "date", "status"),
    )

    @property
    def is_full(self) -> bool:
        return self.capacity is not None and self.registered_count >= self.capacity


class EventRegistration(Base):
    """A citizen's seat at an event; at most one per (event, citizen)."""

    __tablename__ = "event_registrations"

    event_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("events.id", ondelete="CASCADE"), primary_key=True
    )
    citizen_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("citizens.id", ondelete="CASCADE"), primary_key=True
    )
    registered_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utcnow)

    event: Mapped[Event] = relationship(back_populates="registrations")
    citizen: Mapped["Citizen"] = relationship(lazy="selectin")
