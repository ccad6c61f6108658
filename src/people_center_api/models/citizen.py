"""Citizen model: registered end users with a citizen or admin role."""

import enum

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from people_center_api.models.base import Base, JSONType, TimestampMixin, UUIDMixin


class CitizenRole(enum.StrEnum):
    CITIZEN = "citizen"
    ADMIN = "admin"


class Gender(enum.StrEnum):
    MALE = "male"
    FEMALE = "female"
    OTHER = "other"
    PREFER_NOT_TO_SAY = "prefer-not-to-say"
    UNSPECIFIED = ""


class Interest(enum.StrEnum):
    """Topics a citizen can follow."""

    INFRASTRUCTURE = "infrastructure"
    EDUCATION = "education"
    HEALTHCARE = "healthcare"
    ENVIRONMENT = "environment"
    PUBLIC_SAFETY = "public-safety"
    TRANSPORTATION = "transportation"
    HOUSING = "housing"
    ECONOMIC_DEVELOPMENT = "economic-development"


class Citizen(Base, UUIDMixin, TimestampMixin):
    """A registered citizen.

    Attributes:
        email: Unique, stored trimmed and lower-cased.
        hashed_password: bcrypt hash; the plaintext is never stored.
        location: Nested document (address, city, state, zipCode, coordinates).
        interests: List of ``Interest`` values.
    """

    __tablename__ = "citizens"

    name: Mapped[str] = mapped_column(String(100), nullable=False)
    first_name: Mapped[str | None] = mapped_column(String(50), nullable=True)
    last_name: Mapped[str | None] = mapped_column(String(50), nullable=True)
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False, index=True)
    hashed_password: Mapped[str] = mapped_column(String(255), nullable=False)
    phone_number: Mapped[str | None] = mapped_column(String(30), nullable=True)
    gender: Mapped[str] = mapped_column(String(20), nullable=False, default=Gender.UNSPECIFIED.value)
    role: Mapped[str] = mapped_column(String(20), nullable=False, default=CitizenRole.CITIZEN.value)
    location: Mapped[dict | None] = mapped_column(JSONType, nullable=True)
    interests: Mapped[list] = mapped_column(JSONType, nullable=False, default=list)

    @property
    def is_admin(self) -> bool:
        return self.role == CitizenRole.ADMIN
