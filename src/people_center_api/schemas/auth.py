"""Authentication Pydantic v2 schemas.

Register and login fields are optional at the schema level; the auth service
checks them in a fixed order so each problem maps to its own error code.
"""

from pydantic import Field

from people_center_api.models.citizen import Gender, Interest
from people_center_api.schemas.citizen import CitizenResponse
from people_center_api.schemas.common import CamelModel, Location


class RegisterRequest(CamelModel):
    """Citizen self-registration."""

    email: str | None = None
    password: str | None = None
    name: str | None = Field(default=None, max_length=100)
    first_name: str | None = Field(default=None, max_length=50)
    last_name: str | None = Field(default=None, max_length=50)
    phone_number: str | None = Field(default=None, max_length=30)
    gender: Gender | None = None
    location: Location | None = None
    interests: list[Interest] | None = None


class LoginRequest(CamelModel):
    email: str | None = None
    password: str | None = None


class AuthData(CamelModel):
    """Issued token plus the public projection of the citizen."""

    citizen: CitizenResponse
    token: str


class InfoData(CamelModel):
    name: str
    version: str
    environment: str
