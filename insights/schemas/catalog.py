from __future__ import annotations

from pydantic import Field

from insights.schemas.base import FrozenCamelModel


class Service(FrozenCamelModel):
    id: str
    name: str = ""
    price: float = 0.0
    duration_minutes: int | None = None
    description: str | None = None


class Staff(FrozenCamelModel):
    id: str
    name: str = ""
    role: str | None = None
    specialties: list[str] = Field(default_factory=list)  # ids de serviços
