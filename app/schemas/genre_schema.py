# app/schemas/genre_schema.py
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field, field_validator


class GenreCreate(BaseModel):
    name: Annotated[
        str,
        Field(
            min_length=1,
            max_length=100,
            description="Genre name",
            examples=["Classic"],
        ),
    ]

    @field_validator("name")
    @classmethod
    def normalize_name(cls, v: str) -> str:
        """Genres are stored trimmed and title-cased."""
        v = " ".join(v.split()).title()
        if not v:
            raise ValueError("Name cannot be blank")
        return v


class GenreResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
