# app/schemas/author_schema.py
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field, field_validator


class AuthorCreate(BaseModel):
    name: Annotated[
        str,
        Field(
            min_length=1,
            max_length=255,
            description="Full name of the author",
            examples=["F. Scott Fitzgerald"],
        ),
    ]

    @field_validator("name")
    @classmethod
    def normalize_name(cls, v: str) -> str:
        v = " ".join(v.split())
        if not v:
            raise ValueError("Name cannot be blank")
        return v


class AuthorResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
