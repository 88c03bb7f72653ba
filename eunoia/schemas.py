import datetime as dt
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic import ValidationError as PydanticValidationError
from pydantic.alias_generators import to_camel

from .errors import ValidationError

Mood = Literal["great", "good", "okay", "low", "rough"]
GymStatus = Literal["worked_out", "rest_day", "skipped"]


def parse_body(schema, data):
    """Validate a decoded JSON body, raising our ValidationError with field details."""
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")
    try:
        return schema.model_validate(data)
    except PydanticValidationError as exc:
        details = [
            {"field": ".".join(str(p) for p in err["loc"]) or "body", "message": err["msg"]}
            for err in exc.errors()
        ]
        raise ValidationError("Invalid request data", details) from exc


# ===============================
# Auth
# ===============================
class Credentials(BaseModel):
    model_config = ConfigDict(extra="ignore")

    username: str = Field(min_length=1, max_length=64)
    password: str = Field(min_length=1)


class Registration(Credentials):
    password: str = Field(min_length=6)


# ===============================
# Journal entries
# ===============================
class _EntryFields(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="forbid")

    target_plan: Optional[str] = None
    reflection: Optional[str] = None
    gym_status: Optional[GymStatus] = None
    gym_notes: Optional[str] = None
    food: Optional[str] = None
    mood: Optional[Mood] = None
    images: Optional[List[str]] = None
    videos: Optional[List[str]] = None

    @field_validator("date", mode="before", check_fields=False)
    @classmethod
    def _date_part(cls, value):
        # clients send either YYYY-MM-DD or a local timestamp
        if isinstance(value, str) and "T" in value:
            return value.split("T", 1)[0]
        return value

    @field_validator("mood", "gym_status", mode="before")
    @classmethod
    def _blank_is_null(cls, value):
        return None if value == "" else value

    @field_validator("images", "videos")
    @classmethod
    def _data_uris(cls, value):
        if value is not None:
            for item in value:
                if not item.startswith("data:"):
                    raise ValueError("media must be data URIs")
        return value


class EntryCreate(_EntryFields):
    date: dt.date
    target_met: bool = False

    @field_validator("target_met", mode="before")
    @classmethod
    def _null_is_default(cls, value):
        return False if value is None else value

    def fields(self) -> dict:
        return self.model_dump()


class EntryPatch(_EntryFields):
    """Partial update.

    Keys absent from the body are left alone, an explicit ``null`` clears the
    field. ``date`` and ``targetMet`` cannot be cleared.
    """

    date: Optional[dt.date] = None
    target_met: Optional[bool] = None

    @field_validator("date", "target_met")
    @classmethod
    def _not_null(cls, value):
        if value is None:
            raise ValueError("may not be null")
        return value

    def changes(self) -> dict:
        return {name: getattr(self, name) for name in self.model_fields_set}
