"""
Pydantic schema for the health profile submitted through the intake form.

The profile is immutable once validated: it is created per request, read by
the prompt builder / mock generator and discarded after the fetch completes.
Nothing here is persisted.

Numbers and booleans are strict: "29", true or "yes" are rejected rather
than coerced.

Validation order matters. Pydantic reports field errors in declaration
order, so fields are declared in the priority the intake form uses:
age, weight, gender, then the free-text fields. The "at least one tag"
rules live in the after-validator so they only fire once every
per-field check has passed.
"""

from typing import Annotated, Any, Iterable, Literal, Tuple

from pydantic import BaseModel, ConfigDict, Field, StringConstraints, field_validator, model_validator
from pydantic_core import PydanticCustomError

# Sentinel the intake form submits when the user takes no medication
NO_MEDICATION = "없음"

MAX_TEXT_LENGTH = 500

Gender = Literal["male", "female", "other"]

Tag = Annotated[str, StringConstraints(max_length=MAX_TEXT_LENGTH)]


def _normalize_tags(value: Any) -> Any:
    """Strip, drop empties and de-duplicate while keeping first-seen order."""
    if value is None:
        return ()
    if isinstance(value, str):
        value = value.split(",")
    elif isinstance(value, (set, frozenset)):
        value = sorted(value)
    elif not isinstance(value, (list, tuple)):
        # Let pydantic report the type error
        return value

    seen = []
    for item in value:
        if isinstance(item, str):
            item = item.strip()
            if not item or item in seen:
                continue
        seen.append(item)
    return tuple(seen)


class HealthProfile(BaseModel):
    """
    Normalized user health intake record.

    `concerns` and `lifestyle` are tag sets: order carries no meaning, but
    the first-seen order is kept so prompts stay byte-identical for the
    same submission.
    """

    model_config = ConfigDict(frozen=True)

    age: int = Field(
        ...,
        strict=True,
        ge=1,
        le=150,
        description="Age in years",
        examples=[29]
    )
    weight: float = Field(
        ...,
        ge=1,
        le=500,
        description="Body weight in kg",
        examples=[70]
    )
    gender: Gender = Field(
        ...,
        description="Gender as selected in the intake form",
        examples=["male", "female", "other"]
    )
    medications: str = Field(
        "",
        max_length=MAX_TEXT_LENGTH,
        description=(
            "Medications currently taken, free text. "
            f"Empty or '{NO_MEDICATION}' means none."
        ),
        examples=["없음", "와파린"]
    )
    concerns: Tuple[Tag, ...] = Field(
        default=(),
        description="Selected health concern tags (at least one)",
        examples=[["피로"]]
    )
    lifestyle: Tuple[Tag, ...] = Field(
        default=(),
        description="Selected lifestyle tags (at least one)",
        examples=[["수면"]]
    )
    smoking: bool = Field(
        False,
        strict=True,
        description="Whether the user smokes"
    )

    @field_validator("weight", mode="before")
    @classmethod
    def require_number(cls, v: Any) -> Any:
        # bool is an int subclass; strings are not numbers here
        if isinstance(v, bool) or not isinstance(v, (int, float)):
            raise PydanticCustomError("float_type", "Input should be a valid number")
        return v

    @field_validator("medications", mode="before")
    @classmethod
    def strip_medications(cls, v: Any) -> Any:
        if v is None:
            return ""
        if isinstance(v, str):
            return v.strip()
        return v

    @field_validator("concerns", "lifestyle", mode="before")
    @classmethod
    def normalize_tags(cls, v: Any) -> Any:
        return _normalize_tags(v)

    @model_validator(mode="after")
    def require_selected_tags(self):
        """Concerns and lifestyle must each carry at least one tag."""
        if not self.concerns:
            raise PydanticCustomError(
                "tags_required",
                "건강 고민을 최소 1개 이상 선택해주세요",
                {"field": "concerns"},
            )
        if not self.lifestyle:
            raise PydanticCustomError(
                "tags_required",
                "생활 패턴을 최소 1개 이상 선택해주세요",
                {"field": "lifestyle"},
            )
        return self

    @property
    def takes_medication(self) -> bool:
        """True when medications holds something other than the "none" sentinel."""
        return bool(self.medications) and self.medications != NO_MEDICATION


def tags_contain(tags: Iterable[str], *candidates: str) -> bool:
    """Exact tag membership test used by the rule-based generator."""
    tag_set = set(tags)
    return any(candidate in tag_set for candidate in candidates)
