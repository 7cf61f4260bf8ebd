"""Classification Schema - Strict JSON structure for classifier output.

The LLM must answer with exactly these three fields. Anything that does not
validate is treated as a malformed response and registration is aborted.
"""

from typing import Optional

from pydantic import BaseModel, Field, field_validator

from csinventory.models import DrugSchedule


class ClassificationResponse(BaseModel):
    """Validated classifier answer.

    Fields:
        schedule: "II" | "III" | "IV" | "V" | "N/A" (raw token, mapped later)
        formatted_brand_name: upper-case brand name
        formatted_generic_name: word-capitalized generic name
    """
    schedule: str
    formatted_brand_name: str = Field(alias="formattedBrandName")
    formatted_generic_name: str = Field(alias="formattedGenericName")

    class Config:
        populate_by_name = True

    @field_validator("schedule", "formatted_brand_name", "formatted_generic_name")
    @classmethod
    def strip_strings(cls, v: str) -> str:
        return v.strip()

    @field_validator("formatted_brand_name", "formatted_generic_name")
    @classmethod
    def require_name(cls, v: str) -> str:
        if not v:
            raise ValueError("name must not be empty")
        return v

    def drug_schedule(self) -> Optional[DrugSchedule]:
        """Mapped schedule, or None when the token is not II..V."""
        return DrugSchedule.from_token(self.schedule)
