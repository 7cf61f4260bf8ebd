from pydantic import BaseModel, field_validator

from csinventory.models import Drug, DrugForm, DrugSchedule
from csinventory.services.filters import StockLevel


class DrugCreate(BaseModel):
    brand_name: str
    generic_name: str
    strength: str
    form: DrugForm

    @field_validator("brand_name", "generic_name")
    @classmethod
    def require_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("must not be empty")
        return v

    @field_validator("strength")
    @classmethod
    def strip_strength(cls, v: str) -> str:
        return v.strip()


class DrugResponse(BaseModel):
    id: int
    brand_name: str
    generic_name: str
    strength: str
    form: DrugForm
    schedule: DrugSchedule
    schedule_label: str
    stock: int
    stock_level: StockLevel

    @classmethod
    def from_drug(cls, drug: Drug, level: StockLevel) -> "DrugResponse":
        return cls(
            id=drug.id,
            brand_name=drug.brand_name,
            generic_name=drug.generic_name,
            strength=drug.strength,
            form=drug.form,
            schedule=drug.schedule,
            schedule_label=drug.schedule.label,
            stock=drug.stock,
            stock_level=level,
        )


class DrugDeleteResponse(BaseModel):
    id: int
    removed: bool
    message: str


class DrugFilterOption(BaseModel):
    generic_name: str
    label: str
