"""Drug catalog entities.

Drugs are frozen values. The catalog swaps a whole record when stock
changes, so a Drug handed to a caller never changes underneath it.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Optional


class DrugForm(str, Enum):
    TABLET = "Tablet"
    INJECTION = "Injection"
    LIQUID = "Liquid"
    PATCH = "Patch"


class DrugSchedule(str, Enum):
    """US DEA controlled substance schedules tracked by the pharmacy."""
    CII = "II"
    CIII = "III"
    CIV = "IV"
    CV = "V"

    @classmethod
    def from_token(cls, token: Optional[str]) -> Optional["DrugSchedule"]:
        """Map a roman-numeral token ("II", " iv ") to a schedule.

        Returns None for anything else, including "N/A" for uncontrolled
        substances.
        """
        if not token or not isinstance(token, str):
            return None
        clean = token.strip().upper()
        for schedule in cls:
            if schedule.value == clean:
                return schedule
        return None

    @property
    def label(self) -> str:
        return f"C-{self.value}"


@dataclass(frozen=True)
class DrugSnapshot:
    """Display fields of a drug, copied into each transaction."""

    brand_name: str
    generic_name: str
    strength: str
    form: DrugForm


@dataclass(frozen=True)
class Drug:
    id: int
    brand_name: str
    generic_name: str
    strength: str
    form: DrugForm
    schedule: DrugSchedule
    stock: int = 0

    def snapshot(self) -> DrugSnapshot:
        return DrugSnapshot(
            brand_name=self.brand_name,
            generic_name=self.generic_name,
            strength=self.strength,
            form=self.form,
        )

    @property
    def display_name(self) -> str:
        return f"{self.brand_name} ({self.generic_name})"
