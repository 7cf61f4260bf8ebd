"""
Shared fixtures for all tests.

No test talks to Groq: the classification gateway is replaced with
FakeGateway, and the ledger clock with FakeClock so day grouping and date
filters are deterministic.
"""
import pytest
from datetime import datetime, timedelta, timezone

from classifier import ClassificationResponse
from csinventory.models import DrugForm, DrugSchedule, StockSource
from csinventory.services.catalog_service import CatalogEntry
from csinventory.services.inventory_service import InventoryService

# Fixed local offset so "calendar day" never depends on the machine running the tests.
LOCAL_TZ = timezone(timedelta(hours=-5))


# ---------------------------------------------------------------------------
# Fakes
# ---------------------------------------------------------------------------

class FakeClock:
    """Returns `now`, then moves forward one minute per call."""

    def __init__(self, start=None):
        self.now = start or datetime(2026, 10, 19, 9, 0, tzinfo=LOCAL_TZ)

    def __call__(self):
        current = self.now
        self.now = self.now + timedelta(minutes=1)
        return current

    def set(self, *args, **kwargs):
        self.now = datetime(*args, tzinfo=LOCAL_TZ, **kwargs)


class FakeGateway:
    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.calls = []

    async def classify(self, brand_name, generic_name):
        self.calls.append((brand_name, generic_name))
        if self.error is not None:
            raise self.error
        return self.response


def classification(schedule="IV", brand="ATIVAN", generic="Lorazepam"):
    return ClassificationResponse(
        schedule=schedule,
        formattedBrandName=brand,
        formattedGenericName=generic,
    )


def catalog_entry(brand="Dilaudid", generic="Hydromorphone HCl", strength="2mg",
                  form=DrugForm.TABLET, schedule=DrugSchedule.CII):
    return CatalogEntry(brand, generic, strength, form, schedule)


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def gateway():
    return FakeGateway(response=classification())


@pytest.fixture
def service(gateway, clock):
    """Empty inventory: no seed, fake classifier, fake clock."""
    return InventoryService(gateway=gateway, clock=clock, low_stock_threshold=50)


@pytest.fixture
def dilaudid(service):
    """DILAUDID with 100 on hand (one ADD transaction already in the ledger)."""
    drug = service.import_drugs([catalog_entry()])[0]
    service.add_stock(drug.id, 100, StockSource.WHOLESALER)
    return service.get_drug(drug.id)


@pytest.fixture
def ativan(service):
    return service.import_drugs([
        catalog_entry("Ativan", "lorazepam", "1mg", DrugForm.TABLET, DrugSchedule.CIV),
    ])[0]
