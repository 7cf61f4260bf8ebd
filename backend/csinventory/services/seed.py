"""Starter controlled-substance catalog loaded on startup."""
import logging
from typing import List

from csinventory.models import Drug, DrugForm, DrugSchedule
from csinventory.services.catalog_service import CatalogEntry

logger = logging.getLogger(__name__)


INITIAL_DRUGS = [
    CatalogEntry("Duramorph", "Morphine Sulfate", "10mg", DrugForm.INJECTION, DrugSchedule.CII),
    CatalogEntry("Sublimaze", "Fentanyl Citrate", "50mcg/mL", DrugForm.INJECTION, DrugSchedule.CII),
    CatalogEntry("Roxicodone", "Oxycodone HCl", "5mg", DrugForm.TABLET, DrugSchedule.CII),
    CatalogEntry("Dilaudid", "Hydromorphone HCl", "2mg", DrugForm.TABLET, DrugSchedule.CII),
    CatalogEntry("Valium", "Diazepam", "5mg/mL", DrugForm.INJECTION, DrugSchedule.CIV),
    CatalogEntry("Ativan", "Lorazepam", "1mg", DrugForm.TABLET, DrugSchedule.CIV),
    CatalogEntry("Duragesic", "Fentanyl Patch", "25mcg/hr", DrugForm.PATCH, DrugSchedule.CII),
]


def seed_catalog(service) -> List[Drug]:
    """Import INITIAL_DRUGS into an InventoryService. Only meant for an empty catalog."""
    if len(service.catalog):
        logger.info("Catalog already populated, skipping seed")
        return []
    drugs = service.import_drugs(INITIAL_DRUGS, source="seed")
    logger.info(f"Seeded catalog with {len(drugs)} drugs")
    return drugs
