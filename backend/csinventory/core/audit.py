"""
Audit logging for controlled-substance events.

Every catalog change and stock movement is written as one JSON line to the
"audit" logger so it can be shipped somewhere separate from the app log.
Authorization tokens are never included.
"""
import logging
import json
from datetime import datetime, timezone
from typing import Optional

from csinventory.models import Drug, Transaction

# Separate logger for audit events (can be shipped to centralized logging)
audit_logger = logging.getLogger("audit")


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


class AuditLog:
    """Central audit logging for catalog and ledger events."""

    @staticmethod
    def log_drug_registered(drug: Drug, source: str = "classifier"):
        """
        Usage:
            AuditLog.log_drug_registered(drug)
            AuditLog.log_drug_registered(drug, source="seed")
        """
        log_entry = {
            "timestamp": _now(),
            "event_type": "drug.registered",
            "drug_id": drug.id,
            "brand_name": drug.brand_name,
            "generic_name": drug.generic_name,
            "schedule": drug.schedule.value,
            "source": source,
        }
        audit_logger.info(json.dumps(log_entry))

    @staticmethod
    def log_drug_removed(drug: Drug):
        log_entry = {
            "timestamp": _now(),
            "event_type": "drug.removed",
            "drug_id": drug.id,
            "brand_name": drug.brand_name,
            "generic_name": drug.generic_name,
            "stock_at_removal": drug.stock,
        }
        audit_logger.info(json.dumps(log_entry))

    @staticmethod
    def log_stock_movement(transaction: Transaction, drug_id: int, stock_after: int):
        """
        Log an ADD or DISTRIBUTE with the resulting stock level.

        Usage:
            AuditLog.log_stock_movement(txn, drug_id=4, stock_after=70)
        """
        log_entry = {
            "timestamp": transaction.timestamp.isoformat(),
            "event_type": f"stock.{transaction.type.value.lower()}",
            "transaction_id": transaction.id,
            "drug_id": drug_id,
            "generic_name": transaction.drug.generic_name,
            "quantity": transaction.quantity,
            "stock_after": stock_after,
        }
        if transaction.unit is not None:
            log_entry["unit"] = transaction.unit.value
        if transaction.source is not None:
            log_entry["source"] = transaction.source.value
        if transaction.invoice_number:
            log_entry["invoice_number"] = transaction.invoice_number

        audit_logger.info(json.dumps(log_entry))

    @staticmethod
    def log_classification_failed(brand_name: str, generic_name: str, reason: str):
        log_entry = {
            "timestamp": _now(),
            "event_severity": "WARNING",
            "event_type": "drug.classification_failed",
            "brand_name": brand_name,
            "generic_name": generic_name,
            "reason": reason,
        }
        audit_logger.warning(json.dumps(log_entry))

    @staticmethod
    def log_access_denied(action: str, resource_type: str, resource_id: int, reason: str, client: Optional[str] = None):
        """
        Log denied attempts, e.g. a deletion without valid authorization.

        Usage:
            AuditLog.log_access_denied("delete", "drug", 3, "Missing authorization header")
        """
        log_entry = {
            "timestamp": _now(),
            "event_severity": "WARNING",
            "event_type": "access_denied",
            "action": action,
            "resource_type": resource_type,
            "resource_id": resource_id,
            "reason": reason,
        }
        if client:
            log_entry["client"] = client

        audit_logger.warning(json.dumps(log_entry))
