"""
Authorization hook for destructive catalog operations.

Deleting a controlled substance from the catalog is irreversible, so the
route depends on authorize_deletion. The default check compares the
X-Delete-Authorization header with DELETE_AUTH_TOKEN in constant time and
refuses everything when no token is configured.

Deployments with a real identity provider replace the hook:

    app.dependency_overrides[authorize_deletion] = my_sso_check
"""
import secrets
from typing import Optional

from fastapi import Header, Request

from csinventory.core.audit import AuditLog
from csinventory.core.config import settings
from csinventory.core.exceptions import BusinessError

DELETE_AUTH_HEADER = "X-Delete-Authorization"


def token_matches(presented: Optional[str], expected: str) -> bool:
    if not expected or not presented:
        return False
    return secrets.compare_digest(presented.encode("utf-8"), expected.encode("utf-8"))


def authorize_deletion(
    request: Request,
    drug_id: int,
    x_delete_authorization: Optional[str] = Header(None),
) -> None:
    client = request.client.host if request.client else None

    if not settings.DELETE_AUTH_TOKEN:
        AuditLog.log_access_denied("delete", "drug", drug_id, "Deletion token not configured", client)
        raise BusinessError.forbidden("deletion requested but DELETE_AUTH_TOKEN is not set")

    if not token_matches(x_delete_authorization, settings.DELETE_AUTH_TOKEN):
        reason = "Missing authorization header" if not x_delete_authorization else "Invalid authorization token"
        AuditLog.log_access_denied("delete", "drug", drug_id, reason, client)
        raise BusinessError.forbidden(f"drug {drug_id}: {reason}")
