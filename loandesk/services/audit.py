# loandesk/services/audit.py
"""
Audit trail for hierarchy and task changes
"""

import json
from typing import Any, Dict, Optional

from fastapi import Request
from sqlalchemy.orm import Session

from loandesk.models.audit_log import AuditLog


def record_audit(
    db: Session,
    user_id: Optional[int],
    action: str,
    resource_type: str,
    resource_id: Optional[Any] = None,
    details: Optional[Dict[str, Any]] = None,
    request: Optional[Request] = None,
) -> AuditLog:
    """
    Stage an audit row in the caller's transaction.

    The row is flushed but not committed, so it is persisted only if the
    change it describes is.

    Args:
        db: Database session
        user_id: ID of the acting user
        action: Dotted action name, e.g. 'admin.hierarchy.assign'
        resource_type: 'hierarchy' or 'task'
        resource_id: ID of the affected record
        details: Extra data, stored as JSON
        request: Incoming request, used for client address and user agent
    """
    ip_address = None
    user_agent = None
    if request is not None:
        ip_address = request.client.host if request.client else None
        user_agent = request.headers.get("user-agent")

    entry = AuditLog(
        user_id=user_id,
        action=action,
        resource_type=resource_type,
        resource_id=str(resource_id) if resource_id is not None else None,
        details=json.dumps(details, default=str) if details else None,
        ip_address=ip_address,
        user_agent=user_agent[:255] if user_agent else None,
    )
    db.add(entry)
    db.flush()
    return entry
