# loandesk/routers/hierarchy.py
from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.orm import Session

from loandesk.database import get_db
from loandesk.models.user import User
from loandesk.schemas.hierarchy import (
    AssignManagerRequest,
    HierarchyEdgeOut,
    HierarchyTreeOut,
    RemoveManagerOut,
    RemoveManagerRequest,
)
from loandesk.services.audit import record_audit
from loandesk.utils.hierarchy import HierarchyManager, hierarchy_transaction
from loandesk.utils.permissions import HIERARCHY_MANAGE, require_permission

router = APIRouter()

@router.post("/assign", response_model=HierarchyEdgeOut, status_code=status.HTTP_201_CREATED)
def assign_manager(
    payload: AssignManagerRequest,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_permission(HIERARCHY_MANAGE))
):
    """Set the manager of a user, replacing any existing one"""
    manager = HierarchyManager(db)
    with hierarchy_transaction(db):
        previous_manager_id = manager.get_manager_id(payload.subordinate_id)
        edge = manager.assign_manager(payload.subordinate_id, payload.manager_id)
        record_audit(
            db,
            current_user.id,
            "admin.hierarchy.assign",
            "hierarchy",
            edge.id,
            {
                "subordinate_id": payload.subordinate_id,
                "manager_id": payload.manager_id,
                "previous_manager_id": previous_manager_id,
            },
            request,
        )
    db.refresh(edge)
    return edge

@router.delete("/remove", response_model=RemoveManagerOut)
def remove_manager(
    payload: RemoveManagerRequest,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_permission(HIERARCHY_MANAGE))
):
    """Remove the reporting line of a user; a no-op if there is none"""
    manager = HierarchyManager(db)
    with hierarchy_transaction(db):
        previous_manager_id = manager.get_manager_id(payload.subordinate_id)
        removed = manager.remove_manager(payload.subordinate_id)
        if removed:
            record_audit(
                db,
                current_user.id,
                "admin.hierarchy.remove",
                "hierarchy",
                payload.subordinate_id,
                {"subordinate_id": payload.subordinate_id, "manager_id": previous_manager_id},
                request,
            )
    return {"subordinate_id": payload.subordinate_id, "removed": removed}

@router.get("/tree", response_model=HierarchyTreeOut)
def get_hierarchy_tree(
    db: Session = Depends(get_db),
    current_user: User = Depends(require_permission(HIERARCHY_MANAGE))
):
    """Reporting forest of all active users"""
    return HierarchyManager(db).get_tree()
