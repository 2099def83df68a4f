from pydantic import BaseModel
from typing import List
from datetime import datetime

from loandesk.schemas.user import UserBasic

class AssignManagerRequest(BaseModel):
    subordinate_id: int
    manager_id: int

class RemoveManagerRequest(BaseModel):
    subordinate_id: int

class HierarchyEdgeOut(BaseModel):
    id: int
    manager_id: int
    subordinate_id: int
    created_at: datetime
    manager: UserBasic
    subordinate: UserBasic

    model_config = {
        "from_attributes": True
    }

class RemoveManagerOut(BaseModel):
    subordinate_id: int
    removed: bool

class HierarchyNodeOut(BaseModel):
    user: UserBasic
    depth: int
    subordinates: List["HierarchyNodeOut"] = []

class HierarchyTreeOut(BaseModel):
    root: List[HierarchyNodeOut]
    max_depth: int

HierarchyNodeOut.model_rebuild()
