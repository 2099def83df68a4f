from .user import UserCreate, UserLogin, UserOut, UserBasic
from .tokens import Token
from .hierarchy import AssignManagerRequest, RemoveManagerRequest, RemoveManagerOut, HierarchyEdgeOut, HierarchyNodeOut, HierarchyTreeOut
from .task import TaskCreate, TaskUpdate, TaskStatusUpdate, TaskOut, TaskBase, TaskCommentCreate, TaskCommentOut
