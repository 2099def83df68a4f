# loandesk/routers/user.py
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from typing import List

from loandesk.database import get_db
from loandesk.models.user import User
from loandesk.schemas.user import UserBasic, UserCreate, UserOut
from loandesk.utils.auth import get_current_user
from loandesk.utils.errors import UnknownUser
from loandesk.utils.hierarchy import HierarchyManager
from loandesk.utils.permissions import USERS_MANAGE, require_permission
from loandesk.utils.security import hash_password

router = APIRouter()

@router.get("/", response_model=List[UserBasic])
def get_active_users(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Active users in the directory"""
    return db.query(User).filter(User.is_active == True).order_by(User.name, User.id).all()

@router.post("/", response_model=UserOut, status_code=status.HTTP_201_CREATED)
def create_user(
    user: UserCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_permission(USERS_MANAGE))
):
    """Create a new user (admin only)"""
    existing_user = db.query(User).filter(User.email == user.email).first()
    if existing_user:
        raise HTTPException(status_code=400, detail="Email already registered")

    new_user = User(
        name=user.name,
        email=user.email,
        hashed_password=hash_password(user.password),
        department=user.department,
        role=user.role,
    )
    db.add(new_user)
    db.commit()
    db.refresh(new_user)
    return new_user

@router.get("/me", response_model=UserOut)
def get_current_user_info(current_user: User = Depends(get_current_user)):
    """Get current user information"""
    return current_user

@router.get("/me/manager", response_model=UserBasic)
def get_my_manager(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Direct manager of the current user"""
    manager = HierarchyManager(db).get_manager_of(current_user.id)
    if not manager:
        raise HTTPException(status_code=404, detail="No manager assigned")
    return manager

@router.get("/me/subordinates", response_model=List[UserBasic])
def get_my_subordinates(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Direct subordinates of the current user"""
    return HierarchyManager(db).get_subordinates_of(current_user.id)

@router.get("/{user_id}", response_model=UserOut)
def get_user(
    user_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Get a specific user by ID"""
    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        raise UnknownUser(user_id)
    return user
