# loandesk/utils/hierarchy.py
import logging
import threading
from contextlib import contextmanager
from typing import Dict, List, Optional, Set

from sqlalchemy import text
from sqlalchemy.orm import Session

from loandesk.models.hierarchy import HierarchyEdge
from loandesk.models.user import User
from loandesk.utils.errors import CycleDetected, SelfReference, UnknownUser

logger = logging.getLogger(__name__)

# Serializes edge mutations and task validation within this process.
# PostgreSQL additionally gets a table lock so other workers are covered too.
_hierarchy_mutex = threading.RLock()

_TX_DEPTH_KEY = "hierarchy_tx_depth"


def _lock_edge_table(db: Session, exclusive: bool) -> None:
    dialect = db.get_bind().dialect.name
    if dialect == "sqlite":
        # Opens the session transaction now; the engine issues BEGIN IMMEDIATE
        # (see configure_sqlite_locking) so the write lock is held before any read.
        db.connection()
        return
    if dialect != "postgresql":
        return
    # SHARE ROW EXCLUSIVE conflicts with itself and with SHARE, so a mutation
    # waits for in-flight task validations and for other mutations.
    mode = "SHARE ROW EXCLUSIVE" if exclusive else "SHARE"
    db.execute(text(f"LOCK TABLE user_hierarchy IN {mode} MODE"))


@contextmanager
def hierarchy_transaction(db: Session, exclusive: bool = True):
    """Run a block atomically while the reporting lines are locked.

    Use ``exclusive=True`` for edge mutations and ``exclusive=False`` for
    writes that only read the graph (task validation). Blocks may nest; only
    the outermost one commits or rolls back.

    The database lock is always taken before the process mutex, so a request
    that already holds the database lock never waits on a thread that is
    itself waiting for that lock.
    """
    depth = db.info.get(_TX_DEPTH_KEY, 0)
    try:
        _lock_edge_table(db, exclusive)
        with _hierarchy_mutex:
            db.info[_TX_DEPTH_KEY] = depth + 1
            try:
                yield db
            finally:
                db.info[_TX_DEPTH_KEY] = depth
            if depth == 0:
                db.commit()
    except Exception:
        if depth == 0:
            db.rollback()
        raise


class HierarchyManager:
    """Reporting lines between users: mutations, cycle checks and tree views"""

    def __init__(self, db: Session):
        self.db = db

    # ------------------------------------------------------------------
    # Edge lookups
    # ------------------------------------------------------------------

    def get_edge(self, subordinate_id: int) -> Optional[HierarchyEdge]:
        return self.db.query(HierarchyEdge).filter(
            HierarchyEdge.subordinate_id == subordinate_id
        ).first()

    def get_manager_id(self, user_id: int) -> Optional[int]:
        row = self.db.query(HierarchyEdge.manager_id).filter(
            HierarchyEdge.subordinate_id == user_id
        ).first()
        return row[0] if row else None

    def has_edge(self, manager_id: int, subordinate_id: int) -> bool:
        """True if subordinate_id reports directly to manager_id"""
        return self.db.query(HierarchyEdge.id).filter(
            HierarchyEdge.manager_id == manager_id,
            HierarchyEdge.subordinate_id == subordinate_id,
        ).first() is not None

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def assign_manager(self, subordinate_id: int, manager_id: int) -> HierarchyEdge:
        """Make subordinate_id report to manager_id, replacing any current manager.

        Raises SelfReference, UnknownUser or CycleDetected; nothing is written
        when any of them is raised.
        """
        if subordinate_id == manager_id:
            raise SelfReference(subordinate_id)

        with hierarchy_transaction(self.db, exclusive=True):
            active_ids = {
                row[0] for row in self.db.query(User.id).filter(
                    User.id.in_([subordinate_id, manager_id]),
                    User.is_active == True,
                ).all()
            }
            for user_id in (subordinate_id, manager_id):
                if user_id not in active_ids:
                    raise UnknownUser(user_id)

            self._check_cycle(subordinate_id, manager_id)

            existing = self.get_edge(subordinate_id)
            if existing:
                if existing.manager_id == manager_id:
                    return existing
                self.db.delete(existing)
                # The unique constraint on subordinate_id needs the delete first
                self.db.flush()

            edge = HierarchyEdge(manager_id=manager_id, subordinate_id=subordinate_id)
            self.db.add(edge)
            self.db.flush()
            logger.info(
                "Assigned manager %s to user %s (previous manager: %s)",
                manager_id, subordinate_id, existing.manager_id if existing else None,
            )

        self.db.refresh(edge)
        return edge

    def remove_manager(self, subordinate_id: int) -> bool:
        """Remove the reporting line of subordinate_id. Returns False if there was none."""
        with hierarchy_transaction(self.db, exclusive=True):
            edge = self.get_edge(subordinate_id)
            if edge is None:
                return False
            self.db.delete(edge)
            self.db.flush()
            logger.info("Removed manager %s from user %s", edge.manager_id, subordinate_id)
        return True

    def _check_cycle(self, subordinate_id: int, manager_id: int) -> None:
        # Walk up from the candidate manager; reaching anything already on the
        # path (the subordinate included) means the new edge closes a loop.
        visited: Set[int] = {subordinate_id}
        path = [subordinate_id]
        current: Optional[int] = manager_id
        while current is not None:
            if current in visited:
                path.append(current)
                logger.warning(
                    "Rejected manager %s for user %s: cycle %s",
                    manager_id, subordinate_id, path,
                )
                raise CycleDetected(subordinate_id, manager_id, path)
            visited.add(current)
            path.append(current)
            current = self.get_manager_id(current)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_manager_of(self, user_id: int) -> Optional[User]:
        """Direct manager of a user, None for a root"""
        return self.db.query(User).join(
            HierarchyEdge, HierarchyEdge.manager_id == User.id
        ).filter(HierarchyEdge.subordinate_id == user_id).first()

    def get_subordinates_of(self, user_id: int) -> List[User]:
        """Direct subordinates only"""
        return self.db.query(User).join(
            HierarchyEdge, HierarchyEdge.subordinate_id == User.id
        ).filter(HierarchyEdge.manager_id == user_id).order_by(User.name, User.id).all()

    def get_all_subordinates(self, user_id: int) -> List[User]:
        """Direct and indirect subordinates of a user"""
        subordinates = []
        visited = {user_id}
        frontier = [user_id]
        while frontier:
            next_frontier = []
            for manager_id in frontier:
                for subordinate in self.get_subordinates_of(manager_id):
                    if subordinate.id in visited:
                        continue
                    visited.add(subordinate.id)
                    subordinates.append(subordinate)
                    next_frontier.append(subordinate.id)
            frontier = next_frontier
        return subordinates

    def is_subordinate_of(self, user_id: int, potential_manager_id: int) -> bool:
        """Check if user_id reports (directly or indirectly) to potential_manager_id"""
        visited = {user_id}
        current = self.get_manager_id(user_id)
        while current is not None and current not in visited:
            if current == potential_manager_id:
                return True
            visited.add(current)
            current = self.get_manager_id(current)
        return False

    def get_tree(self) -> dict:
        """Full reporting forest of active users.

        Returns ``{"root": [node, ...], "max_depth": int}`` where each node is
        ``{"user": User, "depth": int, "subordinates": [node, ...]}``.
        """
        users = self.db.query(User).filter(User.is_active == True).order_by(User.name, User.id).all()
        users_by_id: Dict[int, User] = {user.id: user for user in users}
        edges = self.db.query(HierarchyEdge).all()

        children: Dict[int, List[User]] = {}
        managed: Set[int] = set()
        for edge in edges:
            if edge.manager_id in users_by_id and edge.subordinate_id in users_by_id:
                children.setdefault(edge.manager_id, []).append(users_by_id[edge.subordinate_id])
                managed.add(edge.subordinate_id)
        for siblings in children.values():
            siblings.sort(key=lambda u: (u.name, u.id))

        # A user whose manager is inactive is shown as a root rather than hidden
        roots = [user for user in users if user.id not in managed]

        seen: Set[int] = set()
        forest = []
        max_depth = 0
        for root_user in roots:
            root_node = {"user": root_user, "depth": 0, "subordinates": []}
            forest.append(root_node)
            seen.add(root_user.id)
            stack = [root_node]
            while stack:
                node = stack.pop()
                for child in children.get(node["user"].id, []):
                    if child.id in seen:
                        logger.warning(
                            "Hierarchy revisits user %s under manager %s; branch truncated",
                            child.id, node["user"].id,
                        )
                        continue
                    seen.add(child.id)
                    child_node = {"user": child, "depth": node["depth"] + 1, "subordinates": []}
                    node["subordinates"].append(child_node)
                    max_depth = max(max_depth, child_node["depth"])
                    stack.append(child_node)

        unreachable = [user.id for user in users if user.id not in seen]
        if unreachable:
            logger.warning("Users %s are not reachable from any root (cyclic reporting data)", unreachable)

        return {"root": forest, "max_depth": max_depth}
