"""
Master Database Seeding Script
Creates database tables and populates them with demo users, reporting lines
and tasks. Reporting lines and tasks go through the same services as the API,
so the seed data obeys the hierarchy and routing rules.
"""

import sys
from datetime import datetime

from create_tables import create_tables
from demo_tasks import DEMO_TASKS
from demo_users import DEMO_PASSWORD, DEMO_USERS
from loandesk.database import SessionLocal
from loandesk.models.task import Task
from loandesk.models.user import User
from loandesk.schemas.task import TaskCreate
from loandesk.services.task_service import TaskService
from loandesk.utils.errors import LoanDeskError
from loandesk.utils.hierarchy import HierarchyManager
from loandesk.utils.security import hash_password

def seed_demo_users(session):
    """Create demo users in the database"""
    print(f"\n{'='*60}")
    print(f"🚀 Creating Demo Users")
    print(f"{'='*60}")

    created = 0
    for user_data in DEMO_USERS:
        if session.query(User).filter(User.email == user_data["email"]).first():
            print(f"[SKIP] User {user_data['email']} already exists, skipping...")
            continue
        session.add(User(
            name=user_data["name"],
            email=user_data["email"],
            hashed_password=hash_password(DEMO_PASSWORD),
            department=user_data["department"],
            role=user_data["role"],
        ))
        created += 1
        print(f"[SUCCESS] Created user: {user_data['name']} ({user_data['role']} - {user_data['department']})")

    session.commit()
    print(f"\n[SUCCESS] Successfully created {created} demo users!")

def seed_reporting_lines(session):
    """Assign managers in list order so every edge passes the cycle check"""
    print(f"\n{'='*60}")
    print(f"🚀 Assigning Reporting Lines")
    print(f"{'='*60}")

    manager = HierarchyManager(session)
    ids = {user.email: user.id for user in session.query(User).all()}
    for user_data in DEMO_USERS:
        if not user_data["manager_email"]:
            continue
        manager.assign_manager(ids[user_data["email"]], ids[user_data["manager_email"]])
        print(f"[SUCCESS] {user_data['email']} -> {user_data['manager_email']}")

def seed_demo_tasks(session):
    """Create demo tasks through the task service"""
    print(f"\n{'='*60}")
    print(f"🚀 Creating Demo Tasks")
    print(f"{'='*60}")

    service = TaskService(session)
    users = {user.email: user for user in session.query(User).all()}
    created = 0
    for task_data in DEMO_TASKS:
        if session.query(Task).filter(Task.title == task_data["title"]).first():
            print(f"[SKIP] Task '{task_data['title']}' already exists, skipping...")
            continue
        assigner = users[task_data["assigned_by"]]
        payload = TaskCreate(
            title=task_data["title"],
            description=task_data["description"],
            assigned_to=users[task_data["assigned_to"]].id,
            task_type=task_data["task_type"],
            direction=task_data["direction"],
            priority=task_data["priority"],
            linked_case_id=task_data["linked_case_id"],
            due_date=task_data["due_date"],
        )
        try:
            service.create_task(assigner, payload)
        except LoanDeskError as e:
            print(f"[SKIP] Task '{task_data['title']}': {e.message}")
            continue
        created += 1
        print(f"[SUCCESS] Created task: {task_data['title']} ({task_data['assigned_by']} -> {task_data['assigned_to']})")

    print(f"\n[SUCCESS] Successfully created {created} demo tasks!")

def main():
    """Main function to run all seeding operations"""
    print("🌱 MASTER DATABASE SEEDING SCRIPT")
    print("=" * 60)
    print(f"Started at: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}")

    create_tables()

    session = SessionLocal()
    try:
        seed_demo_users(session)
        seed_reporting_lines(session)
        seed_demo_tasks(session)
    except Exception as e:
        session.rollback()
        print(f"\n[ERROR] Seeding failed: {e}")
        sys.exit(1)
    finally:
        session.close()

    print(f"\n{'='*60}")
    print("📊 SEEDING SUMMARY")
    print(f"{'='*60}")
    print(f"   - {len(DEMO_USERS)} users with reporting lines")
    print(f"   - {len(DEMO_TASKS)} tasks (PERSONAL, COMMON and HIERARCHICAL)")
    print(f"\n[INFO] Login Credentials:")
    print(f"   - Admin: admin@example.com / admin123")
    print(f"   - All demo users: {DEMO_PASSWORD}")
    print(f"\nCompleted at: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}")

if __name__ == "__main__":
    main()
