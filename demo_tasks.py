"""
Demo tasks for the seeded branch
Assigner and assignee are referenced by email; every entry must satisfy the
task routing rules against the reporting lines in demo_users.py
"""

from datetime import datetime, timedelta

from loandesk.models.task import TaskDirection, TaskPriority, TaskType

DEMO_TASKS = [
    {
        "title": "Collect salary slips for home loan file",
        "description": "Applicant is missing the last three months of salary slips",
        "assigned_by": "rohit.mehta@loandesk.in",
        "assigned_to": "kavya.nair@loandesk.in",
        "task_type": TaskType.HIERARCHICAL,
        "direction": TaskDirection.DOWNWARD,
        "priority": TaskPriority.HIGH,
        "linked_case_id": "HL-2024-0153",
        "due_date": datetime.now() + timedelta(days=2)
    },
    {
        "title": "Follow up on property valuation report",
        "description": "Valuer has not shared the report for the Baner flat",
        "assigned_by": "rohit.mehta@loandesk.in",
        "assigned_to": "arjun.singh@loandesk.in",
        "task_type": TaskType.HIERARCHICAL,
        "direction": TaskDirection.DOWNWARD,
        "priority": TaskPriority.MEDIUM,
        "linked_case_id": "HL-2024-0161",
        "due_date": datetime.now() + timedelta(days=5)
    },
    {
        "title": "Approve deviation on FOIR limit",
        "description": "FOIR is at 58% against a 55% policy limit; co-applicant income pending",
        "assigned_by": "vikram.rao@loandesk.in",
        "assigned_to": "meera.iyer@loandesk.in",
        "task_type": TaskType.HIERARCHICAL,
        "direction": TaskDirection.UPWARD,
        "priority": TaskPriority.HIGH,
        "linked_case_id": "LAP-2024-0042",
        "due_date": datetime.now() + timedelta(days=1)
    },
    {
        "title": "Quarterly branch audit checklist",
        "description": "Prepare the KYC sampling sheet for the internal audit",
        "assigned_by": "rohit.mehta@loandesk.in",
        "assigned_to": "sneha.kulkarni@loandesk.in",
        "task_type": TaskType.COMMON,
        "direction": None,
        "priority": TaskPriority.LOW,
        "linked_case_id": None,
        "due_date": datetime.now() + timedelta(days=14)
    },
    {
        "title": "Renew DSA agreement reminders",
        "description": None,
        "assigned_by": "kavya.nair@loandesk.in",
        "assigned_to": "kavya.nair@loandesk.in",
        "task_type": TaskType.PERSONAL,
        "direction": None,
        "priority": TaskPriority.MEDIUM,
        "linked_case_id": None,
        "due_date": None
    },
]
