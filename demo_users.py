"""
Demo users and reporting lines for a loan-origination branch
Managers are referenced by email and wired up through HierarchyManager
"""

DEMO_PASSWORD = "password123"

DEMO_USERS = [
    # Branch leadership
    {
        "name": "Anita Desai",
        "email": "anita.desai@loandesk.in",
        "department": "Branch Operations",
        "role": "manager",
        "manager_email": None
    },

    # Sales
    {
        "name": "Rohit Mehta",
        "email": "rohit.mehta@loandesk.in",
        "department": "Sales",
        "role": "manager",
        "manager_email": "anita.desai@loandesk.in"
    },
    {
        "name": "Kavya Nair",
        "email": "kavya.nair@loandesk.in",
        "department": "Sales",
        "role": "employee",
        "manager_email": "rohit.mehta@loandesk.in"
    },
    {
        "name": "Arjun Singh",
        "email": "arjun.singh@loandesk.in",
        "department": "Sales",
        "role": "employee",
        "manager_email": "rohit.mehta@loandesk.in"
    },

    # Credit
    {
        "name": "Meera Iyer",
        "email": "meera.iyer@loandesk.in",
        "department": "Credit",
        "role": "manager",
        "manager_email": "anita.desai@loandesk.in"
    },
    {
        "name": "Vikram Rao",
        "email": "vikram.rao@loandesk.in",
        "department": "Credit",
        "role": "employee",
        "manager_email": "meera.iyer@loandesk.in"
    },

    # Operations
    {
        "name": "Sneha Kulkarni",
        "email": "sneha.kulkarni@loandesk.in",
        "department": "Operations",
        "role": "employee",
        "manager_email": "anita.desai@loandesk.in"
    },
]
