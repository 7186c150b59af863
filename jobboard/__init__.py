"""
Campus Job Board
Two-sided job board: employers post internship and entry-level jobs,
students browse, save and apply.

Architecture:
- PostgreSQL: users, profiles, jobs, applications, saved jobs
- JWT sessions carrying {user_id, role, profile_id}
- Authorization Gate: role + ownership checks before every mutation
"""

__version__ = "1.0.0"
