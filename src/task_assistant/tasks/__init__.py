"""
Task subsystem.

Components:
- task_models.py: data structures (Task, TaskStatus) and the entity validator
- task_store.py: SQLite-backed storage + query helpers
- task_format.py: list/item/error layout shown to users
- task_api.py: small high-level helpers used by the chat commands
"""
