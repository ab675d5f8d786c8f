"""
Task subsystem.

Components:
- task_models.py: data structures (Task, TaskStatus, TaskPriority, TaskUpdate)
- task_store.py: SQLite key/value slot holding the JSON snapshot
- retention.py: retention window filter
- task_engine.py: lifecycle engine (intents, sweeps, derived views)
- task_scheduler.py: periodic sweepers on a background event loop
- task_api.py: read-side helpers (countdowns, labels, date parsing)
"""
