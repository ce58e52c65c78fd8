"""
Task subsystem.

Components:
- task_models.py: data structures (Task, Reminder) and input parsing
- task_store.py: in-memory store, priority ordering, JSON save/load
- task_scheduler.py: polling reminder scheduler + background thread runner
"""
