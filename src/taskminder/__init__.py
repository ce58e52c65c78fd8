"""
taskminder: a small priority task manager.

Components:
- tasks/: task model, in-memory store with JSON persistence, reminder scheduler
- core/: ports (Protocols) and application state
- cli/: composition root, slash commands, entrypoint
- connectors/: console REPL
"""
