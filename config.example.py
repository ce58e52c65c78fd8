# config.example.py

"""
Documentation-only module (safe to commit).

The real configuration is loaded from environment variables (optionally via a local .env file).
This file exists to make the repo self-documenting even without opening .env.example.
"""

ENV_VARS = {
    # App / logging
    "TASKMINDER_APP_NAME": "App display name (default: taskminder).",
    "TASKMINDER_LOG_LEVEL": "Console logging level (default: INFO). The log file always gets DEBUG.",
    # Paths (gitignored)
    "TASKMINDER_DATA_DIR": "Local data directory for the task file and logs (default: .local/taskminder).",
    "TASKMINDER_TASKS_PATH": "Task file written by /save (default: <data_dir>/tasks.json).",
    # Reminders
    "TASKMINDER_REMINDERS_ENABLED": "Run the background reminder loop (true/false, default: true).",
    "TASKMINDER_REMINDER_INTERVAL_SECONDS": "Seconds between reminder scans (default: 60).",
    "TASKMINDER_REMINDER_LOOKAHEAD_SECONDS": "Remind about deadlines within this many seconds (default: 3600).",
}
