# config.example.py

"""
Documentation-only module (safe to commit).

The real configuration is loaded from environment variables (optionally via a local .env file).
The two tree options (SEPARATOR_REGEX, AUTO_COLLAPSE_LIMIT) are re-read from .env on every
tree rebuild, so editing .env while the console runs updates the tree.

This file exists to make the repo self-documenting even without opening .env.
"""

ENV_VARS = {
    # App / logging
    "TASKTRIGGER_APP_NAME": "App display name (default: task-trigger).",
    "TASKTRIGGER_LOG_LEVEL": "Console logging level (default: INFO).",
    "TASKTRIGGER_CONSOLE_ENABLED": "Run the interactive console (true/false, default: true).",
    # Tree options (live)
    "TASKTRIGGER_SEPARATOR_REGEX": (
        "Regular expression splitting 'Folder<sep>Task' names (default: \\* , a literal asterisk)."
    ),
    "TASKTRIGGER_AUTO_COLLAPSE_LIMIT": "Folders with more entries than this start collapsed (default: 5).",
    # Workspace
    "TASKTRIGGER_WORKSPACE_DIR": "Workspace root (default: current directory).",
    "TASKTRIGGER_TASKS_FILE": "Tasks file (default: <workspace>/.vscode/tasks.json).",
    "TASKTRIGGER_MAKEFILE": "Makefile providing 'make' tasks (default: <workspace>/Makefile).",
    "TASKTRIGGER_ENV_FILE": ".env file to load and watch (default: .env).",
    # Paths (gitignored)
    "TASKTRIGGER_DATA_DIR": "Local data directory for logs (default: .local/task-trigger).",
    # Tuning
    "TASKTRIGGER_WATCH_INTERVAL_SECONDS": "How often to poll .env and task files (default: 2.0).",
    "TASKTRIGGER_TASK_TIMEOUT_SECONDS": "Kill a running task after this many seconds (default: none).",
}
