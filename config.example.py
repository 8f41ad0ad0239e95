# config.example.py

"""
Documentation-only module (safe to commit).

The real configuration is loaded from environment variables (optionally via a local .env file).
This file exists to make the repo self-documenting even without opening .env.
"""

ENV_VARS = {
    # App / logging
    "TODO_APP_NAME": "App display name (default: todo-keeper).",
    "TODO_LOG_LEVEL": "Console logging level (default: INFO). The log file always gets DEBUG.",
    # Connectors
    "TODO_CONSOLE_ENABLED": "Run the interactive console (true/false, default: true).",
    # Durable slot
    "TODO_STORE_BACKEND": "sqlite | file | memory (default: sqlite).",
    "TODO_STORE_PATH": "SQLite db file, or directory for the file backend.",
    "TODO_STORAGE_KEY": "Slot name holding the task envelope (default: todoApp_todos).",
    "TODO_STORAGE_QUOTA_BYTES": "Reject saves larger than this many bytes (0 = unlimited).",
    # Paths
    "TODO_DATA_DIR": "Local data dir for the store and log file (default: .local/todo_keeper).",
    "TODO_EXPORT_DIR": "Default directory for /export (default: current directory).",
}
