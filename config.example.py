# config.example.py

"""
Documentation-only module (safe to commit).

The real configuration is loaded from environment variables (optionally via a local .env file).
This file exists to make the repo self-documenting even without opening .env.
"""

ENV_VARS = {
    # App / logging
    "TALLY_APP_NAME": "App display name (default: tally).",
    "TALLY_LOG_LEVEL": "Console logging level (default: INFO).",
    # Paths (gitignored)
    "TALLY_DATA_DIR": "Local data directory (default: .local/tally).",
    "TALLY_LISTS_DB_PATH": "ListStore SQLite path (default: <data_dir>/lists.sqlite3).",
    # Lists / tree editing
    "TALLY_PREVIEW_LIMIT": "Items shown per list in /lists previews (default: 4).",
    "TALLY_SUBTASK_TEXT": "Text of a sub-task added without text (default: New sub-task).",
    "TALLY_DEFAULT_PRIORITY": "Priority of new items: high|medium|low|none (default: low).",
    "TALLY_DEFAULT_COLOR": "Color of new lists (default: #6366f1).",
    "TALLY_CHECK_IDS": "Reject commits with duplicate node ids (true/false, default: false).",
}
