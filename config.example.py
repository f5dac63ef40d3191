# config.example.py

"""
Documentation-only module (safe to commit).

The real configuration is loaded from environment variables (optionally via a local .env file).
Do NOT commit real secrets; keep them in .env (local, gitignored).

This file exists to make the repo self-documenting even without opening .env.example.
"""

ENV_VARS = {
    # App / logging
    "UNIFLOW_APP_NAME": "App display name (default: UniFlow).",
    "UNIFLOW_LOG_LEVEL": "Console logging level (default: WARNING; the log file always gets DEBUG).",
    # Persistence
    "UNIFLOW_DATA_DIR": "Local data directory (default: .local/uniflow).",
    "UNIFLOW_STORAGE_BACKEND": "sqlite | json | memory (default: sqlite).",
    "UNIFLOW_STORAGE_PATH": (
        "Storage file (default: <data_dir>/uniflow.sqlite3, or <data_dir>/tasks.json for json)."
    ),
    "UNIFLOW_STORAGE_KEY": "Slot name inside the SQLite kv table (default: uniflow-tasks).",
    # LLM / OpenRouter
    "UNIFLOW_OPENROUTER_API_KEY": "OpenRouter API key (unset -> offline demo client).",
    "UNIFLOW_OPENROUTER_BASE_URL": "OpenAI-compatible base URL (default: https://openrouter.ai/api/v1).",
    "UNIFLOW_LLM_MODEL": "Model id (default: google/gemini-2.5-flash).",
    "UNIFLOW_HTTP_REFERER": "Optional OpenRouter metadata header.",
    "UNIFLOW_APP_TITLE": "Optional OpenRouter metadata header title.",
    "UNIFLOW_LLM_CONNECT_TIMEOUT_SECONDS": "Connect timeout (default: 5).",
    "UNIFLOW_LLM_READ_TIMEOUT_SECONDS": "Read timeout (default: 25).",
    # Advisory tuning
    "UNIFLOW_ADVICE_MAX_TOKENS": "Max output tokens for the advice sentence (default: 60).",
    "UNIFLOW_ADVICE_TEMPERATURE": "Creativity of the advice sentence (default: 0.7).",
    "UNIFLOW_ADVICE_TASK_LIMIT": "How many pending tasks go into the advice prompt (default: 10).",
}
