# config.example.py

"""
Documentation-only module (safe to commit).

The real configuration is loaded from environment variables (optionally via a local .env file).
Do NOT commit real secrets; keep the bot token and API key in .env (local, gitignored).
"""

ENV_VARS = {
    # App / logging
    "TASKBOT_APP_NAME": "App display name (default: taskbot).",
    "TASKBOT_LOG_LEVEL": "Console logging level (default: INFO). The log file always gets DEBUG.",
    # Connectors
    "TASKBOT_CONSOLE_ENABLED": "Enable console connector (true/false, default: true).",
    "TASKBOT_CONSOLE_USER_ID": "Numeric user id that owns tasks created from the console (default: 1).",
    "TASKBOT_TELEGRAM_ENABLED": "Enable Telegram connector (true/false, default: false).",
    # Telegram
    "TASKBOT_TELEGRAM_BOT_TOKEN": "Bot token from @BotFather (TELEGRAM_BOT_TOKEN is accepted too).",
    "TASKBOT_TELEGRAM_API_BASE": "Bot API base URL (default: https://api.telegram.org).",
    "TASKBOT_TELEGRAM_POLL_TIMEOUT_SECONDS": "getUpdates long-poll timeout (default: 10).",
    "TASKBOT_TELEGRAM_ALLOWED_CHATS": "Optional allowlist of chat ids (empty => all chats).",
    # LLM / OpenRouter (used by /enhance; offline fallback without a key)
    "TASKBOT_OPENROUTER_API_KEY": "OpenRouter API key (OPENROUTER_API_KEY is accepted too).",
    "TASKBOT_OPENROUTER_BASE_URL": "OpenRouter base URL (default: https://openrouter.ai/api/v1).",
    "TASKBOT_LLM_MODELS": "Comma/space separated list of models to try in order.",
    "TASKBOT_HTTP_REFERER": "Optional OpenRouter metadata header.",
    "TASKBOT_APP_TITLE": "Optional OpenRouter metadata header title.",
    "TASKBOT_LLM_CONNECT_TIMEOUT_SECONDS": "LLM connect timeout (default: 5).",
    "TASKBOT_LLM_READ_TIMEOUT_SECONDS": "LLM read timeout (default: 25).",
    "TASKBOT_LLM_FIRST_TOKEN_TIMEOUT_SECONDS": "Max wait for the first content token (default: 20).",
    # Quota
    "TASKBOT_FREE_REQUESTS_PER_MONTH": "Monthly /enhance requests for non-premium users (default: 10).",
    # Paths (gitignored)
    "TASKBOT_DATA_DIR": "Local data directory for the database and log file (default: .local/taskbot).",
    "TASKBOT_TASKS_DB_PATH": "SQLite path for tasks and quotas (default: <data_dir>/tasks.sqlite3).",
}
