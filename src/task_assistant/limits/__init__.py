"""Per-user monthly quota for LLM-backed commands (APILimit + SQLite store)."""
