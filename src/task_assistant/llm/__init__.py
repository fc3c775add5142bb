"""
LLM integration.

Components:
- client.py: OpenRouter client (OpenAI SDK) with model fallback
- offline.py: deterministic client used without an API key
- enhancer.py: task description rewriting for /enhance
"""
