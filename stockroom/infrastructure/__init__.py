"""Infrastructure adapters: storage, LLM providers, parsers, PDF."""
