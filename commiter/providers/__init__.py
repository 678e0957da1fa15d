"""LLM provider drivers."""
