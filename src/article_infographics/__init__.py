"""Turn articles into infographic slides and social posts with an LLM."""

__all__ = ["config", "models", "workflow"]
