"""Portfolio Studio package."""

from .config import KnowledgeBaseConfig, LlmConfig, StudioConfig

__all__ = ["KnowledgeBaseConfig", "LlmConfig", "StudioConfig"]
