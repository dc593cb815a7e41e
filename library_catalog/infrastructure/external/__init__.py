"""Adapters for external services."""

from .ollama_embedding_service import OllamaEmbeddingService

__all__ = ["OllamaEmbeddingService"]
