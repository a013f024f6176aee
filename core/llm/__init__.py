"""LLM Module - scoring oracle services and interfaces."""
from core.llm.interfaces import LLMProvider
from core.llm.openai_service import OpenAIService

__all__ = ['LLMProvider', 'OpenAIService']
