"""LLM Module - remote completion backends for match scoring."""
from core.llm.interfaces import LLMProvider
from core.llm.openai_service import OpenAIService, TRANSIENT_ERRORS
from core.llm.system_prompts import MATCH_SCORING_SYSTEM_PROMPT, MATCH_SCORING_PROMPT_TEMPLATE

__all__ = [
    'LLMProvider',
    'OpenAIService',
    'TRANSIENT_ERRORS',
    'MATCH_SCORING_SYSTEM_PROMPT',
    'MATCH_SCORING_PROMPT_TEMPLATE',
]
