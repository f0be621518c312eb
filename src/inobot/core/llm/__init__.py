"""LLM client object as BaseChatModel in langchain."""

from .deps import build_llm, create_llm, get_llm  # noqa: F401
