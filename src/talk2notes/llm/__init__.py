"""对话模型模块 - 根据 provider 选择后端"""

from talk2notes.config import Provider, ProviderConfig
from talk2notes.llm.anthropic_chat import AnthropicChatBackend
from talk2notes.llm.base import AbstractChatBackend
from talk2notes.llm.openai_chat import GROQ_BASE_URL, OpenAIChatBackend


def get_chat_backend(ai: ProviderConfig) -> AbstractChatBackend | None:
    """
    openai    → OpenAI
    groq      → OpenAI 兼容接口 + Groq base_url
    anthropic → Anthropic Messages API
    deepgram  → 只有语音接口，总结借用 OpenAI
    未配置密钥时返回 None，由调用方决定降级或报错
    """
    if ai.provider is Provider.GROQ:
        if not ai.api_key:
            return None
        return OpenAIChatBackend(api_key=ai.api_key, model=ai.summarization_model, base_url=GROQ_BASE_URL)
    if ai.provider is Provider.ANTHROPIC:
        if not ai.api_key:
            return None
        return AnthropicChatBackend(api_key=ai.api_key, model=ai.summarization_model)
    if ai.provider is Provider.DEEPGRAM:
        if not ai.openai_api_key:
            return None
        return OpenAIChatBackend(api_key=ai.openai_api_key, model=ai.summarization_model)
    if not ai.api_key:
        return None
    return OpenAIChatBackend(api_key=ai.api_key, model=ai.summarization_model)


__all__ = [
    "AbstractChatBackend",
    "AnthropicChatBackend",
    "OpenAIChatBackend",
    "get_chat_backend",
]
