"""Anthropic Messages API 实现"""

from talk2notes.llm.base import AbstractChatBackend

DEFAULT_MAX_TOKENS = 4096


class AnthropicChatBackend(AbstractChatBackend):
    def __init__(self, api_key: str, model: str, timeout: float = 600.0, client=None) -> None:
        self.model = model
        if client is None:
            try:
                from anthropic import AsyncAnthropic
            except ImportError:
                raise RuntimeError("anthropic package not installed. Install it: pip install 'talk2notes[anthropic]'")
            client = AsyncAnthropic(api_key=api_key, timeout=timeout)
        self.client = client

    async def complete(
        self,
        system_prompt: str,
        user_content: str,
        *,
        temperature: float = 0.3,
        json_mode: bool = False,
        max_tokens: int | None = None,
    ) -> str:
        # Messages API 没有 JSON 模式，靠提示词约束输出
        if json_mode:
            user_content = f"{user_content}\n\nRespond with the JSON object only."

        response = await self.client.messages.create(
            model=self.model,
            max_tokens=max_tokens or DEFAULT_MAX_TOKENS,
            temperature=temperature,
            system=system_prompt,
            messages=[{"role": "user", "content": user_content}],
        )
        return "".join(
            block.text for block in response.content if getattr(block, "type", "") == "text"
        )
