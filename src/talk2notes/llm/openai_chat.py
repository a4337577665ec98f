"""OpenAI 兼容接口（OpenAI / Groq，通过 base_url 切换）"""

from typing import Any

from openai import AsyncOpenAI

from talk2notes.llm.base import AbstractChatBackend

GROQ_BASE_URL = "https://api.groq.com/openai/v1"


class OpenAIChatBackend(AbstractChatBackend):
    def __init__(
        self,
        api_key: str,
        model: str,
        base_url: str | None = None,
        timeout: float = 600.0,
        client: AsyncOpenAI | None = None,
    ) -> None:
        self.model = model
        self.client = client or AsyncOpenAI(api_key=api_key, base_url=base_url, timeout=timeout)

    async def complete(
        self,
        system_prompt: str,
        user_content: str,
        *,
        temperature: float = 0.3,
        json_mode: bool = False,
        max_tokens: int | None = None,
    ) -> str:
        params: dict[str, Any] = {
            "model": self.model,
            "messages": [
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_content},
            ],
            "temperature": temperature,
        }
        if json_mode:
            params["response_format"] = {"type": "json_object"}
        if max_tokens:
            params["max_tokens"] = max_tokens

        response = await self.client.chat.completions.create(**params)
        return response.choices[0].message.content or ""
