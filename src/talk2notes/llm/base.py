"""对话补全后端抽象基类（翻译、排版、总结共用）"""

from abc import ABC, abstractmethod


class AbstractChatBackend(ABC):
    model: str = ""

    @abstractmethod
    async def complete(
        self,
        system_prompt: str,
        user_content: str,
        *,
        temperature: float = 0.3,
        json_mode: bool = False,
        max_tokens: int | None = None,
    ) -> str:
        """返回模型输出的文本；json_mode 时要求模型只输出一个 JSON 对象"""
        ...
