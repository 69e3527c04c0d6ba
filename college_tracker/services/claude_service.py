"""
Claude API service wrapper
"""
from anthropic import AsyncAnthropic
from college_tracker.config import get_settings
from typing import Optional

settings = get_settings()


class ClaudeService:
    def __init__(self, api_key: Optional[str] = None):
        api_key = api_key or settings.ANTHROPIC_API_KEY or None
        self.model = settings.CLAUDE_MODEL
        self.max_tokens = settings.CLAUDE_MAX_TOKENS
        self._available = bool(api_key)
        self.client = AsyncAnthropic(api_key=api_key) if self._available else None

    @property
    def is_available(self) -> bool:
        return self._available

    async def generate_response(
        self,
        prompt: str,
        system_prompt: Optional[str] = None,
        temperature: float = 0.7,
        max_tokens: Optional[int] = None
    ) -> str:
        """
        Generate a plain-text response from Claude
        """
        if not self._available or self.client is None:
            raise RuntimeError("AI service not configured: ANTHROPIC_API_KEY is not set")

        response = await self.client.messages.create(
            model=self.model,
            max_tokens=max_tokens or self.max_tokens,
            temperature=temperature,
            system=system_prompt or "",
            messages=[{"role": "user", "content": prompt}],
        )

        return "".join(
            block.text for block in response.content if getattr(block, "type", "") == "text"
        ).strip()


# Singleton instance
claude_service = ClaudeService()
