"""
Base class for AI agents
"""
from abc import ABC, abstractmethod
from college_tracker.services.claude_service import claude_service
from typing import Dict, Any, Optional


class BaseAgent(ABC):
    """
    Base class for the assistant's specialized agents
    """

    def __init__(self, name: str):
        self.name = name
        self.claude = claude_service

    @property
    def is_available(self) -> bool:
        return self.claude.is_available

    @abstractmethod
    async def process(self, context: Dict[str, Any]) -> Dict[str, Any]:
        """
        Process the given context and return results
        """
        pass

    async def generate_response(
        self,
        prompt: str,
        system_prompt: Optional[str] = None
    ) -> str:
        """Wrapper for Claude service"""
        return await self.claude.generate_response(prompt, system_prompt)
