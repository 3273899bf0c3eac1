import json
import logging
from typing import Callable, Iterable, Optional

from autogen_agentchat.agents import AssistantAgent

from lab_central.config import get_model_client
from lab_central.data_models import Equipment

logger = logging.getLogger(__name__)

FALLBACK_RESPONSE = (
    "I'm having trouble connecting to the research knowledge base right now. "
    "Please try again later."
)
EMPTY_RESPONSE = "No response from AI."

# Usage above this many hours needs an inspection.
INSPECTION_HOURS = 3000


def equipment_snapshot(equipment: Iterable[Equipment]) -> list:
    """The only equipment fields the assistant gets to see."""
    return [
        {"name": item.name, "category": item.category, "hours": item.total_usage_hours}
        for item in equipment
    ]


def build_system_message(equipment: Iterable[Equipment]) -> str:
    return f"""You are an expert AI Lab Assistant for a research equipment portal.
    Current available equipment: {json.dumps(equipment_snapshot(equipment))}
    Your goal is to provide:
    1. Recommendations for equipment based on research descriptions.
    2. Maintenance predictions based on total usage hours (high usage > {INSPECTION_HOURS} hours needs inspection).
    3. Research workflow suggestions.
    Keep answers concise, technical, and helpful."""


class LabAssistantAgent:
    """Advisory assistant answering researcher questions about the inventory."""

    def __init__(self, name: str = "LabAssistant", agent_factory: Optional[Callable[..., AssistantAgent]] = None):
        self.name = name
        self.agent_factory = agent_factory or self._default_agent

    def _default_agent(self, system_message: str) -> AssistantAgent:
        return AssistantAgent(
            name=self.name,
            model_client=get_model_client(),
            system_message=system_message,
        )

    async def ask(self, prompt: str, equipment: Iterable[Equipment]) -> str:
        """Text in, text out. Never raises: failures come back as a fallback message."""
        try:
            # The system message carries the current inventory snapshot.
            agent = self.agent_factory(system_message=build_system_message(equipment))
            response = await agent.run(task=prompt)
            content = str(response.messages[-1].content) if response.messages else ""
        except Exception:
            logger.exception("[%s] ERROR: assistant request failed.", self.name)
            return FALLBACK_RESPONSE
        return content.strip() or EMPTY_RESPONSE
