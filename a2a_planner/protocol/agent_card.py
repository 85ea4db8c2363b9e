"""
Agent card discovery.

The card at ``/.well-known/agent.json`` is only used to name the
counterpart in prompts, so a failed fetch is never fatal: a placeholder
card is returned instead.
"""

import json
import logging
from typing import Optional

from pydantic import BaseModel, Field, ValidationError

from .errors import A2AClientError
from .transport import HttpRequest, RequestsTransport, Transport

logger = logging.getLogger(__name__)

WELL_KNOWN_PATH = "/.well-known/agent.json"
DEFAULT_CARD_TIMEOUT = 10.0


class AgentSkill(BaseModel):
    """A skill advertised by an agent."""

    id: str
    name: str = ""
    description: Optional[str] = None


class AgentCard(BaseModel):
    """The subset of an agent card the planner uses."""

    name: str = "unknown"
    description: Optional[str] = None
    skills: list[AgentSkill] = Field(default_factory=list)

    @property
    def skill_ids(self) -> set[str]:
        return {skill.id for skill in self.skills}


def fetch_agent_card(
    base_url: str,
    transport: Optional[Transport] = None,
    timeout: float = DEFAULT_CARD_TIMEOUT,
) -> AgentCard:
    """Fetch the agent card, falling back to an empty ``unknown`` card."""
    url = f"{base_url.rstrip('/')}{WELL_KNOWN_PATH}"
    transport = transport or RequestsTransport()
    try:
        response = transport(HttpRequest(method="GET", url=url, timeout=timeout))
        if not response.ok:
            raise A2AClientError(f"HTTP {response.status}")
        card = AgentCard.model_validate(response.json())
    except (A2AClientError, json.JSONDecodeError, ValidationError) as e:
        logger.warning(
            "Agent card fetch from %s failed (%s), assuming all skills available",
            url,
            e,
        )
        return AgentCard()

    logger.debug("Agent card: %s (%d skills)", card.name, len(card.skills))
    return card
