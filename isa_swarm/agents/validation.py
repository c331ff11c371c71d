"""
Swarm configuration checks run before any graph is built.
"""

from __future__ import annotations

import logging
from typing import Iterable, List

from langgraph.graph import END, START

from isa_swarm.errors import ConfigurationError

from .swarm_types import SwarmConfig

logger = logging.getLogger(__name__)

_RESERVED_NAMES = {START, END}


def validate_default_agent(agent_names: Iterable[str], default_active_agent: str) -> None:
    """Raise ConfigurationError unless ``default_active_agent`` is one of ``agent_names``."""
    names = list(agent_names)
    if default_active_agent not in names:
        raise ConfigurationError(
            f"Default active agent '{default_active_agent}' not found in agent names {names}",
            field="default_active_agent",
            value=default_active_agent,
        )


def validate_swarm_config(config: SwarmConfig) -> List[str]:
    """Check a swarm configuration and return its agent names in order.

    Raises:
        ConfigurationError: empty agent list, empty/reserved/duplicate names,
            unknown default agent, or a destination naming no agent
    """
    if not config.agents:
        raise ConfigurationError("Agents list cannot be empty", field="agents")

    agent_names: List[str] = []
    for agent in config.agents:
        if not agent.name:
            raise ConfigurationError("Agent name cannot be empty", field="name")
        if agent.name in _RESERVED_NAMES:
            raise ConfigurationError(
                f"Agent name '{agent.name}' is reserved by the graph engine",
                field="name",
                value=agent.name,
            )
        if agent.name in agent_names:
            raise ConfigurationError(
                f"Duplicate agent name '{agent.name}'",
                field="name",
                value=agent.name,
            )
        agent_names.append(agent.name)

    validate_default_agent(agent_names, config.default_active_agent)

    for agent in config.agents:
        unknown = [dest for dest in agent.destinations if dest not in agent_names]
        if unknown:
            raise ConfigurationError(
                f"Agent '{agent.name}' lists unknown destinations {unknown}. Available: {agent_names}",
                field="destinations",
                value=unknown,
            )

    logger.debug("Swarm config valid: agents=%s default=%s", agent_names, config.default_active_agent)
    return agent_names
