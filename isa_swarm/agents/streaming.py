"""
Swarm graph with per-agent conditional edges.

Intended for incremental execution (``stream``/``astream``): every run enters
at the default agent, and after each agent the graph follows a handoff only
when the target is one of that agent's destinations.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict

from langgraph.graph import END, StateGraph

from isa_swarm.agent_types import get_active_agent

from .agent_node import SwarmAgentNode
from .swarm_types import SwarmAgent, SwarmConfig
from .validation import validate_swarm_config

logger = logging.getLogger(__name__)


def make_destination_router(agent: SwarmAgent) -> Callable[[Any], str]:
    """Route to the state's active agent if ``agent`` may hand off to it, else END."""
    destinations = set(agent.destinations)

    def route(state: Any) -> str:
        active_agent = get_active_agent(state)
        if active_agent and active_agent != agent.name and active_agent in destinations:
            logger.debug("Routing from '%s' to '%s'", agent.name, active_agent)
            return active_agent
        return END

    route.__name__ = f"route_from_{agent.name}"
    return route


def create_streaming_swarm(config: SwarmConfig) -> StateGraph:
    """
    Create a swarm graph whose transitions are conditional edges.

    The entry point is ``config.default_active_agent``. After an agent runs,
    control moves to ``state["active_agent"]`` when it differs from that agent
    and is one of its destinations; otherwise the run ends. Agents without
    destinations always end the run.

    Returns:
        A StateGraph ready to be compiled

    Raises:
        ConfigurationError: the configuration is invalid

    Example::

        builder = create_streaming_swarm(config)
        app = builder.compile()
        for chunk in app.stream({"messages": [HumanMessage("hi")]}, stream_mode="updates"):
            print(chunk)
    """
    agent_names = validate_swarm_config(config)

    builder = StateGraph(config.state_schema, context_schema=config.context_schema)
    builder.set_entry_point(config.default_active_agent)

    for agent in config.agents:
        node = SwarmAgentNode(
            agent,
            agent_names,
            jump_on_handoff=False,
            enforce_destinations=False,
        )
        builder.add_node(agent.name, node.as_runnable())

    for agent in config.agents:
        if agent.destinations:
            path_map: Dict[str, str] = {dest: dest for dest in agent.destinations}
            path_map[END] = END
            builder.add_conditional_edges(agent.name, make_destination_router(agent), path_map)
        else:
            builder.add_edge(agent.name, END)

    logger.info(
        "Created streaming swarm with agents %s (entry '%s')",
        agent_names,
        config.default_active_agent,
    )
    return builder
