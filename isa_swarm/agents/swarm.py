"""
Swarm multi-agent graph builder.

Builds a LangGraph StateGraph in which agents hand off control of a shared
conversation to one another. Every invocation enters through the active-agent
router, so a conversation resumes with whichever agent held control last.

Handoff works through tool results: a handoff tool returns
``__HANDOFF__<agent name>``. The agent's node detects it, records the transfer
in the state and jumps straight to the target agent's node.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from langgraph.graph import StateGraph

from isa_swarm.core.config import get_settings

from .agent_node import SwarmAgentNode
from .router import add_active_agent_router
from .swarm_types import SwarmConfig
from .validation import validate_swarm_config

logger = logging.getLogger(__name__)


def create_swarm(
    config: SwarmConfig,
    *,
    enforce_destinations: Optional[bool] = None,
    unknown_agent_policy: Optional[str] = None,
) -> StateGraph:
    """
    Create a multi-agent swarm graph.

    Each agent becomes one node. The graph's entry point routes to the state's
    active agent (or ``config.default_active_agent``). An agent that hands off
    moves control to the target node within the same invocation; the handoff
    is recorded in ``messages`` and ``active_agent`` in the same step.

    Args:
        config: Agents and default active agent
        enforce_destinations: Reject handoffs outside an agent's destinations
            (defaults to the ISA_SWARM_ENFORCE_DESTINATIONS setting)
        unknown_agent_policy: Router behavior for an unregistered active agent,
            "error" or "default" (defaults to the configured setting)

    Returns:
        A StateGraph ready to be compiled

    Raises:
        ConfigurationError: the configuration is invalid

    Example::

        builder = create_swarm(SwarmConfig(
            agents=[
                SwarmAgent(name="Alice", runnable=alice, destinations=["Bob"]),
                SwarmAgent(name="Bob", runnable=bob, destinations=["Alice"]),
            ],
            default_active_agent="Alice",
        ))
        app = builder.compile(checkpointer=InMemorySaver())
        result = app.invoke({"messages": [HumanMessage("hi")]}, config)
    """
    agent_names = validate_swarm_config(config)
    if enforce_destinations is None:
        enforce_destinations = get_settings().enforce_destinations

    builder = StateGraph(config.state_schema, context_schema=config.context_schema)

    add_active_agent_router(
        builder,
        agent_names,
        config.default_active_agent,
        unknown_agent_policy=unknown_agent_policy,
    )

    for agent in config.agents:
        node = SwarmAgentNode(
            agent,
            agent_names,
            jump_on_handoff=True,
            enforce_destinations=enforce_destinations,
        )
        # destinations declare the possible jumps for graph validation and drawing
        builder.add_node(agent.name, node.as_runnable(), destinations=agent.destinations)

    logger.info(
        "Created swarm with agents %s (default '%s', enforce_destinations=%s)",
        agent_names,
        config.default_active_agent,
        enforce_destinations,
    )
    return builder


def compile_swarm(builder: StateGraph, checkpointer: Any = None, **kwargs: Any):
    """Compile a swarm graph; ``checkpointer`` enables multi-turn memory per thread_id."""
    app = builder.compile(checkpointer=checkpointer, **kwargs)
    logger.debug("Compiled swarm graph (checkpointer=%s)", type(checkpointer).__name__ if checkpointer else None)
    return app
