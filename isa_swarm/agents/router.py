"""
Entry routing for swarm graphs.

The router sends every invocation of a compiled swarm to the agent named by
``state["active_agent"]``, or to the default agent when none is set, so a
conversation resumes where it left off.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, List, Optional

from langgraph.graph import START, StateGraph

from isa_swarm.agent_types import get_active_agent
from isa_swarm.core.config import check_unknown_agent_policy, get_settings
from isa_swarm.errors import UnknownAgentError

from .validation import validate_default_agent

logger = logging.getLogger(__name__)


class ActiveAgentRouter:
    """
    Map a swarm state to the agent that should run next.

    Args:
        agent_names: Names of all agents reachable from the entry point
        default_active_agent: Agent used when the state names none
        unknown_agent_policy: "error" raises UnknownAgentError when the state
            names an unregistered agent; "default" falls back to the default
            agent. Defaults to the configured setting.
    """

    def __init__(
        self,
        agent_names: Iterable[str],
        default_active_agent: str,
        unknown_agent_policy: Optional[str] = None,
    ):
        self.agent_names: List[str] = list(agent_names)
        validate_default_agent(self.agent_names, default_active_agent)
        self.default_active_agent = default_active_agent
        self.unknown_agent_policy = check_unknown_agent_policy(
            unknown_agent_policy or get_settings().unknown_agent_policy
        )

    @property
    def path_map(self) -> Dict[str, str]:
        return {name: name for name in self.agent_names}

    def __call__(self, state: Any) -> str:
        active_agent = get_active_agent(state)
        if not active_agent:
            logger.debug("No active agent in state, routing to default '%s'", self.default_active_agent)
            return self.default_active_agent

        if active_agent not in self.agent_names:
            if self.unknown_agent_policy == "default":
                logger.warning(
                    "Unknown active agent '%s', falling back to default '%s'",
                    active_agent,
                    self.default_active_agent,
                )
                return self.default_active_agent
            raise UnknownAgentError(
                f"Active agent '{active_agent}' is not part of this swarm",
                agent_name=active_agent,
                available=self.agent_names,
            )

        logger.debug("Resuming active agent '%s'", active_agent)
        return active_agent


def add_active_agent_router(
    builder: StateGraph,
    agent_names: Iterable[str],
    default_active_agent: str,
    unknown_agent_policy: Optional[str] = None,
) -> ActiveAgentRouter:
    """Route a graph's entry point to the active agent.

    Useful for custom graphs whose agent nodes are added by the caller.

    Raises:
        ConfigurationError: ``default_active_agent`` is not in ``agent_names``

    Example::

        builder = StateGraph(SwarmState)
        builder.add_node("Alice", alice)
        builder.add_node("Bob", bob)
        add_active_agent_router(builder, ["Alice", "Bob"], "Alice")
    """
    router = ActiveAgentRouter(agent_names, default_active_agent, unknown_agent_policy)
    builder.add_conditional_edges(START, router, router.path_map)
    return router
