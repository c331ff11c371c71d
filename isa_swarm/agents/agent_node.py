"""
Graph node that runs one swarm agent.

The node invokes the agent's runnable with the shared state, resolves any
handoff signals the agent's tools left in the conversation, and checks the
handoff target before control moves on.
"""

from __future__ import annotations

import inspect
import logging
from typing import Any, Dict, Iterable, List, Union

from langchain_core.runnables import RunnableLambda
from langchain_core.runnables.config import RunnableConfig
from langgraph.graph import END
from langgraph.types import Command

from isa_swarm.agent_types import get_active_agent, get_messages
from isa_swarm.errors import HandoffNotAllowedError, UnknownAgentError

from .handoff import find_handoff_in_messages
from .swarm_types import SwarmAgent

logger = logging.getLogger(__name__)

NodeOutput = Union[Dict[str, Any], Command]


def _accepts_config(fn: Any) -> bool:
    try:
        params = inspect.signature(fn).parameters
    except (TypeError, ValueError):
        return False
    if "config" in params:
        return True
    positional = [
        p for p in params.values()
        if p.kind in (p.POSITIONAL_ONLY, p.POSITIONAL_OR_KEYWORD)
    ]
    return len(positional) >= 2 or any(p.kind == p.VAR_POSITIONAL for p in params.values())


def _call(fn: Any, state: Any, config: RunnableConfig) -> Any:
    if _accepts_config(fn):
        return fn(state, config)
    return fn(state)


def invoke_agent_runnable(runnable: Any, state: Any, config: RunnableConfig) -> Any:
    """Run an agent synchronously."""
    if hasattr(runnable, "invoke"):
        return runnable.invoke(state, config=config)
    if callable(runnable):
        result = _call(runnable, state, config)
        if inspect.isawaitable(result):
            # close the coroutine so it is not reported as never awaited
            if hasattr(result, "close"):
                result.close()
            raise TypeError("Agent runnable is async; invoke the swarm with ainvoke()")
        return result
    raise TypeError(f"Unsupported agent runnable type: {type(runnable)}")


async def ainvoke_agent_runnable(runnable: Any, state: Any, config: RunnableConfig) -> Any:
    """Run an agent on the event loop."""
    if hasattr(runnable, "ainvoke"):
        return await runnable.ainvoke(state, config=config)
    if hasattr(runnable, "invoke"):
        return runnable.invoke(state, config=config)
    if callable(runnable):
        result = _call(runnable, state, config)
        if inspect.isawaitable(result):
            return await result
        return result
    raise TypeError(f"Unsupported agent runnable type: {type(runnable)}")


class SwarmAgentNode:
    """
    Node wrapper around a SwarmAgent.

    Args:
        agent: The agent to run
        agent_names: All agents in the swarm, for handoff target checks
        jump_on_handoff: Return a Command that jumps to the handoff target
            (direct mode) instead of leaving routing to the graph's edges
        enforce_destinations: Reject handoffs to agents outside ``agent.destinations``
    """

    def __init__(
        self,
        agent: SwarmAgent,
        agent_names: Iterable[str],
        *,
        jump_on_handoff: bool,
        enforce_destinations: bool,
    ):
        self.agent = agent
        self.agent_names: List[str] = list(agent_names)
        self.jump_on_handoff = jump_on_handoff
        self.enforce_destinations = enforce_destinations

    @property
    def name(self) -> str:
        return self.agent.name

    def as_runnable(self) -> RunnableLambda:
        return RunnableLambda(self.invoke, afunc=self.ainvoke, name=self.name)

    def invoke(self, state: Dict[str, Any], config: RunnableConfig) -> NodeOutput:
        logger.debug("Running agent '%s'", self.name)
        result = invoke_agent_runnable(self.agent.runnable, state, config)
        return self._handle_result(state, result)

    async def ainvoke(self, state: Dict[str, Any], config: RunnableConfig) -> NodeOutput:
        logger.debug("Running agent '%s' (async)", self.name)
        result = await ainvoke_agent_runnable(self.agent.runnable, state, config)
        return self._handle_result(state, result)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _handle_result(self, state: Dict[str, Any], result: Any) -> NodeOutput:
        if isinstance(result, Command):
            return self._check_command(result)
        if not isinstance(result, dict):
            logger.debug("Agent '%s' returned %s, state left unchanged", self.name, type(result).__name__)
            return {}

        update = self._resolve_handoff_signals(state, dict(result))

        previous = get_active_agent(state)
        target = get_active_agent(update)
        if not target or target == self.name or target == previous:
            return update

        self._check_handoff(target)
        logger.debug("Handoff from '%s' to '%s'", self.name, target)

        if self.jump_on_handoff:
            return Command(goto=target, update=update)
        return update

    def _check_command(self, command: Command) -> Command:
        """Apply the handoff target checks to a jump issued by the agent itself."""
        goto = command.goto
        if command.graph is None and isinstance(goto, str) and goto not in (END, self.name):
            self._check_handoff(goto)
            logger.debug("Agent '%s' issued a jump to '%s'", self.name, goto)
        return command

    def _resolve_handoff_signals(self, state: Dict[str, Any], update: Dict[str, Any]) -> Dict[str, Any]:
        """Turn handoff signals in the agent's new tool messages into transfers."""
        if "messages" not in update:
            return update

        known_ids = {m.id for m in get_messages(state) if getattr(m, "id", None)}
        messages = get_messages(update)
        new_positions = [
            i for i, message in enumerate(messages)
            if getattr(message, "id", None) not in known_ids
        ]
        resolved, target = find_handoff_in_messages([messages[i] for i in new_positions])
        if target is None:
            return update

        for position, message in zip(new_positions, resolved):
            messages[position] = message
        return {**update, "messages": messages, "active_agent": target}

    def _check_handoff(self, target: str) -> None:
        if target not in self.agent_names:
            raise UnknownAgentError(
                f"Agent '{self.name}' handed off to unknown agent '{target}'",
                agent_name=target,
                available=self.agent_names,
            )
        if self.enforce_destinations and target not in self.agent.destinations:
            raise HandoffNotAllowedError(
                f"Agent '{self.name}' may not hand off to '{target}'",
                source_agent=self.name,
                target_agent=target,
                allowed=list(self.agent.destinations),
            )
