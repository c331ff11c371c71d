"""
Handoff signalling for swarm orchestration.

A tool asks for a transfer of control by returning a reserved-prefix token
(``__HANDOFF__<agent name>``) as its whole result. This module produces that
token, decodes tool results into a ToolOutcome at the tool boundary, and turns
a decoded handoff into a state update or a LangGraph Command.
"""

from __future__ import annotations

import logging
import re
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple, Type

from langchain_core.callbacks import (
    AsyncCallbackManagerForToolRun,
    CallbackManagerForToolRun,
)
from langchain_core.messages import AnyMessage, ToolMessage
from langchain_core.tools import BaseTool
from langgraph.types import Command
from pydantic import BaseModel, Field

from isa_swarm.agent_types import get_messages
from isa_swarm.errors import ConfigurationError, UnknownAgentError

from .swarm_types import HandoffRequest, OrdinaryResult, ToolOutcome

logger = logging.getLogger(__name__)

HANDOFF_PREFIX = "__HANDOFF__"

# Tool metadata key holding the agent a handoff tool transfers to
METADATA_KEY_HANDOFF_DESTINATION = "__handoff_destination"

_WHITESPACE_RE = re.compile(r"\s+")


def normalize_agent_name(agent_name: str) -> str:
    """Normalize an agent name for use inside a tool name.

    Trims surrounding whitespace, collapses inner whitespace runs to a single
    underscore and lowercases the result: "Agent  One " -> "agent_one".
    """
    normalized = _WHITESPACE_RE.sub("_", agent_name.strip())
    return normalized.lower()


# ============================================================================
# Signal encoding
# ============================================================================

def encode_handoff_signal(target_agent: str) -> str:
    """Return the tool result that requests a transfer to ``target_agent``."""
    return f"{HANDOFF_PREFIX}{target_agent}"


def decode_handoff_signal(result: Any) -> Tuple[str, bool]:
    """Check whether a tool result is a handoff signal.

    Returns:
        ``(target_agent, True)`` for a handoff signal, ``("", False)`` otherwise
    """
    if isinstance(result, str) and result.startswith(HANDOFF_PREFIX):
        return result[len(HANDOFF_PREFIX):], True
    return "", False


def parse_tool_outcome(result: Any) -> ToolOutcome:
    """Decode a raw tool result into an OrdinaryResult or a HandoffRequest."""
    target, is_handoff = decode_handoff_signal(result)
    if is_handoff:
        return HandoffRequest(target_agent=target)
    return OrdinaryResult(content=result if isinstance(result, str) else str(result))


# ============================================================================
# Applying a handoff
# ============================================================================

TRANSFER_MESSAGE_TEMPLATE = "Successfully transferred to {agent_name}"


def create_transfer_message(target_agent: str, tool_call_id: str = "", **kwargs: Any) -> ToolMessage:
    """Build the tool message recorded when control moves to ``target_agent``."""
    return ToolMessage(
        content=TRANSFER_MESSAGE_TEMPLATE.format(agent_name=target_agent),
        tool_call_id=tool_call_id or "",
        **kwargs,
    )


def is_transfer_message(message: Any, target_agent: str) -> bool:
    """Whether ``message`` records a transfer of control to ``target_agent``."""
    return (
        isinstance(message, ToolMessage)
        and message.content == TRANSFER_MESSAGE_TEMPLATE.format(agent_name=target_agent)
    )


def _check_target(target_agent: str, agent_names: Optional[Iterable[str]]) -> None:
    if agent_names is None:
        return
    available = list(agent_names)
    if target_agent not in available:
        raise UnknownAgentError(
            f"Cannot hand off to unknown agent '{target_agent}'",
            agent_name=target_agent,
            available=available,
        )


def apply_handoff(
    state: Dict[str, Any],
    target_agent: str,
    tool_call_id: str = "",
    agent_names: Optional[Iterable[str]] = None,
) -> Dict[str, Any]:
    """Return a new state with control handed to ``target_agent``.

    The new state has ``active_agent`` set to the target and exactly one extra
    trailing tool message. Nothing else changes and ``state`` is not modified.

    Raises:
        UnknownAgentError: ``agent_names`` is given and does not contain the target
    """
    _check_target(target_agent, agent_names)
    messages = get_messages(state)
    messages.append(create_transfer_message(target_agent, tool_call_id))
    return {**state, "messages": messages, "active_agent": target_agent}


def process_tool_result(
    state: Dict[str, Any],
    tool_result: Any,
    tool_call_id: str = "",
    agent_names: Optional[Iterable[str]] = None,
) -> Tuple[Dict[str, Any], bool]:
    """Apply ``tool_result`` to ``state`` if it is a handoff signal.

    Returns:
        ``(new_state, True)`` when a handoff was applied, ``(state, False)`` otherwise
    """
    outcome = parse_tool_outcome(tool_result)
    if isinstance(outcome, HandoffRequest):
        return apply_handoff(state, outcome.target_agent, tool_call_id, agent_names), True
    return state, False


def create_handoff_command(
    target_agent: str,
    tool_call_id: str = "",
    graph: Optional[str] = None,
) -> Command:
    """Create the Command that jumps to ``target_agent`` and records the handoff.

    The engine applies the update and the jump in the same step.

    Args:
        target_agent: Agent (node) to transfer control to
        tool_call_id: Id of the tool call that triggered the handoff
        graph: ``Command.PARENT`` when issued from inside an agent subgraph

    Example::

        target, is_handoff = decode_handoff_signal(tool_result)
        if is_handoff:
            return create_handoff_command(target, tool_call["id"])
    """
    return Command(
        graph=graph,
        goto=target_agent,
        update={
            "messages": [create_transfer_message(target_agent, tool_call_id)],
            "active_agent": target_agent,
        },
    )


def find_handoff_in_messages(messages: Sequence[AnyMessage]) -> Tuple[List[AnyMessage], Optional[str]]:
    """Resolve handoff signals left in tool messages.

    Every tool message whose content is a handoff signal is replaced by the
    transfer message (same id and tool_call_id, so the message reducer
    overwrites it). When several are present the last one wins.

    Returns:
        ``(messages, target_agent)``; ``target_agent`` is None when no signal was found
    """
    resolved: List[AnyMessage] = []
    target: Optional[str] = None
    for message in messages:
        if isinstance(message, ToolMessage):
            agent_name, is_handoff = decode_handoff_signal(message.content)
            if is_handoff:
                target = agent_name
                message = create_transfer_message(
                    agent_name,
                    message.tool_call_id,
                    name=message.name,
                    id=message.id,
                )
        resolved.append(message)
    return resolved, target


# ============================================================================
# Handoff tools
# ============================================================================

class HandoffToolConfig(BaseModel):
    """Configuration for a handoff tool."""
    agent_name: str = Field(..., description="Name of the agent to hand control to")
    name: Optional[str] = Field(default=None, description="Tool name (default: transfer_to_<agent_name>)")
    description: Optional[str] = Field(default=None, description="Tool description shown to the model")


class HandoffToolInput(BaseModel):
    reason: str = Field(default="", description="Why control is being transferred")


class HandoffTool(BaseTool):
    """Tool whose result is always the handoff signal for ``agent_name``."""

    name: str
    description: str
    agent_name: str
    args_schema: Type[BaseModel] = HandoffToolInput

    def _run(
        self,
        reason: str = "",
        run_manager: Optional[CallbackManagerForToolRun] = None,
    ) -> str:
        logger.debug("Handoff tool '%s' requested transfer to '%s'", self.name, self.agent_name)
        return encode_handoff_signal(self.agent_name)

    async def _arun(
        self,
        reason: str = "",
        run_manager: Optional[AsyncCallbackManagerForToolRun] = None,
    ) -> str:
        return self._run(reason)


def create_handoff_tool(
    config: Optional[HandoffToolConfig] = None,
    *,
    agent_name: Optional[str] = None,
    name: Optional[str] = None,
    description: Optional[str] = None,
) -> HandoffTool:
    """Create a tool that hands control to another agent.

    Args:
        config: Full tool configuration; alternatively pass the fields as keywords
        agent_name: Agent to hand control to
        name: Tool name (default: ``transfer_to_<normalized agent name>``)
        description: Tool description (default: ``Ask agent '<agent name>' for help``)

    Example::

        transfer_to_bob = create_handoff_tool(
            agent_name="Bob",
            description="Transfer to Bob for pirate speak",
        )
    """
    if config is None:
        config = HandoffToolConfig(agent_name=agent_name or "", name=name, description=description)

    if not config.agent_name.strip():
        raise ConfigurationError("Handoff tool needs a target agent name", field="agent_name")

    tool_name = config.name or f"transfer_to_{normalize_agent_name(config.agent_name)}"
    tool_description = config.description or f"Ask agent '{config.agent_name}' for help"

    return HandoffTool(
        name=tool_name,
        description=tool_description,
        agent_name=config.agent_name,
        metadata={METADATA_KEY_HANDOFF_DESTINATION: config.agent_name},
    )


def _collect_tools(agent: Any, tool_node_name: str) -> List[Any]:
    if isinstance(agent, (list, tuple, set)):
        return list(agent)

    tools = getattr(agent, "tools", None)
    if isinstance(tools, (list, tuple)):
        return list(tools)

    get_graph = getattr(agent, "get_graph", None)
    if not callable(get_graph):
        return []

    node = get_graph().nodes.get(tool_node_name)
    tools_by_name = getattr(getattr(node, "data", None), "tools_by_name", None)
    if not tools_by_name:
        return []
    return list(tools_by_name.values())


def get_handoff_destinations(agent: Any, tool_node_name: str = "tools") -> List[str]:
    """List the agents an agent can hand off to, read from its handoff tools.

    Args:
        agent: A list of tools, an object with a ``tools`` list, or a compiled
            LangGraph agent whose tool node holds the tools
        tool_node_name: Name of the tool node in a compiled graph

    Returns:
        Target agent names in tool order; empty when nothing can be inspected
    """
    if agent is None:
        return []

    destinations: List[str] = []
    for tool in _collect_tools(agent, tool_node_name):
        metadata = getattr(tool, "metadata", None) or {}
        destination = metadata.get(METADATA_KEY_HANDOFF_DESTINATION)
        if destination and destination not in destinations:
            destinations.append(destination)
    return destinations
