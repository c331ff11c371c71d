"""Swarm abstractions (state types, handoff protocol, routing, graph builders)."""

from .swarm_types import (
    AgentRunnable,
    HandoffRequest,
    OrdinaryResult,
    SwarmAgent,
    SwarmConfig,
    ToolOutcome,
)
from .handoff import (
    HANDOFF_PREFIX,
    METADATA_KEY_HANDOFF_DESTINATION,
    HandoffTool,
    HandoffToolConfig,
    apply_handoff,
    create_handoff_command,
    create_handoff_tool,
    create_transfer_message,
    decode_handoff_signal,
    encode_handoff_signal,
    find_handoff_in_messages,
    get_handoff_destinations,
    is_transfer_message,
    normalize_agent_name,
    parse_tool_outcome,
    process_tool_result,
)
from .validation import validate_default_agent, validate_swarm_config
from .router import ActiveAgentRouter, add_active_agent_router
from .agent_node import SwarmAgentNode
from .swarm import compile_swarm, create_swarm
from .streaming import create_streaming_swarm, make_destination_router

__all__ = [
    "AgentRunnable",
    "HandoffRequest",
    "OrdinaryResult",
    "SwarmAgent",
    "SwarmConfig",
    "ToolOutcome",
    "HANDOFF_PREFIX",
    "METADATA_KEY_HANDOFF_DESTINATION",
    "HandoffTool",
    "HandoffToolConfig",
    "apply_handoff",
    "create_handoff_command",
    "create_handoff_tool",
    "create_transfer_message",
    "decode_handoff_signal",
    "encode_handoff_signal",
    "find_handoff_in_messages",
    "get_handoff_destinations",
    "is_transfer_message",
    "normalize_agent_name",
    "parse_tool_outcome",
    "process_tool_result",
    "validate_default_agent",
    "validate_swarm_config",
    "ActiveAgentRouter",
    "add_active_agent_router",
    "SwarmAgentNode",
    "compile_swarm",
    "create_swarm",
    "create_streaming_swarm",
    "make_destination_router",
]
