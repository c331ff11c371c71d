#!/usr/bin/env python3
"""
isA Swarm
=========

Multi-agent swarms on LangGraph: agents hand off control of a shared
conversation to one another, and every turn resumes with the agent that held
control last.

Quick Start:
    from langchain_core.messages import HumanMessage
    from langgraph.checkpoint.memory import InMemorySaver
    from isa_swarm import (
        SwarmAgent, SwarmConfig, create_swarm, create_handoff_tool, create_react_agent,
    )

    alice = create_react_agent("Alice", model, [add, create_handoff_tool(agent_name="Bob")])
    bob = create_react_agent("Bob", model, [create_handoff_tool(agent_name="Alice")])

    builder = create_swarm(SwarmConfig(
        agents=[
            SwarmAgent(name="Alice", runnable=alice, destinations=["Bob"]),
            SwarmAgent(name="Bob", runnable=bob, destinations=["Alice"]),
        ],
        default_active_agent="Alice",
    ))
    app = builder.compile(checkpointer=InMemorySaver())

    config = {"configurable": {"thread_id": "1"}}
    await app.ainvoke({"messages": [HumanMessage("i'd like to speak to Bob")]}, config)

Handoff protocol:
    Any tool can hand off by returning ``encode_handoff_signal("Bob")``
    (``__HANDOFF__Bob``). The swarm records "Successfully transferred to Bob",
    sets ``active_agent`` and moves control to Bob.
"""

# Version
__version__ = "0.1.0"

# Error classes (import early, no dependencies)
from .errors import (
    SwarmError,
    ValidationError,
    ConfigurationError,
    RoutingError,
    UnknownAgentError,
    HandoffNotAllowedError,
)

from .core.config import SwarmSettings, get_settings, reload_settings
from .utils.logger import setup_logger

from .agent_types import SwarmState
from .agents import (
    AgentRunnable,
    HandoffRequest,
    OrdinaryResult,
    SwarmAgent,
    SwarmConfig,
    ToolOutcome,
    HANDOFF_PREFIX,
    METADATA_KEY_HANDOFF_DESTINATION,
    HandoffTool,
    HandoffToolConfig,
    apply_handoff,
    create_handoff_command,
    create_handoff_tool,
    decode_handoff_signal,
    encode_handoff_signal,
    get_handoff_destinations,
    normalize_agent_name,
    parse_tool_outcome,
    process_tool_result,
    ActiveAgentRouter,
    add_active_agent_router,
    compile_swarm,
    create_swarm,
    create_streaming_swarm,
)
from .nodes import ReactAgent, create_react_agent

__all__ = [
    "__version__",
    # Errors
    "SwarmError",
    "ValidationError",
    "ConfigurationError",
    "RoutingError",
    "UnknownAgentError",
    "HandoffNotAllowedError",
    # Configuration & logging
    "SwarmSettings",
    "get_settings",
    "reload_settings",
    "setup_logger",
    # State & types
    "SwarmState",
    "AgentRunnable",
    "HandoffRequest",
    "OrdinaryResult",
    "SwarmAgent",
    "SwarmConfig",
    "ToolOutcome",
    # Handoff protocol
    "HANDOFF_PREFIX",
    "METADATA_KEY_HANDOFF_DESTINATION",
    "HandoffTool",
    "HandoffToolConfig",
    "apply_handoff",
    "create_handoff_command",
    "create_handoff_tool",
    "decode_handoff_signal",
    "encode_handoff_signal",
    "get_handoff_destinations",
    "normalize_agent_name",
    "parse_tool_outcome",
    "process_tool_result",
    # Routing & graph builders
    "ActiveAgentRouter",
    "add_active_agent_router",
    "compile_swarm",
    "create_swarm",
    "create_streaming_swarm",
    # Agents
    "ReactAgent",
    "create_react_agent",
]
