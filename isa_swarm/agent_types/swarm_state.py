"""
Swarm State definition for LangGraph

This module defines the state schema shared by every agent in a swarm and the
reducer used for the active agent pointer.
"""
from typing import Annotated, List, Optional, TypeVar

from langchain_core.messages import AnyMessage
from langgraph.graph.message import add_messages
from typing_extensions import TypedDict

T = TypeVar('T')


def preserve_latest(existing: Optional[T], new: Optional[T]) -> Optional[T]:
    """
    Reducer that preserves the latest non-empty value.

    Args:
        existing: The current value in state
        new: The new value to potentially apply

    Returns:
        The new value if it is not None and not empty string, otherwise existing
    """
    return new if new is not None and new != "" else existing


class SwarmState(TypedDict):
    """
    Conversation state threaded through every agent of a swarm.

    messages: conversation history; new messages are appended, messages that
        reuse an existing id replace it
    active_agent: agent that receives control on the next invocation; empty or
        absent means the swarm's default agent
    """

    messages: Annotated[List[AnyMessage], add_messages]
    active_agent: Annotated[Optional[str], preserve_latest]


def get_active_agent(state) -> str:
    """Return the state's active agent name, or "" when none is set."""
    if isinstance(state, dict):
        return state.get("active_agent") or ""
    return getattr(state, "active_agent", None) or ""


def get_messages(state) -> List[AnyMessage]:
    if isinstance(state, dict):
        return list(state.get("messages") or [])
    return list(getattr(state, "messages", None) or [])
