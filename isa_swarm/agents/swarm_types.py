"""
Swarm multi-agent data models.

Provides data structures for building a swarm of agents that hand off control
of a shared conversation to one another.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import (
    Any,
    Iterable,
    List,
    Optional,
    Protocol,
    Tuple,
    Type,
    Union,
    runtime_checkable,
)

from langchain_core.runnables.config import RunnableConfig

from isa_swarm.agent_types import SwarmState


@runtime_checkable
class AgentRunnable(Protocol):
    """
    Anything a swarm can run as an agent.

    Compiled LangGraph graphs and langchain runnables satisfy this protocol.
    Plain callables ``(state, config) -> state`` are accepted as well.
    """

    def invoke(self, state: Any, config: Optional[RunnableConfig] = None) -> Any:
        ...


@dataclass(frozen=True)
class OrdinaryResult:
    """A tool result that carries no handoff."""
    content: str

    @property
    def is_handoff(self) -> bool:
        return False


@dataclass(frozen=True)
class HandoffRequest:
    """A tool result asking to transfer control to ``target_agent``."""
    target_agent: str

    @property
    def is_handoff(self) -> bool:
        return True


ToolOutcome = Union[OrdinaryResult, HandoffRequest]


@dataclass
class SwarmAgent:
    """
    An agent taking part in a swarm.

    Args:
        name: Unique agent name, used as graph node name and handoff target
        runnable: The agent's pre-built logic (compiled graph, runnable or callable)
        destinations: Agent names this agent may hand off to
        description: Human-readable description of this agent's capabilities
    """
    name: str
    runnable: Any
    destinations: Tuple[str, ...] = ()
    description: str = ""

    def __post_init__(self):
        self.destinations = tuple(self.destinations or ())

    @classmethod
    def from_runnable(
        cls,
        name: str,
        runnable: Any,
        destinations: Optional[Iterable[str]] = None,
        description: str = "",
        tool_node_name: str = "tools",
    ) -> "SwarmAgent":
        """Build a SwarmAgent, reading destinations from its handoff tools when not given."""
        if destinations is None:
            from .handoff import get_handoff_destinations
            destinations = get_handoff_destinations(runnable, tool_node_name=tool_node_name)
        return cls(
            name=name,
            runnable=runnable,
            destinations=tuple(destinations),
            description=description,
        )


@dataclass
class SwarmConfig:
    """
    Build-time configuration of a swarm.

    Args:
        agents: Agents in the swarm (at least one)
        default_active_agent: Agent that receives control when the state names none
        context_schema: Optional run-time context schema passed to the graph
        state_schema: State schema; subclasses of SwarmState add caller fields
    """
    agents: List[SwarmAgent] = field(default_factory=list)
    default_active_agent: str = ""
    context_schema: Optional[Type[Any]] = None
    state_schema: Type[Any] = SwarmState

    @property
    def agent_names(self) -> List[str]:
        return [agent.name for agent in self.agents]

    def get_agent(self, name: str) -> Optional[SwarmAgent]:
        for agent in self.agents:
            if agent.name == name:
                return agent
        return None
