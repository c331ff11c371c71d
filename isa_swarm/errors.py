#!/usr/bin/env python3
"""
isA Swarm - Error Classes
=========================

Unified error hierarchy for isA Swarm.
Build-time failures surface as ConfigurationError; run-time routing failures
surface as RoutingError subclasses. Errors raised by agent runnables, models or
the graph engine are never wrapped.

Example:
    from isa_swarm import create_swarm, ConfigurationError, UnknownAgentError

    try:
        builder = create_swarm(config)
    except ConfigurationError as e:
        print(f"Bad swarm config: {e.field} - {e}")

    try:
        app.invoke(state)
    except UnknownAgentError as e:
        print(f"State points at {e.agent_name}, known: {e.available}")
"""

from typing import Optional, Dict, Any, List


# ============================================================================
# Base Error
# ============================================================================

class SwarmError(Exception):
    """
    Base exception for all isA Swarm errors.

    All swarm-specific exceptions inherit from this class,
    allowing users to catch all swarm errors with a single except clause.
    """

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} | details={self.details}"
        return self.message


# ============================================================================
# Validation Errors
# ============================================================================

class ValidationError(SwarmError):
    """
    Input validation failed.

    Base class for validation-related errors.
    """

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        value: Optional[Any] = None,
        **kwargs
    ):
        super().__init__(message, kwargs)
        self.field = field
        self.value = value
        self.details["field"] = field


class ConfigurationError(ValidationError):
    """
    Swarm configuration is invalid.

    Raised when:
    - The agent list is empty
    - The default active agent is not one of the agents
    - Agent names are duplicated, empty or reserved
    - A destination names no registered agent
    - A settings value is out of range
    """
    pass


# ============================================================================
# Routing Errors
# ============================================================================

class RoutingError(SwarmError):
    """
    Control could not be transferred.

    Base class for errors raised while routing between agents.
    """
    pass


class UnknownAgentError(RoutingError):
    """
    An agent name does not match any registered agent.

    Raised when the state's active agent, or a handoff target,
    names an agent that is not part of the swarm.
    """

    def __init__(
        self,
        message: str,
        agent_name: Optional[str] = None,
        available: Optional[List[str]] = None,
        **kwargs
    ):
        super().__init__(message, kwargs)
        self.agent_name = agent_name
        self.available = list(available or [])
        self.details["agent_name"] = agent_name
        self.details["available"] = self.available


class HandoffNotAllowedError(RoutingError):
    """
    Handoff target is not one of the source agent's destinations.
    """

    def __init__(
        self,
        message: str,
        source_agent: Optional[str] = None,
        target_agent: Optional[str] = None,
        allowed: Optional[List[str]] = None,
        **kwargs
    ):
        super().__init__(message, kwargs)
        self.source_agent = source_agent
        self.target_agent = target_agent
        self.allowed = list(allowed or [])
        self.details["source_agent"] = source_agent
        self.details["target_agent"] = target_agent
        self.details["allowed"] = self.allowed


# ============================================================================
# Exports
# ============================================================================

__all__ = [
    # Base
    "SwarmError",

    # Validation
    "ValidationError",
    "ConfigurationError",

    # Routing
    "RoutingError",
    "UnknownAgentError",
    "HandoffNotAllowedError",
]
