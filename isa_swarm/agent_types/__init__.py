"""State schemas for isA Swarm graphs"""

from .swarm_state import SwarmState, preserve_latest, get_active_agent, get_messages

__all__ = [
    "SwarmState",
    "preserve_latest",
    "get_active_agent",
    "get_messages",
]
