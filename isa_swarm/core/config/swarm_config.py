#!/usr/bin/env python3
"""Swarm runtime settings"""
import os
from dataclasses import dataclass, field

from isa_swarm.errors import ConfigurationError
from .logging_config import LoggingConfig

UNKNOWN_AGENT_POLICIES = ("error", "default")


def _bool(val: str) -> bool:
    return val.strip().lower() in ("true", "1", "yes")


def check_unknown_agent_policy(policy: str) -> str:
    """Return the normalized policy or raise ConfigurationError"""
    normalized = (policy or "").strip().lower()
    if normalized not in UNKNOWN_AGENT_POLICIES:
        raise ConfigurationError(
            f"Unknown agent policy must be one of {list(UNKNOWN_AGENT_POLICIES)}, got '{policy}'",
            field="unknown_agent_policy",
            value=policy,
        )
    return normalized


@dataclass
class SwarmSettings:
    """
    Settings shared by every swarm built in this process.

    enforce_destinations: reject handoffs to agents outside the source
        agent's destinations in direct mode
    unknown_agent_policy: what the entry router does when the state names an
        unregistered agent ("error" raises, "default" falls back)
    """
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    enforce_destinations: bool = True
    unknown_agent_policy: str = "error"

    def __post_init__(self):
        self.unknown_agent_policy = check_unknown_agent_policy(self.unknown_agent_policy)

    @property
    def log_level(self) -> str:
        return self.logging.log_level

    @property
    def log_format(self) -> str:
        return self.logging.log_format

    @classmethod
    def from_env(cls) -> 'SwarmSettings':
        """Load swarm settings from environment"""
        return cls(
            logging=LoggingConfig.from_env(),
            enforce_destinations=_bool(os.getenv("ISA_SWARM_ENFORCE_DESTINATIONS", "true")),
            unknown_agent_policy=os.getenv("ISA_SWARM_UNKNOWN_AGENT_POLICY", "error"),
        )
