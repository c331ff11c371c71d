#!/usr/bin/env python3
"""Configuration for isA Swarm

Configuration hierarchy:
- logging_config: Log level and format
- swarm_config: Routing behavior (destination whitelist, unknown agents)

Values are read in this order:
  1. Environment variables (highest priority)
  2. The env file named by ISA_SWARM_ENV_FILE (default: .env)
  3. Defaults
"""
import os
import logging

from dotenv import load_dotenv

from .logging_config import LoggingConfig
from .swarm_config import SwarmSettings, UNKNOWN_AGENT_POLICIES, check_unknown_agent_policy

logger = logging.getLogger(__name__)

_env_file = os.getenv("ISA_SWARM_ENV_FILE", ".env")
if load_dotenv(_env_file, override=False):
    logger.debug("Loaded swarm environment from %s", _env_file)

# Create global settings instance
settings = SwarmSettings.from_env()


def get_settings() -> SwarmSettings:
    """Get global settings instance"""
    return settings


def reload_settings() -> SwarmSettings:
    """Reload settings from environment"""
    global settings
    settings = SwarmSettings.from_env()
    return settings


__all__ = [
    'SwarmSettings',
    'LoggingConfig',
    'UNKNOWN_AGENT_POLICIES',
    'check_unknown_agent_policy',
    'get_settings',
    'reload_settings',
    'settings',
]
