"""
Agent Nodes - Ready-made agent implementations
"""
from .react_agent import ReactAgent, create_react_agent

__all__ = ["ReactAgent", "create_react_agent"]
