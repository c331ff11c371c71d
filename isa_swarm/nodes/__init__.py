"""
Nodes - Agent building blocks for swarms
"""
from .agent_nodes import ReactAgent, create_react_agent

__all__ = ["ReactAgent", "create_react_agent"]
