#!/usr/bin/env python3
"""
ReactAgent - LangGraph-based tool-calling agent for swarms

An implementation of the ReAct pattern that follows the swarm handoff
protocol: when one of its tools returns a handoff signal the agent records the
transfer and stops, leaving the swarm to pass control on.
"""

import logging
from typing import Any, Dict, List, Optional, Sequence

from langchain_core.messages import AIMessage, SystemMessage, ToolMessage
from langchain_core.runnables import RunnableLambda
from langchain_core.runnables.config import RunnableConfig
from langchain_core.tools import BaseTool
from langgraph.graph import END, StateGraph

from isa_swarm.agent_types import SwarmState
from isa_swarm.agents.handoff import (
    create_transfer_message,
    is_transfer_message,
    parse_tool_outcome,
)
from isa_swarm.agents.swarm_types import HandoffRequest

SKIPPED_TOOL_TEMPLATE = "Skipped: control transferred to {agent_name}"


class _ToolBatch:
    """
    Tool messages answering one model turn's tool calls

    Every tool call gets exactly one ToolMessage. After a handoff the remaining
    calls are answered as skipped and the transfer message goes last.
    """

    def __init__(self, tools_by_name: Dict[str, BaseTool], logger: logging.Logger):
        self.tools_by_name = tools_by_name
        self.logger = logger
        self.messages: List[ToolMessage] = []
        self.handoff_target: Optional[str] = None
        self._transfer: Optional[ToolMessage] = None

    def lookup(self, tool_call: Dict[str, Any]) -> Optional[BaseTool]:
        """Return the tool to run, or None when the call was answered without running"""
        tool_name = tool_call["name"]

        if self.handoff_target is not None:
            self.messages.append(ToolMessage(
                content=SKIPPED_TOOL_TEMPLATE.format(agent_name=self.handoff_target),
                tool_call_id=tool_call["id"],
                name=tool_name,
                status="error",
            ))
            return None

        tool = self.tools_by_name.get(tool_name)
        if tool is None:
            self.logger.warning(f"Model requested unknown tool '{tool_name}'")
            self.messages.append(ToolMessage(
                content=f"Tool execution failed: unknown tool '{tool_name}'",
                tool_call_id=tool_call["id"],
                name=tool_name,
                status="error",
            ))
            return None

        self.logger.debug(f"Executing tool: {tool_name}")
        return tool

    def add_error(self, tool_call: Dict[str, Any], error: Exception) -> None:
        self.logger.error(f"Tool {tool_call['name']} failed: {error}")
        self.messages.append(ToolMessage(
            content=f"Tool execution failed: {str(error)}",
            tool_call_id=tool_call["id"],
            name=tool_call["name"],
            status="error",
        ))

    def add_result(self, tool_call: Dict[str, Any], result: Any) -> None:
        outcome = parse_tool_outcome(result)
        if isinstance(outcome, HandoffRequest):
            self.logger.debug(f"Tool {tool_call['name']} requested handoff to '{outcome.target_agent}'")
            self.handoff_target = outcome.target_agent
            self._transfer = create_transfer_message(
                outcome.target_agent, tool_call["id"], name=tool_call["name"]
            )
            return

        self.messages.append(ToolMessage(
            content=outcome.content,
            tool_call_id=tool_call["id"],
            name=tool_call["name"],
        ))

    def update(self) -> Dict[str, Any]:
        if self._transfer is None:
            return {"messages": self.messages}
        return {
            "messages": self.messages + [self._transfer],
            "active_agent": self.handoff_target,
        }


class ReactAgent:
    """
    ReAct Agent implementation using LangGraph

    Alternates between calling the model and running the tools it asks for
    until the model answers without tool calls or a handoff tool fires.

    Args:
        name: Agent name, as registered in the swarm
        model: langchain chat model supporting ``bind_tools``
        tools: Tools the model may call, handoff tools included
        system_prompt: Optional system prompt prepended to every model call

    Both ``invoke`` and ``ainvoke`` are supported; the sync path needs a model
    and tools that implement ``invoke``.
    """

    def __init__(
        self,
        name: str,
        model: Any,
        tools: Sequence[BaseTool],
        system_prompt: Optional[str] = None,
    ):
        self.logger = logging.getLogger(__name__)
        self.name = name
        self.tools: List[BaseTool] = list(tools)
        self.tools_by_name: Dict[str, BaseTool] = {tool.name: tool for tool in self.tools}
        self.system_prompt = system_prompt
        self.model = model.bind_tools(self.tools) if self.tools else model

        self.logger.debug(f"ReactAgent '{name}' initialized with {len(self.tools)} tools")

        try:
            self.graph = self._create_graph()
        except Exception as e:
            self.logger.error(f"Failed to create ReactAgent graph: {e}")
            raise

    def _create_graph(self):
        """
        Create the ReAct agent execution graph

        Returns:
            Compiled LangGraph workflow
        """
        workflow = StateGraph(SwarmState)

        workflow.add_node("agent", RunnableLambda(self._call_model, afunc=self._acall_model, name="agent"))
        workflow.add_node("tools", RunnableLambda(self._call_tools, afunc=self._acall_tools, name="tools"))

        workflow.set_entry_point("agent")
        workflow.add_conditional_edges("agent", self._should_continue, {"tools": "tools", END: END})
        workflow.add_conditional_edges("tools", self._after_tools, {"agent": "agent", END: END})

        return workflow.compile(name=self.name)

    def _model_input(self, state: SwarmState) -> List[Any]:
        messages = list(state["messages"])
        if self.system_prompt:
            messages = [SystemMessage(content=self.system_prompt)] + messages
        return messages

    def _model_output(self, response: AIMessage) -> Dict[str, List[AIMessage]]:
        if getattr(response, "tool_calls", None):
            self.logger.debug(f"Model generated {len(response.tool_calls)} tool calls")
        return {"messages": [response]}

    def _call_model(self, state: SwarmState, config: RunnableConfig) -> Dict[str, List[AIMessage]]:
        """Call the LLM with conversation history; model errors propagate"""
        response = self.model.invoke(self._model_input(state), config=config)
        return self._model_output(response)

    async def _acall_model(self, state: SwarmState, config: RunnableConfig) -> Dict[str, List[AIMessage]]:
        response = await self.model.ainvoke(self._model_input(state), config=config)
        return self._model_output(response)

    def _should_continue(self, state: SwarmState) -> str:
        """Run tools if the last model response asked for any"""
        last_message = state["messages"][-1]

        if getattr(last_message, "tool_calls", None):
            return "tools"

        self.logger.debug("No tools required - ending turn")
        return END

    def _after_tools(self, state: SwarmState) -> str:
        """Stop once a handoff has been recorded by the tools node"""
        active_agent = state.get("active_agent")
        if (
            active_agent
            and active_agent != self.name
            and is_transfer_message(state["messages"][-1], active_agent)
        ):
            return END
        return "agent"

    def _call_tools(self, state: SwarmState, config: RunnableConfig) -> Dict[str, Any]:
        """
        Execute tools requested by the model

        A handoff ends the tool batch: later tool calls are answered as skipped
        and the transfer message is recorded last.
        """
        batch = _ToolBatch(self.tools_by_name, self.logger)

        for tool_call in state["messages"][-1].tool_calls:
            tool = batch.lookup(tool_call)
            if tool is None:
                continue
            try:
                result = tool.invoke(tool_call["args"], config=config)
            except Exception as e:
                batch.add_error(tool_call, e)
                continue
            batch.add_result(tool_call, result)

        return batch.update()

    async def _acall_tools(self, state: SwarmState, config: RunnableConfig) -> Dict[str, Any]:
        batch = _ToolBatch(self.tools_by_name, self.logger)

        for tool_call in state["messages"][-1].tool_calls:
            tool = batch.lookup(tool_call)
            if tool is None:
                continue
            try:
                result = await tool.ainvoke(tool_call["args"], config=config)
            except Exception as e:
                batch.add_error(tool_call, e)
                continue
            batch.add_result(tool_call, result)

        return batch.update()

    def get_graph(self, *args: Any, **kwargs: Any):
        return self.graph.get_graph(*args, **kwargs)

    def invoke(self, state: Dict[str, Any], config: Optional[RunnableConfig] = None) -> Dict[str, Any]:
        return self.graph.invoke(state, config=config)

    async def ainvoke(self, state: Dict[str, Any], config: Optional[RunnableConfig] = None) -> Dict[str, Any]:
        return await self.graph.ainvoke(state, config=config)


def create_react_agent(
    name: str,
    model: Any,
    tools: Sequence[BaseTool],
    system_prompt: Optional[str] = None,
) -> ReactAgent:
    """
    Factory function to create a ReactAgent instance

    Args:
        name: Agent name, as registered in the swarm
        model: langchain chat model supporting ``bind_tools``
        tools: Tools the model may call, handoff tools included
        system_prompt: Optional system prompt

    Returns:
        Configured ReactAgent instance
    """
    return ReactAgent(name, model, tools, system_prompt=system_prompt)
