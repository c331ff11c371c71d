"""
Tests for the direct-mode swarm graph (create_swarm).
"""

import pytest
from langchain_core.messages import AIMessage, HumanMessage, ToolMessage
from langgraph.checkpoint.memory import InMemorySaver
from langgraph.graph import END, StateGraph
from langgraph.types import Command

from isa_swarm.agent_types import SwarmState
from isa_swarm.agents import (
    SwarmAgent,
    SwarmConfig,
    compile_swarm,
    create_swarm,
    encode_handoff_signal,
)
from isa_swarm.errors import (
    ConfigurationError,
    HandoffNotAllowedError,
    UnknownAgentError,
)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _make_agent(response_text: str, calls: list = None):
    """Create a compiled single-node agent that appends a fixed reply."""
    def respond(state):
        if calls is not None:
            calls.append(len(state["messages"]))
        return {"messages": [AIMessage(content=response_text)]}

    builder = StateGraph(SwarmState)
    builder.add_node("respond", respond)
    builder.set_entry_point("respond")
    builder.add_edge("respond", END)
    return builder.compile()


def _handoff_messages(target: str, tool_call_id: str = "call_1"):
    return [
        AIMessage(
            content="",
            tool_calls=[{"name": f"transfer_to_{target.lower()}", "args": {}, "id": tool_call_id}],
        ),
        ToolMessage(content=encode_handoff_signal(target), tool_call_id=tool_call_id),
    ]


def _make_handoff_agent(target: str, tool_call_id: str = "call_1"):
    """Create a compiled agent whose tool call hands off to ``target``."""
    def hand_off(state):
        return {"messages": _handoff_messages(target, tool_call_id)}

    builder = StateGraph(SwarmState)
    builder.add_node("hand_off", hand_off)
    builder.set_entry_point("hand_off")
    builder.add_edge("hand_off", END)
    return builder.compile()


def _alice_bob_config(alice=None, bob=None, alice_destinations=("Bob",)):
    return SwarmConfig(
        agents=[
            SwarmAgent(
                name="Alice",
                runnable=alice or _make_agent("Hello from Alice"),
                destinations=list(alice_destinations),
            ),
            SwarmAgent(
                name="Bob",
                runnable=bob or _make_agent("Hello from Bob"),
                destinations=["Alice"],
            ),
        ],
        default_active_agent="Alice",
    )


def _user(text: str = "hi"):
    return {"messages": [HumanMessage(content=text)]}


# ---------------------------------------------------------------------------
# Construction
# ---------------------------------------------------------------------------

class TestCreateSwarm:
    def test_builds_one_node_per_agent(self):
        app = compile_swarm(create_swarm(_alice_bob_config()))
        nodes = set(app.get_graph().nodes)
        assert {"Alice", "Bob"} <= nodes

    def test_invalid_default_agent(self):
        config = SwarmConfig(
            agents=[SwarmAgent(name="Alice", runnable=_make_agent("hi"))],
            default_active_agent="Bob",
        )
        with pytest.raises(ConfigurationError):
            create_swarm(config)

    def test_empty_agent_list(self):
        with pytest.raises(ConfigurationError):
            create_swarm(SwarmConfig(agents=[], default_active_agent="Alice"))

    def test_unknown_destination(self):
        config = SwarmConfig(
            agents=[SwarmAgent(name="Alice", runnable=_make_agent("hi"), destinations=["Zed"])],
            default_active_agent="Alice",
        )
        with pytest.raises(ConfigurationError, match="Zed"):
            create_swarm(config)


# ---------------------------------------------------------------------------
# Routing
# ---------------------------------------------------------------------------

class TestSwarmRouting:
    def test_fresh_state_routes_to_default(self):
        app = compile_swarm(create_swarm(_alice_bob_config()))

        result = app.invoke(_user())

        assert len(result["messages"]) == 2
        assert result["messages"][-1].content == "Hello from Alice"
        assert not result.get("active_agent")

    def test_resumes_active_agent(self):
        app = compile_swarm(create_swarm(_alice_bob_config()))

        result = app.invoke({**_user(), "active_agent": "Bob"})

        assert result["messages"][-1].content == "Hello from Bob"
        assert result["active_agent"] == "Bob"

    def test_unknown_active_agent_raises(self):
        app = compile_swarm(create_swarm(_alice_bob_config(), unknown_agent_policy="error"))

        with pytest.raises(UnknownAgentError) as exc_info:
            app.invoke({**_user(), "active_agent": "Mallory"})
        assert exc_info.value.agent_name == "Mallory"

    def test_unknown_active_agent_falls_back_to_default(self):
        app = compile_swarm(create_swarm(_alice_bob_config(), unknown_agent_policy="default"))

        result = app.invoke({**_user(), "active_agent": "Mallory"})

        assert result["messages"][-1].content == "Hello from Alice"


# ---------------------------------------------------------------------------
# Handoff
# ---------------------------------------------------------------------------

class TestSwarmHandoff:
    def test_handoff_jumps_within_same_invoke(self):
        bob_calls = []
        config = _alice_bob_config(
            alice=_make_handoff_agent("Bob"),
            bob=_make_agent("Hello from Bob", bob_calls),
        )
        app = compile_swarm(create_swarm(config, enforce_destinations=True))

        result = app.invoke(_user())

        assert result["active_agent"] == "Bob"
        assert len(bob_calls) == 1
        contents = [m.content for m in result["messages"]]
        assert contents[-2:] == ["Successfully transferred to Bob", "Hello from Bob"]

    def test_signal_message_replaced_not_duplicated(self):
        config = _alice_bob_config(alice=_make_handoff_agent("Bob", "call_42"))
        app = compile_swarm(create_swarm(config, enforce_destinations=True))

        result = app.invoke(_user())

        tool_messages = [m for m in result["messages"] if isinstance(m, ToolMessage)]
        assert len(tool_messages) == 1
        assert tool_messages[0].tool_call_id == "call_42"
        assert not any(m.content.startswith("__HANDOFF__") for m in result["messages"])

    def test_next_invoke_resumes_with_handoff_target(self):
        alice_calls, bob_calls = [], []

        def alice(state):
            alice_calls.append(1)
            return {"messages": _handoff_messages("Bob")}

        config = _alice_bob_config(alice=alice, bob=_make_agent("Hello from Bob", bob_calls))
        app = compile_swarm(create_swarm(config, enforce_destinations=True))

        first = app.invoke(_user())
        second = app.invoke({
            "messages": first["messages"] + [HumanMessage(content="again")],
            "active_agent": first["active_agent"],
        })

        assert len(alice_calls) == 1
        assert len(bob_calls) == 2
        assert second["messages"][-1].content == "Hello from Bob"
        assert second["active_agent"] == "Bob"

    def test_handoff_chain(self):
        config = SwarmConfig(
            agents=[
                SwarmAgent(name="Alice", runnable=_make_handoff_agent("Bob", "call_a"), destinations=["Bob"]),
                SwarmAgent(name="Bob", runnable=_make_handoff_agent("Carol", "call_b"), destinations=["Carol"]),
                SwarmAgent(name="Carol", runnable=_make_agent("Hello from Carol")),
            ],
            default_active_agent="Alice",
        )
        app = compile_swarm(create_swarm(config, enforce_destinations=True))

        result = app.invoke(_user())

        assert result["active_agent"] == "Carol"
        assert result["messages"][-1].content == "Hello from Carol"

    def test_handoff_outside_destinations_rejected(self):
        config = _alice_bob_config(alice=_make_handoff_agent("Bob"), alice_destinations=())
        app = compile_swarm(create_swarm(config, enforce_destinations=True))

        with pytest.raises(HandoffNotAllowedError) as exc_info:
            app.invoke(_user())
        assert exc_info.value.source_agent == "Alice"
        assert exc_info.value.target_agent == "Bob"

    def test_handoff_outside_destinations_allowed_when_not_enforced(self):
        config = _alice_bob_config(alice=_make_handoff_agent("Bob"), alice_destinations=())
        app = compile_swarm(create_swarm(config, enforce_destinations=False))

        result = app.invoke(_user())

        assert result["active_agent"] == "Bob"
        assert result["messages"][-1].content == "Hello from Bob"

    def test_agent_issued_jump(self):
        def alice(state):
            return Command(goto="Bob", update={"active_agent": "Bob"})

        app = compile_swarm(create_swarm(_alice_bob_config(alice=alice), enforce_destinations=True))

        result = app.invoke(_user())

        assert result["active_agent"] == "Bob"
        assert result["messages"][-1].content == "Hello from Bob"

    def test_agent_issued_jump_outside_destinations_rejected(self):
        def alice(state):
            return Command(goto="Bob", update={"active_agent": "Bob"})

        config = _alice_bob_config(alice=alice, alice_destinations=())
        app = compile_swarm(create_swarm(config, enforce_destinations=True))

        with pytest.raises(HandoffNotAllowedError):
            app.invoke(_user())

    def test_agent_issued_jump_to_unregistered_agent(self):
        app = compile_swarm(create_swarm(
            _alice_bob_config(alice=lambda state: Command(goto="Charlie")),
            enforce_destinations=False,
        ))

        with pytest.raises(UnknownAgentError) as exc_info:
            app.invoke(_user())
        assert exc_info.value.agent_name == "Charlie"

    def test_handoff_to_unregistered_agent(self):
        config = _alice_bob_config(alice=_make_handoff_agent("Charlie"))
        app = compile_swarm(create_swarm(config, enforce_destinations=False))

        with pytest.raises(UnknownAgentError) as exc_info:
            app.invoke(_user())
        assert exc_info.value.agent_name == "Charlie"


# ---------------------------------------------------------------------------
# Agent runnables
# ---------------------------------------------------------------------------

class TestAgentRunnables:
    def test_plain_function_agent(self):
        config = _alice_bob_config(alice=lambda state: {"messages": [AIMessage(content="from a function")]})
        app = compile_swarm(create_swarm(config))

        result = app.invoke(_user())

        assert result["messages"][-1].content == "from a function"

    def test_function_agent_receives_config(self):
        seen = {}

        def alice(state, config):
            seen["config"] = config
            return {"messages": [AIMessage(content="ok")]}

        app = compile_swarm(create_swarm(_alice_bob_config(alice=alice)))
        app.invoke(_user())

        assert isinstance(seen["config"], dict)

    def test_non_dict_result_leaves_state_unchanged(self):
        app = compile_swarm(create_swarm(_alice_bob_config(alice=lambda state: None)))

        result = app.invoke(_user())

        assert len(result["messages"]) == 1

    def test_agent_error_propagates(self):
        def failing(state):
            raise RuntimeError("model unavailable")

        app = compile_swarm(create_swarm(_alice_bob_config(alice=failing)))
        state = _user()

        with pytest.raises(RuntimeError, match="model unavailable"):
            app.invoke(state)
        assert len(state["messages"]) == 1
        assert "active_agent" not in state

    def test_async_agent_needs_ainvoke(self):
        async def alice(state):
            return {"messages": [AIMessage(content="async hello")]}

        app = compile_swarm(create_swarm(_alice_bob_config(alice=alice)))

        with pytest.raises(TypeError, match="ainvoke"):
            app.invoke(_user())

    @pytest.mark.asyncio
    async def test_async_agent(self):
        async def alice(state):
            return {"messages": _handoff_messages("Bob")}

        app = compile_swarm(create_swarm(_alice_bob_config(alice=alice)))

        result = await app.ainvoke(_user())

        assert result["active_agent"] == "Bob"
        assert result["messages"][-1].content == "Hello from Bob"


# ---------------------------------------------------------------------------
# Multi-turn memory
# ---------------------------------------------------------------------------

class TestSwarmMemory:
    def test_checkpointer_resumes_active_agent_per_thread(self):
        alice_calls = []

        def alice(state):
            alice_calls.append(1)
            return {"messages": _handoff_messages("Bob", f"call_{len(alice_calls)}")}

        app = compile_swarm(
            create_swarm(_alice_bob_config(alice=alice), enforce_destinations=True),
            checkpointer=InMemorySaver(),
        )
        thread = {"configurable": {"thread_id": "1"}}

        app.invoke(_user("i'd like to speak to Bob"), thread)
        result = app.invoke(_user("what's 5 + 7?"), thread)

        assert len(alice_calls) == 1
        assert result["active_agent"] == "Bob"
        assert result["messages"][-1].content == "Hello from Bob"

        other = app.invoke(_user("hello"), {"configurable": {"thread_id": "2"}})
        assert len(alice_calls) == 2
        assert other["active_agent"] == "Bob"
