"""Tests for the AI node checks."""

from conftest import (
    AGENT,
    CALCULATOR_TOOL,
    CHAIN_LLM,
    CODE_TOOL,
    HTTP_TOOL,
    OPENAI_MODEL,
    SET,
    SLACK,
    STRIPE_LIVE_KEY,
    WEBHOOK,
)

from flowaudit.scanning.checks.ai import (
    check_ai_chaining,
    check_ai_output_to_external,
    check_over_privileged_tools,
    check_prompt_injection,
    check_secrets_in_prompts,
    check_trigger_to_ai,
    is_prompt_parameter,
)
from flowaudit.scanning.types import FindingCategory, FindingSeverity
from flowaudit.scanning.walker import ParameterString


def test_prompt_parameters():
    assert is_prompt_parameter(ParameterString("x", "systemMessage", False))
    assert is_prompt_parameter(ParameterString("x", "messages.values[0].message", False))
    assert is_prompt_parameter(ParameterString("x", "options.systemMessage", False))
    assert not is_prompt_parameter(ParameterString("x", "options.temperature", False))
    assert not is_prompt_parameter(ParameterString("x", "promptType", False))


class TestPromptInjection:

    def test_user_input_in_system_message(self, builder, run_check):
        graph = builder.node("Agent", AGENT, {"systemMessage": "={{ $json.userText }}"}).build()
        (finding,) = run_check(check_prompt_injection, graph)
        assert finding.severity == FindingSeverity.WARNING
        assert finding.category == FindingCategory.EXPRESSION_RISK
        assert finding.parameter_path == "systemMessage"

    def test_options_system_message(self, builder, run_check):
        params = {"options": {"systemMessage": "=Answer about {{ $('Chat').item.json.topic }}"}}
        graph = builder.node("Agent", AGENT, params).build()
        (finding,) = run_check(check_prompt_injection, graph)
        assert finding.parameter_path == "options.systemMessage"

    def test_literal_prompt(self, builder, run_check):
        graph = builder.node("Agent", AGENT, {"systemMessage": "You are a helpful assistant."}).build()
        assert run_check(check_prompt_injection, graph) == []

    def test_expression_without_input_reference(self, builder, run_check):
        graph = builder.node("Agent", AGENT, {"systemMessage": "={{ new Date().toISOString() }}"}).build()
        assert run_check(check_prompt_injection, graph) == []

    def test_non_prompt_parameter(self, builder, run_check):
        graph = builder.node("Agent", AGENT, {"options": {"maxIterations": "={{ $json.n }}"}}).build()
        assert run_check(check_prompt_injection, graph) == []

    def test_non_ai_node(self, builder, run_check):
        graph = builder.node("Set", SET, {"systemMessage": "={{ $json.userText }}"}).build()
        assert run_check(check_prompt_injection, graph) == []


class TestSecretsInPrompts:

    def test_secret_in_prompt(self, builder, run_check):
        params = {"text": f"Use key {STRIPE_LIVE_KEY} when calling the API"}
        graph = builder.node("Chain", CHAIN_LLM, params).build()
        (finding,) = run_check(check_secrets_in_prompts, graph)
        assert finding.severity == FindingSeverity.CRITICAL
        assert finding.category == FindingCategory.HARDCODED_SECRET
        assert finding.title == 'Stripe key in AI prompt of "Chain"'
        assert STRIPE_LIVE_KEY not in finding.matched_value

    def test_secret_outside_prompt(self, builder, run_check):
        graph = builder.node("Chain", CHAIN_LLM, {"options": {"note": STRIPE_LIVE_KEY}}).build()
        assert run_check(check_secrets_in_prompts, graph) == []


class TestTriggerToAi:

    def test_direct_connection(self, builder, run_check):
        graph = builder.node("Hook", WEBHOOK).node("Agent", AGENT).connect("Hook", "Agent").build()
        (finding,) = run_check(check_trigger_to_ai, graph)
        assert finding.severity == FindingSeverity.WARNING
        assert finding.category == FindingCategory.DATA_EXPOSURE
        assert finding.node_name == "Agent"

    def test_filtered_connection(self, builder, run_check):
        graph = (
            builder.node("Hook", WEBHOOK).node("Filter", SET).node("Agent", AGENT)
            .connect("Hook", "Filter").connect("Filter", "Agent")
            .build()
        )
        assert run_check(check_trigger_to_ai, graph) == []


class TestOverPrivilegedTools:

    def test_dangerous_tools(self, builder, run_check):
        graph = (
            builder.node("Agent", AGENT)
            .node("Fetch", HTTP_TOOL)
            .node("Script", CODE_TOOL)
            .node("Math", CALCULATOR_TOOL)
            .connect("Fetch", "Agent", connection_type="ai_tool")
            .connect("Script", "Agent", connection_type="ai_tool")
            .connect("Math", "Agent", connection_type="ai_tool")
            .build()
        )
        findings = run_check(check_over_privileged_tools, graph)
        assert [f.title for f in findings] == [
            'AI Agent "Agent" has HTTP Request tool',
            'AI Agent "Agent" has Code tool',
        ]
        assert all(f.severity == FindingSeverity.INFO for f in findings)
        assert all(f.category == FindingCategory.CODE_INJECTION for f in findings)

    def test_tool_on_main_connection_ignored(self, builder, run_check):
        graph = builder.node("Agent", AGENT).node("Fetch", HTTP_TOOL).connect("Fetch", "Agent").build()
        assert run_check(check_over_privileged_tools, graph) == []


class TestAiOutput:

    def test_output_to_external_service(self, builder, run_check):
        graph = builder.node("Chain", CHAIN_LLM).node("Post", SLACK).connect("Chain", "Post").build()
        (finding,) = run_check(check_ai_output_to_external, graph)
        assert finding.severity == FindingSeverity.INFO
        assert finding.node_name == "Post"

    def test_chaining(self, builder, run_check):
        graph = builder.node("Chain", CHAIN_LLM).node("Agent", AGENT).connect("Chain", "Agent").build()
        (finding,) = run_check(check_ai_chaining, graph)
        assert finding.severity == FindingSeverity.WARNING
        assert finding.title == 'AI node "Chain" chains directly to AI node "Agent"'

    def test_model_wiring_is_not_chaining(self, builder, run_check):
        graph = (
            builder.node("Model", OPENAI_MODEL).node("Agent", AGENT)
            .connect("Model", "Agent", connection_type="ai_languageModel")
            .build()
        )
        assert run_check(check_ai_chaining, graph) == []
        assert run_check(check_ai_output_to_external, graph) == []
