"""Security checks specific to AI/LLM nodes.

Covers user input and secrets in prompts, raw trigger data reaching AI
nodes, agents wired to dangerous tools, AI output sent straight to external
services, and AI nodes feeding other AI nodes.
"""

from __future__ import annotations

from typing import Iterator

from flowaudit.scanning.catalog import AI_HTTP_TOOL_TYPE
from flowaudit.scanning.checks.base import ScanContext
from flowaudit.scanning.graph import AI_TOOL_CONNECTION, MAIN_CONNECTION
from flowaudit.scanning.models import Finding
from flowaudit.scanning.patterns import INPUT_REF_PATTERN, SECRET_SIGNATURES, first_match
from flowaudit.scanning.types import Capability, FindingCategory, FindingSeverity
from flowaudit.scanning.walker import ParameterString

PROMPT_PARAMETERS = frozenset({"systemMessage", "text", "messages"})
OPTIONS_SYSTEM_MESSAGE = "options.systemMessage"


def is_prompt_parameter(item: ParameterString) -> bool:
    """Whether a parameter feeds the model's prompt."""
    if item.top_level_key in PROMPT_PARAMETERS:
        return True
    return item.path == OPTIONS_SYSTEM_MESSAGE or item.path.startswith(
        OPTIONS_SYSTEM_MESSAGE + "."
    )


def check_prompt_injection(ctx: ScanContext) -> Iterator[Finding]:
    for node in ctx.nodes_with(Capability.AI_NODE):
        for item in ctx.expressions(node):
            if not is_prompt_parameter(item):
                continue
            if not INPUT_REF_PATTERN.search(item.value):
                continue
            yield Finding(
                severity=FindingSeverity.WARNING,
                category=FindingCategory.EXPRESSION_RISK,
                title=f'User input in AI system prompt of "{node.name}"',
                description=(
                    "The system prompt references user-controlled data. An attacker "
                    "could craft input that overrides system instructions "
                    "(prompt injection)."
                ),
                node_name=node.name,
                parameter_path=item.path,
            )


def check_secrets_in_prompts(ctx: ScanContext) -> Iterator[Finding]:
    for node in ctx.nodes_with(Capability.AI_NODE):
        for item in ctx.literals(node):
            if not is_prompt_parameter(item):
                continue
            signature = first_match(SECRET_SIGNATURES, item.value)
            if signature is None:
                continue
            yield Finding(
                severity=FindingSeverity.CRITICAL,
                category=FindingCategory.HARDCODED_SECRET,
                title=f'{signature.label} key in AI prompt of "{node.name}"',
                description=(
                    f"A {signature.label} secret in the system prompt will likely be "
                    "echoed by the LLM. Move it to the credential store."
                ),
                node_name=node.name,
                parameter_path=item.path,
                matched_value=item.value,
            )


def check_trigger_to_ai(ctx: ScanContext) -> Iterator[Finding]:
    for trigger in ctx.nodes_with(Capability.TRIGGER):
        for target in ctx.graph.targets_of(trigger.name, MAIN_CONNECTION):
            if not ctx.has(target, Capability.AI_NODE):
                continue
            yield Finding(
                severity=FindingSeverity.WARNING,
                category=FindingCategory.DATA_EXPOSURE,
                title=f'Trigger data flows directly to AI node "{target.name}"',
                description=(
                    f'"{trigger.name}" connects directly to "{target.name}" without '
                    "intermediate filtering. Raw user input may be sent to the AI provider."
                ),
                node_name=target.name,
            )


def check_over_privileged_tools(ctx: ScanContext) -> Iterator[Finding]:
    """Agents given tools that can make arbitrary HTTP calls or run code."""
    for conn in ctx.graph.iter_connections():
        if conn.connection_type != AI_TOOL_CONNECTION:
            continue
        tool = ctx.graph.node_by_name(conn.source)
        agent = ctx.graph.node_by_name(conn.target)
        if tool is None or agent is None:
            continue
        if not ctx.has(agent, Capability.AI_AGENT) or not ctx.has(tool, Capability.DANGEROUS_TOOL):
            continue

        if tool.type == AI_HTTP_TOOL_TYPE:
            tool_label, ability = "HTTP Request tool", "make arbitrary HTTP requests"
        else:
            tool_label, ability = "Code tool", "execute arbitrary code"
        yield Finding(
            severity=FindingSeverity.INFO,
            category=FindingCategory.CODE_INJECTION,
            title=f'AI Agent "{agent.name}" has {tool_label}',
            description=(
                f'The {tool_label} "{tool.name}" gives the AI agent the ability to {ability}.'
            ),
            node_name=agent.name,
        )


def check_ai_output_to_external(ctx: ScanContext) -> Iterator[Finding]:
    for node in ctx.nodes_with(Capability.AI_NODE):
        for target in ctx.graph.targets_of(node.name, MAIN_CONNECTION):
            if not ctx.has(target, Capability.EXTERNAL_SERVICE):
                continue
            yield Finding(
                severity=FindingSeverity.INFO,
                category=FindingCategory.DATA_EXPOSURE,
                title=f'AI output sent directly to "{target.name}"',
                description=(
                    f'"{node.name}" outputs directly to the external service '
                    f'"{target.name}". AI outputs may contain hallucinated data '
                    "or leaked context."
                ),
                node_name=target.name,
            )


def check_ai_chaining(ctx: ScanContext) -> Iterator[Finding]:
    for node in ctx.nodes_with(Capability.AI_NODE):
        for target in ctx.graph.targets_of(node.name, MAIN_CONNECTION):
            if not ctx.has(target, Capability.AI_NODE):
                continue
            yield Finding(
                severity=FindingSeverity.WARNING,
                category=FindingCategory.DATA_EXPOSURE,
                title=f'AI node "{node.name}" chains directly to AI node "{target.name}"',
                description=(
                    "Chained AI nodes amplify hallucination risk and can propagate "
                    "prompt injection. Add validation between them."
                ),
                node_name=target.name,
            )
