"""Security check registry.

Checks are independent of each other. Their order here fixes how findings
of equal severity are ordered in the report.
"""

from flowaudit.scanning.checks.ai import (
    check_ai_chaining,
    check_ai_output_to_external,
    check_over_privileged_tools,
    check_prompt_injection,
    check_secrets_in_prompts,
    check_trigger_to_ai,
)
from flowaudit.scanning.checks.base import ScanContext, SecurityCheck
from flowaudit.scanning.checks.code_execution import check_code_data_logging, check_code_injection
from flowaudit.scanning.checks.expressions import check_expression_risks
from flowaudit.scanning.checks.exposure import check_data_exposure, check_fan_out
from flowaudit.scanning.checks.hardcoded_secrets import check_hardcoded_secrets
from flowaudit.scanning.checks.insecure_config import check_insecure_config
from flowaudit.scanning.checks.network import check_ssrf_risk
from flowaudit.scanning.checks.pii import check_pii, check_pii_field_names

DEFAULT_CHECKS: tuple[SecurityCheck, ...] = (
    SecurityCheck("hardcoded_secrets", check_hardcoded_secrets),
    SecurityCheck("pii", check_pii),
    SecurityCheck("pii_field_names", check_pii_field_names),
    SecurityCheck("insecure_config", check_insecure_config),
    SecurityCheck("expression_risks", check_expression_risks),
    SecurityCheck("data_exposure", check_data_exposure),
    SecurityCheck("ai_prompt_injection", check_prompt_injection),
    SecurityCheck("ai_secrets_in_prompts", check_secrets_in_prompts),
    SecurityCheck("ai_trigger_to_ai", check_trigger_to_ai),
    SecurityCheck("ai_over_privileged_tools", check_over_privileged_tools),
    SecurityCheck("ai_output_to_external", check_ai_output_to_external),
    SecurityCheck("ai_chaining", check_ai_chaining),
    SecurityCheck("code_injection", check_code_injection),
    SecurityCheck("code_data_logging", check_code_data_logging),
    SecurityCheck("fan_out", check_fan_out),
    SecurityCheck("ssrf", check_ssrf_risk),
)

__all__ = [
    "DEFAULT_CHECKS",
    "ScanContext",
    "SecurityCheck",
]
