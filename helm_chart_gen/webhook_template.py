# Copyright (c) 2025 Red Hat, Inc.
# Copyright Contributors to the Open Cluster Management project

"""
Chart template for the admission webhook configurations.
"""

import json
import re
from enum import Enum

from helm_chart_gen import constants
from helm_chart_gen.webhooks import WebhookKind

PLAIN_SCALAR = re.compile(r'^[A-Za-z0-9/][A-Za-z0-9/._-]*$')

CONFIGURATION_SUFFIX = {
    WebhookKind.MUTATING: "mutating-webhook-configuration",
    WebhookKind.VALIDATING: "validating-webhook-configuration",
}


def _scalar(value):
    if isinstance(value, Enum):
        value = value.value
    value = "" if value is None else str(value)
    if PLAIN_SCALAR.match(value) and value.lower() not in ("null", "true", "false", "yes", "no", "on", "off"):
        return value
    return json.dumps(value)


def _list(key, values, indent):
    padding = " " * indent
    lines = [f"{padding}{key}:"]
    lines.extend(f"{padding}  - {_scalar(value)}" for value in values)
    return lines


def _webhook_entry(webhook):
    lines = [
        f"  - name: {_scalar(webhook.name)}",
        "    clientConfig:",
        "      service:",
        f"        name: {_scalar(webhook.service_name)}",
        f"        namespace: {constants.RELEASE_NAMESPACE}",
        f"        path: {_scalar(webhook.path)}",
    ]
    if webhook.failure_policy is not None:
        lines.append(f"    failurePolicy: {_scalar(webhook.failure_policy)}")
    if webhook.side_effects is not None:
        lines.append(f"    sideEffects: {_scalar(webhook.side_effects)}")
    lines.extend(_list("admissionReviewVersions", webhook.admission_review_versions, 4))
    if webhook.rules:
        lines.append("    rules:")
        for rule in webhook.rules:
            rule_lines = (
                _list("operations", rule.operations, 8)
                + _list("apiGroups", rule.api_groups, 8)
                + _list("apiVersions", rule.api_versions, 8)
                + _list("resources", rule.resources, 8)
            )
            # First key of each rule opens the sequence item
            rule_lines[0] = "      - " + rule_lines[0].lstrip()
            lines.extend(rule_lines)
    return lines


def _configuration(kind, webhooks, project_name):
    lines = [
        "apiVersion: admissionregistration.k8s.io/v1",
        f"kind: {kind.value}",
        "metadata:",
        f"  name: {project_name}-{CONFIGURATION_SUFFIX[kind]}",
        f"  namespace: {constants.RELEASE_NAMESPACE}",
        "  annotations:",
    ]
    lines.extend("    " + line for line in constants.CERT_MANAGER_ANNOTATION)
    lines.extend("  " + line for line in constants.CHART_LABELS)
    lines.append("webhooks:")
    for webhook in webhooks:
        lines.extend(_webhook_entry(webhook))
    return lines


def render_webhook_template(mutating_webhooks, validating_webhooks, project_name):
    """
    Render the webhook configurations of the chart.

    Returns:
        str: The template, or None when the project has no webhooks
    """
    if not mutating_webhooks and not validating_webhooks:
        return None

    lines = [f"{{{{- if {constants.WEBHOOK_ENABLE_CONDITION} }}}}"]
    for kind, webhooks in ((WebhookKind.MUTATING, mutating_webhooks),
                           (WebhookKind.VALIDATING, validating_webhooks)):
        if not webhooks:
            continue
        if len(lines) > 1:
            lines.append("---")
        lines.extend(_configuration(kind, webhooks, project_name))
    lines.append("{{- end }}")
    return "\n".join(lines) + "\n"
