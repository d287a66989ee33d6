# Copyright (c) 2025 Red Hat, Inc.
# Copyright Contributors to the Open Cluster Management project

"""
Extraction of admission webhooks from the generated webhook manifests.

controller-gen writes every Mutating/ValidatingWebhookConfiguration of the
project into a single multi-document file. The chart renders its own webhook
configurations, so only the per-webhook settings are kept here.
"""

import logging
import os
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Tuple, Union

import yaml

from helm_chart_gen.helm_utils import read_text

DOCUMENT_SEPARATOR = re.compile(r'^---[ \t]*$', re.MULTILINE)


class WebhookKind(str, Enum):
    """Kinds of webhook configuration documents that are extracted"""
    MUTATING = "MutatingWebhookConfiguration"
    VALIDATING = "ValidatingWebhookConfiguration"


class FailurePolicy(str, Enum):
    FAIL = "Fail"
    IGNORE = "Ignore"


class SideEffects(str, Enum):
    NONE = "None"
    NONE_ON_DRY_RUN = "NoneOnDryRun"
    SOME = "Some"
    UNKNOWN = "Unknown"


@dataclass
class WebhookRule:
    api_groups: List[str] = field(default_factory=list)
    api_versions: List[str] = field(default_factory=list)
    resources: List[str] = field(default_factory=list)
    operations: List[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, rule: dict, webhook_name: str = "") -> "WebhookRule":
        if not isinstance(rule, dict):
            raise ValueError(f"webhook '{webhook_name}': rules entries must be mappings, got {rule!r}")
        api_groups = _string_list(rule.get('apiGroups'), 'apiGroups', webhook_name)
        if not api_groups:
            # Omitted apiGroups means the core API group
            api_groups = [""]
        return cls(
            api_groups=api_groups,
            api_versions=_string_list(rule.get('apiVersions'), 'apiVersions', webhook_name),
            resources=_string_list(rule.get('resources'), 'resources', webhook_name),
            operations=_string_list(rule.get('operations'), 'operations', webhook_name),
        )


@dataclass
class WebhookDescriptor:
    name: str
    service_name: str
    path: str
    failure_policy: Union[FailurePolicy, str, None]
    side_effects: Union[SideEffects, str, None]
    admission_review_versions: List[str] = field(default_factory=list)
    rules: List[WebhookRule] = field(default_factory=list)


def webhook_service_name(project_name):
    return f"{project_name}-webhook-service"


def _coerce(enum_cls, value, webhook_name):
    if value is None:
        return None
    try:
        return enum_cls(value)
    except ValueError:
        logging.warning("Webhook '%s': unexpected %s value '%s', keeping it as is",
                        webhook_name, enum_cls.__name__, value)
        return value


def _string_list(value, key, webhook_name):
    if value is None:
        return []
    if not isinstance(value, list) or any(item is None or isinstance(item, (dict, list)) for item in value):
        raise ValueError(f"webhook '{webhook_name}': {key} must be a list of strings, got {value!r}")
    return [str(item) for item in value]


def _mapping(value, key, webhook_name):
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise ValueError(f"webhook '{webhook_name}': {key} must be a mapping, got {value!r}")
    return value


def _to_descriptor(webhook, project_name):
    """
    Build the descriptor of one webhook entry.

    Raises:
        ValueError: If a field does not have the type of the admissionregistration API
    """
    if not isinstance(webhook, dict):
        raise ValueError(f"webhooks entries must be mappings, got {webhook!r}")
    name = webhook.get('name', '')
    client_config = _mapping(webhook.get('clientConfig'), 'clientConfig', name)
    service = _mapping(client_config.get('service'), 'clientConfig.service', name)

    rules = webhook.get('rules')
    if rules is not None and not isinstance(rules, list):
        raise ValueError(f"webhook '{name}': rules must be a list, got {rules!r}")

    return WebhookDescriptor(
        name=name,
        # The chart owns the webhook service, the generated name is discarded
        service_name=webhook_service_name(project_name),
        path=service.get('path', ''),
        failure_policy=_coerce(FailurePolicy, webhook.get('failurePolicy'), name),
        side_effects=_coerce(SideEffects, webhook.get('sideEffects'), name),
        admission_review_versions=_string_list(webhook.get('admissionReviewVersions'),
                                               'admissionReviewVersions', name),
        rules=[WebhookRule.from_dict(rule, name) for rule in rules or []],
    )


def split_documents(content):
    """Split a multi-document YAML stream on its separator lines."""
    return DOCUMENT_SEPARATOR.split(content)


def extract_webhooks(manifest_file, project_name) -> Tuple[List[WebhookDescriptor], List[WebhookDescriptor]]:
    """
    Parse the generated webhook manifests into mutating and validating descriptors.

    Args:
        manifest_file (str): Path to the multi-document webhook manifest
        project_name (str): Project name used to derive the webhook service name

    Returns:
        tuple: (mutating_webhooks, validating_webhooks), both empty when the file does not exist

    Raises:
        ChartGenerationError: If the file exists but cannot be read
    """
    mutating_webhooks = []
    validating_webhooks = []

    if not os.path.exists(manifest_file):
        logging.info("Webhook manifests were not found at %s", manifest_file)
        return mutating_webhooks, validating_webhooks

    content = read_text(manifest_file)

    buckets = {
        WebhookKind.MUTATING: mutating_webhooks,
        WebhookKind.VALIDATING: validating_webhooks,
    }

    for index, doc in enumerate(split_documents(content)):
        try:
            webhook_config = yaml.safe_load(doc)
        except yaml.YAMLError as e:
            logging.error("Failed to parse document %d of %s: %s", index, manifest_file, e)
            continue

        if not isinstance(webhook_config, dict):
            continue

        try:
            kind = WebhookKind(webhook_config.get('kind'))
        except ValueError:
            logging.debug("Ignoring document of kind '%s' in %s", webhook_config.get('kind'), manifest_file)
            continue

        webhooks = webhook_config.get('webhooks') or []
        try:
            if not isinstance(webhooks, list):
                raise ValueError(f"webhooks must be a list, got {webhooks!r}")
            descriptors = [_to_descriptor(webhook, project_name) for webhook in webhooks]
        except ValueError as e:
            logging.error("Failed to parse document %d of %s: %s", index, manifest_file, e)
            continue

        for descriptor in descriptors:
            buckets[kind].append(descriptor)
            logging.debug("Found %s webhook '%s' (path: %s)", kind.value, descriptor.name, descriptor.path)

    logging.info("Extracted %d mutating and %d validating webhooks from %s",
                 len(mutating_webhooks), len(validating_webhooks), manifest_file)
    return mutating_webhooks, validating_webhooks
