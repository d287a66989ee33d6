#!/usr/bin/env python3
"""
Unit tests for the webhook configuration chart template.
"""

import unittest

import yaml

from helm_chart_gen.webhook_template import render_webhook_template
from helm_chart_gen.webhooks import FailurePolicy, SideEffects, WebhookDescriptor, WebhookRule


def descriptor(name, path, api_groups=None):
    return WebhookDescriptor(
        name=name,
        service_name="demo-webhook-service",
        path=path,
        failure_policy=FailurePolicy.FAIL,
        side_effects=SideEffects.NONE,
        admission_review_versions=["v1"],
        rules=[WebhookRule(api_groups=api_groups or [""], api_versions=["v1"],
                           resources=["pods"], operations=["CREATE", "UPDATE"])],
    )


def strip_helm(template):
    """Drop the Helm action lines so the rest can be parsed as YAML."""
    return "\n".join(line for line in template.splitlines() if "{{-" not in line)


class TestRenderWebhookTemplate(unittest.TestCase):

    def test_no_webhooks(self):
        self.assertIsNone(render_webhook_template([], [], "demo"))

    def test_guarded_by_webhook_flag(self):
        template = render_webhook_template([descriptor("m.kb.io", "/mutate")], [], "demo")

        self.assertTrue(template.startswith("{{- if .Values.webhook.enable }}\n"))
        self.assertTrue(template.endswith("{{- end }}\n"))
        self.assertNotIn("ValidatingWebhookConfiguration", template)

    def test_renders_both_configurations(self):
        template = render_webhook_template(
            [descriptor("m.kb.io", "/mutate")],
            [descriptor("v1.kb.io", "/validate-1", ["apps"]), descriptor("v2.kb.io", "/validate-2")],
            "demo",
        )

        docs = list(yaml.safe_load_all(strip_helm(template).replace("{{ .Release.Namespace }}", "ns")))

        self.assertEqual([doc["kind"] for doc in docs],
                         ["MutatingWebhookConfiguration", "ValidatingWebhookConfiguration"])
        self.assertEqual(docs[0]["metadata"]["name"], "demo-mutating-webhook-configuration")
        self.assertEqual(docs[1]["metadata"]["name"], "demo-validating-webhook-configuration")

        validating = docs[1]["webhooks"]
        self.assertEqual([w["name"] for w in validating], ["v1.kb.io", "v2.kb.io"])
        self.assertEqual(validating[0]["clientConfig"]["service"],
                         {"name": "demo-webhook-service", "namespace": "ns", "path": "/validate-1"})
        self.assertEqual(validating[0]["failurePolicy"], "Fail")
        self.assertEqual(validating[0]["sideEffects"], "None")
        self.assertEqual(validating[0]["admissionReviewVersions"], ["v1"])
        self.assertEqual(validating[0]["rules"], [{
            "operations": ["CREATE", "UPDATE"],
            "apiGroups": ["apps"],
            "apiVersions": ["v1"],
            "resources": ["pods"],
        }])
        self.assertEqual(validating[1]["rules"][0]["apiGroups"], [""])


if __name__ == '__main__':
    unittest.main(verbosity=2)
