# Copyright (c) 2025 Red Hat, Inc.
# Copyright Contributors to the Open Cluster Management project

"""
Centralized tables for the manifest transformation: categories, RBAC renames
and the Helm snippets injected into the generated templates.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class ManifestCategory:
    """A kind of manifest copied from the generated config into the chart"""
    name: str
    source_dir: str       # relative to the manifest directory
    destination_dir: str  # relative to <chart-dir>/chart/templates
    enable_flag: str      # .Values.<enable_flag>.enable


RBAC = ManifestCategory("rbac", "rbac", "rbac", "rbac")
CRD = ManifestCategory("crd", "crd/bases", "crd", "crd")
NETWORK_POLICY = ManifestCategory("networkPolicy", "network-policy", "network-policy", "networkPolicy")

# Processing order of the categories
MANIFEST_CATEGORIES = [RBAC, CRD, NETWORK_POLICY]

DEFAULT_MANIFEST_DIR = "config"
DEFAULT_CHART_DIR = "dist"
DEFAULT_PROJECT_FILE = "PROJECT"
HELM_PLUGIN_KEY = "helm.kubebuilder.io/v1-alpha"

WEBHOOK_MANIFEST_FILE = "webhook/manifests.yaml"
CRD_PATCHES_DIR = "crd/patches"
CHART_TEMPLATES_DIR = "chart/templates"
WEBHOOK_TEMPLATE_FILE = "webhook/webhooks.yaml"

# Kustomize files living next to the manifests, never copied
SKIPPED_FILES = ("kustomization.yaml", "kustomizeconfig.yaml")

# RBAC files only rendered when both rbac and metrics are enabled
METRICS_RBAC_FILES = (
    "metrics_auth_role.yaml",
    "metrics_auth_role_binding.yaml",
    "metrics_reader_role.yaml",
)

SERVICE_ACCOUNT_NAME_VALUE = "{{ .Values.controllerManager.serviceAccountName }}"
RELEASE_NAMESPACE = "{{ .Release.Namespace }}"

# (generated name, chart name, replace count) where a count of -1 replaces
# every occurrence. "{project}" is substituted with the project name.
RBAC_RENAMES = [
    ("controller-manager", SERVICE_ACCOUNT_NAME_VALUE, -1),
    ("metrics-reader", "{project}-metrics-reader", 1),
    ("metrics-auth-role", "{project}-metrics-auth-role", -1),
    ("metrics-auth-rolebinding", "{project}-metrics-auth-rolebinding", 1),
    ("leader-election-role", "{project}-leader-election-role", -1),
    ("leader-election-rolebinding", "{project}-leader-election-rolebinding", 1),
    ("manager-role", "{project}-manager-role", -1),
    ("manager-rolebinding", "{project}-manager-rolebinding", 1),
]

LEADER_ELECTION_MARKER = "leader-election-role"

CHART_LABELS = [
    "labels:",
    '  {{- include "chart.labels" . | nindent 4 }}',
]

SERVICE_ACCOUNT_ANNOTATIONS = [
    "{{- if and .Values.controllerManager.serviceAccount .Values.controllerManager.serviceAccount.annotations }}",
    "annotations:",
    "  {{- range $key, $value := .Values.controllerManager.serviceAccount.annotations }}",
    "  {{ $key }}: {{ $value }}",
    "  {{- end }}",
    "{{- end }}",
]

CERT_MANAGER_ANNOTATION = [
    "{{- if .Values.certmanager.enable }}",
    'cert-manager.io/inject-ca-from: "{{ .Release.Namespace }}/serving-cert"',
    "{{- end }}",
]

RESOURCE_POLICY_ANNOTATION = [
    "{{- if .Values.crd.keep }}",
    '"helm.sh/resource-policy": keep',
    "{{- end }}",
]

WEBHOOK_ENABLE_CONDITION = ".Values.webhook.enable"
METRICS_RBAC_CONDITION = "and .Values.rbac.enable .Values.metrics.enable"
