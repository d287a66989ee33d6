# Copyright (c) 2025 Red Hat, Inc.
# Copyright Contributors to the Open Cluster Management project

"""
Rewriting of generated manifests into Helm chart templates.
"""

import logging

from helm_chart_gen import constants
from helm_chart_gen.constants import CRD, RBAC
from helm_chart_gen.crd_patches import extract_conversion_spec
from helm_chart_gen.helm_utils import insert_flow_control_if_around, wrap_in_flow_control
from helm_chart_gen.manifest_document import ManifestDocument


def is_skipped_file(file_name):
    return file_name.endswith(constants.SKIPPED_FILES)


def is_metrics_rbac_file(category, file_name):
    return category == RBAC and file_name.endswith(constants.METRICS_RBAC_FILES)


def enable_condition(category, file_name):
    """Helm condition guarding the template generated from file_name"""
    if is_metrics_rbac_file(category, file_name):
        return constants.METRICS_RBAC_CONDITION
    return f".Values.{category.enable_flag}.enable"


SYSTEM_NAMESPACE = "namespace: system"
TEMPLATED_NAMESPACE = f"namespace: {constants.RELEASE_NAMESPACE}"


def template_namespace(text):
    return text.replace(SYSTEM_NAMESPACE, TEMPLATED_NAMESPACE)


def rbac_renames(project_name):
    """Expand the rename table into (old, new, count) text replacements"""
    return [
        (f"name: {old}", f"name: {new.format(project=project_name)}", count)
        for old, new, count in constants.RBAC_RENAMES
    ]


def rename_rbac_resources(document, project_name):
    for old, new, count in rbac_renames(project_name):
        document.replace(old, new, count)


def inject_rbac_metadata(document):
    """Add the fields the generated RBAC manifests lack."""
    for doc in document.documents:
        if doc.metadata is None:
            continue
        text = document.text(doc)

        if (doc.kind == "ServiceAccount"
                and constants.SERVICE_ACCOUNT_NAME_VALUE in text
                and "RoleBinding" not in text):
            document.insert_child(doc.metadata, constants.SERVICE_ACCOUNT_ANNOTATIONS)

        # Leader election RBAC lives in the release namespace
        if constants.LEADER_ELECTION_MARKER in text and not doc.has_namespace:
            document.insert_child(doc.metadata, [TEMPLATED_NAMESPACE])


def conversion_block(conversion_spec, indent):
    """
    Re-indent a conversion fragment to sit under spec at the given indent, and
    guard it with the webhook flag.
    """
    lines = conversion_spec.rstrip("\n").split("\n")
    lines = [line.rstrip("\r") for line in lines]

    child_indents = [len(line) - len(line.lstrip()) for line in lines[1:] if line.strip()]
    shift = (indent + 2 - min(child_indents)) if child_indents else 0

    block = [" " * indent + lines[0]]
    for line in lines[1:]:
        if not line.strip():
            block.append(line)
        elif shift >= 0:
            block.append(" " * shift + line)
        else:
            block.append(line[min(-shift, len(line) - len(line.lstrip())):])

    block = [template_namespace(line) for line in block]
    return insert_flow_control_if_around(block, 0, len(block) - 1, constants.WEBHOOK_ENABLE_CONDITION)


def inject_crd_patch(document, conversion_spec):
    """
    Splice the conversion webhook into the CRD and add its annotations.

    Returns:
        bool: True if a conversion block was injected
    """
    has_webhook_patch = False
    crd = next((doc for doc in document.documents if doc.spec is not None), None)

    if conversion_spec and crd is not None and crd.spec.block:
        block = conversion_block(conversion_spec, crd.spec.child_indent)
        # Indentation is already part of the block
        document.insert_after(crd.spec.line, block)
        has_webhook_patch = True
    elif conversion_spec:
        logging.warning("No spec to patch in %s, skipping conversion webhook", document.source or "CRD")

    annotations = []
    if has_webhook_patch:
        annotations.extend(constants.CERT_MANAGER_ANNOTATION)
    annotations.extend(constants.RESOURCE_POLICY_ANNOTATION)

    target = crd or (document.documents[0] if document.documents else None)
    if target is None:
        return has_webhook_patch
    if target.annotations is not None:
        document.insert_child(target.annotations, annotations)
    elif target.metadata is not None:
        document.insert_child(target.metadata, ["annotations:"] + ["  " + line for line in annotations])

    return has_webhook_patch


def apply_chart_conventions(document):
    """Swap generated labels for the chart's and template the namespace."""
    for doc in document.documents:
        for labels in doc.labels:
            document.remove(labels)

    document.replace(SYSTEM_NAMESPACE, TEMPLATED_NAMESPACE)

    for doc in document.documents:
        if doc.metadata is not None:
            document.insert_child(doc.metadata, constants.CHART_LABELS)


def rewrite_manifest(file_name, content, category, project_name, patch_content=""):
    """
    Turn a generated manifest into a Helm template.

    Args:
        file_name (str): Base name of the source file
        content (str): Source file content
        category (ManifestCategory): Category the file was found under
        project_name (str): Project name used to prefix RBAC resource names
        patch_content (str, optional): CRD conversion patch for CRD files

    Returns:
        str: The template, or None when the file must not be copied to the chart
    """
    if is_skipped_file(file_name):
        logging.debug("Skipping kustomize file %s", file_name)
        return None

    document = ManifestDocument(content, source=file_name)

    if category == RBAC:
        rename_rbac_resources(document, project_name)
        inject_rbac_metadata(document)

    if category == CRD:
        if inject_crd_patch(document, extract_conversion_spec(patch_content)):
            logging.info("Injected conversion webhook into %s", file_name)

    apply_chart_conventions(document)

    return wrap_in_flow_control(document.render(), enable_condition(category, file_name))
