# Copyright (c) 2025 Red Hat, Inc.
# Copyright Contributors to the Open Cluster Management project

"""
Resolution of the conversion-webhook patches generated for CRDs.
"""

import glob
import logging
import os

from helm_chart_gen.helm_utils import read_text

CONVERSION_KEY = "conversion:"


def extract_kind_and_group_from_filename(file_name):
    """
    Extract the kind and group from a CRD base file name.

    CRD bases are named "<group>.<domain>_<kind>.yaml", e.g.
    "batch.tutorial.kubebuilder.io_cronjobs.yaml" gives ("cronjobs", "batch").

    Returns:
        tuple: (kind, group), both empty when the name has no "_" separator
    """
    parts = file_name.split("_")
    if len(parts) < 2:
        return "", ""

    group = parts[0].split(".")[0]
    kind = parts[1]
    if kind.endswith(".yaml"):
        kind = kind[:-len(".yaml")]
    return kind, group


def find_patch_files(patches_dir, kind, group):
    """
    List the webhook patch files for a CRD.

    Patches naming both the group and the kind win; the kind-only search runs
    only when there are none.
    """
    group_kind_pattern = os.path.join(
        glob.escape(patches_dir), f"webhook_*{glob.escape(group)}*{glob.escape(kind)}*.yaml")
    patch_files = sorted(glob.glob(group_kind_pattern))
    if patch_files:
        return patch_files

    kind_only_pattern = os.path.join(glob.escape(patches_dir), f"webhook_*{glob.escape(kind)}*.yaml")
    return sorted(glob.glob(kind_only_pattern))


def get_crd_patch_content(kind, group, patches_dir):
    """
    Find and read the patch for the given CRD kind and group.

    Args:
        kind (str): CRD kind as found in the base file name (plural)
        group (str): First label of the CRD group
        patches_dir (str): Directory holding the webhook_*.yaml patches

    Returns:
        tuple: (patch_content, found)

    Raises:
        ChartGenerationError: If a matching patch cannot be read
    """
    if not kind:
        return "", False

    patch_files = find_patch_files(patches_dir, kind, group)
    if not patch_files:
        logging.debug("No conversion patch found for kind '%s' in %s", kind, patches_dir)
        return "", False

    if len(patch_files) > 1:
        logging.debug("Several patches match kind '%s': %s, using the first", kind, patch_files)

    logging.info("Using patch %s for kind '%s'", patch_files[0], kind)
    return read_text(patch_files[0]), True


def extract_conversion_spec(patch_content):
    """Return the patch text from the first "conversion:" key to the end, or "" without one."""
    spec_start = patch_content.find(CONVERSION_KEY)
    if spec_start == -1:
        return ""
    return patch_content[spec_start:]
