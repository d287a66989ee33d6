# Copyright (c) 2025 Red Hat, Inc.
# Copyright Contributors to the Open Cluster Management project

"""
Copies the generated config manifests into the Helm chart templates.
"""

import glob
import logging
import os

from helm_chart_gen import constants
from helm_chart_gen.constants import CRD
from helm_chart_gen.crd_patches import extract_kind_and_group_from_filename, get_crd_patch_content
from helm_chart_gen.exceptions import ChartGenerationError
from helm_chart_gen.helm_utils import log_header, read_text, write_text
from helm_chart_gen.rewriter import rewrite_manifest
from helm_chart_gen.webhook_template import render_webhook_template
from helm_chart_gen.webhooks import extract_webhooks


class ChartScaffolder:
    """Regenerates the chart templates derived from the project's manifests"""

    def __init__(self, config, chart_dir=constants.DEFAULT_CHART_DIR,
                 manifest_dir=constants.DEFAULT_MANIFEST_DIR, categories=None):
        self.config = config
        self.chart_dir = chart_dir
        self.manifest_dir = manifest_dir
        self.categories = categories or constants.MANIFEST_CATEGORIES

    @property
    def templates_dir(self):
        return os.path.join(self.chart_dir, constants.CHART_TEMPLATES_DIR)

    @property
    def patches_dir(self):
        return os.path.join(self.manifest_dir, constants.CRD_PATCHES_DIR)

    def scaffold(self):
        """
        Generate the chart templates.

        Returns:
            list: Paths of the files written

        Raises:
            ChartGenerationError: On the first file or directory that cannot be processed
        """
        log_header("Generating Helm chart templates in {}", self.chart_dir)
        project_name = self.config.project_name

        written = []
        mutating_webhooks, validating_webhooks = extract_webhooks(
            os.path.join(self.manifest_dir, constants.WEBHOOK_MANIFEST_FILE), project_name)
        webhook_template = render_webhook_template(mutating_webhooks, validating_webhooks, project_name)
        if webhook_template is not None:
            written.append(self._write(constants.WEBHOOK_TEMPLATE_FILE, webhook_template))

        written.extend(self.copy_config_files(project_name))
        logging.info("Helm chart templates generated: %d files written\n", len(written))
        return written

    def copy_config_files(self, project_name):
        """Copy rbac, crd and network-policy manifests into the chart templates."""
        written = []
        for category in self.categories:
            source_dir = os.path.join(self.manifest_dir, category.source_dir)
            if not os.path.isdir(source_dir):
                logging.info("No %s manifests found at %s", category.name, source_dir)
                continue

            files = sorted(glob.glob(os.path.join(glob.escape(source_dir), "*.yaml")))
            if not files:
                logging.info("No %s manifests found at %s", category.name, source_dir)
                continue

            destination_dir = os.path.join(self.templates_dir, category.destination_dir)
            try:
                os.makedirs(destination_dir, exist_ok=True)
            except OSError as e:
                raise ChartGenerationError(f"failed to create directory {destination_dir}: {e}", destination_dir) from e

            logging.info("Copying %d %s manifests to %s", len(files), category.name, destination_dir)
            for src_file in files:
                destination = self.copy_file_with_helm_logic(src_file, category, project_name)
                if destination:
                    written.append(destination)
        return written

    def copy_file_with_helm_logic(self, src_file, category, project_name):
        """
        Rewrite one manifest for the chart and write it to the templates directory.

        Returns:
            str: Destination path, or None when the file is not part of the chart
        """
        file_name = os.path.basename(src_file)
        content = read_text(src_file)

        patch_content = ""
        if category == CRD:
            kind, group = extract_kind_and_group_from_filename(file_name)
            patch_content, _ = get_crd_patch_content(kind, group, self.patches_dir)

        template = rewrite_manifest(file_name, content, category, project_name, patch_content)
        if template is None:
            return None

        destination = self._write(os.path.join(category.destination_dir, file_name), template)
        logging.info("Successfully copied %s to %s", src_file, destination)
        return destination

    def _write(self, relative_path, content):
        destination = os.path.join(self.templates_dir, relative_path)
        write_text(destination, content)
        return destination
