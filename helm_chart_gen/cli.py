# Copyright (c) 2025 Red Hat, Inc.
# Copyright Contributors to the Open Cluster Management project

"""
Command line entry point.

Usage:
    helm-chart-gen [--chart-dir dist] [--manifest-dir config] [--project-file PROJECT]

Run it from the project root after regenerating the manifests, so that the
chart templates match the latest RBAC, CRDs, network policies and webhooks.
"""

import argparse
import logging
import sys

import coloredlogs

from helm_chart_gen import constants
from helm_chart_gen.config import ProjectConfig
from helm_chart_gen.exceptions import ChartGenerationError
from helm_chart_gen.transformer import ChartScaffolder


def parse_args(argv=None):
    parser = argparse.ArgumentParser(
        description="Generate the Helm chart templates that distribute the project")
    parser.add_argument("--chart-dir", dest="chart_dir", type=str, default=constants.DEFAULT_CHART_DIR,
                        help="Directory where the Helm chart will be scaffolded")
    parser.add_argument("--manifest-dir", dest="manifest_dir", type=str, default=constants.DEFAULT_MANIFEST_DIR,
                        help="Directory holding the generated manifests")
    parser.add_argument("--project-file", dest="project_file", type=str, default=constants.DEFAULT_PROJECT_FILE,
                        help="Path to the PROJECT file")
    parser.add_argument("--project-name", dest="project_name", type=str,
                        help="Project name, overrides the one in the PROJECT file")
    parser.add_argument("--debug", dest="debug", action='store_true', help="Enable debug logging")
    return parser.parse_args(argv)


def resolve_chart_dir(args, config):
    # A directory recorded by a previous run wins over the default
    if args.chart_dir == constants.DEFAULT_CHART_DIR and config.chart_dir:
        return config.chart_dir
    return args.chart_dir or constants.DEFAULT_CHART_DIR


def main(argv=None):
    args = parse_args(argv)
    coloredlogs.install(level='DEBUG' if args.debug else 'INFO')

    try:
        config = ProjectConfig.load(args.project_file, args.project_name)
        chart_dir = resolve_chart_dir(args, config)
        ChartScaffolder(config, chart_dir, args.manifest_dir).scaffold()
    except ChartGenerationError as e:
        logging.critical("Helm chart generation failed: %s", e)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
