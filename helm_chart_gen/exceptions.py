# Copyright (c) 2025 Red Hat, Inc.
# Copyright Contributors to the Open Cluster Management project

"""
Exceptions raised while generating the Helm chart.
"""


class ChartGenerationError(Exception):
    """Fatal error during chart generation, optionally bound to a file or directory."""

    def __init__(self, message, path=None):
        super().__init__(message)
        self.path = path


class ConfigurationError(ChartGenerationError):
    """The project configuration is missing or unusable."""
