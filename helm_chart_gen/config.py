# Copyright (c) 2025 Red Hat, Inc.
# Copyright Contributors to the Open Cluster Management project

"""Project configuration read from the kubebuilder PROJECT file"""

import logging
from typing import Optional

from helm_chart_gen.constants import DEFAULT_PROJECT_FILE, HELM_PLUGIN_KEY
from helm_chart_gen.exceptions import ConfigurationError
from helm_chart_gen.helm_utils import load_yaml


class ProjectConfig:
    """Accessor for the project settings the chart generation depends on"""

    def __init__(self, data: dict = None, project_name: str = None):
        self.data = data or {}
        self._project_name = project_name

    @classmethod
    def load(cls, path: str = DEFAULT_PROJECT_FILE, project_name: str = None) -> "ProjectConfig":
        """Load the PROJECT file. An explicit project name overrides the file's."""
        data = load_yaml(path)
        if not data:
            logging.info("No project configuration found at %s", path)
        return cls(data, project_name)

    @property
    def project_name(self) -> str:
        name = self._project_name or self.data.get('projectName')
        if not name:
            raise ConfigurationError(
                "Missing required field 'projectName'. "
                "Provide it in the PROJECT file or with --project-name."
            )
        return name

    def plugin_config(self, key: str = HELM_PLUGIN_KEY) -> dict:
        """Get the settings stored for a plugin, empty if there are none"""
        plugins = self.data.get('plugins') or {}
        return plugins.get(key) or {}

    @property
    def chart_dir(self) -> Optional[str]:
        """Chart directory recorded by a previous run, if any"""
        return self.plugin_config().get('chartDir') or None
