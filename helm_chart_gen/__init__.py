"""
Helm chart generation from kubebuilder manifests.
"""

__version__ = "1.0.0"
