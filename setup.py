"""Setup configuration for helm-chart-gen"""

from setuptools import setup, find_packages
from pathlib import Path

# Read README for long description
readme_file = Path(__file__).parent / "README.md"
long_description = ""
if readme_file.exists():
    long_description = readme_file.read_text()

setup(
    name="helm-chart-gen",
    version="1.0.0",
    description="Generate a Helm chart from kubebuilder RBAC, CRD, network-policy and webhook manifests",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=find_packages(exclude=["tests", "tests.*"]),
    python_requires=">=3.8",
    install_requires=[
        "PyYAML>=5.4",
        "coloredlogs>=15.0",
    ],
    entry_points={
        "console_scripts": [
            "helm-chart-gen=helm_chart_gen.cli:main",
        ],
    },
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Developers",
        "Topic :: System :: Systems Administration",
        "Topic :: Utilities",
        "Programming Language :: Python :: 3",
        "Operating System :: OS Independent",
    ],
    keywords="helm kubernetes kubebuilder chart crd rbac webhook",
)
