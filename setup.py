"""Setup configuration for payload_changes"""

from setuptools import setup, find_packages

setup(
    name="payload-changes",
    version="0.1.0",
    description=(
        "CLI tool listing recent commits of every source repository "
        "referenced by a release payload."
    ),
    author="Payload Changes Contributors",
    author_email="",
    python_requires=">=3.10",
    package_dir={"": "src"},
    packages=find_packages(where="src"),
    install_requires=[
        "requests>=2.28.0",
        "rich>=12.0",
    ],
    extras_require={
        "dev": [
            "pytest>=7.0",
            "black>=22.0",
            "flake8>=4.0",
            "mypy>=0.950",
        ],
    },
    entry_points={
        "console_scripts": [
            "payload-changes=payload_changes.main:main",
        ],
    },
)
