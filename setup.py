"""Setup script for the walldash household dashboard data layer."""

from pathlib import Path

from setuptools import find_packages, setup

# Read the README file
readme_file = Path(__file__).parent / "README.md"
long_description = readme_file.read_text(encoding="utf-8") if readme_file.exists() else ""

# Read requirements, separating test-only dependencies
requirements_file = Path(__file__).parent / "requirements.txt"
requirements = []
dev_requirements = []

if requirements_file.exists():
    content = requirements_file.read_text().strip()
    lines = content.split("\n")

    for line in lines:
        line = line.strip()
        # Skip empty lines and comments
        if not line or line.startswith("#"):
            continue

        # Test tooling and fixture builders go to the dev extra
        if "pytest" in line or line.startswith("icalendar"):
            dev_requirements.append(line)
        else:
            requirements.append(line)

setup(
    name="walldash",
    version="0.3.0",
    description="Feed parsers for a household wall dashboard: calendar ICS, energy bill CSV and maintenance sheets",
    long_description=long_description,
    long_description_content_type="text/markdown",
    author="Walldash Team",
    author_email="support@walldash.local",
    # Package configuration
    packages=find_packages(exclude=["tests*", "docs*"]),
    include_package_data=True,
    # Dependencies
    install_requires=requirements,
    extras_require={
        "dev": dev_requirements,
        "test": dev_requirements,
    },
    python_requires=">=3.11",
    classifiers=[
        "Development Status :: 4 - Beta",
        "Environment :: Console",
        "Intended Audience :: End Users/Desktop",
        "License :: OSI Approved :: MIT License",
        "Operating System :: POSIX :: Linux",
        "Operating System :: MacOS",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Topic :: Office/Business :: Scheduling",
        "Topic :: Text Processing",
    ],
    keywords="calendar ics csv energy-bill dashboard household",
    entry_points={
        "console_scripts": [
            "walldash=walldash.__main__:main",
        ],
    },
    package_data={
        "walldash": ["py.typed"],
    },
    zip_safe=False,
    platforms=["linux", "macos"],
)
