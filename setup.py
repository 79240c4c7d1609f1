from setuptools import setup, find_packages

setup(
    name="skillsync",
    version="0.1.0",
    description="skillsync - collects .claude/skills folders from local projects into one destination",
    author="skillsync contributors",
    package_dir={"": "src"},
    packages=find_packages("src"),
    include_package_data=True,
    python_requires=">=3.10",
    install_requires=[
        "typer>=0.16.0",
        "rich>=13.7.1",
        "python-dotenv>=1.0.1",
        "PyYAML>=6.0.2",
    ],
    extras_require={
        "test": [
            "pytest>=8.3.2",
        ],
    },
    entry_points={
        "console_scripts": [
            "skillsync=skillsync.apps.cli.app:app",  # command `skillsync`
        ],
    },
)
