import re
import subprocess
from pathlib import Path

from setuptools import find_packages, setup


def get_version() -> str:
    try:
        output = subprocess.run(
            [
                "git", "--git-dir", Path(__file__).parent / ".git",
                "describe", "--tags"
            ],
            capture_output=True
        ).stdout.decode().strip().split("-")
    except OSError:
        return "0.dev"
    # Output is either v1.3.5 if the tag points to the current commit or
    # something like this v1.3.5-11-g3b467ad if it doesn't

    version = ".".join(re.findall(r"\d+", output[0])) or "0.dev"
    if len(output) > 1:
        return f"{version}+{output[-1]}"
    else:
        return version


setup(
    name="lobby-matchmaker",
    version=get_version(),
    packages=find_packages(exclude=["tests", "tests.*"]),
    py_modules=["main"],
    license="GPLv3",
    description="Happiness based matchmaker that groups waiting users into rooms",
    python_requires=">=3.9",
    install_requires=[
        "aiomysql",
        "docopt",
        "humanize",
        "prometheus_client",
        "pyyaml",
        "sqlalchemy[asyncio]>=1.4",
        "uvloop; sys_platform != 'win32'",
    ],
    extras_require={
        "test": [
            "hypothesis",
            "pytest",
            "pytest-asyncio",
            "pytest-mock",
        ]
    },
    include_package_data=True
)
