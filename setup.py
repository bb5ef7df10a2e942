import re
from pathlib import Path

from setuptools import setup, find_packages

VERSION_FILE = Path(__file__).parent / "src" / "conlog" / "_version.py"
VERSION = re.search(r'^__version__ = "([^"]+)"',
                    VERSION_FILE.read_text(encoding="utf-8"), re.M).group(1)

setup(
    name="conlog",
    version=VERSION,
    description="Leveled console logger — prefixes, colors, borders, groups and throttling for terminal output",
    author="Dustin",
    author_email="6962246+djdarcy@users.noreply.github.com",
    url="https://github.com/djdarcy/conlog",
    package_dir={"": "src"},
    packages=find_packages("src"),
    install_requires=[
        "colorama>=0.4.6",
    ],
    extras_require={
        "test": ["pytest>=7.0"],
    },
    entry_points={
        "console_scripts": [
            "conlog=conlog.cli:main",
        ],
    },
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Developers",
        "License :: OSI Approved :: GNU General Public License v3 (GPLv3)",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
    ],
    python_requires=">=3.10",
)
