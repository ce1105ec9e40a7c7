# setup.py - Package configuration for querybar

from setuptools import setup, find_packages

with open("README.md", "r", encoding="utf-8") as fh:
    long_description = fh.read()

with open("requirements.txt", "r", encoding="utf-8") as fh:
    requirements = [line.strip() for line in fh if line.strip() and not line.startswith("#")]

setup(
    name="querybar",
    version="0.1.0",
    author="CloudClub",
    author_email="example@cloudclub.com",
    description="Database panel of a request debug toolbar",
    long_description=long_description,
    long_description_content_type="text/markdown",
    url="https://github.com/cloudclub/querybar",
    packages=find_packages(exclude=["tests", "tests.*", "examples", "examples.*"]),
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Developers",
        "Topic :: Software Development :: Debuggers",
        "License :: OSI Approved :: Apache Software License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.8",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
    ],
    python_requires=">=3.8",
    install_requires=requirements,
    extras_require={
        "test": ["pytest>=7.0"],
        "examples": ["flask>=2.0"],
    },
    entry_points={
        "console_scripts": [
            "querybar=querybar.cli:cli",
        ],
    },
    include_package_data=True,
    zip_safe=False,
)
