from setuptools import find_packages, setup

setup(
    name="fileintel",
    version="0.1.0",
    description="Duplicate grouping and disposability scoring for candidate cleanup files",
    python_requires=">=3.11",
    packages=find_packages(include=["fileintel", "fileintel.*"]),
    install_requires=["result>=0.17"],
    extras_require={"test": ["pytest>=8"]},
)
