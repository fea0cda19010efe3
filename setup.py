from setuptools import setup, find_packages


with open("README.md", "r", encoding="utf-8") as fh:
    long_description = fh.read()

setup(
    name="finestat",
    version="0.1.0",
    description="Concurrent aggregation of traffic-violation fines into an XML report.",
    long_description=long_description,
    long_description_content_type="text/markdown",
    classifiers=[
        "Programming Language :: Python :: 3",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
    ],
    packages=find_packages(exclude=("tests", "tests.*")),
    package_data={"finestat.schemas": ["*.json"]},
    python_requires=">=3.10",
    install_requires=["jsonschema>=4.0", "PyYAML>=6.0"],
    extras_require={"dev": ["pytest"]},
    tests_require=["pytest"],
    entry_points={"console_scripts": ["finestat=finestat.cli:main"]},
)
