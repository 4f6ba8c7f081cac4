"""
python -m build
twine upload dist/*
"""

from setuptools import setup, find_packages


def pizzapi_setup():
    with open("requirements.txt", "rt") as fp:
        install_requires = fp.read().strip().split("\n")

    version = "1.0.0"

    setup(
        name="pizzapi",
        packages=find_packages(exclude=["tests", "tests.*"]),
        package_data={"pizzapi": ["openapi.yaml"]},
        version=version,
        license="MIT",
        description="pizzapi : JSON:API backend for pizza recipes",
        long_description=open("README.rst").read(),
        keywords=["SqlAlchemy", "Flask", "REST", "Swagger", "JsonAPI", "OpenAPI"],
        python_requires=">=3.8, <4",
        install_requires=install_requires,
        classifiers=[
            "Development Status :: 3 - Alpha",
            "Intended Audience :: Developers",
            "Framework :: Flask",
            "Environment :: Web Environment",
            "Programming Language :: Python :: 3.12",
            "Programming Language :: Python :: 3.11",
            "Programming Language :: Python :: 3.10",
            "Programming Language :: Python :: 3.9",
            "Programming Language :: Python :: 3.8",
        ],
        extras_require={"test": ["pytest>=7.0"]},
        entry_points={"console_scripts": ["pizzapi=pizzapi.app:main"]},
    )


pizzapi_setup()  # pragma: no cover
