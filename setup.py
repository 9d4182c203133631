import io
import os
import re

from setuptools import find_packages, setup


with io.open("flask_selecttree/__init__.py", "rt", encoding="utf8") as f:
    version = re.search(r"__version__ = \"(.*?)\"", f.read()).group(1)


def fpath(name):
    return os.path.join(os.path.dirname(__file__), name)


def read(fname):
    return open(fpath(fname)).read()


def desc():
    return read("README.rst")


setup(
    name="Flask-SelectTree",
    version=version,
    license="BSD",
    description=(
        "Hierarchical single and multiple select field for Flask and WTForms,"
        " backed by self referencing SQLAlchemy models."
    ),
    long_description=desc(),
    long_description_content_type="text/x-rst",
    packages=find_packages(exclude=["tests*"]),
    include_package_data=True,
    zip_safe=False,
    platforms="any",
    install_requires=[
        "Flask>=2, <4",
        "Flask-Babel>=2, <5",
        "markupsafe>=2",
        "SQLAlchemy>=1.4, <3",
        "WTForms>=3, <4",
    ],
    extras_require={
        "testing": [
            "pytest>=7",
            "Flask-SQLAlchemy>=3, <4",
        ],
    },
    classifiers=[
        "Development Status :: 4 - Beta",
        "Environment :: Web Environment",
        "Intended Audience :: Developers",
        "License :: OSI Approved :: BSD License",
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3.8",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Topic :: Software Development :: Libraries :: Python Modules",
    ],
    python_requires=">=3.8",
)
