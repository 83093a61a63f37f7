from setuptools import setup
from codecs import open
from os import path
from crudadmin import __version__ as pkg_version, __author__ as pkg_author, __license__ as pkg_license

# Load the README file for use in the long description
local_dir = path.abspath(path.dirname(__file__))
with open(path.join(local_dir, "README.rst"), encoding="utf-8") as f:
  long_description = f.read()

requires = [
  "iso8601",
]

tests_requires = [
  "nose2",
  "nose2[coverage_plugin]",
]

extras_require = {
  "doc": ["sphinx", "sphinx_rtd_theme"],
  "test": tests_requires,
  "lint": ["pylint"],
}

setup(
  name="crudadmin",
  version=pkg_version,
  description="Field descriptions and filter form types for CRUD administration",
  long_description=long_description,
  author=pkg_author,
  license=pkg_license,
  classifiers=[
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "License :: OSI Approved :: MIT License",
    "Programming Language :: Python :: 3",
    "Topic :: Software Development :: Libraries",
    "Operating System :: OS Independent",
  ],
  keywords="admin crud field description filter",
  packages=["crudadmin"],
  python_requires=">=3.6",
  install_requires=requires,
  extras_require=extras_require,
)
