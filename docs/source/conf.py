"""Sphinx configuration for Cotton Blend Allocation documentation."""

import os
import sys

sys.path.insert(0, os.path.abspath("../.."))

project = "Cotton Blend Allocation"
author = "Cotton Blend Allocation contributors"
copyright = "Cotton Blend Allocation contributors | MIT License"
extensions = [
    "sphinx.ext.autodoc",
    "sphinx.ext.napoleon",
    "sphinx.ext.mathjax",
    "myst_parser",
]

source_suffix = {
    ".rst": "restructuredtext",
    ".md": "markdown",
}
templates_path = ["_templates"]
exclude_patterns = ["build"]
html_theme = "sphinx_rtd_theme"
html_theme_options = {
    "navigation_depth": 2,
}

autodoc_member_order = "bysource"
napoleon_numpy_docstring = True
napoleon_google_docstring = False
