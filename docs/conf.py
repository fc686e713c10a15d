"""Sphinx configuration for the pitchvalue documentation."""

import os
import sys

sys.path.insert(0, os.path.abspath(os.path.join(__file__, "..", "..")))

from pitchvalue import __version__  # noqa: E402

project = "pitchvalue"
author = "Richard Owen"
copyright = f"2025, {author}"
release = __version__

extensions = [
    "sphinx.ext.autodoc",
    "sphinx.ext.napoleon",
]

# The visualiser is optional and must not be needed to render the API.
autodoc_mock_imports = ["pygame"]
autodoc_typehints = "description"
napoleon_google_docstring = False
napoleon_numpy_docstring = True

exclude_patterns = ["_build"]
html_theme = "sphinx_rtd_theme"
