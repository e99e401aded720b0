"""
adoc-reducer - flatten AsciiDoc documents

Reduces a document composed with include directives and preprocessor
conditionals into a single document that contains exactly the lines a
parser would read.
"""

__version__ = "1.0.0"

from .api import reduce, reduce_file  # noqa: E402

__all__ = ["__version__", "reduce", "reduce_file"]
