"""adoc-reducer core library package.

Subpackages:
- document: reader, attributes, conditionals, includes and block scanner
- reduction: directive tracking, replay and rebuild
- config: layered YAML configuration
"""

# Re-export exceptions module
from . import exceptions  # noqa: F401
