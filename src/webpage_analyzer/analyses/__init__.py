"""Page analyses: title, doctype, headings, links and login forms.

With the registry system, analyses auto-register themselves using the
@registry.register decorator. This module auto-imports all analysis
modules to trigger their registration.
"""

import importlib
import pkgutil
from pathlib import Path

# Auto-import all analysis modules to trigger @registry.register decorators
_analysis_dir = Path(__file__).parent
for module_info in pkgutil.iter_modules([str(_analysis_dir)]):
    if not module_info.name.startswith("_") and module_info.name != "protocol":
        importlib.import_module(f".{module_info.name}", package=__name__)

__all__ = []
