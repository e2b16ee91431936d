"""Auto-discover experiment packages.

Importing this package imports every subpackage, which registers its
runner with ExperimentRegistry.
"""

import importlib
import pkgutil

for _, name, is_pkg in pkgutil.iter_modules(__path__):
    if is_pkg:
        importlib.import_module(f'.{name}', __package__)
