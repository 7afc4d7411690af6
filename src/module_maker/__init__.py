"""Generate framework modules inside a Laravel application.

The package derives class, table and migration names from a module name,
renders a tree of ``.stub`` templates into a new module directory and
registers the module with the host project's composer autoloader and service
provider list. It can be used programmatically through
:class:`ModuleScaffolder` or via the ``module-maker`` command.
"""

from __future__ import annotations

from .config import ModuleConfig
from .errors import InvalidModuleNameError, ModuleExistsError, ModuleMakerError, StubsNotFoundError
from .naming import pluralize, snake_case, table_name
from .scaffold import ModuleScaffolder, ScaffoldReport
from .settings import MakerSettings
from .template import StubRenderer, TemplateRenderingError

__all__ = [
    "InvalidModuleNameError",
    "MakerSettings",
    "ModuleConfig",
    "ModuleExistsError",
    "ModuleMakerError",
    "ModuleScaffolder",
    "ScaffoldReport",
    "StubRenderer",
    "StubsNotFoundError",
    "TemplateRenderingError",
    "pluralize",
    "snake_case",
    "table_name",
]

__version__ = "0.1.0"
