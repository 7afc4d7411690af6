"""Names derived from a module name, shared by the scaffolder and the CLI."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping

from .naming import class_prefix, table_name, validate_module_name

MODULES_NAMESPACE = "Modules"


@dataclass(slots=True, frozen=True)
class ModuleConfig:
    """Identifiers describing a module to generate.

    Attributes
    ----------
    name:
        The module name as given by the user. It is used verbatim for the
        module directory and the ``{{moduleName}}`` placeholder.
    model_name:
        The Eloquent model class, ``name`` with its first letter upper-cased.
    controller_name:
        ``<Model>Controller``.
    request_name:
        ``<Model>Request``, the form-request class.
    resource_name:
        ``<Model>Resource``, the API resource class.
    table:
        The snake_cased, pluralized database table (``BlogPost`` ->
        ``blog_posts``).
    migration_name:
        ``create_<table>_table``.
    """

    name: str
    model_name: str
    controller_name: str
    request_name: str
    resource_name: str
    table: str
    migration_name: str

    @classmethod
    def from_name(cls, name: str) -> "ModuleConfig":
        """Build a :class:`ModuleConfig` from a user supplied module name."""

        module_name = validate_module_name(name)
        model = class_prefix(module_name)
        table = table_name(module_name)

        return cls(
            name=module_name,
            model_name=model,
            controller_name=f"{model}Controller",
            request_name=f"{model}Request",
            resource_name=f"{module_name}Resource",
            table=table,
            migration_name=f"create_{table}_table",
        )

    @property
    def namespace(self) -> str:
        return f"{MODULES_NAMESPACE}\\{self.name}"

    @property
    def provider_name(self) -> str:
        return f"{self.name}ServiceProvider"

    @property
    def provider_fqcn(self) -> str:
        """Fully-qualified class name of the module's service provider."""

        return f"{self.namespace}\\Providers\\{self.provider_name}"

    def context(self) -> Mapping[str, str]:
        """Return the placeholder values understood by the stub renderer."""

        return {
            "moduleName": self.name,
            "modelName": self.model_name,
            "controllerName": self.controller_name,
            "requestName": self.request_name,
            "resourceName": self.resource_name,
            "migrationName": self.migration_name,
            "table": self.table,
            "namespace": self.namespace,
        }
