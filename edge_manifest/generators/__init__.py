"""Code generators driven by a validated manifest.

Quick usage::

    from edge_manifest.generators import GeneratorOptions, generate_all

    output = await generate_all(manifest, GeneratorOptions(skip=["admin"]))
    print(output.schema)
    print(output.admin.routes)  # {} because "admin" was skipped
"""

from edge_manifest.generators.admin_assets_gen import (
    generate_admin_assets,
    generate_admin_assets_module,
)
from edge_manifest.generators.admin_gen import AdminOutput, generate_admin_ui
from edge_manifest.generators.api_gen import generate_api_routes, generate_request_schemas
from edge_manifest.generators.config_gen import generate_config
from edge_manifest.generators.dispatch import (
    GENERATOR_GROUPS,
    GeneratorOptions,
    GeneratorOutput,
    UnknownGeneratorTargetError,
    generate,
    generate_all,
)
from edge_manifest.generators.migration_gen import (
    MigrationMetadata,
    generate_migration_metadata,
    generate_migrations,
    generate_rollback,
)
from edge_manifest.generators.plugins import (
    ApiDocsPlugin,
    GeneratorPlugin,
    GeneratorPluginError,
    GeneratorRegistry,
    PluginNotFoundError,
    PluginRegistrationError,
    PluginValidationError,
    run_all_generators,
    run_generator,
)
from edge_manifest.generators.schema_gen import (
    generate_pydantic_schemas,
    generate_sqlalchemy_schema,
)
from edge_manifest.generators.templates import TemplateRenderer
from edge_manifest.generators.type_gen import generate_api_types, generate_types

__all__ = [
    "AdminOutput",
    "ApiDocsPlugin",
    "GENERATOR_GROUPS",
    "GeneratorOptions",
    "GeneratorOutput",
    "GeneratorPlugin",
    "GeneratorPluginError",
    "GeneratorRegistry",
    "MigrationMetadata",
    "PluginNotFoundError",
    "PluginRegistrationError",
    "PluginValidationError",
    "TemplateRenderer",
    "UnknownGeneratorTargetError",
    "generate",
    "generate_admin_assets",
    "generate_admin_assets_module",
    "generate_admin_ui",
    "generate_all",
    "generate_api_routes",
    "generate_api_types",
    "generate_config",
    "generate_migration_metadata",
    "generate_migrations",
    "generate_pydantic_schemas",
    "generate_request_schemas",
    "generate_rollback",
    "generate_sqlalchemy_schema",
    "generate_types",
    "run_all_generators",
    "run_generator",
]
