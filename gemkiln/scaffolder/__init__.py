"""gemkiln scaffolder -- composes template sets into a project tree.

Several independently written template sets (``base``, ``rspec``, ``yard``,
user-installed sets, ...) are merged into one output tree.  Later sets
override files of earlier ones, directories are created once, and include
fragments from every set are layered into the files that ask for them.

Quick usage::

    from gemkiln.config import GeneratorOptions
    from gemkiln.scaffolder import ProjectGenerator

    options = GeneratorOptions(yard=True, markdown=True, bundler=True)
    generator = ProjectGenerator(options)
    result = await generator.generate("/tmp/my_cool-gem")
"""

from gemkiln.scaffolder.generator import (
    BASE_TEMPLATE,
    GenerationResult,
    GeneratorError,
    ProjectGenerator,
    TemplateName,
    UnknownTemplateError,
)
from gemkiln.scaffolder.includes import IncludeResolver
from gemkiln.scaffolder.interpolations import interpolate
from gemkiln.scaffolder.registry import (
    TemplateRegistrationError,
    TemplateRegistry,
    default_registry,
)
from gemkiln.scaffolder.template_set import TemplateSet
from gemkiln.scaffolder.templates import TemplateRenderer
from gemkiln.scaffolder.variables import Markup, VariableContext, derive_variables

__all__ = [
    "BASE_TEMPLATE",
    "GenerationResult",
    "GeneratorError",
    "IncludeResolver",
    "Markup",
    "ProjectGenerator",
    "TemplateName",
    "TemplateRegistrationError",
    "TemplateRegistry",
    "TemplateRenderer",
    "TemplateSet",
    "UnknownTemplateError",
    "VariableContext",
    "default_registry",
    "derive_variables",
    "interpolate",
]
