"""treegen -- render directory templates and tear them down again.

Quick usage::

    from treegen import Generator, Options

    generator = Generator(Options(variables={"name": "demo"}), "templates/app", "out")
    generator.generate()
    generator.destroy()
"""

from treegen.config import GeneratorError, Options, load_variables
from treegen.conflict import ConflictResolver
from treegen.cursor import StepCursor, UserInterrupt
from treegen.generator import Generator, TraversalSession
from treegen.models import (
    Action,
    ActionStep,
    ConflictChoice,
    DirectoryStep,
    FileStep,
    Mode,
    Step,
)
from treegen.reporting import ReportEntry, Reporter
from treegen.templates import TemplateRenderer

__all__ = [
    "Action",
    "ActionStep",
    "ConflictChoice",
    "ConflictResolver",
    "DirectoryStep",
    "FileStep",
    "Generator",
    "GeneratorError",
    "Mode",
    "Options",
    "ReportEntry",
    "Reporter",
    "Step",
    "StepCursor",
    "TemplateRenderer",
    "TraversalSession",
    "UserInterrupt",
    "load_variables",
]
