"""Static page builders."""
from .base import BaseBuilder
from .classes_services import ClassesServicesBuilder
from .instructors import InstructorsBuilder
from .schedule import ScheduleBuilder
from .teacher_training import TeacherTrainingBuilder

# CLI command name -> builder, in the order `all` runs them
BUILDERS = {
    builder.name: builder
    for builder in (
        InstructorsBuilder,
        ScheduleBuilder,
        ClassesServicesBuilder,
        TeacherTrainingBuilder,
    )
}

__all__ = [
    "BaseBuilder",
    "ClassesServicesBuilder",
    "InstructorsBuilder",
    "ScheduleBuilder",
    "TeacherTrainingBuilder",
    "BUILDERS",
]
