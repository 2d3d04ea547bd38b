# -*- coding: utf-8 -*-
"""
Step Registry - ordered, immutable list of wizard step definitions.

The registry order is the only legal step order. Every "before/after",
"required" or "which step is this" question is answered here instead of
by index arithmetic at call sites.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, Iterator, List, Optional, Sequence, Tuple, Type

from services.translation_manager import tr


class StepState(Enum):
    """Display state of a step in the step indicator."""
    UPCOMING = "upcoming"
    CURRENT = "current"
    COMPLETE = "complete"
    ERRORED = "errored"


@dataclass
class StepValidationResult:
    """Result of step validation."""
    is_valid: bool = True
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    def add_error(self, message: str):
        """Add an error message."""
        self.errors.append(message)
        self.is_valid = False

    def add_warning(self, message: str):
        """Add a warning message."""
        self.warnings.append(message)

    def has_errors(self) -> bool:
        return len(self.errors) > 0

    def has_warnings(self) -> bool:
        return len(self.warnings) > 0


@dataclass(frozen=True)
class StepDefinition:
    """
    One wizard step.

    Attributes:
        id: stable step identifier (a StepId member)
        title_key: translation key of the step title
        required: whether the step must validate before moving past it
        checker: pure, total function draft -> StepValidationResult
        projector: pure function draft -> fields owned by this step
        description_key: translation key of the subtitle
    """
    id: Enum
    title_key: str
    required: bool
    checker: Callable[[Any], StepValidationResult]
    projector: Callable[[Any], Dict[str, Any]]
    description_key: str = ""

    @property
    def title(self) -> str:
        return tr(self.title_key)

    @property
    def description(self) -> str:
        return tr(self.description_key) if self.description_key else ""

    def check(self, draft) -> StepValidationResult:
        return self.checker(draft)

    def validate(self, draft) -> bool:
        return self.checker(draft).is_valid

    def project(self, draft) -> Dict[str, Any]:
        return self.projector(draft)


class StepRegistry:
    """
    Immutable, ordered collection of step definitions.

    Built once at startup. When id_type is given, every member of that
    enum must have exactly one definition.
    """

    def __init__(self, steps: Sequence[StepDefinition], id_type: Optional[Type[Enum]] = None):
        steps = tuple(steps)
        if not steps:
            raise ValueError("A wizard needs at least one step")

        ids = [step.id for step in steps]
        duplicates = {i for i in ids if ids.count(i) > 1}
        if duplicates:
            raise ValueError(f"Duplicate step ids: {sorted(d.value for d in duplicates)}")

        if id_type is not None:
            missing = [member for member in id_type if member not in ids]
            if missing:
                raise ValueError(f"Steps without a definition: {[m.value for m in missing]}")

        self._steps: Tuple[StepDefinition, ...] = steps
        self._index_by_id = {step.id: index for index, step in enumerate(steps)}

    def __len__(self) -> int:
        return len(self._steps)

    def __iter__(self) -> Iterator[StepDefinition]:
        return iter(self._steps)

    def __getitem__(self, index: int) -> StepDefinition:
        return self._steps[index]

    @property
    def steps(self) -> Tuple[StepDefinition, ...]:
        return self._steps

    def contains_index(self, index: int) -> bool:
        return 0 <= index < len(self._steps)

    def by_index(self, index: int) -> Optional[StepDefinition]:
        if self.contains_index(index):
            return self._steps[index]
        return None

    def by_id(self, step_id: Enum) -> StepDefinition:
        return self._steps[self._index_by_id[step_id]]

    def index_of(self, step_id: Enum) -> int:
        return self._index_by_id[step_id]

    def is_required(self, index: int) -> bool:
        step = self.by_index(index)
        return step is not None and step.required

    def is_before(self, first: Enum, second: Enum) -> bool:
        return self.index_of(first) < self.index_of(second)

    def required_steps(self) -> List[StepDefinition]:
        return [step for step in self._steps if step.required]

    @property
    def last_index(self) -> int:
        return len(self._steps) - 1
