from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Optional

from ..models import Sticker
from ..utils import format_error


class StepStatus(str, Enum):
    DONE = "done"
    SKIPPED = "skipped"
    FAILED = "failed"


@dataclass
class StepResult:
    step: str
    path: Path
    status: StepStatus
    exc: Optional[BaseException] = None
    reason: Optional[str] = None

    @property
    def message(self) -> Optional[str]:
        if self.exc:
            return format_error(self.exc)
        return self.reason


@dataclass
class StickerOutcome:
    pack_name: str
    sticker: Sticker
    steps: list[StepResult] = field(default_factory=list)
    unsupported: bool = False

    def add(
        self,
        step: str,
        path: Path,
        status: StepStatus,
        exc: Optional[BaseException] = None,
        reason: Optional[str] = None,
    ) -> StepResult:
        it = StepResult(step, path, status, exc, reason)
        self.steps.append(it)
        return it

    def done(self, step: str, path: Path) -> StepResult:
        return self.add(step, path, StepStatus.DONE)

    def skip(self, step: str, path: Path) -> StepResult:
        return self.add(step, path, StepStatus.SKIPPED)

    def fail(
        self,
        step: str,
        path: Path,
        exc: Optional[BaseException] = None,
        reason: Optional[str] = None,
    ) -> StepResult:
        return self.add(step, path, StepStatus.FAILED, exc, reason)

    def find(self, step: str) -> Optional[StepResult]:
        return next((x for x in self.steps if x.step == step), None)

    def count(self, status: StepStatus) -> int:
        return sum(1 for x in self.steps if x.status is status)

    @property
    def failed(self) -> bool:
        return any(x.status is StepStatus.FAILED for x in self.steps)

    @property
    def failed_steps(self) -> list[StepResult]:
        return [x for x in self.steps if x.status is StepStatus.FAILED]


@dataclass
class RunReport:
    outcomes: list[StickerOutcome] = field(default_factory=list)

    def count(self, status: StepStatus) -> int:
        return sum(x.count(status) for x in self.outcomes)

    @property
    def failed(self) -> list[StickerOutcome]:
        return [x for x in self.outcomes if x.failed]

    @property
    def unsupported(self) -> list[StickerOutcome]:
        return [x for x in self.outcomes if x.unsupported]

    def summary(self) -> str:
        return (
            f"{len(self.outcomes)} stickers"
            f", {self.count(StepStatus.DONE)} steps done"
            f", {self.count(StepStatus.SKIPPED)} skipped"
            f", {self.count(StepStatus.FAILED)} failed"
            f" ({len(self.failed)} stickers with failures"
            f", {len(self.unsupported)} unsupported)"
        )
