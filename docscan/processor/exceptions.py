from docscan.processor.models import ProcessingFailure, Stage
from docscan.validation.models import ValidationIssue


class ProcessingError(Exception):
    """Raised by the raising pipeline API when a document reaches Failed."""

    def __init__(self, failure: ProcessingFailure) -> None:
        super().__init__(f"{failure.stage.value} stage failed: {failure.message}")
        self.failure = failure

    @property
    def stage(self) -> Stage:
        return self.failure.stage

    @property
    def issues(self) -> tuple[ValidationIssue, ...]:
        return self.failure.issues
