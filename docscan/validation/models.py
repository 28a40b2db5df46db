from collections.abc import Mapping
from dataclasses import dataclass, field, replace

PathSegment = str | int


@dataclass(frozen=True)
class ValidationIssue:
    """A single validation failure located at `path` inside the validated value."""

    message: str
    path: tuple[PathSegment, ...] = ()
    code: str = "custom"
    invalid_value: object = None
    metadata: Mapping[str, object] = field(default_factory=dict)

    @property
    def dotted_path(self) -> str:
        return ".".join(str(segment) for segment in self.path)

    def nested_under(self, segment: PathSegment, validator_name: str) -> "ValidationIssue":
        """Return a copy re-rooted one level deeper, keeping code and value intact.

        The innermost validator name wins when an issue is propagated through
        several levels.
        """
        return replace(
            self,
            path=(segment, *self.path),
            metadata={"nested_validator": validator_name, **self.metadata},
        )
