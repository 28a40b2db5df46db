from enum import Enum


class DocumentKind(str, Enum):
    CHECK = "check"
    RECEIPT = "receipt"

    @classmethod
    def parse(cls, value: str) -> "DocumentKind":
        try:
            return cls(value.lower())
        except ValueError as exc:
            raise ValueError(
                f"Unknown document kind '{value}'. Choose from: {[k.value for k in cls]}"
            ) from exc
