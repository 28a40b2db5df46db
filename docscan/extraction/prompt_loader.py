import json
from pathlib import Path
from typing import Any

PROMPT_DIR = Path(__file__).parent / "prompts"


class PromptLoadError(Exception):
    """Raised when a bundled prompt or schema file cannot be loaded."""


def load_prompt(name: str, prompt_dir: Path | None = None) -> str:
    """Load a prompt text file.

    Args:
        name: File stem, e.g. "check" loads check_prompt.txt.
        prompt_dir: Directory to read from. Defaults to the bundled prompts.

    Returns:
        The raw prompt text.

    Raises:
        PromptLoadError: if the file cannot be read.
    """
    path = (prompt_dir or PROMPT_DIR) / f"{name}_prompt.txt"
    try:
        return path.read_text(encoding="utf-8")
    except OSError as exc:
        raise PromptLoadError(f"Failed to load prompt '{name}': {exc}") from exc


def load_json_schema(name: str, prompt_dir: Path | None = None) -> dict[str, Any]:
    """Load and parse a bundled `<name>_schema.json` file.

    Raises:
        PromptLoadError: if the file cannot be read or is not a JSON object.
    """
    path = (prompt_dir or PROMPT_DIR) / f"{name}_schema.json"
    try:
        schema = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        raise PromptLoadError(f"Failed to load JSON schema '{name}': {exc}") from exc
    if not isinstance(schema, dict):
        raise PromptLoadError(f"JSON schema '{name}' must be an object")
    return schema
