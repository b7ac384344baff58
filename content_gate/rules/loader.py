import logging
import os
from pathlib import Path

import yaml
from pydantic import ValidationError

from content_gate.rules.models import Rules

logger = logging.getLogger(__name__)

CEILING_ENV_VAR = "CONTENT_GATE_PREVIEW_CEILING_SECONDS"


def _strip_code_fence(content: str) -> str:
    """Return the first ```yaml block if present, else the whole text."""
    yaml_lines = []
    in_block = False
    found_block = False

    for line in content.splitlines():
        s_line = line.strip()
        if s_line.startswith("```yaml"):
            in_block = True
            found_block = True
            continue
        if in_block and s_line.startswith("```"):
            break
        if in_block:
            yaml_lines.append(line)

    return "\n".join(yaml_lines) if found_block else content


def load_rules(path: Path) -> Rules:
    """
    Load and validate the rules file.
    Raises FileNotFoundError if file missing.
    Raises ValueError if YAML or schema invalid.
    """
    if not path.exists():
        raise FileNotFoundError(f"Rules file not found at: {path}")

    with open(path) as f:
        content = f.read()

    try:
        data = yaml.safe_load(_strip_code_fence(content))
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML syntax in rules file: {e}") from e

    try:
        rules = Rules.model_validate(data)
    except ValidationError as e:
        raise ValueError(f"Rules validation failed:\n{e}") from e

    return apply_env_overrides(rules)


def apply_env_overrides(rules: Rules) -> Rules:
    """Apply environment overrides (preview ceiling) on top of file rules."""
    raw = os.environ.get(CEILING_ENV_VAR)
    if raw is None:
        return rules

    try:
        ceiling = int(raw)
    except ValueError as e:
        raise ValueError(f"{CEILING_ENV_VAR} must be an integer, got {raw!r}") from e
    if ceiling <= 0:
        raise ValueError(f"{CEILING_ENV_VAR} must be positive, got {ceiling}")

    logger.info("Preview ceiling overridden from environment: %ds", ceiling)
    preview = rules.preview.model_copy(update={"ceiling_seconds": ceiling})
    return rules.model_copy(update={"preview": preview})
