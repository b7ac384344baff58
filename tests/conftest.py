from pathlib import Path

import pytest

from content_gate.rules.loader import CEILING_ENV_VAR, load_rules
from content_gate.rules.models import Rules

PROJECT_ROOT = Path(__file__).parent.parent


@pytest.fixture
def rules_path() -> Path:
    """The real rules.yaml from the project root."""
    path = PROJECT_ROOT / "rules.yaml"
    if not path.exists():
        raise FileNotFoundError(f"Rules not found at {path}")
    return path


@pytest.fixture
def rules(rules_path: Path, monkeypatch: pytest.MonkeyPatch) -> Rules:
    """Rules as loaded from disk, without environment overrides."""
    monkeypatch.delenv(CEILING_ENV_VAR, raising=False)
    return load_rules(rules_path)
