"""Load GitHub credentials from a local (gitignored) JSON file."""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any, Dict, List, Optional

DEFAULT_SECRETS_FILENAME = "local_secrets.json"


def _default_secrets_path() -> Path:
    root = Path(__file__).resolve().parents[1]
    return root / DEFAULT_SECRETS_FILENAME


def load_local_secrets(path: Optional[str | Path] = None) -> Dict[str, Any]:
    """Load secrets from a JSON file; return {} when it is missing or unreadable."""

    candidate = path or os.getenv("LOCAL_SECRETS_FILE") or _default_secrets_path()
    secrets_path = Path(candidate).expanduser()
    if not secrets_path.exists():
        return {}
    try:
        with secrets_path.open("r", encoding="utf-8") as handle:
            data = json.load(handle)
    except (OSError, ValueError):
        return {}
    return data if isinstance(data, dict) else {}


def resolve_github_tokens(secrets: Optional[Dict[str, Any]] = None,
                          env_value: Optional[str] = None) -> List[str]:
    """Collect tokens: GITHUB_ACCESS_TOKEN (comma separated) first, then the secrets file."""
    if env_value is None:
        env_value = os.getenv("GITHUB_ACCESS_TOKEN", "")
    tokens = [tok.strip() for tok in env_value.split(",") if tok.strip()]
    for tok in (secrets or {}).get("github_tokens", []) or []:
        if isinstance(tok, str) and tok and tok not in tokens:
            tokens.append(tok)
    return tokens


__all__ = ["load_local_secrets", "resolve_github_tokens", "DEFAULT_SECRETS_FILENAME"]
