"""Configuration models for the speccontext engine."""

import os
from dataclasses import dataclass
from typing import Optional


@dataclass
class SpecContextConfig:
    """Configuration for the specification context engine."""

    # Workspace layout
    workspace_dir: str = "."
    specs_dirname: str = "specs"
    reqs_dirname: str = "reqs"

    # Ranking settings
    default_limit: int = 5
    index_weight: int = 2   # index-derived matches count double
    hint_boost: int = 5     # flat boost for caller-supplied hint files

    # Diff rendering
    color: bool = True

    # Text-generation service
    llm_provider: Optional[str] = None
    llm_api_key: Optional[str] = None
    fast_model: Optional[str] = None
    deep_model: Optional[str] = None
    llm_max_retries: int = 3

    @classmethod
    def from_env(cls, **overrides) -> "SpecContextConfig":
        """Build a config from SPECCONTEXT_* environment variables."""
        values = {
            "workspace_dir": os.environ.get("SPECCONTEXT_WORKSPACE_DIR") or os.getcwd(),
            "llm_provider": os.environ.get("SPECCONTEXT_LLM_PROVIDER"),
            "llm_api_key": os.environ.get("SPECCONTEXT_LLM_API_KEY"),
            "fast_model": os.environ.get("SPECCONTEXT_LLM_FAST_MODEL"),
            "deep_model": os.environ.get("SPECCONTEXT_LLM_DEEP_MODEL"),
        }
        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)
