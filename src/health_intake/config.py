"""Engine configuration — reads settings from environment variables.

All settings have sensible defaults for local development.  Hosts that
embed the engine typically override them via env vars or a ``.env`` file
loaded by their own process manager.
"""

import os
from dataclasses import dataclass


@dataclass(frozen=True)
class EngineSettings:
    """Immutable engine configuration read from environment at startup."""

    # Catalogue directory (None → QuestionRegistry default, the packaged v1/)
    ruleset_dir: str | None = None

    # Summary templates (None → DossierSummarizer default, the packaged template/)
    template_dir: str | None = None

    # Logging
    log_level: str = "INFO"


def load_settings() -> EngineSettings:
    """Build settings from ``INTAKE_*`` environment variables."""
    return EngineSettings(
        ruleset_dir=os.getenv("INTAKE_RULESET_DIR") or None,
        template_dir=os.getenv("INTAKE_TEMPLATE_DIR") or None,
        log_level=os.getenv("INTAKE_LOG_LEVEL", "INFO").upper(),
    )
