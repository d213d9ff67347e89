"""Interactive restore of saved PostgreSQL dumps."""

from .prompts import Prompter, RichPrompter
from .runner import NoBackupsError, RestoreOutcome, run_restore, validate_target_url

__all__ = [
    "NoBackupsError",
    "Prompter",
    "RestoreOutcome",
    "RichPrompter",
    "run_restore",
    "validate_target_url",
]
