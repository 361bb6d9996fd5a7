"""Name recorded as the author of classifications and postings."""

import getpass
from typing import Optional

FALLBACK_ACTOR = "ledgerkit"


def resolve_actor(actor: Optional[str]) -> str:
    """Return the given actor, or the login name of the current user.

    Falls back to ``FALLBACK_ACTOR`` when the login name is unavailable, as in
    containers without USER/LOGNAME or a passwd entry.
    """
    if actor:
        return actor
    try:
        return getpass.getuser()
    except (OSError, KeyError):
        return FALLBACK_ACTOR
