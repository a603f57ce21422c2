from __future__ import annotations

import re
from typing import Optional

# Gecko token is either the frozen build id 20100101 or "<major>.0".
TBB_USER_AGENTS = re.compile(
    r"Mozilla/5\.0 \([^)]*\) Gecko/([0-9]+\.0|20100101) Firefox/[0-9]+\.0"
)


def likely_tbb(user_agent: Optional[str]) -> bool:
    """Whether the User-Agent has the shape Tor Browser sends.

    Advisory only: regular Firefox can produce the same string and any
    client can spoof it.
    """
    if not user_agent:
        return False
    return TBB_USER_AGENTS.fullmatch(user_agent) is not None
