# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-10-14
# Description: sse.py
# -----------------------------------------------------------------------------
import json
from contextlib import aclosing
from typing import Any, AsyncIterator, Dict


def format_sse(event: Dict[str, Any]) -> str:
    """One server-sent event carrying a JSON payload."""
    return f"data: {json.dumps(event, ensure_ascii=False)}\n\n"


async def sse_stream(events: AsyncIterator[Dict[str, Any]]) -> AsyncIterator[str]:
    # closing the response (client gone) closes the event source too
    async with aclosing(events) as source:
        async for event in source:
            yield format_sse(event)
