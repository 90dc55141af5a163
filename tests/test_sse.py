# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-10-14
# Description: test_sse.py
# -----------------------------------------------------------------------------
import json

import pytest

from utility.sse import format_sse, sse_stream


def test_format_sse_frames_one_json_event():
    frame = format_sse({"content": "Hello"})

    assert frame == 'data: {"content": "Hello"}\n\n'
    assert json.loads(frame[len("data: "):]) == {"content": "Hello"}


def test_format_sse_keeps_non_ascii_text():
    assert format_sse({"content": "Grüße"}) == 'data: {"content": "Grüße"}\n\n'


@pytest.mark.asyncio
async def test_sse_stream_closes_source_when_closed_early():
    closed = []

    async def events():
        try:
            yield {"content": "a"}
            yield {"content": "b"}
        finally:
            closed.append(True)

    frames = sse_stream(events())
    assert await frames.__anext__() == 'data: {"content": "a"}\n\n'
    await frames.aclose()

    assert closed == [True]
