import asyncio
import json
import logging
from io import StringIO
from unittest.mock import MagicMock

import pytest
from aiogram.types import Message

from middlewares.correlation import CorrelationMiddleware
from utils.logging import (
    JSONFormatter,
    get_conversation_id,
    get_logger,
    get_request_id,
    set_request_context,
)


@pytest.fixture(autouse=True)
def clear_context():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    set_request_context(None, None)
    yield
    root.handlers = handlers
    root.setLevel(level)


def _setup_capture():
    stream = StringIO()
    handler = logging.StreamHandler(stream)
    handler.setFormatter(JSONFormatter())
    root = logging.getLogger()
    root.handlers = [handler]
    root.setLevel(logging.INFO)
    return stream


def _message(chat_id):
    msg = MagicMock(spec=Message)
    msg.chat = MagicMock(id=chat_id)
    msg.text = "/status"
    return msg


@pytest.mark.asyncio
async def test_concurrent_request_ids_isolated():
    mw = CorrelationMiddleware()

    async def handler(event, data):
        await asyncio.sleep(0)
        return get_request_id(), get_conversation_id(), data["request_id"]

    res1, res2 = await asyncio.gather(mw(handler, _message(1), {}), mw(handler, _message(2), {}))

    assert res1[0] != res2[0]
    assert res1[0] == res1[2]
    assert res1[1] == "1"
    assert res2[1] == "2"
    assert get_request_id() is None
    assert get_conversation_id() is None


@pytest.mark.asyncio
async def test_conversation_id_in_handler_logs():
    stream = _setup_capture()
    mw = CorrelationMiddleware()

    async def handler(event, data):
        get_logger(__name__).info("handler called")

    await mw(handler, _message(42), {})

    lines = stream.getvalue().strip().splitlines()
    received = json.loads(lines[0])
    assert received["message"] == "update received"
    assert received["update_type"] == "Message"
    record = json.loads(lines[-1])
    assert record["conversation_id"] == "42"
    assert record["request_id"]


@pytest.mark.asyncio
async def test_context_cleared_after_handler_error():
    mw = CorrelationMiddleware()

    async def handler(event, data):
        raise RuntimeError("boom")

    with pytest.raises(RuntimeError):
        await mw(handler, _message(3), {})

    assert get_request_id() is None
    assert get_conversation_id() is None
