"""Shared fixtures: in-memory rendered views and element factories."""

import asyncio
import json

import pytest

from css_compare.models import IdentityMethod, ScrapedElement
from css_compare.scripts import CSS_INSPECT_PREFIX


class FakeView:
    """RenderedView stand-in that answers scripts from memory."""

    def __init__(self, elements=None, available=True, error=None, responder=None, delay=0.0):
        self.elements = elements or []
        self.available = available
        self.error = error
        self.responder = responder
        self.delay = delay
        self.scripts: list[str] = []
        self.started = asyncio.Event()

    def is_available(self) -> bool:
        return self.available

    async def run_script(self, script: str):
        self.scripts.append(script)
        self.started.set()
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error:
            raise self.error
        if self.responder:
            return self.responder(script)
        return [dict(e, styles=dict(e["styles"])) for e in self.elements]

    async def capture_page_pixels(self) -> bytes:
        return b"\x89PNG\r\n\x1a\n" + b"fake"


def raw_element(key, styles=None, tag="div", method="id"):
    """Element dict in the shape returned by the collection script."""
    return {"tag": tag, "key": key, "method": method, "styles": dict(styles or {})}


@pytest.fixture
def make_view():
    return FakeView


@pytest.fixture
def make_raw():
    return raw_element


@pytest.fixture
def make_element():
    def factory(key, styles=None, tag="div", method=IdentityMethod.ID):
        return ScrapedElement(tag=tag, key=key, method=method, styles=dict(styles or {}))

    return factory


def script_params(script):
    """Decode the JSON argument a parameterised script is called with."""
    return json.loads(script[script.rindex("})(") + 3:-1])


def console_line(type, data=None):
    """Console text in the format the inspect script logs."""
    return CSS_INSPECT_PREFIX + json.dumps({"type": type, "data": data or {}})
