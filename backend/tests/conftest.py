"""
Pytest configuration and fixtures for the wire backend tests.
"""

from __future__ import annotations

import html
import json
import re

import httpx
import pytest_asyncio

from backend.main import app


@pytest_asyncio.fixture
async def async_client():
    """Async HTTP client against the ASGI app."""
    async with httpx.AsyncClient(
        transport=httpx.ASGITransport(app=app),
        base_url="http://test",
    ) as client:
        yield client


@pytest_asyncio.fixture
async def envelopes(async_client):
    """Initial envelopes of every component on the index page, keyed by component name."""
    res = await async_client.get("/")
    assert res.status_code == 200
    found = {}
    for raw in re.findall(r'wire:initial-data="([^"]*)"', res.text):
        envelope = json.loads(html.unescape(raw))
        found[envelope["fingerprint"]["name"]] = envelope
    return found
