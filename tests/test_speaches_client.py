"""Tests for SpeachesClient request shapes and reachability handling."""

from __future__ import annotations

import asyncio

import httpx
import pytest

from speaches_ui.backend.base import BackendUnavailableError
from speaches_ui.backend.speaches import SpeachesClient


def test_health_check_true_when_models_endpoint_answers():
    async def _run() -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            if request.url.path == "/v1/models":
                return httpx.Response(200, json={"data": []})
            return httpx.Response(404)

        client = SpeachesClient(
            base_url="http://speaches.local/",
            transport=httpx.MockTransport(handler),
        )
        await client.start()
        try:
            assert await client.health_check()
            assert client.base_url == "http://speaches.local"
        finally:
            await client.close()

    asyncio.run(_run())


def test_health_check_false_before_start_and_when_unreachable():
    async def _run() -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("refused", request=request)

        client = SpeachesClient(
            base_url="http://speaches.local",
            transport=httpx.MockTransport(handler),
        )
        assert not await client.health_check()
        await client.start()
        try:
            assert not await client.health_check()
        finally:
            await client.close()

    asyncio.run(_run())


def test_install_model_url_encodes_model_id():
    async def _run() -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200)

        client = SpeachesClient(
            base_url="http://speaches.local",
            transport=httpx.MockTransport(handler),
        )
        await client.start()
        try:
            await client.install_model("speaches-ai/piper-en_GB-alan-low")
            await client.install_model("whisper-1")
        finally:
            await client.close()

        assert [r.method for r in seen] == ["POST", "POST"]
        assert seen[0].url.raw_path == b"/v1/models/speaches-ai%2Fpiper-en_GB-alan-low"
        assert seen[1].url.raw_path == b"/v1/models/whisper-1"
        assert seen[0].content == b""

    asyncio.run(_run())


class CountingBody(httpx.AsyncByteStream):
    def __init__(self, chunks: list[bytes]) -> None:
        self.chunks = chunks
        self.pulled = 0

    async def __aiter__(self):
        for chunk in self.chunks:
            self.pulled += 1
            yield chunk


def test_open_speech_leaves_body_unread():
    async def _run() -> None:
        body = CountingBody([b"chunk"] * 10)

        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, stream=body)

        client = SpeachesClient(
            base_url="http://speaches.local",
            transport=httpx.MockTransport(handler),
        )
        await client.start()
        try:
            resp = await client.open_speech({"model": "tts-1", "input": "x", "voice": "af_nova"})
            assert body.pulled == 0
            assert not resp.is_stream_consumed
            assert await resp.aread() == b"chunk" * 10
            assert body.pulled == 10
            await resp.aclose()
        finally:
            await client.close()

    asyncio.run(_run())


def test_calls_before_start_raise_unavailable():
    async def _run() -> None:
        client = SpeachesClient(base_url="http://speaches.local")
        with pytest.raises(BackendUnavailableError):
            await client.list_models()

    asyncio.run(_run())


def test_transport_errors_become_backend_unavailable():
    async def _run() -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("slow", request=request)

        client = SpeachesClient(
            base_url="http://speaches.local",
            transport=httpx.MockTransport(handler),
        )
        await client.start()
        try:
            with pytest.raises(BackendUnavailableError):
                await client.post_transcription(
                    audio=b"a", filename="a.wav", language="en", model="whisper-1"
                )
            with pytest.raises(BackendUnavailableError):
                await client.open_speech({"model": "tts-1", "input": "x", "voice": "af_nova"})
            with pytest.raises(BackendUnavailableError):
                await client.list_registry()
        finally:
            await client.close()

    asyncio.run(_run())
