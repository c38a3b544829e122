"""Tests for temporary hosting with primary/backup fallback."""

from __future__ import annotations

import httpx
import pytest

from product_reels.errors import AllUploadTargetsFailed
from product_reels.hosting.uploader import AssetPublisher, normalize_tmpfiles_url


class HostRouter:
    """Routes uploads by host and counts them."""

    def __init__(self, responses: dict[str, httpx.Response | Exception]):
        self.responses = responses
        self.hits: dict[str, int] = {}

    def __call__(self, request: httpx.Request) -> httpx.Response:
        host = request.url.host
        self.hits[host] = self.hits.get(host, 0) + 1
        assert b"reel.mp4" in request.content
        result = self.responses[host]
        if isinstance(result, Exception):
            raise result
        return result


@pytest.fixture
def video(tmp_path):
    path = tmp_path / "reel.mp4"
    path.write_bytes(b"\x00\x00\x00\x18ftypmp42" * 100)
    return path


TMPFILES_OK = httpx.Response(
    200,
    json={"status": "success", "data": {"url": "http://tmpfiles.org/4242/reel.mp4"}},
)


@pytest.mark.asyncio
async def test_primary_success_skips_backup(video):
    router = HostRouter({
        "file.io": httpx.Response(200, json={"success": True, "link": "https://file.io/abc", "expires": "1 day"}),
        "tmpfiles.org": TMPFILES_OK,
    })
    publisher = AssetPublisher(transport=httpx.MockTransport(router))

    hosted = await publisher.publish(video)

    assert hosted.url == "https://file.io/abc"
    assert hosted.host == "file.io"
    assert router.hits == {"file.io": 1}


@pytest.mark.asyncio
async def test_primary_500_falls_back_to_rewritten_tmpfiles_url(video):
    router = HostRouter({
        "file.io": httpx.Response(500, text="internal error"),
        "tmpfiles.org": TMPFILES_OK,
    })
    publisher = AssetPublisher(transport=httpx.MockTransport(router))

    hosted = await publisher.publish(video)

    assert hosted.url == "https://tmpfiles.org/dl/4242/reel.mp4"
    assert hosted.host == "tmpfiles.org"
    assert hosted.expires == "1 hour"
    assert router.hits == {"file.io": 1, "tmpfiles.org": 1}


@pytest.mark.asyncio
async def test_rejected_primary_payload_counts_as_failure(video):
    router = HostRouter({
        "file.io": httpx.Response(200, json={"success": False, "message": "quota"}),
        "tmpfiles.org": TMPFILES_OK,
    })
    hosted = await AssetPublisher(transport=httpx.MockTransport(router)).publish(video)
    assert hosted.host == "tmpfiles.org"


@pytest.mark.asyncio
async def test_both_failing_reports_both_errors(video):
    request = httpx.Request("POST", "https://tmpfiles.org/api/v1/upload")
    router = HostRouter({
        "file.io": httpx.Response(503, text="maintenance"),
        "tmpfiles.org": httpx.ConnectError("refused", request=request),
    })

    with pytest.raises(AllUploadTargetsFailed) as exc_info:
        await AssetPublisher(transport=httpx.MockTransport(router)).publish(video)

    message = str(exc_info.value)
    assert message.startswith("All upload services failed. Primary: ")
    assert "HTTP 503" in message
    assert "Backup: tmpfiles.org: network error" in message
    assert router.hits == {"file.io": 1, "tmpfiles.org": 1}


@pytest.mark.parametrize("url,expected", [
    ("http://tmpfiles.org/123/reel.mp4", "https://tmpfiles.org/dl/123/reel.mp4"),
    ("https://tmpfiles.org/123/reel.mp4", "https://tmpfiles.org/dl/123/reel.mp4"),
    ("https://tmpfiles.org/dl/123/reel.mp4", "https://tmpfiles.org/dl/123/reel.mp4"),
])
def test_normalize_tmpfiles_url(url, expected):
    assert normalize_tmpfiles_url(url) == expected
