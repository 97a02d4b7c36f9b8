"""Tests for gridbeat.helpers.remote.

These tests stub ``requests.post`` and do NOT contact a live service.
"""

import typing

import pytest
import requests

import gridbeat.generation
import gridbeat.helpers.remote as remote


class FakeResponse:

	"""Just enough of requests.Response for the helper."""

	def __init__ (self, body: typing.Any, status_code: int = 200) -> None:

		self.body = body
		self.status_code = status_code

	def raise_for_status (self) -> None:

		if self.status_code >= 400:
			raise requests.HTTPError(f"{self.status_code} Server Error")

	def json (self) -> typing.Any:

		return self.body


def test_fetch_posts_payload_with_key (monkeypatch: pytest.MonkeyPatch) -> None:

	"""fetch() posts JSON to the generate endpoint with the API key header."""

	calls: typing.List[typing.Dict[str, typing.Any]] = []

	def fake_post (url: str, **kwargs: typing.Any) -> FakeResponse:
		calls.append({"url": url, **kwargs})
		return FakeResponse({"grid": [], "suggestedName": "Echo"})

	monkeypatch.setattr(requests, "post", fake_post)

	source = remote.HttpPatternSource("https://beats.example.com/", api_key="secret", timeout=5)
	body = source.fetch({"style": "Rock"})

	assert body == {"grid": [], "suggestedName": "Echo"}
	assert calls[0]["url"] == "https://beats.example.com/api/patterns/generate"
	assert calls[0]["json"] == {"style": "Rock"}
	assert calls[0]["headers"]["X-API-Key"] == "secret"
	assert calls[0]["timeout"] == 5


def test_headers_without_key () -> None:

	"""No X-API-Key header is sent when no key is configured."""

	assert remote.HttpPatternSource("http://localhost:5000").headers() == {"Content-Type": "application/json"}


def test_http_errors_raise (monkeypatch: pytest.MonkeyPatch) -> None:

	"""Server errors propagate out of fetch()."""

	monkeypatch.setattr(requests, "post", lambda url, **kwargs: FakeResponse({}, status_code=500))

	with pytest.raises(requests.HTTPError):
		remote.HttpPatternSource("http://localhost:5000").fetch({})


def test_source_satisfies_protocol () -> None:

	"""HttpPatternSource can be used wherever a PatternSource is expected."""

	assert isinstance(remote.HttpPatternSource("http://localhost"), gridbeat.generation.PatternSource)


@pytest.mark.asyncio
async def test_channel_reports_http_failure (monkeypatch: pytest.MonkeyPatch) -> None:

	"""Through the channel, an HTTP error becomes a failed result."""

	monkeypatch.setattr(requests, "post", lambda url, **kwargs: FakeResponse({}, status_code=503))

	channel = gridbeat.generation.GenerationChannel()
	await channel.submit(remote.HttpPatternSource("http://localhost"), gridbeat.generation.GenerateRequest())
	result = await channel.receive()

	assert result.success is False
	assert "503" in result.error
