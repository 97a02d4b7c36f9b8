"""HTTP pattern source for a remote generation service.

NOTE: This module is NOT part of the gridbeat core.  The core never touches
the network; this helper is the one place a real request is made, and it is
only ever called from a worker thread via
``gridbeat.generation.GenerationChannel.submit``.

The service accepts the request body from
``GenerateRequest.to_payload()`` at ``POST /api/patterns/generate`` and
answers with::

	{"grid": [{"step": 0, "drum": "kick", "velocity": 110}, ...],
	 "suggestedName": "Low Tide"}

Typical use::

	import gridbeat.generation
	import gridbeat.helpers.remote as remote

	source = remote.HttpPatternSource("https://beats.example.com", api_key="...")
	channel = gridbeat.generation.GenerationChannel()
	await channel.submit(source, gridbeat.generation.GenerateRequest(style="Metal"))

There are no retries and no backoff.  Failures raise, and the channel turns
them into a failed ``GenerateResult``.
"""

import logging
import typing

import requests


logger = logging.getLogger(__name__)

GENERATE_PATH = "/api/patterns/generate"
DEFAULT_TIMEOUT = 30.0


class HttpPatternSource:

	"""
	A ``PatternSource`` that posts requests to a generation service.
	"""

	def __init__ (self, base_url: str, api_key: typing.Optional[str] = None, timeout: float = DEFAULT_TIMEOUT) -> None:

		"""
		Parameters:
			base_url: Service root, e.g. ``"https://beats.example.com"``.
			api_key: Sent as ``X-API-Key`` when given.
			timeout: Seconds before the request is abandoned.
		"""

		self.base_url = base_url.rstrip("/")
		self.api_key = api_key
		self.timeout = timeout

	@property
	def url (self) -> str:

		return self.base_url + GENERATE_PATH

	def headers (self) -> typing.Dict[str, str]:

		"""Request headers, including the API key when one is set."""

		headers = {"Content-Type": "application/json"}

		if self.api_key:
			headers["X-API-Key"] = self.api_key

		return headers

	def fetch (self, payload: typing.Dict[str, typing.Any]) -> typing.Dict[str, typing.Any]:

		"""
		POST *payload* and return the decoded JSON body.

		Raises ``requests.RequestException`` for transport and HTTP errors and
		``ValueError`` when the body is not JSON.
		"""

		logger.info(f"Requesting {payload.get('type')} pattern ({payload.get('style')}, {payload.get('timeSignature')}) from {self.url}")

		response = requests.post(self.url, json=payload, headers=self.headers(), timeout=self.timeout)
		response.raise_for_status()

		return response.json()
