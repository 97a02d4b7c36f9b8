"""Contracts for obtaining a pattern from a remote generation service.

The service itself lives elsewhere.  This module defines what goes over the
wire, how a response becomes a ``Pattern``, and how results get back to the
thread that owns the sequencer without blocking it.

A source is anything with a blocking ``fetch(payload) -> dict``.  The HTTP
implementation is in ``gridbeat.helpers.remote``; tests use a stub.

Results travel through a ``GenerationChannel``, an ``asyncio.Queue`` the
owner drains at its own pace.  A result that arrives after a newer request
was submitted is stale and is dropped on receipt::

	channel = gridbeat.generation.GenerationChannel()
	await channel.submit(source, GenerateRequest(style="Djent", pattern_type="Groove"))
	result = await channel.receive()

	if result.success:
		sequencer.set_pattern(result.pattern)
"""

import asyncio
import dataclasses
import logging
import typing

import gridbeat.instruments
import gridbeat.pattern
import gridbeat.time_signature


logger = logging.getLogger(__name__)


def _clamp_percent (value: int) -> int:

	return max(0, min(100, int(value)))


@dataclasses.dataclass
class GenerateRequest:

	"""
	Parameters for one generation request.
	"""

	style: str = "Djent"
	pattern_type: str = "Groove"
	time_signature: str = gridbeat.time_signature.DEFAULT_TIME_SIGNATURE
	complexity: int = 50
	bpm: int = 120
	secondary_style: str = ""
	style_mix: int = 70

	def __post_init__ (self) -> None:
		self.complexity = _clamp_percent(self.complexity)
		self.style_mix = _clamp_percent(self.style_mix)

	@property
	def step_count (self) -> int:

		return gridbeat.time_signature.step_count(self.time_signature)

	@property
	def has_secondary_style (self) -> bool:

		return bool(self.secondary_style) and self.style_mix > 0


	def to_payload (self) -> typing.Dict[str, typing.Any]:

		"""The JSON request body."""

		payload: typing.Dict[str, typing.Any] = {
			"style": self.style,
			"bpm": self.bpm,
			"type": self.pattern_type,
			"complexity": self.complexity,
			"timeSignature": self.time_signature,
			"stepCount": self.step_count,
		}

		if self.has_secondary_style:
			payload["secondaryStyle"] = self.secondary_style
			payload["styleMix"] = self.style_mix

		return payload

	def build_prompt (self) -> str:

		"""Natural-language prompt describing the requested pattern."""

		prompt = f"Generate a {self.pattern_type} drum pattern in {self.style} style"

		if self.has_secondary_style:
			prompt += f" mixed with {self.secondary_style} ({self.style_mix}% influence)"

		tokens = ", ".join(instrument.value for instrument in gridbeat.instruments.Instrument)

		prompt += (
			f". Time signature: {self.time_signature}. Steps: {self.step_count}."
			f" Complexity: {self.complexity}%.\n\n"
			f"Available drums: {tokens}.\n\n"
			f'Return ONLY a JSON array of objects with format: {{"step": 0-{self.step_count - 1}, "drum": "name", "velocity": 60-127}}'
		)

		return prompt


@dataclasses.dataclass
class GenerateResult:

	"""
	Outcome of one request: a pattern on success, an error message otherwise.
	"""

	success: bool
	pattern: typing.Optional[gridbeat.pattern.Pattern] = None
	error: str = ""
	request_id: int = 0


@typing.runtime_checkable
class PatternSource (typing.Protocol):

	"""
	Anything that can turn a request payload into a response payload.
	"""

	def fetch (self, payload: typing.Dict[str, typing.Any]) -> typing.Dict[str, typing.Any]:

		"""Blocking call.  May raise on transport or service errors."""

		...


def parse_generated_grid (items: typing.Any, step_count: int) -> typing.List[gridbeat.pattern.GridStep]:

	"""
	Validate generated (step, drum, velocity) entries.

	Out-of-range or non-integer steps are discarded, unknown drums become
	kicks and velocities are clamped to 0-127.  Duplicate (step, drum) pairs
	keep the last velocity.
	"""

	accepted: typing.Dict[typing.Tuple[int, gridbeat.instruments.Instrument], gridbeat.pattern.GridStep] = {}

	if not isinstance(items, list):
		return []

	for item in items:

		grid_step = gridbeat.pattern.grid_step_from_dict(item)

		if grid_step is None or not 0 <= grid_step.step < step_count:
			continue

		accepted[(grid_step.step, grid_step.instrument)] = grid_step

	return list(accepted.values())


def pattern_from_response (payload: typing.Mapping[str, typing.Any], request: GenerateRequest) -> gridbeat.pattern.Pattern:

	"""
	Build a pattern from a service response and the request that produced it.
	"""

	name = payload.get("suggestedName") or f"{request.style} {request.pattern_type}"

	grid = payload.get("grid")
	accepted = parse_generated_grid(grid, request.step_count)
	received = len(grid) if isinstance(grid, list) else 0

	if len(accepted) < received:
		logger.debug(f"Discarded {received - len(accepted)} of {received} generated steps")

	return gridbeat.pattern.Pattern(
		name = str(name),
		bpm = request.bpm if request.bpm > 0 else 120,
		time_signature = request.time_signature,
		grid = accepted
	)


class GenerationChannel:

	"""
	Delivers generation results to the owner of the sequencer.

	``submit`` runs the blocking fetch in a worker thread and queues the
	result; it never raises.  ``receive`` hands back the next result that is
	still current.
	"""

	def __init__ (self) -> None:

		self._queue: asyncio.Queue = asyncio.Queue()
		self._latest_request_id = 0

	@property
	def latest_request_id (self) -> int:

		return self._latest_request_id


	async def submit (self, source: PatternSource, request: GenerateRequest) -> int:

		"""
		Fetch a pattern for *request* and queue the result.  Returns the request id.
		"""

		self._latest_request_id += 1
		request_id = self._latest_request_id

		try:
			payload = await asyncio.to_thread(source.fetch, request.to_payload())

			if not isinstance(payload, typing.Mapping):
				raise ValueError(f"Expected a JSON object, got {type(payload).__name__}")

			if payload.get("success") is False:
				raise RuntimeError(payload.get("error") or "Generation failed")

			result = GenerateResult(
				success = True,
				pattern = pattern_from_response(payload, request),
				request_id = request_id
			)

		except Exception as e:
			logger.warning(f"Pattern generation failed: {e}")
			result = GenerateResult(success=False, error=str(e) or type(e).__name__, request_id=request_id)

		await self._queue.put(result)

		return request_id

	async def receive (self) -> GenerateResult:

		"""
		Wait for the next result, skipping any superseded by a newer request.
		"""

		while True:
			result: GenerateResult = await self._queue.get()

			if result.request_id >= self._latest_request_id:
				return result

			logger.debug(f"Dropped stale generation result {result.request_id} (latest {self._latest_request_id})")

	def receive_nowait (self) -> typing.Optional[GenerateResult]:

		"""
		Non-blocking ``receive``.  Returns None when nothing current is waiting.
		"""

		while not self._queue.empty():
			result: GenerateResult = self._queue.get_nowait()

			if result.request_id >= self._latest_request_id:
				return result

		return None
