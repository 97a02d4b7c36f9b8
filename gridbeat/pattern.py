import copy
import dataclasses
import logging
import math
import typing
import uuid

import gridbeat.constants.velocity
import gridbeat.constants.ticks
import gridbeat.instruments
import gridbeat.time_signature


logger = logging.getLogger(__name__)

GridKey = typing.Tuple[int, gridbeat.instruments.Instrument]


def clamp_velocity (velocity: int, low: int = gridbeat.constants.velocity.MIN_VELOCITY, high: int = gridbeat.constants.velocity.MAX_VELOCITY) -> int:

	"""Clamp a velocity into ``[low, high]``."""

	return max(low, min(high, int(velocity)))


@dataclasses.dataclass
class GridStep:

	"""
	One drum hit at a step in the grid.
	"""

	step: int
	instrument: gridbeat.instruments.Instrument
	velocity: int = gridbeat.constants.velocity.DEFAULT_VELOCITY


class Pattern:

	"""
	A fixed-length grid of drum hits plus its name, tempo and time signature.

	The step count is always derived from the time signature, and every hit
	lies inside ``0 <= step < step_count``.  A given (step, instrument) pair
	appears at most once, but any number of instruments may share a step.
	"""

	def __init__ (
		self,
		name: str = "Untitled",
		bpm: int = 120,
		time_signature: str = gridbeat.time_signature.DEFAULT_TIME_SIGNATURE,
		grid: typing.Optional[typing.Iterable[GridStep]] = None
	) -> None:

		"""
		Create a pattern, inserting any given hits that fall inside the step range.
		"""

		if bpm <= 0:
			raise ValueError("BPM must be positive")

		self.name = name
		self.bpm = bpm
		self._time_signature = time_signature
		self._steps: typing.Dict[GridKey, GridStep] = {}

		for grid_step in grid or ():
			self.add_step(grid_step.step, grid_step.instrument, grid_step.velocity)


	@property
	def time_signature (self) -> str:

		"""The time signature key, e.g. ``"4/4"``."""

		return self._time_signature

	@property
	def step_count (self) -> int:

		"""Number of steps, derived from the time signature."""

		return gridbeat.time_signature.step_count(self._time_signature)

	@property
	def length_ticks (self) -> int:

		"""Length of the pattern in MIDI ticks."""

		return self.step_count * gridbeat.constants.ticks.TICKS_PER_STEP

	@property
	def grid (self) -> typing.List[GridStep]:

		"""All hits, in insertion order.  The list is new; the GridSteps are live."""

		return list(self._steps.values())


	def __len__ (self) -> int:

		return len(self._steps)

	def __iter__ (self) -> typing.Iterator[GridStep]:

		return iter(list(self._steps.values()))

	def __repr__ (self) -> str:

		return f"Pattern(name={self.name!r}, bpm={self.bpm}, time_signature={self._time_signature!r}, steps={len(self._steps)})"


	def in_range (self, step: typing.Any) -> bool:

		"""True when *step* is an integer index inside this pattern."""

		return isinstance(step, int) and not isinstance(step, bool) and 0 <= step < self.step_count

	def add_step (self, step: int, instrument: gridbeat.instruments.Instrument, velocity: int = gridbeat.constants.velocity.DEFAULT_VELOCITY) -> bool:

		"""
		Place a hit, overwriting the velocity if the instrument is already at that step.

		Returns False and leaves the grid untouched when the step is out of range.
		"""

		if not self.in_range(step):
			logger.debug(f"Rejected step {step!r} for {instrument.value} (pattern has {self.step_count} steps)")
			return False

		key = (step, instrument)
		velocity = clamp_velocity(velocity)

		if key in self._steps:
			self._steps[key].velocity = velocity
		else:
			self._steps[key] = GridStep(step=step, instrument=instrument, velocity=velocity)

		return True

	def remove_step (self, step: int, instrument: gridbeat.instruments.Instrument) -> bool:

		"""Remove a hit.  Returns True if one was removed."""

		return self._steps.pop((step, instrument), None) is not None

	def toggle_step (self, step: int, instrument: gridbeat.instruments.Instrument, velocity: int = gridbeat.constants.velocity.DEFAULT_VELOCITY) -> bool:

		"""
		Flip the presence of a hit.

		Removes the hit if present, otherwise inserts it with *velocity*.
		Returns True when the hit is present afterwards.  Out-of-range steps
		are ignored and return False.
		"""

		if not self.in_range(step):
			logger.debug(f"Ignored toggle at step {step!r} (pattern has {self.step_count} steps)")
			return False

		if self.remove_step(step, instrument):
			return False

		return self.add_step(step, instrument, velocity)

	def get_step (self, step: int, instrument: gridbeat.instruments.Instrument) -> typing.Optional[GridStep]:

		"""Return the hit for (step, instrument), or None."""

		return self._steps.get((step, instrument))

	def has_instrument_at (self, step: int, instruments: typing.Iterable[gridbeat.instruments.Instrument]) -> bool:

		"""True if any of *instruments* has a hit at *step*."""

		return any((step, instrument) in self._steps for instrument in instruments)

	def notes_at_step (self, step: int) -> typing.List[GridStep]:

		"""Return every hit at *step*."""

		return [grid_step for grid_step in self._steps.values() if grid_step.step == step]

	def clear (self) -> None:

		"""Remove every hit, keeping name, tempo and time signature."""

		self._steps.clear()

	def set_time_signature (self, time_signature: str) -> None:

		"""
		Change the time signature, dropping hits beyond the new step count.
		"""

		self._time_signature = time_signature
		limit = self.step_count

		dropped = [key for key in self._steps if key[0] >= limit]

		for key in dropped:
			del self._steps[key]

		if dropped:
			logger.debug(f"Dropped {len(dropped)} steps outside {time_signature} ({limit} steps)")

	def copy (self) -> "Pattern":

		"""Return a deep copy."""

		return copy.deepcopy(self)


	def to_dict (self) -> typing.Dict[str, typing.Any]:

		"""
		Serialize to the JSON wire shape used for persistence and generation.
		"""

		return {
			"name": self.name,
			"bpm": self.bpm,
			"timeSignature": self._time_signature,
			"stepCount": self.step_count,
			"grid": [
				{"step": gs.step, "drum": gs.instrument.value, "velocity": gs.velocity}
				for gs in sorted(self._steps.values(), key=_sort_key)
			],
		}

	@classmethod
	def from_dict (cls, data: typing.Mapping[str, typing.Any]) -> "Pattern":

		"""
		Build a pattern from its wire shape.

		Entries with a missing, non-integer or out-of-range step are discarded,
		and unknown drum tokens become kicks.  A missing or invalid bpm falls
		back to 120.
		"""

		bpm = data.get("bpm", 120)

		if not isinstance(bpm, int) or isinstance(bpm, bool) or bpm <= 0:
			logger.debug(f"Invalid bpm {bpm!r}, using 120")
			bpm = 120

		pattern = cls(
			name = str(data.get("name", "Untitled")),
			bpm = bpm,
			time_signature = str(data.get("timeSignature", gridbeat.time_signature.DEFAULT_TIME_SIGNATURE))
		)

		pattern.load_grid(data.get("grid") or [])

		return pattern

	def load_grid (self, items: typing.Iterable[typing.Any]) -> int:

		"""
		Insert hits from wire-shape dicts, discarding anything that doesn't fit.

		Returns the number of hits inserted.
		"""

		inserted = 0

		for item in items:

			grid_step = grid_step_from_dict(item)

			if grid_step is None:
				continue

			if self.add_step(grid_step.step, grid_step.instrument, grid_step.velocity):
				inserted += 1

		return inserted


class ArrangementPattern (Pattern):

	"""
	A pattern used as one segment of an arrangement, with a stable id.
	"""

	def __init__ (
		self,
		name: str = "Untitled",
		bpm: int = 120,
		time_signature: str = gridbeat.time_signature.DEFAULT_TIME_SIGNATURE,
		grid: typing.Optional[typing.Iterable[GridStep]] = None,
		id: typing.Optional[str] = None
	) -> None:

		super().__init__(name=name, bpm=bpm, time_signature=time_signature, grid=grid)
		self.id = id if id is not None else uuid.uuid4().hex

	@classmethod
	def from_pattern (cls, pattern: Pattern, id: typing.Optional[str] = None) -> "ArrangementPattern":

		"""Copy *pattern* into a new segment."""

		return cls(
			name = pattern.name,
			bpm = pattern.bpm,
			time_signature = pattern.time_signature,
			grid = [dataclasses.replace(gs) for gs in pattern.grid],
			id = id
		)

	def to_dict (self) -> typing.Dict[str, typing.Any]:

		data = super().to_dict()
		data["id"] = self.id
		return data

	@classmethod
	def from_dict (cls, data: typing.Mapping[str, typing.Any]) -> "ArrangementPattern":

		segment = typing.cast(ArrangementPattern, super().from_dict(data))

		if data.get("id") is not None:
			segment.id = str(data["id"])

		return segment


class Arrangement:

	"""
	An ordered timeline of patterns that play back to back.
	"""

	def __init__ (self, segments: typing.Optional[typing.Iterable[Pattern]] = None) -> None:

		self._segments: typing.List[ArrangementPattern] = []

		for segment in segments or ():
			self.append(segment)

	@property
	def segments (self) -> typing.List[ArrangementPattern]:

		return list(self._segments)

	@property
	def total_steps (self) -> int:

		return sum(segment.step_count for segment in self._segments)

	def __len__ (self) -> int:

		return len(self._segments)

	def __iter__ (self) -> typing.Iterator[ArrangementPattern]:

		return iter(list(self._segments))

	def append (self, pattern: Pattern) -> ArrangementPattern:

		"""Add a segment at the end.  Plain patterns are copied into a new segment."""

		segment = self._as_segment(pattern)
		self._segments.append(segment)
		return segment

	def insert (self, index: int, pattern: Pattern) -> ArrangementPattern:

		segment = self._as_segment(pattern)
		self._segments.insert(index, segment)
		return segment

	def get (self, segment_id: str) -> typing.Optional[ArrangementPattern]:

		for segment in self._segments:
			if segment.id == segment_id:
				return segment

		return None

	def remove (self, segment_id: str) -> bool:

		"""Remove the segment with *segment_id*.  Returns True if it existed."""

		segment = self.get(segment_id)

		if segment is None:
			return False

		self._segments.remove(segment)
		return True

	def move (self, segment_id: str, index: int) -> bool:

		"""Move a segment to *index* (clamped to the timeline)."""

		segment = self.get(segment_id)

		if segment is None:
			return False

		self._segments.remove(segment)
		index = max(0, min(len(self._segments), index))
		self._segments.insert(index, segment)
		return True

	def start_ticks (self) -> typing.List[int]:

		"""Absolute start tick of each segment."""

		starts: typing.List[int] = []
		tick = 0

		for segment in self._segments:
			starts.append(tick)
			tick += segment.length_ticks

		return starts

	def _as_segment (self, pattern: Pattern) -> ArrangementPattern:

		"""Segments are added as-is unless their id is already taken, in which case they are copied."""

		if isinstance(pattern, ArrangementPattern) and self.get(pattern.id) is None:
			return pattern

		return ArrangementPattern.from_pattern(pattern)


def grid_step_from_dict (item: typing.Any) -> typing.Optional[GridStep]:

	"""
	Read one ``{"step", "drum", "velocity"}`` entry.

	Returns None when the entry is not a mapping or its step is not an
	integer.  The step is not range-checked here.  Unknown drums become kicks,
	and a missing, non-numeric or non-finite velocity becomes the default.
	"""

	if not isinstance(item, typing.Mapping):
		return None

	step = _coerce_step(item.get("step"))

	if step is None:
		return None

	velocity = item.get("velocity", gridbeat.constants.velocity.DEFAULT_VELOCITY)

	if not isinstance(velocity, (int, float)) or isinstance(velocity, bool) or not math.isfinite(velocity):
		velocity = gridbeat.constants.velocity.DEFAULT_VELOCITY

	return GridStep(
		step = step,
		instrument = gridbeat.instruments.parse_instrument(item.get("drum")),
		velocity = clamp_velocity(velocity)
	)


def _sort_key (grid_step: GridStep) -> typing.Tuple[int, int]:

	return grid_step.step, gridbeat.instruments.MIDI_NOTE_MAP.get(grid_step.instrument, 0)


def _coerce_step (value: typing.Any) -> typing.Optional[int]:

	"""Accept ints and integral floats (JSON numbers); reject everything else."""

	if isinstance(value, bool):
		return None

	if isinstance(value, int):
		return value

	if isinstance(value, float) and value.is_integer():
		return int(value)

	return None
