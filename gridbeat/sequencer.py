import logging
import random
import threading
import typing

import gridbeat.constants.velocity
import gridbeat.humanize
import gridbeat.instruments
import gridbeat.midi_export
import gridbeat.pattern


logger = logging.getLogger(__name__)


class Sequencer:

	"""
	Owns the current pattern, the playhead, the tempo and per-track levels.

	The control side (toggling steps, humanizing, transport) and the timing
	driver that calls ``advance_step()`` run on different threads, so every
	read or write of the pattern and playhead happens under one lock.  Hold
	times are short and bounded; nothing inside the lock does I/O.

	Example::

		seq = gridbeat.sequencer.Sequencer(bpm=140)
		seq.toggle_step(0, Instrument.KICK)
		seq.play()

		# from the clock thread, once per sixteenth
		seq.advance_step()
		for hit in seq.notes_at_step(seq.current_step):
			send(hit.instrument, seq.get_scaled_velocity(hit))
	"""

	def __init__ (
		self,
		pattern: typing.Optional[gridbeat.pattern.Pattern] = None,
		bpm: int = 140,
		rng: typing.Optional[random.Random] = None
	) -> None:

		"""Create a stopped sequencer at step 0.

		Parameters:
			pattern: Initial pattern.  An empty 4/4 pattern when omitted.
			bpm: Playback tempo.  Independent of the pattern's stored bpm.
			rng: Random source for humanize.  Seed it for repeatable results.
		"""

		self._lock = threading.Lock()
		self._pattern = pattern if pattern is not None else gridbeat.pattern.Pattern()
		self._current_step = 0
		self._is_playing = False
		self._bpm = 0
		self._track_scales: typing.Dict[gridbeat.instruments.Instrument, float] = {}
		self.rng = rng if rng is not None else random.Random()

		self.set_bpm(bpm)


	# ------------------------------------------------------------------
	# State
	# ------------------------------------------------------------------

	@property
	def pattern (self) -> gridbeat.pattern.Pattern:

		"""The live current pattern.  Use ``snapshot()`` to read it from another thread."""

		return self._pattern

	@property
	def step_count (self) -> int:

		"""Always the current pattern's step count."""

		return self._pattern.step_count

	@property
	def current_step (self) -> int:

		return self._current_step

	@property
	def is_playing (self) -> bool:

		return self._is_playing

	@property
	def bpm (self) -> int:

		return self._bpm


	def set_bpm (self, bpm: int) -> None:

		"""Change the playback tempo."""

		if bpm <= 0:
			raise ValueError("BPM must be positive")

		self._bpm = bpm
		logger.info(f"BPM set to {bpm}")

	def set_pattern (self, pattern: gridbeat.pattern.Pattern) -> None:

		"""
		Replace the current pattern.

		The pattern and step count change together, and the playhead wraps
		into the new range so it never points past the end.
		"""

		with self._lock:
			self._pattern = pattern
			self._current_step %= pattern.step_count

		logger.info(f"Pattern set to {pattern.name!r} ({pattern.time_signature}, {pattern.step_count} steps)")

	def set_time_signature (self, time_signature: str) -> None:

		"""
		Change the current pattern's meter.

		Hits beyond the new step count are dropped and the playhead wraps
		into the new range.
		"""

		with self._lock:
			self._pattern.set_time_signature(time_signature)
			self._current_step %= self._pattern.step_count

		logger.info(f"Time signature set to {time_signature} ({self.step_count} steps)")

	def snapshot (self) -> gridbeat.pattern.Pattern:

		"""Deep copy of the current pattern, taken under the lock."""

		with self._lock:
			return self._pattern.copy()


	# ------------------------------------------------------------------
	# Editing
	# ------------------------------------------------------------------

	def toggle_step (self, step: int, instrument: gridbeat.instruments.Instrument, velocity: int = gridbeat.constants.velocity.DEFAULT_VELOCITY) -> bool:

		"""
		Add or remove a hit.  Out-of-range steps are ignored.

		Returns True when the hit is present afterwards.
		"""

		with self._lock:
			return self._pattern.toggle_step(step, instrument, velocity)

	def clear_pattern (self) -> None:

		"""Remove every hit from the current pattern."""

		with self._lock:
			self._pattern.clear()

	def notes_at_step (self, step: int) -> typing.List[gridbeat.pattern.GridStep]:

		"""Copies of every hit at *step*."""

		with self._lock:
			return [
				gridbeat.pattern.GridStep(step=gs.step, instrument=gs.instrument, velocity=gs.velocity)
				for gs in self._pattern.notes_at_step(step)
			]

	def humanize (self, variation: int = gridbeat.constants.velocity.DEFAULT_VARIATION, rng: typing.Optional[random.Random] = None) -> int:

		"""
		Humanize the current pattern in place.  See ``gridbeat.humanize``.

		Returns the number of ghost notes added.
		"""

		with self._lock:
			return gridbeat.humanize.humanize(self._pattern, variation=variation, rng=rng if rng is not None else self.rng)


	# ------------------------------------------------------------------
	# Transport
	# ------------------------------------------------------------------

	def play (self) -> None:

		"""Start or resume from the current step."""

		with self._lock:
			self._is_playing = True

	def pause (self) -> None:

		"""Stop advancing, keeping the current step."""

		with self._lock:
			self._is_playing = False

	def stop (self) -> None:

		"""Stop advancing and return to step 0."""

		with self._lock:
			self._is_playing = False
			self._current_step = 0

	def advance_step (self) -> int:

		"""
		Move the playhead one step, wrapping at the end.  No-op when not playing.

		Called by the external clock once per step.  Returns the current step.
		"""

		with self._lock:
			if self._is_playing:
				self._current_step = (self._current_step + 1) % self._pattern.step_count
			return self._current_step


	# ------------------------------------------------------------------
	# Track levels
	# ------------------------------------------------------------------

	def set_track_velocity (self, instrument: gridbeat.instruments.Instrument, scale: float) -> None:

		"""Set an instrument's playback level, clamped to 0.0-1.0."""

		with self._lock:
			self._track_scales[instrument] = max(0.0, min(1.0, float(scale)))

	def get_track_velocity (self, instrument: gridbeat.instruments.Instrument) -> float:

		"""An instrument's playback level (1.0 unless set)."""

		return self._track_scales.get(instrument, gridbeat.constants.velocity.DEFAULT_TRACK_SCALE)

	def reset_track_velocities (self) -> None:

		with self._lock:
			self._track_scales.clear()

	def get_scaled_velocity (self, grid_step: gridbeat.pattern.GridStep) -> int:

		"""Effective velocity for playback.  The stored velocity is not changed."""

		return round(grid_step.velocity * self.get_track_velocity(grid_step.instrument))


	# ------------------------------------------------------------------
	# Export
	# ------------------------------------------------------------------

	def export (self) -> gridbeat.midi_export.MidiExport:

		"""Export a snapshot of the current pattern at the sequencer's tempo."""

		return gridbeat.midi_export.export_pattern(self.snapshot(), self._bpm)
