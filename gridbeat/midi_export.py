"""Pattern and arrangement export to a tick-based MIDI event stream.

Exports use a fixed resolution of 480 ticks per quarter note, and every
step is a sixteenth note (120 ticks).  Each hit becomes a note-on at
``step * 120`` and a note-off one step later, on channel 10.  A stored
velocity of 0 is written as 1, since a zero-velocity note-on reads as a
note-off.

The result is an abstract, sorted list of ``MidiEvent`` objects.  Turning it
into bytes is left to ``mido``::

	export = gridbeat.midi_export.export_pattern(pattern, bpm=120)
	export.save("groove.mid")

Exporting never fails on odd input: unknown time signatures are written as
4/4, and a non-positive tempo falls back to 120 BPM.
"""

import dataclasses
import logging
import typing

import mido

import gridbeat.constants.ticks
import gridbeat.instruments
import gridbeat.pattern
import gridbeat.time_signature


logger = logging.getLogger(__name__)

DEFAULT_EXPORT_BPM = 120

# Sort order for events sharing a tick.  Meta first, then note-offs that end
# the previous step, then note-ons that start the next one.
PRIORITY_META = 0
PRIORITY_NOTE_OFF = 1
PRIORITY_NOTE_ON = 2


@dataclasses.dataclass (order=True)
class MidiEvent:

	"""
	A MIDI event at an absolute tick.  ``channel`` is 1-based.
	"""

	tick: int
	priority: int
	message_type: str = dataclasses.field(compare=False)
	channel: int = dataclasses.field(compare=False, default=0)
	note: int = dataclasses.field(compare=False, default=0)
	velocity: int = dataclasses.field(compare=False, default=0)
	tempo: int = dataclasses.field(compare=False, default=0)
	numerator: int = dataclasses.field(compare=False, default=0)
	denominator: int = dataclasses.field(compare=False, default=0)


	def to_message (self) -> typing.Union[mido.Message, mido.MetaMessage]:

		"""Build the equivalent mido message with ``time`` left at 0."""

		if self.message_type == 'set_tempo':
			return mido.MetaMessage('set_tempo', tempo=self.tempo)

		if self.message_type == 'time_signature':
			return mido.MetaMessage('time_signature', numerator=self.numerator, denominator=self.denominator)

		return mido.Message(self.message_type, channel=self.channel - 1, note=self.note, velocity=self.velocity)


@dataclasses.dataclass
class MidiExport:

	"""
	A finished, tick-sorted event stream for a single-track MIDI file.
	"""

	events: typing.List[MidiEvent]
	ticks_per_beat: int = gridbeat.constants.ticks.TICKS_PER_QUARTER_NOTE


	def note_events (self) -> typing.List[MidiEvent]:

		"""Only the note-on and note-off events."""

		return [event for event in self.events if event.message_type in ('note_on', 'note_off')]

	def meta_events (self, message_type: typing.Optional[str] = None) -> typing.List[MidiEvent]:

		"""Meta events, optionally filtered by type."""

		return [
			event for event in self.events
			if event.priority == PRIORITY_META and (message_type is None or event.message_type == message_type)
		]

	def to_midi_file (self) -> mido.MidiFile:

		"""Encode as a type 0 ``mido.MidiFile`` with delta times."""

		mid = mido.MidiFile(type=0, ticks_per_beat=self.ticks_per_beat)
		track = mido.MidiTrack()
		mid.tracks.append(track)

		last_tick = 0

		for event in self.events:
			message = event.to_message()
			message.time = event.tick - last_tick
			track.append(message)
			last_tick = event.tick

		return mid

	def save (self, filename: str) -> bool:

		"""
		Write the export to a ``.mid`` file.  Returns False if the file could not be written.
		"""

		try:
			self.to_midi_file().save(filename)
		except OSError as e:
			logger.error(f"Failed to save MIDI export to {filename}: {e}")
			return False

		logger.info(f"Saved {filename} ({len(self.note_events())} note events)")
		return True


def tempo_for_bpm (bpm: typing.Union[int, float]) -> int:

	"""Microseconds per quarter note for *bpm*, capped at the 24-bit meta-event limit."""

	if bpm <= 0:
		logger.warning(f"Invalid export tempo {bpm!r}, using {DEFAULT_EXPORT_BPM} BPM")
		bpm = DEFAULT_EXPORT_BPM

	tempo = round(gridbeat.constants.ticks.MICROSECONDS_PER_MINUTE / bpm)

	return min(tempo, gridbeat.constants.ticks.MAX_TEMPO)


def _tempo_event (bpm: typing.Union[int, float]) -> MidiEvent:

	return MidiEvent(
		tick = 0,
		priority = PRIORITY_META,
		message_type = 'set_tempo',
		tempo = tempo_for_bpm(bpm)
	)


def _time_signature_event (time_signature: str, tick: int) -> MidiEvent:

	numerator, denominator = gridbeat.time_signature.parse_time_signature(time_signature)

	return MidiEvent(
		tick = tick,
		priority = PRIORITY_META,
		message_type = 'time_signature',
		numerator = numerator,
		denominator = denominator
	)


def _note_events (pattern: gridbeat.pattern.Pattern, offset: int) -> typing.List[MidiEvent]:

	"""Build note-on/note-off pairs for every mapped hit, shifted by *offset* ticks."""

	events: typing.List[MidiEvent] = []
	ticks_per_step = gridbeat.constants.ticks.TICKS_PER_STEP

	for grid_step in pattern.grid:

		note = gridbeat.instruments.midi_note(grid_step.instrument)

		if note is None:
			continue

		start = offset + grid_step.step * ticks_per_step

		# Note On
		events.append(MidiEvent(
			tick = start,
			priority = PRIORITY_NOTE_ON,
			message_type = 'note_on',
			channel = gridbeat.constants.ticks.DRUM_CHANNEL,
			note = note,
			velocity = max(1, grid_step.velocity)
		))

		# Note Off
		events.append(MidiEvent(
			tick = start + ticks_per_step,
			priority = PRIORITY_NOTE_OFF,
			message_type = 'note_off',
			channel = gridbeat.constants.ticks.DRUM_CHANNEL,
			note = note,
			velocity = 0
		))

	return events


def export_pattern (pattern: gridbeat.pattern.Pattern, bpm: typing.Union[int, float]) -> MidiExport:

	"""
	Export a single pattern starting at tick 0.
	"""

	events = [_tempo_event(bpm), _time_signature_event(pattern.time_signature, 0)]
	events.extend(_note_events(pattern, 0))
	events.sort()

	logger.debug(f"Exported {pattern.name!r}: {len(events)} events")

	return MidiExport(events=events)


def export_arrangement (segments: typing.Iterable[gridbeat.pattern.Pattern], bpm: typing.Union[int, float]) -> MidiExport:

	"""
	Export patterns back to back as one continuous track.

	A time-signature event is written at a segment's start only when its
	signature differs from the previous segment's.
	"""

	events = [_tempo_event(bpm)]
	current_tick = 0
	current_time_signature: typing.Optional[str] = None
	count = 0

	for segment in segments:

		if segment.time_signature != current_time_signature:
			events.append(_time_signature_event(segment.time_signature, current_tick))
			current_time_signature = segment.time_signature

		events.extend(_note_events(segment, current_tick))
		current_tick += segment.step_count * gridbeat.constants.ticks.TICKS_PER_STEP
		count += 1

	events.sort()

	logger.debug(f"Exported arrangement of {count} segments: {len(events)} events, {current_tick} ticks")

	return MidiExport(events=events)
