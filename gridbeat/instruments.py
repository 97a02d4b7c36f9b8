"""The eight-voice drum kit.

``Instrument`` is a closed set.  Each member's value is the lowercase token
used on the wire (pattern JSON, generation responses), and two read-only
tables give the General MIDI note and a human-readable name for every member.
"""

import enum
import logging
import types
import typing

import gridbeat.constants.gm_drums


logger = logging.getLogger(__name__)


class Instrument (enum.Enum):

	"""
	A percussion voice in the sequencer grid.
	"""

	KICK = "kick"
	SNARE = "snare"
	HIHAT_CLOSED = "hihat_closed"
	HIHAT_OPEN = "hihat_open"
	TOM_1 = "tom_1"
	TOM_2 = "tom_2"
	CRASH = "crash"
	RIDE = "ride"


MIDI_NOTE_MAP: typing.Mapping[Instrument, int] = types.MappingProxyType({
	Instrument.KICK:         gridbeat.constants.gm_drums.KICK_1,
	Instrument.SNARE:        gridbeat.constants.gm_drums.SNARE_1,
	Instrument.HIHAT_CLOSED: gridbeat.constants.gm_drums.HI_HAT_CLOSED,
	Instrument.HIHAT_OPEN:   gridbeat.constants.gm_drums.HI_HAT_OPEN,
	Instrument.TOM_1:        gridbeat.constants.gm_drums.HIGH_MID_TOM,
	Instrument.TOM_2:        gridbeat.constants.gm_drums.LOW_TOM,
	Instrument.CRASH:        gridbeat.constants.gm_drums.CRASH_1,
	Instrument.RIDE:         gridbeat.constants.gm_drums.RIDE_1,
})

DISPLAY_NAMES: typing.Mapping[Instrument, str] = types.MappingProxyType({
	Instrument.KICK:         "Kick",
	Instrument.SNARE:        "Snare",
	Instrument.HIHAT_CLOSED: "Hi-Hat Closed",
	Instrument.HIHAT_OPEN:   "Hi-Hat Open",
	Instrument.TOM_1:        "Tom 1",
	Instrument.TOM_2:        "Tom 2",
	Instrument.CRASH:        "Crash",
	Instrument.RIDE:         "Ride",
})

HIHATS: typing.FrozenSet[Instrument] = frozenset({Instrument.HIHAT_CLOSED, Instrument.HIHAT_OPEN})


def midi_note (instrument: Instrument) -> typing.Optional[int]:

	"""Return the General MIDI note for an instrument, or None if it has no mapping."""

	return MIDI_NOTE_MAP.get(instrument)


def parse_instrument (token: typing.Any) -> Instrument:

	"""Resolve a wire token such as ``"hihat_closed"`` to an Instrument.

	Matching ignores case and surrounding whitespace.  Anything unrecognised,
	including non-string values, falls back to ``Instrument.KICK``.
	"""

	if isinstance(token, Instrument):
		return token

	if isinstance(token, str):
		try:
			return Instrument(token.strip().lower())
		except ValueError:
			pass

	logger.debug(f"Unknown drum token {token!r}, using kick")
	return Instrument.KICK


def instrument_for_note (note: int) -> typing.Optional[Instrument]:

	"""Map an incoming MIDI note to the closest kit voice.

	Alternate GM notes fold onto the eight voices (snare 2 onto snare, pedal
	hat onto closed hat, and so on).  Notes outside the kit return None.
	"""

	token = gridbeat.constants.gm_drums.GM_NOTE_ALIASES.get(note)

	if token is None:
		return None

	return Instrument(token)
