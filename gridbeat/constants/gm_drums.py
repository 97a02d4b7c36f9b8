"""General MIDI Level 1 drum notes used by the eight-voice kit.

Standard MIDI percussion assignments for channel 10.  Only the voices the
sequencer grid can hold are named here, plus the alternates that incoming
MIDI is folded onto (see ``gridbeat.instruments.instrument_for_note``).
"""

import typing


# ─── Kit voices ──────────────────────────────────────────────────────

KICK_1 = 36
SNARE_1 = 38
HI_HAT_CLOSED = 42
HI_HAT_OPEN = 46
HIGH_MID_TOM = 48
LOW_TOM = 45
CRASH_1 = 49
RIDE_1 = 51


# ─── Alternates folded onto kit voices ───────────────────────────────

SNARE_2 = 40
HI_HAT_PEDAL = 44
HIGH_TOM = 50
LOW_MID_TOM = 47
CRASH_2 = 57
RIDE_BELL = 53


# Note number -> kit voice token, for translating incoming MIDI.
GM_NOTE_ALIASES: typing.Dict[int, str] = {
	KICK_1:        "kick",
	SNARE_1:       "snare",
	SNARE_2:       "snare",
	HI_HAT_CLOSED: "hihat_closed",
	HI_HAT_PEDAL:  "hihat_closed",
	HI_HAT_OPEN:   "hihat_open",
	HIGH_MID_TOM:  "tom_1",
	HIGH_TOM:      "tom_1",
	LOW_TOM:       "tom_2",
	LOW_MID_TOM:   "tom_2",
	CRASH_1:       "crash",
	CRASH_2:       "crash",
	RIDE_1:        "ride",
	RIDE_BELL:     "ride",
}
