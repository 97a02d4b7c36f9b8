"""MIDI export timing constants.

Exported files use **480 ticks per quarter note**.  Every sequencer step is a
sixteenth note, so one step is a quarter of that.
"""

TICKS_PER_QUARTER_NOTE = 480
TICKS_PER_STEP = TICKS_PER_QUARTER_NOTE // 4    # 120, one sixteenth note

# General MIDI percussion channel, 1-based as written on hardware and in DAWs.
# mido wants 0-based channels, so encoding subtracts one.
DRUM_CHANNEL = 10

# Microseconds per minute, for tempo meta-events.
MICROSECONDS_PER_MINUTE = 60_000_000

# set_tempo stores a 24-bit value.
MAX_TEMPO = 0xFFFFFF
