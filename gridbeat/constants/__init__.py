"""Constants for gridbeat.

This package contains three sets of constants:

- ``gridbeat.constants.ticks`` - MIDI export resolution and step timing
- ``gridbeat.constants.velocity`` - Velocity bounds and humanize/ghost-note settings
- ``gridbeat.constants.gm_drums`` - General MIDI drum note numbers used by the instrument map

The tick constants are re-exported here so ``gridbeat.constants.TICKS_PER_STEP``
works without importing the submodule.
"""

# Re-export tick constants.
# These match the values in gridbeat.constants.ticks.

TICKS_PER_QUARTER_NOTE = 480
TICKS_PER_STEP = 120
DRUM_CHANNEL = 10
