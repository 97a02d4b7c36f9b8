"""MIDI velocity constants.

Velocity is the MIDI attack strength (0-127).  The humanize values are flat
integer deltas and fixed probabilities, not derived from style or complexity.
"""

# Primary defaults
DEFAULT_VELOCITY = 100          # Toggled steps

# MIDI standard range
MIN_VELOCITY = 0
MAX_VELOCITY = 127

# Humanize
DEFAULT_VARIATION = 15          # +/- raw velocity units, not a percentage
HUMANIZE_MIN_VELOCITY = 30
HUMANIZE_MAX_VELOCITY = 127

# Ghost notes
GHOST_SNARE_PROBABILITY = 0.15
GHOST_HIHAT_PROBABILITY = 0.10
GHOST_MIN_VELOCITY = 30
GHOST_VELOCITY_SPAN = 25        # ghost velocity = 30 + round(U * 25), so 30..55

# Per-track scaling
DEFAULT_TRACK_SCALE = 1.0
