"""Humanization for drum patterns.

Two passes make a mechanically programmed grid feel played:

1. **Velocity drift.**  Every existing hit moves by a random whole number in
   ``[-variation, +variation]`` and is clamped to 30-127.  ``variation`` is a
   flat velocity delta, not a percentage of the current velocity.
2. **Ghost notes.**  Each step independently has a 15% chance of gaining a
   quiet snare (if it has no snare) and a 10% chance of gaining a quiet
   closed hi-hat (if it has no hi-hat of either kind).  Ghost velocities are
   ``30 + round(U * 25)``, so 30-55.

Nothing is ever removed.  Running it twice compounds the drift and may add
more ghosts, because the presence checks only look at instruments.

Pass a seeded ``random.Random`` for repeatable results::

	import random
	import gridbeat.humanize

	gridbeat.humanize.humanize(pattern, rng=random.Random(42))
"""

import logging
import random
import typing

import gridbeat.constants.velocity
import gridbeat.instruments
import gridbeat.pattern


logger = logging.getLogger(__name__)


def ghost_velocity (rng: random.Random) -> int:

	"""Draw a ghost-note velocity in 30-55."""

	return gridbeat.constants.velocity.GHOST_MIN_VELOCITY + round(rng.random() * gridbeat.constants.velocity.GHOST_VELOCITY_SPAN)


def vary_velocities (pattern: gridbeat.pattern.Pattern, variation: int, rng: random.Random) -> None:

	"""Shift every hit's velocity by up to +/- *variation* and clamp to 30-127."""

	variation = abs(int(variation))

	for grid_step in pattern.grid:
		delta = rng.randint(-variation, variation)
		grid_step.velocity = gridbeat.pattern.clamp_velocity(
			grid_step.velocity + delta,
			low = gridbeat.constants.velocity.HUMANIZE_MIN_VELOCITY,
			high = gridbeat.constants.velocity.HUMANIZE_MAX_VELOCITY
		)


def add_ghost_notes (
	pattern: gridbeat.pattern.Pattern,
	rng: random.Random,
	snare_probability: float = gridbeat.constants.velocity.GHOST_SNARE_PROBABILITY,
	hihat_probability: float = gridbeat.constants.velocity.GHOST_HIHAT_PROBABILITY
) -> int:

	"""
	Scatter ghost snares and closed hats over empty slots.

	Returns the number of ghost notes added.
	"""

	added = 0

	for step in range(pattern.step_count):

		if rng.random() < snare_probability:
			if pattern.get_step(step, gridbeat.instruments.Instrument.SNARE) is None:
				pattern.add_step(step, gridbeat.instruments.Instrument.SNARE, ghost_velocity(rng))
				added += 1

		if rng.random() < hihat_probability:
			if not pattern.has_instrument_at(step, gridbeat.instruments.HIHATS):
				pattern.add_step(step, gridbeat.instruments.Instrument.HIHAT_CLOSED, ghost_velocity(rng))
				added += 1

	return added


def humanize (
	pattern: gridbeat.pattern.Pattern,
	variation: int = gridbeat.constants.velocity.DEFAULT_VARIATION,
	rng: typing.Optional[random.Random] = None
) -> int:

	"""
	Apply velocity drift then ghost notes to *pattern* in place.

	Parameters:
		pattern: The pattern to modify.
		variation: Maximum velocity change per hit, in raw velocity units.
		rng: Random source.  A fresh unseeded ``random.Random`` when omitted.

	Returns:
		The number of ghost notes added.
	"""

	if rng is None:
		rng = random.Random()

	vary_velocities(pattern, variation, rng)
	added = add_ghost_notes(pattern, rng)

	logger.debug(f"Humanized {pattern.name!r}: +/-{variation} velocity, {added} ghost notes")

	return added
