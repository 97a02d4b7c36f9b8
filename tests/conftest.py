import random
import typing

import pytest

import gridbeat.instruments
import gridbeat.pattern


Instrument = gridbeat.instruments.Instrument


def make_pattern (
	hits: typing.Iterable[typing.Tuple[int, Instrument, int]] = (),
	time_signature: str = "4/4",
	name: str = "Test",
	bpm: int = 120
) -> gridbeat.pattern.Pattern:

	"""Build a pattern from (step, instrument, velocity) tuples."""

	pattern = gridbeat.pattern.Pattern(name=name, bpm=bpm, time_signature=time_signature)

	for step, instrument, velocity in hits:
		pattern.add_step(step, instrument, velocity)

	return pattern


def grid_set (pattern: gridbeat.pattern.Pattern) -> typing.Set[typing.Tuple[int, Instrument, int]]:

	"""The grid as a comparable set of tuples."""

	return {(gs.step, gs.instrument, gs.velocity) for gs in pattern.grid}


@pytest.fixture
def rock_pattern () -> gridbeat.pattern.Pattern:

	"""A one-bar rock groove repeated over both bars of 4/4."""

	hits = []

	for bar in (0, 16):
		hits += [(bar + 0, Instrument.KICK, 110), (bar + 8, Instrument.KICK, 105)]
		hits += [(bar + 4, Instrument.SNARE, 100), (bar + 12, Instrument.SNARE, 100)]
		hits += [(bar + step, Instrument.HIHAT_CLOSED, 80) for step in range(0, 16, 2)]

	return make_pattern(hits, name="Basic Rock Groove")


@pytest.fixture
def rng () -> random.Random:

	"""A seeded random source for repeatable humanize runs."""

	return random.Random(1234)
