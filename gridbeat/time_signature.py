"""Time-signature policy.

Patterns are two bars of sixteenth-note steps.  The supported meters are a
fixed table; anything else behaves like 4/4 for step counting.  None of
these functions raise.
"""

import typing


DEFAULT_TIME_SIGNATURE = "4/4"
DEFAULT_STEP_COUNT = 32

_STEP_COUNTS: typing.Dict[str, int] = {
	"4/4": 32,
	"3/4": 24,
	"5/4": 40,
	"6/8": 24,
	"7/8": 28,
	"5/8": 20,
	"9/8": 36,
	"12/8": 48,
}

_COMPOUND_METERS: typing.FrozenSet[str] = frozenset({"6/8", "9/8", "12/8"})

TIME_SIGNATURES: typing.Tuple[str, ...] = tuple(_STEP_COUNTS)

# Steps per visual group.  Compound meters group by the dotted quarter.
_SIMPLE_GROUPING = 4
_COMPOUND_GROUPING = 6

_MAX_DENOMINATOR = 64


def step_count (time_signature: str) -> int:

	"""Return the pattern length in steps for a time signature (32 if unknown)."""

	return _STEP_COUNTS.get(time_signature, DEFAULT_STEP_COUNT)


def is_compound (time_signature: str) -> bool:

	"""True for 6/8, 9/8 and 12/8."""

	return time_signature in _COMPOUND_METERS


def beat_grouping (time_signature: str) -> int:

	"""Return how many steps form one visual beat group (6 for compound meters, else 4)."""

	return _COMPOUND_GROUPING if is_compound(time_signature) else _SIMPLE_GROUPING


def steps_per_bar (time_signature: str) -> int:

	"""Return the number of steps in one bar of the pattern."""

	return step_count(time_signature) // 2


def parse_time_signature (time_signature: typing.Any) -> typing.Tuple[int, int]:

	"""Split ``"<numerator>/<denominator>"`` into integers.

	The numerator must be positive and the denominator a power of two no
	larger than 64, since that is all a MIDI time-signature event can carry.
	Anything else returns ``(4, 4)``.
	"""

	if not isinstance(time_signature, str):
		return 4, 4

	numerator_text, sep, denominator_text = time_signature.strip().partition("/")

	if not sep:
		return 4, 4

	try:
		numerator = int(numerator_text)
		denominator = int(denominator_text)
	except ValueError:
		return 4, 4

	if numerator <= 0 or numerator > 255:
		return 4, 4

	if denominator <= 0 or denominator > _MAX_DENOMINATOR or denominator & (denominator - 1):
		return 4, 4

	return numerator, denominator
