"""ASCII rendering of a pattern grid.

One row per instrument, one cell per step, with a bar between beat groups
(every 4 steps, or every 6 in compound meters).  Each cell shows the hit
velocity::

	4/4  Basic Rock Groove
	  Kick          |O . . . |. . . . |O . . . |. . . . |...
	  Snare         |. . . . |O . . . |. . . . |O . . . |...
	  Hi-Hat Closed |o . o . |o . o . |o . o . |o . o . |...

Pass ``current_step`` to add a playhead row underneath.
"""

import typing

import gridbeat.instruments
import gridbeat.pattern
import gridbeat.time_signature


_LABEL_WIDTH = 14
_GHOST = ","
_EMPTY = "."


def velocity_char (velocity: typing.Optional[int]) -> str:

	"""Map a velocity to one character.

	Returns:
		``"."`` for no hit, ``","`` for ghost level (0-40), ``"o"`` for
		soft (41-80), ``"O"`` for medium (81-110), ``"X"`` for loud (111-127).
	"""

	if velocity is None:
		return _EMPTY
	if velocity <= 40:
		return _GHOST
	if velocity <= 80:
		return "o"
	if velocity <= 110:
		return "O"
	return "X"


def _join_groups (cells: typing.List[str], grouping: int) -> str:

	groups = [" ".join(cells[i:i + grouping]) for i in range(0, len(cells), grouping)]
	return "|" + " |".join(groups) + " |"


def render_grid (pattern: gridbeat.pattern.Pattern, current_step: typing.Optional[int] = None) -> typing.List[str]:

	"""Render *pattern* as a list of text lines."""

	grouping = gridbeat.time_signature.beat_grouping(pattern.time_signature)
	lines = [f"{pattern.time_signature}  {pattern.name}"]

	for instrument in gridbeat.instruments.Instrument:

		cells: typing.List[str] = []

		for step in range(pattern.step_count):
			hit = pattern.get_step(step, instrument)
			cells.append(velocity_char(hit.velocity if hit is not None else None))

		label = gridbeat.instruments.DISPLAY_NAMES[instrument][:_LABEL_WIDTH].ljust(_LABEL_WIDTH)
		lines.append(f"  {label}{_join_groups(cells, grouping)}")

	if current_step is not None and 0 <= current_step < pattern.step_count:
		marks = ["^" if step == current_step else " " for step in range(pattern.step_count)]
		lines.append(f"  {' ' * _LABEL_WIDTH}{_join_groups(marks, grouping)}")

	return lines
