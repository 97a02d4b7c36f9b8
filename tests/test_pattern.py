import pytest

import conftest
import gridbeat.pattern

from gridbeat.instruments import Instrument


# ---------------------------------------------------------------------------
# Construction and step range
# ---------------------------------------------------------------------------

def test_step_count_follows_time_signature () -> None:

	"""step_count is derived from the time signature."""

	assert gridbeat.pattern.Pattern(time_signature="7/8").step_count == 28
	assert gridbeat.pattern.Pattern(time_signature="odd").step_count == 32


def test_non_positive_bpm_is_rejected () -> None:

	"""A pattern needs a positive tempo."""

	with pytest.raises(ValueError):
		gridbeat.pattern.Pattern(bpm=0)


@pytest.mark.parametrize("step", [-1, 24, 100])
def test_add_step_rejects_out_of_range (step: int) -> None:

	"""Steps outside 0..step_count-1 are refused and the grid is unchanged."""

	pattern = conftest.make_pattern([(0, Instrument.KICK, 100)], time_signature="3/4")
	before = conftest.grid_set(pattern)

	assert pattern.add_step(step, Instrument.SNARE, 90) is False
	assert conftest.grid_set(pattern) == before


def test_constructor_drops_out_of_range_hits () -> None:

	"""Hits passed to the constructor go through the same range check."""

	pattern = gridbeat.pattern.Pattern(
		time_signature = "5/8",
		grid = [
			gridbeat.pattern.GridStep(0, Instrument.KICK, 100),
			gridbeat.pattern.GridStep(20, Instrument.KICK, 100),
		]
	)

	assert conftest.grid_set(pattern) == {(0, Instrument.KICK, 100)}


def test_add_step_overwrites_velocity_for_same_pair () -> None:

	"""(step, instrument) is unique; a second add updates the velocity."""

	pattern = conftest.make_pattern([(3, Instrument.RIDE, 70)])
	pattern.add_step(3, Instrument.RIDE, 90)

	assert len(pattern) == 1
	assert pattern.get_step(3, Instrument.RIDE).velocity == 90


def test_add_step_clamps_velocity () -> None:

	"""Velocities are kept within MIDI range."""

	pattern = conftest.make_pattern([(0, Instrument.KICK, 300), (1, Instrument.KICK, -5)])

	assert pattern.get_step(0, Instrument.KICK).velocity == 127
	assert pattern.get_step(1, Instrument.KICK).velocity == 0


def test_steps_are_polyphonic () -> None:

	"""Several instruments can share one step."""

	pattern = conftest.make_pattern([(0, Instrument.KICK, 100), (0, Instrument.CRASH, 120), (1, Instrument.SNARE, 90)])

	assert {gs.instrument for gs in pattern.notes_at_step(0)} == {Instrument.KICK, Instrument.CRASH}
	assert pattern.notes_at_step(5) == []


# ---------------------------------------------------------------------------
# Toggle
# ---------------------------------------------------------------------------

def test_toggle_twice_restores_grid (rock_pattern: gridbeat.pattern.Pattern) -> None:

	"""Toggling an empty slot on and off again leaves the grid as it was."""

	before = conftest.grid_set(rock_pattern)

	assert rock_pattern.toggle_step(5, Instrument.TOM_1) is True
	assert rock_pattern.toggle_step(5, Instrument.TOM_1) is False
	assert conftest.grid_set(rock_pattern) == before


def test_toggle_reinsert_uses_new_velocity (rock_pattern: gridbeat.pattern.Pattern) -> None:

	"""Removing then re-adding a hit takes the newly supplied velocity, not the old one."""

	assert rock_pattern.get_step(0, Instrument.KICK).velocity == 110

	rock_pattern.toggle_step(0, Instrument.KICK)
	rock_pattern.toggle_step(0, Instrument.KICK, velocity=64)

	assert rock_pattern.get_step(0, Instrument.KICK).velocity == 64


def test_toggle_default_velocity () -> None:

	"""Toggled hits default to velocity 100."""

	pattern = gridbeat.pattern.Pattern()
	pattern.toggle_step(7, Instrument.HIHAT_OPEN)

	assert pattern.get_step(7, Instrument.HIHAT_OPEN).velocity == 100


def test_toggle_out_of_range_is_noop () -> None:

	"""Out-of-range toggles change nothing."""

	pattern = gridbeat.pattern.Pattern(time_signature="5/8")

	assert pattern.toggle_step(20, Instrument.KICK) is False
	assert pattern.toggle_step(-1, Instrument.KICK) is False
	assert len(pattern) == 0


# ---------------------------------------------------------------------------
# Clear, copy, time signature changes
# ---------------------------------------------------------------------------

def test_clear_keeps_metadata (rock_pattern: gridbeat.pattern.Pattern) -> None:

	"""clear empties the grid but keeps name, tempo and meter."""

	rock_pattern.clear()

	assert len(rock_pattern) == 0
	assert rock_pattern.name == "Basic Rock Groove"
	assert rock_pattern.bpm == 120
	assert rock_pattern.time_signature == "4/4"


def test_copy_is_independent (rock_pattern: gridbeat.pattern.Pattern) -> None:

	"""Changing a copy does not touch the original."""

	clone = rock_pattern.copy()
	clone.get_step(0, Instrument.KICK).velocity = 1
	clone.clear()

	assert rock_pattern.get_step(0, Instrument.KICK).velocity == 110


def test_set_time_signature_drops_steps_beyond_new_range (rock_pattern: gridbeat.pattern.Pattern) -> None:

	"""Shrinking the meter keeps every hit inside the new step count."""

	rock_pattern.set_time_signature("5/8")

	assert rock_pattern.step_count == 20
	assert all(gs.step < 20 for gs in rock_pattern.grid)
	assert rock_pattern.get_step(16, Instrument.KICK) is not None
	assert rock_pattern.get_step(24, Instrument.KICK) is None


# ---------------------------------------------------------------------------
# Serialization
# ---------------------------------------------------------------------------

def test_to_dict_wire_shape () -> None:

	"""to_dict uses the camelCase wire keys and lowercase drum tokens, sorted by step."""

	pattern = conftest.make_pattern([(4, Instrument.SNARE, 90), (0, Instrument.HIHAT_CLOSED, 70), (0, Instrument.KICK, 100)], name="A", time_signature="6/8")

	assert pattern.to_dict() == {
		"name": "A",
		"bpm": 120,
		"timeSignature": "6/8",
		"stepCount": 24,
		"grid": [
			{"step": 0, "drum": "kick", "velocity": 100},
			{"step": 0, "drum": "hihat_closed", "velocity": 70},
			{"step": 4, "drum": "snare", "velocity": 90},
		],
	}


def test_from_dict_discards_invalid_entries () -> None:

	"""Bad steps are discarded, unknown drums become kicks."""

	pattern = gridbeat.pattern.Pattern.from_dict({
		"name": "Loaded",
		"bpm": 96,
		"timeSignature": "3/4",
		"grid": [
			{"step": 0, "drum": "snare", "velocity": 90},
			{"step": 2.0, "drum": "cowbell", "velocity": 80},
			{"step": 24, "drum": "kick", "velocity": 100},
			{"step": -1, "drum": "kick", "velocity": 100},
			{"step": "3", "drum": "kick", "velocity": 100},
			{"step": 1.5, "drum": "kick", "velocity": 100},
			{"step": 5, "drum": "ride"},
			"junk",
		],
	})

	assert pattern.name == "Loaded"
	assert pattern.bpm == 96
	assert pattern.step_count == 24
	assert conftest.grid_set(pattern) == {
		(0, Instrument.SNARE, 90),
		(2, Instrument.KICK, 80),
		(5, Instrument.RIDE, 100),
	}


@pytest.mark.parametrize("velocity", [float("nan"), float("inf"), float("-inf")])
def test_non_finite_velocity_uses_default (velocity: float) -> None:

	"""NaN and infinite velocities (which json.loads accepts) become 100 instead of raising."""

	pattern = gridbeat.pattern.Pattern.from_dict({
		"grid": [
			{"step": 0, "drum": "kick", "velocity": velocity},
			{"step": 4, "drum": "snare", "velocity": 90},
		],
	})

	assert conftest.grid_set(pattern) == {(0, Instrument.KICK, 100), (4, Instrument.SNARE, 90)}


def test_from_dict_invalid_bpm_falls_back () -> None:

	"""A missing or bad bpm becomes 120 rather than raising."""

	assert gridbeat.pattern.Pattern.from_dict({"bpm": -4}).bpm == 120
	assert gridbeat.pattern.Pattern.from_dict({}).bpm == 120


# ---------------------------------------------------------------------------
# Arrangements
# ---------------------------------------------------------------------------

def test_arrangement_segments_get_ids_and_copies (rock_pattern: gridbeat.pattern.Pattern) -> None:

	"""Plain patterns are copied into segments with their own id."""

	arrangement = gridbeat.pattern.Arrangement()
	first = arrangement.append(rock_pattern)
	second = arrangement.append(rock_pattern)

	assert first.id != second.id
	assert first is not rock_pattern

	first.clear()
	assert len(rock_pattern) > 0
	assert len(second) == len(rock_pattern)


def test_arrangement_start_ticks_accumulate () -> None:

	"""Each segment starts where the previous ones end."""

	arrangement = gridbeat.pattern.Arrangement([
		gridbeat.pattern.Pattern(time_signature="4/4"),
		gridbeat.pattern.Pattern(time_signature="7/8"),
		gridbeat.pattern.Pattern(time_signature="3/4"),
	])

	assert arrangement.start_ticks() == [0, 32 * 120, (32 + 28) * 120]
	assert arrangement.total_steps == 32 + 28 + 24


def test_arrangement_move_and_remove () -> None:

	"""Segments can be reordered and removed by id."""

	arrangement = gridbeat.pattern.Arrangement()
	a = arrangement.append(gridbeat.pattern.ArrangementPattern(name="a", id="a"))
	b = arrangement.append(gridbeat.pattern.ArrangementPattern(name="b", id="b"))
	c = arrangement.append(gridbeat.pattern.ArrangementPattern(name="c", id="c"))

	assert arrangement.move("c", 0) is True
	assert [s.id for s in arrangement] == ["c", "a", "b"]

	assert arrangement.move("a", 99) is True
	assert [s.id for s in arrangement] == ["c", "b", "a"]

	assert arrangement.remove("b") is True
	assert arrangement.remove("b") is False
	assert arrangement.segments == [c, a]
	assert arrangement.get("b") is None
	assert b.name == "b"


def test_arrangement_repeated_segment_gets_new_id () -> None:

	"""Adding a segment whose id is already present stores a copy under a fresh id."""

	arrangement = gridbeat.pattern.Arrangement()
	chorus = gridbeat.pattern.ArrangementPattern(name="Chorus", id="chorus")
	chorus.add_step(0, Instrument.CRASH, 120)

	first = arrangement.append(chorus)
	second = arrangement.append(chorus)
	third = arrangement.insert(0, chorus)

	assert first is chorus
	assert second is not chorus and third is not chorus
	assert len({s.id for s in arrangement}) == 3
	assert conftest.grid_set(second) == conftest.grid_set(chorus)

	assert arrangement.remove(second.id) is True
	assert [s.id for s in arrangement] == [third.id, "chorus"]


def test_arrangement_pattern_round_trips_id () -> None:

	"""Segment ids survive serialization."""

	segment = gridbeat.pattern.ArrangementPattern(name="Verse", time_signature="6/8", id="verse-1")
	segment.add_step(0, Instrument.KICK, 100)

	restored = gridbeat.pattern.ArrangementPattern.from_dict(segment.to_dict())

	assert restored.id == "verse-1"
	assert restored.time_signature == "6/8"
	assert conftest.grid_set(restored) == {(0, Instrument.KICK, 100)}
