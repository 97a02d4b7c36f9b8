"""
gridbeat - a step-grid drum pattern core with humanization and MIDI export.

A pattern is two bars of sixteenth-note steps holding hits for an
eight-voice kit (kick, snare, closed and open hi-hat, two toms, crash and
ride).  The step count follows the time signature.  gridbeat edits those
grids, makes them feel played, and turns them (or a whole arrangement of
them) into a standard MIDI event stream.  It generates pure data; audio,
transport clocks and file dialogs belong to whatever embeds it.

What it does:

- **Time-signature policy.** Eight supported meters (4/4, 3/4, 5/4, 6/8,
  7/8, 5/8, 9/8, 12/8) map to step counts and beat groupings.  Anything
  else behaves like 4/4.
- **Pattern model.** ``Pattern`` keeps (step, instrument, velocity) hits
  unique per step and instrument and rejects steps outside the grid.
  ``Arrangement`` strings patterns into a timeline.
- **Sequencer.** ``Sequencer`` owns the current pattern, the playhead and
  per-track levels behind a lock, so an external clock thread can call
  ``advance_step()`` while the UI edits.
- **Humanize.** Velocity drift plus probabilistic ghost snares and hats,
  driven by an injectable ``random.Random``.
- **MIDI export.** 480 PPQN, one step = 120 ticks, channel 10, tempo and
  time-signature meta events, matched note-on/note-off pairs.  Encoded with
  ``mido``.
- **Remote generation boundary.** Request/response contracts and a
  non-blocking result channel for an external pattern generator.

Minimal example:

    ```python
    import gridbeat

    pattern = gridbeat.Pattern(name="Backbeat", bpm=120, time_signature="4/4")
    for step in (0, 8, 16, 24):
        pattern.add_step(step, gridbeat.Instrument.KICK, 110)
    for step in (4, 12, 20, 28):
        pattern.add_step(step, gridbeat.Instrument.SNARE, 100)

    seq = gridbeat.Sequencer(pattern, bpm=120)
    seq.humanize()
    seq.export().save("backbeat.mid")
    ```

Package-level exports: ``Pattern``, ``ArrangementPattern``, ``Arrangement``,
``GridStep``, ``Instrument``, ``Sequencer``, ``export_pattern``,
``export_arrangement``.
"""

import gridbeat.instruments
import gridbeat.midi_export
import gridbeat.pattern
import gridbeat.sequencer


Arrangement = gridbeat.pattern.Arrangement
ArrangementPattern = gridbeat.pattern.ArrangementPattern
GridStep = gridbeat.pattern.GridStep
Instrument = gridbeat.instruments.Instrument
Pattern = gridbeat.pattern.Pattern
Sequencer = gridbeat.sequencer.Sequencer
export_arrangement = gridbeat.midi_export.export_arrangement
export_pattern = gridbeat.midi_export.export_pattern
