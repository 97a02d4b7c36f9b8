import logging
import random

import gridbeat
import gridbeat.display
import gridbeat.midi_export

logging.basicConfig(level=logging.INFO)

Instrument = gridbeat.Instrument

rng = random.Random(2024)

# Verse: straight 4/4 backbeat with eighth-note hats.
verse = gridbeat.Pattern(name="Verse", bpm=132, time_signature="4/4")

for bar in (0, 16):
	verse.add_step(bar + 0, Instrument.KICK, 112)
	verse.add_step(bar + 10, Instrument.KICK, 96)
	verse.add_step(bar + 4, Instrument.SNARE, 104)
	verse.add_step(bar + 12, Instrument.SNARE, 104)

	for step in range(0, 16, 2):
		verse.add_step(bar + step, Instrument.HIHAT_CLOSED, 84 if step % 4 == 0 else 64)

verse.add_step(0, Instrument.CRASH, 120)

# Bridge: 6/8 with ride and floor tom on the dotted-quarter pulse.
bridge = gridbeat.Pattern(name="Bridge", bpm=132, time_signature="6/8")

for step in range(0, 24, 6):
	bridge.add_step(step, Instrument.TOM_2, 100)

for step in range(0, 24, 2):
	bridge.add_step(step, Instrument.RIDE, 76)

bridge.add_step(6, Instrument.SNARE, 110)
bridge.add_step(18, Instrument.SNARE, 110)

# Audition the verse on a sequencer with the hats pulled down.
seq = gridbeat.Sequencer(verse.copy(), bpm=132, rng=rng)
seq.set_track_velocity(Instrument.HIHAT_CLOSED, 0.8)
seq.humanize(variation=10)
seq.play()

for _ in range(4):
	step = seq.advance_step()
	hits = ", ".join(f"{hit.instrument.value}@{seq.get_scaled_velocity(hit)}" for hit in seq.notes_at_step(step))
	logging.info(f"Step {step}: {hits or '-'}")

seq.stop()

print("\n".join(gridbeat.display.render_grid(seq.pattern, current_step=seq.current_step)))

arrangement = gridbeat.Arrangement([seq.snapshot(), verse, bridge, bridge])
gridbeat.midi_export.export_arrangement(arrangement, bpm=132).save("arrangement.mid")
