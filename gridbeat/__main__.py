"""Command-line export of pattern JSON files to MIDI.

Usage::

	python -m gridbeat groove.json -o groove.mid
	python -m gridbeat verse.json chorus.json --humanize --seed 7 -o song.mid
	python -m gridbeat groove.json --show

One input file exports a single pattern; several export an arrangement in
the order given.  Defaults come from ``config.yaml`` when present::

	sequencer:
	  bpm: 140
	humanize:
	  variation: 15
	  seed: 42
	export:
	  output: pattern.mid
"""

import argparse
import json
import logging
import os
import random
import sys
import typing

import yaml

import gridbeat.display
import gridbeat.midi_export
import gridbeat.pattern
import gridbeat.sequencer


# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def load_config (config_path: str = 'config.yaml') -> dict:

	"""
	Load configuration from a YAML file.
	"""

	if not os.path.exists(config_path):
		logger.warning(f"Config file {config_path} not found. Using defaults.")
		return {}

	with open(config_path, 'r') as f:
		return yaml.safe_load(f) or {}


def load_pattern (path: str) -> gridbeat.pattern.Pattern:

	"""
	Read a pattern from a JSON file in the wire shape.

	A bare JSON array is read as the grid of an untitled 4/4 pattern.
	"""

	with open(path, 'r') as f:
		data = json.load(f)

	if isinstance(data, list):
		data = {"name": os.path.splitext(os.path.basename(path))[0], "grid": data}

	if not isinstance(data, dict):
		raise ValueError(f"{path} does not contain a pattern object")

	return gridbeat.pattern.Pattern.from_dict(data)


def build_parser () -> argparse.ArgumentParser:

	parser = argparse.ArgumentParser(prog="gridbeat", description="Export drum pattern JSON files to MIDI.")
	parser.add_argument("patterns", nargs="+", help="Pattern JSON file(s); several are exported as an arrangement")
	parser.add_argument("-o", "--output", help="Output .mid file")
	parser.add_argument("--bpm", type=int, help="Export tempo (defaults to the config, then the first pattern)")
	parser.add_argument("--humanize", action="store_true", help="Humanize each pattern before export")
	parser.add_argument("--seed", type=int, help="Random seed for humanize")
	parser.add_argument("--config", default="config.yaml", help="YAML config file")
	parser.add_argument("--show", action="store_true", help="Print each pattern as an ASCII grid")
	return parser


def main (argv: typing.Optional[typing.List[str]] = None) -> int:

	"""
	Main entry point.  Returns a process exit code.
	"""

	args = build_parser().parse_args(argv)
	config = load_config(args.config)

	humanize_config = config.get('humanize', {}) or {}
	variation = humanize_config.get('variation', 15)
	seed = args.seed if args.seed is not None else humanize_config.get('seed')
	output = args.output or (config.get('export', {}) or {}).get('output', 'pattern.mid')

	try:
		patterns = [load_pattern(path) for path in args.patterns]
	except (OSError, ValueError) as e:
		logger.error(f"Could not read pattern: {e}")
		return 1

	bpm = args.bpm if args.bpm is not None else (config.get('sequencer', {}) or {}).get('bpm')

	if bpm is None:
		bpm = patterns[0].bpm

	if not isinstance(bpm, int) or isinstance(bpm, bool) or bpm <= 0:
		logger.error(f"BPM must be a positive integer, got {bpm!r}")
		return 1

	rng = random.Random(seed)

	for pattern in patterns:

		if args.humanize:
			seq = gridbeat.sequencer.Sequencer(pattern, bpm=bpm, rng=rng)
			seq.humanize(variation=variation)

		if args.show:
			print("\n".join(gridbeat.display.render_grid(pattern)))
			print()

	if len(patterns) == 1:
		export = gridbeat.midi_export.export_pattern(patterns[0], bpm)
	else:
		export = gridbeat.midi_export.export_arrangement(gridbeat.pattern.Arrangement(patterns), bpm)

	return 0 if export.save(output) else 1


if __name__ == "__main__":
	sys.exit(main())
