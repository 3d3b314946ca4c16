import argparse
import asyncio
import json
import logging
import random
import sys
import typing

import seqtree.config
import seqtree.notes
import seqtree.osc
import seqtree.playback
import seqtree.step
import seqtree.worker


# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def parse_args (argv: typing.Optional[typing.Sequence[str]] = None) -> argparse.Namespace:

	"""
	Parse command-line options. Unset options fall back to the config file.
	"""

	parser = argparse.ArgumentParser(prog="seqtree", description="Grow a tree of melodic variations from a trunk sequence.")
	parser.add_argument("--config", default="seqtree.yaml", help="YAML file with control ranges and defaults")
	parser.add_argument("--height", type=int, help="number of transformation levels below the trunk")
	parser.add_argument("--notes", help="trunk notes separated by spaces, '-' for a rest (default: random melody)")
	parser.add_argument("--scale", choices=seqtree.notes.SCALES, help="scale for the random trunk melody")
	parser.add_argument("--steps", type=int, help="number of steps in the random trunk melody")
	parser.add_argument("--length", type=int)
	parser.add_argument("--order", choices=seqtree.step.ORDERS)
	parser.add_argument("--transpose", type=int)
	parser.add_argument("--slew", type=float)
	parser.add_argument("--repeat", type=int)
	parser.add_argument("--seed", type=int, help="seed for a reproducible run")
	parser.add_argument("--json", action="store_true", help="print the full response payload as JSON")
	parser.add_argument("--path", type=int, help="print only this path, numbered from 1")
	parser.add_argument("--midi", action="store_true", help="list the MIDI messages for each printed path")
	parser.add_argument("--osc", action="store_true", help="serve generation requests over OSC until interrupted")
	parser.add_argument("--receive-port", type=int, default=9000)
	parser.add_argument("--send-port", type=int, default=9001)

	return parser.parse_args(argv)


def build_trunk (args: argparse.Namespace, config: typing.Dict[str, typing.Any], rng: random.Random) -> typing.List[seqtree.step.Step]:

	"""
	Build the trunk from ``--notes`` or a random melody.
	"""

	duration = config["sequence"]["default_step_duration"]

	if args.notes:
		notes = [None if token == "-" else token for token in args.notes.split()]
		for note in notes:
			if note is not None:
				seqtree.notes.note_to_midi(note)
		return seqtree.step.Step.from_notes(notes, duration=duration)

	scale = args.scale or config["sequence"]["scale"]["init"]
	steps = args.steps or config["sequence"]["step_number"]

	return seqtree.step.Step.from_notes(seqtree.notes.random_melody(scale, steps, rng), duration=duration)


def build_state (args: argparse.Namespace, config: typing.Dict[str, typing.Any]) -> seqtree.step.SequenceState:

	"""
	Overlay command-line values on the configured initial state.
	"""

	state = seqtree.config.default_state(config)
	overrides = {
		name: getattr(args, name)
		for name in ("length", "order", "transpose", "slew", "repeat")
		if getattr(args, name) is not None
	}

	state = seqtree.step.SequenceState.from_dict({**state.to_dict(), **overrides})
	seqtree.config.validate_state(state, config)

	return state


def format_path (path: typing.List[typing.Dict[str, typing.Any]]) -> str:

	"""Render a path as space-separated note names, '-' for rests."""

	return " ".join(step["note"] or "-" for step in path)


def path_messages (path: typing.List[typing.Dict[str, typing.Any]], config: typing.Dict[str, typing.Any]) -> typing.List[typing.Any]:

	"""Render a realized path as MIDI at the configured tempo and time division."""

	controls = config["sequence"]
	steps = [seqtree.step.Step.from_dict(step, index) for index, step in enumerate(path)]

	return seqtree.playback.path_to_messages(
		steps,
		division = controls["time_division"]["init"],
		bpm = controls["tempo"]["init"]
	)


async def serve_osc (server: seqtree.osc.GenerationOscServer) -> None:

	"""
	Run the OSC transport until cancelled.
	"""

	await server.start()

	try:
		await asyncio.Event().wait()
	finally:
		await server.stop()


def main (argv: typing.Optional[typing.Sequence[str]] = None) -> int:

	"""
	Main entry point for the seqtree command.
	"""

	args = parse_args(argv)
	config = seqtree.config.load_config(args.config)
	rng = random.Random(args.seed)

	try:
		trunk = build_trunk(args, config, rng)
		state = build_state(args, config)
		height = args.height if args.height is not None else config["tree"]["branches"]["init"]
		seqtree.config.validate_height(height, config)
		if args.path is not None:
			seqtree.config.validate_path(args.path, height, config)
		if args.midi:
			seqtree.config.validate_playback(config)
	except ValueError as e:
		logger.error(str(e))
		return 2

	if args.osc:
		server = seqtree.osc.GenerationOscServer(
			trunk,
			state,
			receive_port = args.receive_port,
			send_port = args.send_port,
			config = config,
			rng = rng
		)
		try:
			asyncio.run(serve_osc(server))
		except KeyboardInterrupt:
			logger.info("Stopping...")
		return 0

	logger.info(f"Generating height {height} from {len(trunk)} trunk steps")

	response = seqtree.worker.generate(seqtree.worker.GenerationRequest(height, trunk, state), rng)

	# Paths are numbered from 1, as on the instrument's path control.
	selected = list(enumerate(response.paths, 1))
	if args.path is not None:
		selected = [selected[args.path - 1]]

	if args.json:
		payload = selected[0][1] if args.path is not None else response.to_payload()
		json.dump(payload, sys.stdout, indent=2)
		sys.stdout.write("\n")
		return 0

	for number, path in selected:
		print(f"{number:>3}: {format_path(path)}")

		if args.midi:
			for message in path_messages(path, config):
				print(f"     {message}")

	return 0


if __name__ == "__main__":
	sys.exit(main())
