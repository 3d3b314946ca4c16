"""Grow a variation tree in the background and print its paths.

Run with ``python examples/variation_tree.py``.
"""

import logging
import queue
import random

import seqtree
import seqtree.notes
import seqtree.playback


logging.basicConfig(level=logging.INFO)


def main () -> None:

	rng = random.Random(2024)

	# Eight steps of C minor pentatonic with a breath in the middle.
	notes = seqtree.notes.random_melody("minor pentatonic", 8, rng)
	notes[4] = None

	trunk = seqtree.Step.from_notes(notes, duration=0.5)
	state = seqtree.SequenceState(length=6, order="pendulum", transpose=0, slew=0.2, repeat=1)

	responses: queue.Queue = queue.Queue()
	worker = seqtree.GenerationWorker(on_message=responses.put, rng=rng)
	worker.start()

	worker.post_message(seqtree.GenerationRequest(height=3, trunk_steps=trunk, trunk_state=state))
	response = responses.get(timeout=30)

	worker.stop()

	for index, path in enumerate(response.paths):
		print(f"path {index + 1}: " + " ".join(step["note"] or "-" for step in path))

	first = [seqtree.Step.from_dict(step) for step in response.paths[0]]
	messages = seqtree.playback.path_to_messages(first)
	print(f"\nFirst path: {len(messages)} MIDI messages, {seqtree.playback.path_length_ticks(first)} ticks")


if __name__ == "__main__":
	main()
