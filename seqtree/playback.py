"""Hand realized paths to a MIDI player.

Scheduling and sound are the player's job; this module only turns a path (a
list of realized steps) into ``mido`` messages whose ``time`` fields are delta
ticks, ready to be fed to a port or a ``mido.MidiTrack``.

Each step's ``transpose`` is added to its pitch. ``slew`` maps to portamento:
CC 65 (portamento on/off) and CC 5 (portamento time), sent whenever the slew
value changes. Rests produce no messages but delay the next event.
"""

import typing

import mido

import seqtree.notes
import seqtree.step


CC_PORTAMENTO_TIME = 5
CC_PORTAMENTO_SWITCH = 65


def _portamento_messages (slew: float, channel: int, delay: int) -> typing.List[mido.Message]:

	"""Return the CC pair that sets portamento for a slew amount (0.0–1.0)."""

	amount = max(0, min(127, int(round(slew * 127))))

	return [
		mido.Message("control_change", channel=channel, control=CC_PORTAMENTO_SWITCH, value=127 if amount else 0, time=delay),
		mido.Message("control_change", channel=channel, control=CC_PORTAMENTO_TIME, value=amount, time=0),
	]


def _step_ticks (step: seqtree.step.Step, ticks_per_beat: int, division: int) -> int:

	"""Length of a step in ticks; a duration of 1 lasts one ``1/division`` note."""

	return max(1, int(round(step.duration * ticks_per_beat * 4 / division)))


def path_to_messages (
	steps: typing.Iterable[seqtree.step.Step],
	ticks_per_beat: int = 480,
	velocity: int = 100,
	channel: int = 0,
	division: int = 4,
	bpm: typing.Optional[float] = None
) -> typing.List[typing.Union[mido.Message, mido.MetaMessage]]:

	"""
	Convert a realized path into delta-timed MIDI messages.

	Parameters:
		steps: Realized steps; a ``duration`` of 1 is one ``1/division`` note.
		ticks_per_beat: Resolution of the ``time`` fields (one beat = a quarter note).
		velocity: Note-on velocity for every note.
		channel: MIDI channel (0–15).
		division: Steps per whole note (4 = quarter notes, 16 = sixteenths).
		bpm: When given, a ``set_tempo`` meta message leads the list.

	Example:
		```python
		track = mido.MidiTrack(path_to_messages(generator.paths[0], division=16, bpm=120))
		```
	"""

	messages: typing.List[typing.Union[mido.Message, mido.MetaMessage]] = []
	delay = 0
	current_slew: typing.Optional[float] = None

	if bpm is not None:
		messages.append(mido.MetaMessage("set_tempo", tempo=mido.bpm2tempo(bpm), time=0))

	for step in steps:

		ticks = _step_ticks(step, ticks_per_beat, division)

		if step.is_rest:
			delay += ticks
			continue

		if step.slew != current_slew:
			messages.extend(_portamento_messages(step.slew, channel, delay))
			current_slew = step.slew
			delay = 0

		pitch = max(0, min(127, seqtree.notes.note_to_midi(step.note) + step.transpose))

		messages.append(mido.Message("note_on", channel=channel, note=pitch, velocity=velocity, time=delay))
		messages.append(mido.Message("note_off", channel=channel, note=pitch, velocity=0, time=ticks))
		delay = 0

	return messages


def path_length_ticks (steps: typing.Iterable[seqtree.step.Step], ticks_per_beat: int = 480, division: int = 4) -> int:

	"""Return the total playing time of a path in ticks, rests included."""

	return sum(_step_ticks(step, ticks_per_beat, division) for step in steps)
