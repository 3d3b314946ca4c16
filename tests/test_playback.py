import seqtree.playback
import seqtree.step


def _summary (messages):

	"""Reduce messages to comparable tuples."""

	return [
		(m.type, getattr(m, "note", getattr(m, "control", None)), getattr(m, "value", getattr(m, "velocity", None)), m.time)
		for m in messages
	]


def test_rests_delay_the_next_note () -> None:

	"""A rest produces no messages but pushes the next note back."""

	steps = seqtree.step.Step.from_notes(["C4", None, "E4"])
	messages = seqtree.playback.path_to_messages(steps, ticks_per_beat=480)

	assert _summary(messages) == [
		("control_change", 65, 0, 0),
		("control_change", 5, 0, 0),
		("note_on", 60, 100, 0),
		("note_off", 60, 0, 480),
		("note_on", 64, 100, 480),
		("note_off", 64, 0, 480),
	]


def test_transpose_is_applied () -> None:

	steps = [seqtree.step.Step(note="C4", transpose=-3)]
	messages = seqtree.playback.path_to_messages(steps)

	assert [m.note for m in messages if m.type == "note_on"] == [57]


def test_slew_changes_send_portamento () -> None:

	"""Portamento CCs are sent only when the slew value changes."""

	steps = [
		seqtree.step.Step(note="C4", slew=0.5),
		seqtree.step.Step(note="D4", slew=0.5),
		seqtree.step.Step(note="E4", slew=0.0),
	]
	messages = seqtree.playback.path_to_messages(steps, channel=2)
	controls = [(m.control, m.value) for m in messages if m.type == "control_change"]

	assert controls == [(65, 127), (5, 64), (65, 0), (5, 0)]
	assert all(m.channel == 2 for m in messages)


def test_path_length_ticks () -> None:

	steps = seqtree.step.Step.from_notes(["C4", None, "E4"], duration=0.5)

	assert seqtree.playback.path_length_ticks(steps, ticks_per_beat=96) == 3 * 48


def test_time_division_scales_step_length () -> None:

	"""At division 16 a duration-1 step is a sixteenth note."""

	steps = seqtree.step.Step.from_notes(["C4", "D4"])

	assert seqtree.playback.path_length_ticks(steps, ticks_per_beat=480, division=16) == 2 * 120

	messages = seqtree.playback.path_to_messages(steps, ticks_per_beat=480, division=16)

	assert [m.time for m in messages if m.type == "note_off"] == [120, 120]


def test_bpm_adds_tempo_meta () -> None:

	messages = seqtree.playback.path_to_messages(seqtree.step.Step.from_notes(["C4"]), bpm=120)

	assert messages[0].is_meta
	assert messages[0].type == "set_tempo"
	assert messages[0].tempo == 500000
	assert messages[0].time == 0
