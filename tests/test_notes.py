import random

import pytest

import seqtree.notes


def test_note_to_midi_naturals_and_accidentals () -> None:

	"""Middle C is 60 and accidentals shift by a semitone."""

	assert seqtree.notes.note_to_midi("C4") == 60
	assert seqtree.notes.note_to_midi("A4") == 69
	assert seqtree.notes.note_to_midi("Db4") == 61
	assert seqtree.notes.note_to_midi("F#3") == 54
	assert seqtree.notes.note_to_midi("C-1") == 0


def test_note_to_midi_enharmonic_crosses_octave () -> None:

	"""B#3 sounds the same as C4."""

	assert seqtree.notes.note_to_midi("B#3") == seqtree.notes.note_to_midi("C4")


@pytest.mark.parametrize("name", ["H2", "C", "", "4C", None])
def test_note_to_midi_rejects_unknown_names (name) -> None:

	"""Unrecognised names raise ValueError."""

	with pytest.raises(ValueError):
		seqtree.notes.note_to_midi(name)


def test_midi_to_note_uses_sharps () -> None:

	"""Black keys are spelled with sharps."""

	assert seqtree.notes.midi_to_note(61) == "C#4"
	assert seqtree.notes.midi_to_note(0) == "C-1"
	assert seqtree.notes.midi_to_note(70) == "A#4"


def test_transpose_by_semitones () -> None:

	"""Transposition moves pitch and respells with sharps."""

	assert seqtree.notes.transpose_by_semitones("C4", 12) == "C5"
	assert seqtree.notes.transpose_by_semitones("C4", -12) == "C3"
	assert seqtree.notes.transpose_by_semitones("Bb3", 2) == "C4"


def test_transpose_rest_stays_rest () -> None:

	"""Transposing an absent note yields an absent note."""

	assert seqtree.notes.transpose_by_semitones(None, 12) is None


def test_compare_pitch_and_is_higher () -> None:

	"""Comparison is by sounding pitch, not by spelling."""

	assert seqtree.notes.compare_pitch("C4", "E4") < 0
	assert seqtree.notes.compare_pitch("E4", "C4") > 0
	assert seqtree.notes.compare_pitch("C4", "B#3") == 0

	assert seqtree.notes.is_higher("E4", "C4") is True
	assert seqtree.notes.is_higher("C4", "B#3") is False


def test_octave_helpers () -> None:

	"""octave_of reads the octave and with_octave moves a pitch class."""

	assert seqtree.notes.octave_of("G2") == 2
	assert seqtree.notes.with_octave("G2", 5) == "G5"


def test_swap_octave_different_octaves () -> None:

	"""Each note takes the other's octave."""

	assert seqtree.notes.swap_octave("C3", "E5") == ("C5", "E3")


def test_swap_octave_same_octave_raises_first () -> None:

	"""Notes in the same octave lift the first note an octave instead."""

	assert seqtree.notes.swap_octave("C3", "E3") == ("C4", "E3")


def test_lower_note () -> None:

	"""Lowering stops at the first octave not above the reference."""

	assert seqtree.notes.lower_note("C6", "E4") == "C4"
	assert seqtree.notes.lower_note("C4", "E4") == "C4"
	assert seqtree.notes.lower_note("E5", "E4") == "E4"


def test_raise_note () -> None:

	"""Raising stops at the first octave strictly above the reference."""

	assert seqtree.notes.raise_note("C3", "E4") == "C5"
	assert seqtree.notes.raise_note("E4", "E4") == "E5"
	assert seqtree.notes.raise_note("G4", "E4") == "G4"


def test_scale_notes () -> None:

	"""Scale notes ascend from the tonic within one octave."""

	assert seqtree.notes.scale_notes("major pentatonic", "C", 4) == ["C4", "D4", "E4", "G4", "A4"]
	assert seqtree.notes.scale_notes("whole tone", "D", 3) == ["D3", "E3", "F#3", "G#3", "A#3", "C4"]


def test_scale_notes_rejects_unknown_and_unresolved () -> None:

	"""Unknown names and an unresolved 'random' raise ValueError."""

	with pytest.raises(ValueError):
		seqtree.notes.scale_notes("lydian augmented")

	with pytest.raises(ValueError):
		seqtree.notes.scale_notes("random")


def test_resolve_scale_random_picks_named_scale () -> None:

	"""'random' resolves to one of the concrete scales."""

	assert seqtree.notes.resolve_scale("random", random.Random(1)) in seqtree.notes.SCALE_INTERVALS
	assert seqtree.notes.resolve_scale("minor") == "minor"


def test_random_melody_stays_in_scale () -> None:

	"""Every generated note belongs to one octave of the scale."""

	melody = seqtree.notes.random_melody("major", 8, random.Random(3))
	pool = set(seqtree.notes.scale_notes("major"))

	assert len(melody) == 8
	assert all(note in pool for note in melody)


def test_random_melody_is_reproducible () -> None:

	"""The same seed gives the same melody."""

	a = seqtree.notes.random_melody("random", 6, random.Random(9))
	b = seqtree.notes.random_melody("random", 6, random.Random(9))

	assert a == b
