"""Note names, pitch comparison and scale helpers.

Notes are plain strings in scientific pitch notation (``"C4"``, ``"F#3"``,
``"Bb2"``). Convention: **C4 = 60**, matching the MIDI Manufacturers
Association standard, so ``C-1`` is MIDI 0. Results are always spelled with
sharps (``"A#3"``, never ``"Bb3"``).

A rest is represented by ``None``. Functions that transform a single note pass
``None`` straight through; comparison functions expect real notes, and rests
must be filtered out before they are called.

Module-level helpers:
- `note_to_midi(note)` / `midi_to_note(pitch)`: Convert between names and MIDI numbers.
- `transpose_by_semitones(note, semitones)`: Shift a note, preserving rests.
- `compare_pitch(a, b)` / `is_higher(a, b)`: Ascending pitch ordering.
- `swap_octave(a, b)`, `lower_note(note, ref)`, `raise_note(note, ref)`: Octave
  juggling used by melodic inversion.
- `scale_notes(scale_name)` / `random_melody(scale_name, length, rng)`: Scale lookup
  and seed melody generation.
"""

import random
import re
import typing


NOTE_NAME_TO_PC: typing.Dict[str, int] = {
	"C": 0,
	"D": 2,
	"E": 4,
	"F": 5,
	"G": 7,
	"A": 9,
	"B": 11,
}

PC_TO_NOTE_NAME: typing.List[str] = [
	"C",
	"C#",
	"D",
	"D#",
	"E",
	"F",
	"F#",
	"G",
	"G#",
	"A",
	"A#",
	"B",
]

OCTAVE = 12

_NOTE_PATTERN = re.compile(r"^([A-Ga-g])([#b]*)(-?\d+)$")


SCALE_INTERVALS: typing.Dict[str, typing.List[int]] = {
	"chromatic": [0, 1, 2, 3, 4, 5, 6, 7, 8, 9, 10, 11],
	"major": [0, 2, 4, 5, 7, 9, 11],
	"minor": [0, 2, 3, 5, 7, 8, 10],
	"major pentatonic": [0, 2, 4, 7, 9],
	"minor pentatonic": [0, 3, 5, 7, 10],
	"harmonic minor": [0, 2, 3, 5, 7, 8, 11],
	"whole tone": [0, 2, 4, 6, 8, 10],
}

# "random" resolves to one of the named scales at generation time.
SCALES: typing.List[str] = list(SCALE_INTERVALS) + ["random"]


def note_to_midi (note: str) -> int:

	"""Convert a note name to its MIDI number.

	Parameters:
		note: Note name with octave (e.g. ``"C4"``, ``"F#3"``, ``"Bb-1"``).

	Returns:
		MIDI note number (``"C4"`` → 60).

	Raises:
		ValueError: If the note name is not recognised.

	Example:
		```python
		note_to_midi("A4")   # → 69
		note_to_midi("Db4")  # → 61
		```
	"""

	match = _NOTE_PATTERN.match(note) if isinstance(note, str) else None

	if match is None:
		raise ValueError(
			f"Unknown note name: {note!r}. Expected e.g. 'C4', 'F#3', 'Bb2'."
		)

	letter, accidentals, octave = match.groups()

	pc = NOTE_NAME_TO_PC[letter.upper()] + accidentals.count("#") - accidentals.count("b")

	return (int(octave) + 1) * OCTAVE + pc


def midi_to_note (pitch: int) -> str:

	"""Convert a MIDI number to a sharp-spelled note name."""

	return f"{PC_TO_NOTE_NAME[pitch % OCTAVE]}{pitch // OCTAVE - 1}"


def transpose_by_semitones (note: typing.Optional[str], semitones: int) -> typing.Optional[str]:

	"""Shift a note by a number of semitones. Rests stay rests."""

	if note is None:
		return None

	return midi_to_note(note_to_midi(note) + semitones)


def compare_pitch (a: str, b: str) -> int:

	"""Return a negative, zero or positive number for ascending pitch order."""

	return note_to_midi(a) - note_to_midi(b)


def is_higher (a: str, b: str) -> bool:

	"""Return True when ``a`` sounds strictly higher than ``b``."""

	return compare_pitch(a, b) > 0


def octave_of (note: str) -> int:

	"""Return the octave number of a note (``"C4"`` → 4, ``"B#3"`` → 4)."""

	return note_to_midi(note) // OCTAVE - 1


def with_octave (note: str, octave: int) -> str:

	"""Return the same pitch class placed in another octave."""

	return midi_to_note((octave + 1) * OCTAVE + note_to_midi(note) % OCTAVE)


def swap_octave (a: str, b: str) -> typing.Tuple[str, str]:

	"""Exchange the octaves of two notes while each keeps its pitch class.

	When both notes already share an octave a plain exchange would change
	nothing, so ``a`` is raised by one octave instead. Callers pass notes in
	ascending order, which makes ``a`` the lower note.

	Example:
		```python
		swap_octave("C3", "E5")  # → ("C5", "E3")
		swap_octave("C3", "E3")  # → ("C4", "E3")
		```
	"""

	octave_a = octave_of(a)
	octave_b = octave_of(b)

	if octave_a == octave_b:
		return with_octave(a, octave_a + 1), b

	return with_octave(a, octave_b), with_octave(b, octave_a)


def lower_note (note: str, reference: str) -> str:

	"""Drop a note by whole octaves until it is no longer higher than ``reference``."""

	while is_higher(note, reference):
		note = midi_to_note(note_to_midi(note) - OCTAVE)

	return note


def raise_note (note: str, reference: str) -> str:

	"""Lift a note by whole octaves until it is strictly higher than ``reference``."""

	while not is_higher(note, reference):
		note = midi_to_note(note_to_midi(note) + OCTAVE)

	return note


def resolve_scale (scale_name: str, rng: typing.Optional[random.Random] = None) -> str:

	"""Validate a scale name, picking a concrete scale when ``"random"`` is given."""

	if scale_name == "random":
		rng = rng or random.Random()
		return rng.choice(list(SCALE_INTERVALS))

	if scale_name not in SCALE_INTERVALS:
		raise ValueError(f"Unknown scale '{scale_name}'. Available: {SCALES}")

	return scale_name


def scale_notes (scale_name: str, tonic: str = "C", octave: int = 4) -> typing.List[str]:

	"""Return the ascending notes of a scale within one octave.

	Parameters:
		scale_name: A key of ``SCALE_INTERVALS`` (e.g. ``"major"``, ``"whole tone"``).
		tonic: Root pitch class name (e.g. ``"C"``, ``"F#"``).
		octave: Octave of the tonic.

	Example:
		```python
		scale_notes("major pentatonic", "C", 4)
		# → ["C4", "D4", "E4", "G4", "A4"]
		```
	"""

	if scale_name not in SCALE_INTERVALS:
		raise ValueError(
			f"Unknown scale '{scale_name}'. Available: {list(SCALE_INTERVALS)} "
			"('random' must be resolved with resolve_scale() first)"
		)

	root = note_to_midi(f"{tonic}{octave}")

	return [midi_to_note(root + interval) for interval in SCALE_INTERVALS[scale_name]]


def random_melody (
	scale_name: str,
	length: int,
	rng: typing.Optional[random.Random] = None,
	tonic: str = "C",
	octave: int = 4
) -> typing.List[str]:

	"""Pick ``length`` notes uniformly from one octave of a scale.

	Example:
		```python
		random_melody("minor", 8, random.Random(3))
		```
	"""

	if length < 0:
		raise ValueError("Melody length cannot be negative")

	rng = rng or random.Random()
	pool = scale_notes(resolve_scale(scale_name, rng), tonic, octave)

	return [rng.choice(pool) for _ in range(length)]
