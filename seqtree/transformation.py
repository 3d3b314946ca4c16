"""Sequence transformations: the four melodic operators and realization.

A :class:`SequenceTransformation` wraps an ordered list of
:class:`~seqtree.step.Step` objects together with the run's shared
:class:`~seqtree.step.SequenceState`. Every operator returns a new
transformation holding freshly copied steps, so a node in the variation tree
never shares step objects with its parent. The state and the random source
are passed along by reference.

Operators
─────────
- ``transposition``: shift every pitched step by −12 or +12 semitones.
- ``inversion``: mirror the melody around its pitch centre (see :meth:`_invert`).
- ``reversal``: play the steps backwards and renumber their ids.
- ``mutation``: transpose a random subset of steps by an octave.
"""

import functools
import logging
import random
import typing

import seqtree.notes
import seqtree.step


logger = logging.getLogger(__name__)

TRANSPOSITION = "transposition"
INVERSION = "inversion"
REVERSAL = "reversal"
MUTATION = "mutation"

TRANSFORMATION_TYPES: typing.Tuple[str, ...] = (TRANSPOSITION, INVERSION, REVERSAL, MUTATION)

OCTAVE_SHIFTS: typing.Tuple[int, int] = (-12, 12)


class EmptyPitchedSequenceError (ValueError):

	"""
	Raised when inversion is asked to work on a sequence with no pitched steps.
	"""


def compare_by_id (a: seqtree.step.Step, b: seqtree.step.Step) -> int:

	"""Order steps by position id."""

	return a.id - b.id


def compare_by_note (a: seqtree.step.Step, b: seqtree.step.Step) -> int:

	"""Order steps by ascending pitch. Rests must be filtered out first."""

	return seqtree.notes.compare_pitch(a.note, b.note)


def swap_ids (a: seqtree.step.Step, b: seqtree.step.Step) -> None:

	"""Exchange the ids of two steps in place."""

	a.id, b.id = b.id, a.id


def swap_octaves (a: seqtree.step.Step, b: seqtree.step.Step) -> None:

	"""Exchange the octaves of two pitched steps in place, keeping pitch classes."""

	a.note, b.note = seqtree.notes.swap_octave(a.note, b.note)


class SequenceTransformation:

	"""
	An ordered step sequence plus the rendering state it is realized with.
	"""

	def __init__ (
		self,
		steps: typing.List[seqtree.step.Step],
		state: seqtree.step.SequenceState,
		rng: typing.Optional[random.Random] = None
	) -> None:

		"""
		Wrap a list of steps. The list is held as given, not copied.
		"""

		self.steps = steps
		self.state = state
		self.rng = rng or random.Random()


	def __len__ (self) -> int:

		return len(self.steps)


	def __repr__ (self) -> str:

		notes = " ".join(step.note or "-" for step in self.steps)
		return f"SequenceTransformation([{notes}], {self.state!r})"


	def transform (self, kind: typing.Optional[str] = None) -> "SequenceTransformation":

		"""
		Apply one operator, chosen uniformly at random when ``kind`` is None.

		Parameters:
			kind: One of ``TRANSFORMATION_TYPES``.

		Raises:
			ValueError: If ``kind`` is not a known transformation.
		"""

		if kind is None:
			kind = self.rng.choice(TRANSFORMATION_TYPES)

		operators: typing.Dict[str, typing.Callable[[], "SequenceTransformation"]] = {
			TRANSPOSITION: self._transpose,
			INVERSION: self._invert,
			REVERSAL: self._revert,
			MUTATION: self._mutate,
		}

		if kind not in operators:
			raise ValueError(f"Unknown transformation '{kind}'. Available: {list(TRANSFORMATION_TYPES)}")

		logger.debug(f"Applying {kind} to {len(self.steps)} steps")

		return operators[kind]()


	def merge (self, other: "SequenceTransformation") -> "SequenceTransformation":

		"""
		Concatenate ``other`` after this sequence. Ids are not renumbered.
		"""

		merged = [step.copy() for step in self.steps] + [step.copy() for step in other.steps]

		return self._derive(merged)


	def realize (self) -> "SequenceTransformation":

		"""
		Materialize the steps as they would play under the current state.

		The steps are truncated to ``state.length``, reordered by
		``state.order``, stamped with the state's ``transpose`` and ``slew``,
		then repeated ``state.repeat`` times. Each repetition holds its own
		step copies.

		Example:
			```python
			# order="pendulum" on [a, b, c, d] plays a b c d c b
			path = sequence.realize()
			```
		"""

		state = self.state
		ordered = [step.copy() for step in self.steps[:state.length]]

		if state.order == "backward":
			ordered.reverse()

		elif state.order == "pendulum":
			ordered += [step.copy() for step in reversed(ordered[1:-1])]

		elif state.order == "random":
			self.rng.shuffle(ordered)

		for step in ordered:
			step.transpose = state.transpose
			step.slew = state.slew

		repeated = [step.copy() for _ in range(state.repeat) for step in ordered]

		return self._derive(repeated)


	# Name used by callers that follow the worker payload vocabulary.
	get_sequence_for_current_state = realize


	def _derive (self, steps: typing.List[seqtree.step.Step]) -> "SequenceTransformation":

		"""Wrap new steps with this sequence's state and random source."""

		return SequenceTransformation(steps, self.state, self.rng)


	def _transpose (self, semitones: typing.Optional[int] = None) -> "SequenceTransformation":

		"""
		Shift every pitched step by ``semitones`` (−12 or +12 when omitted).
		"""

		if semitones is None:
			semitones = self.rng.choice(OCTAVE_SHIFTS)

		transposed = [step.copy() for step in self.steps]

		for step in transposed:
			step.note = seqtree.notes.transpose_by_semitones(step.note, semitones)

		return self._derive(transposed)


	def _revert (self) -> "SequenceTransformation":

		"""
		Reverse the step order and renumber ids to the new positions.
		"""

		reverted = [step.copy() for step in reversed(self.steps)]

		for index, step in enumerate(reverted):
			step.id = index

		return self._derive(reverted)


	def _mutate (self) -> "SequenceTransformation":

		"""
		Transpose a random subset of steps by an octave.

		The subset size is uniform in ``[0, n]``. Each chosen step writes its
		shifted note to the position named by its id.
		"""

		mutated = [step.copy() for step in self.steps]
		chosen = self.rng.sample(mutated, self.rng.randint(0, len(mutated)))

		for step in chosen:
			mutated[step.id].note = seqtree.notes.transpose_by_semitones(
				step.note, self.rng.choice(OCTAVE_SHIFTS)
			)

		return self._derive(mutated)


	def _invert (self) -> "SequenceTransformation":

		"""
		Mirror the melody around its pitch centre.

		Pitched steps are sorted by pitch, inverted pairwise from the outside
		in, then put back in id order. Rests skip the computation and return
		to their original slots unchanged.

		Raises:
			EmptyPitchedSequenceError: If no step carries a note.
		"""

		scratch = [step.copy() for step in self.steps]
		rests = [step for step in scratch if step.is_rest]
		pitched = sorted(
			(step for step in scratch if not step.is_rest),
			key = functools.cmp_to_key(compare_by_note)
		)

		if not pitched:
			raise EmptyPitchedSequenceError(
				f"Cannot invert a sequence without pitched steps ({len(scratch)} rests)"
			)

		inverted = sorted(self._invert_internal(pitched), key=functools.cmp_to_key(compare_by_id))

		for rest in rests:
			inverted.insert(rest.id, rest)

		return self._derive(inverted)


	def _invert_internal (self, ordered: typing.List[seqtree.step.Step]) -> typing.List[seqtree.step.Step]:

		"""
		Invert pitch-sorted steps, working inwards from the outermost pair.

		The outer pair swaps octaves and ids, then each outer step is settled
		against the nearest step of the already inverted interior. A first step
		above the interior's first drops by octaves below it and is placed in
		front; otherwise the two trade places. A last step not above the
		interior's last rises by octaves above it and is placed at the back;
		otherwise the two trade places.
		"""

		if len(ordered) == 1:
			return ordered

		if len(ordered) == 2:
			swap_octaves(ordered[0], ordered[1])
			swap_ids(ordered[0], ordered[1])
			return ordered

		middle = self._invert_internal(ordered[1:-1])

		outer_first = ordered[0]
		outer_last = ordered[-1]

		swap_octaves(outer_first, outer_last)
		swap_ids(outer_first, outer_last)

		inner_first = middle[0]

		if seqtree.notes.is_higher(outer_first.note, inner_first.note):
			outer_first.note = seqtree.notes.lower_note(outer_first.note, inner_first.note)
			middle.insert(0, outer_first)
		else:
			middle[0] = outer_first
			middle.insert(0, inner_first)

		inner_last = middle[-1]

		if not seqtree.notes.is_higher(outer_last.note, inner_last.note):
			outer_last.note = seqtree.notes.raise_note(outer_last.note, inner_last.note)
			middle.append(outer_last)
		else:
			middle[-1] = outer_last
			middle.append(inner_last)

		return middle
