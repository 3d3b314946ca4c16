import random
import typing

import pytest

import seqtree.step
import seqtree.transformation


class ForcedTransformRandom (random.Random):

	"""Random source that always picks the same transformation kind."""

	def __init__ (self, kind: str, seed: int = 0) -> None:

		"""Seed the underlying generator and remember the forced kind."""

		super().__init__(seed)
		self.kind = kind

	def choice (self, seq: typing.Sequence[typing.Any]) -> typing.Any:

		"""Return the forced kind when choosing an operator, otherwise defer."""

		if tuple(seq) == seqtree.transformation.TRANSFORMATION_TYPES:
			return self.kind

		return super().choice(seq)


@pytest.fixture
def rng () -> random.Random:

	"""A seeded random source for reproducible runs."""

	return random.Random(42)


@pytest.fixture
def forced_rng () -> typing.Callable[[str], ForcedTransformRandom]:

	"""Factory for random sources that always apply one transformation."""

	return ForcedTransformRandom


@pytest.fixture
def trunk_steps () -> typing.List[seqtree.step.Step]:

	"""An eight-step C major trunk with one rest."""

	return seqtree.step.Step.from_notes(["C4", "E4", "G4", None, "A4", "F4", "D4", "B3"])


@pytest.fixture
def state () -> seqtree.step.SequenceState:

	"""Forward playback of all eight steps, once."""

	return seqtree.step.SequenceState(length=8, order="forward", transpose=0, slew=0.0, repeat=1)
