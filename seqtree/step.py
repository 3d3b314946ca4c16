import dataclasses
import typing


ORDERS: typing.Tuple[str, ...] = ("forward", "backward", "pendulum", "random")


@dataclasses.dataclass
class Step:

	"""
	A single sequence element. ``note`` is None for a rest.
	"""

	note: typing.Optional[str]
	duration: float = 1
	id: int = 0						# Position in the containing sequence
	transpose: int = 0				# Stamped from SequenceState at realization
	slew: float = 0.0				# Stamped from SequenceState at realization


	@property
	def is_rest (self) -> bool:

		"""True when the step carries no note."""

		return self.note is None


	def copy (self) -> "Step":

		"""Return an independent clone of this step."""

		return dataclasses.replace(self)


	def to_dict (self) -> typing.Dict[str, typing.Any]:

		"""Convert to the plain structure used in generation responses."""

		return dataclasses.asdict(self)


	@classmethod
	def from_dict (cls, data: typing.Dict[str, typing.Any], index: int = 0) -> "Step":

		"""Build a step from a plain dict. A missing id becomes ``index``; other fields use defaults."""

		return cls(
			note = data.get("note"),
			duration = data.get("duration", 1),
			id = data.get("id", index),
			transpose = data.get("transpose", 0),
			slew = data.get("slew", 0.0),
		)


	@classmethod
	def from_notes (cls, notes: typing.Sequence[typing.Optional[str]], duration: float = 1) -> typing.List["Step"]:

		"""Build a positional sequence with ids ``0..n-1`` from note names (None = rest)."""

		return [cls(note=note, duration=duration, id=i) for i, note in enumerate(notes)]


def validate_ids (steps: typing.Sequence[Step]) -> None:

	"""
	Check that step ids are exactly the positions ``0..n-1`` in some order.

	Raises:
		ValueError: If an id is missing, repeated or out of range.
	"""

	ids = sorted(step.id for step in steps)

	if ids != list(range(len(steps))):
		raise ValueError(f"Step ids must be a permutation of 0..{len(steps) - 1}, got {[step.id for step in steps]}")


@dataclasses.dataclass(frozen=True)
class SequenceState:

	"""
	Rendering parameters shared by every node of one generation run.

	``length`` truncates a sequence before it is ordered, ``order`` is one of
	``ORDERS``, ``transpose`` and ``slew`` are stamped onto every realized step,
	and ``repeat`` is the number of times the realized sequence plays.
	"""

	length: int = 8
	order: str = "forward"
	transpose: int = 0
	slew: float = 0.0
	repeat: int = 1


	def __post_init__ (self) -> None:

		if self.length < 1:
			raise ValueError(f"Sequence length must be at least 1, got {self.length}")

		if self.order not in ORDERS:
			raise ValueError(f"Unknown order '{self.order}'. Available: {list(ORDERS)}")

		if self.repeat < 1:
			raise ValueError(f"Repeat count must be at least 1, got {self.repeat}")


	def to_dict (self) -> typing.Dict[str, typing.Any]:

		"""Convert to a plain dict."""

		return dataclasses.asdict(self)


	@classmethod
	def from_dict (cls, data: typing.Dict[str, typing.Any]) -> "SequenceState":

		"""Build a state from a plain dict, ignoring unknown keys."""

		fields = {field.name for field in dataclasses.fields(cls)}

		return cls(**{key: value for key, value in data.items() if key in fields})
