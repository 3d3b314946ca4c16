"""Recursive construction of the variation tree.

The root holds the trunk sequence. Every node below it is one random
transformation of its parent, and both children of a node are derived
independently from the same parent. While descending, the generator keeps a
path: the realized trunk followed by the realized sequence of every node on the
way down. When a branch bottoms out, its path is collected only if the final
edge was a left edge, so a tree of height ``h`` yields ``2 ** h`` paths from its
``2 ** (h + 1)`` leaf calls.
"""

import logging
import random
import typing

import seqtree.step
import seqtree.transformation


logger = logging.getLogger(__name__)


class TreeNode:

	"""
	A node of the variation tree. Children are None at the bottom level.
	"""

	def __init__ (
		self,
		value: seqtree.transformation.SequenceTransformation,
		left: typing.Optional["TreeNode"] = None,
		right: typing.Optional["TreeNode"] = None
	) -> None:

		self.value = value
		self.left = left
		self.right = right


	def count (self) -> int:

		"""Return the number of nodes in this subtree, including this one."""

		total = 1

		for child in (self.left, self.right):
			if child is not None:
				total += child.count()

		return total


	def depth (self) -> int:

		"""Return the number of edges on the longest downward route."""

		children = [child.depth() + 1 for child in (self.left, self.right) if child is not None]

		return max(children, default=0)


	def to_dict (self) -> typing.Dict[str, typing.Any]:

		"""Convert to a plain nested structure for the generation response."""

		return {
			"value": {"steps": steps_to_dicts(self.value.steps)},
			"left": self.left.to_dict() if self.left is not None else None,
			"right": self.right.to_dict() if self.right is not None else None,
		}


def steps_to_dicts (steps: typing.Iterable[seqtree.step.Step]) -> typing.List[typing.Dict[str, typing.Any]]:

	"""Convert a step sequence to a list of plain dicts."""

	return [step.to_dict() for step in steps]


class SequenceTreeGenerator:

	"""
	Builds the whole variation tree and its paths on construction.
	"""

	def __init__ (
		self,
		height: int,
		trunk_steps: typing.List[seqtree.step.Step],
		trunk_state: seqtree.step.SequenceState,
		rng: typing.Optional[random.Random] = None
	) -> None:

		"""
		Generate a tree of ``height`` transformation levels below the trunk.

		Parameters:
			height: Number of levels below the root (0 = root only).
			trunk_steps: Seed sequence. Ids should be dense positions ``0..n-1``.
			trunk_state: Rendering state shared by every node.
			rng: Random source for every choice made during generation.

		Raises:
			ValueError: If ``height`` is negative.
		"""

		if height < 0:
			raise ValueError(f"Tree height cannot be negative, got {height}")

		self.height = height
		self.root = TreeNode(
			seqtree.transformation.SequenceTransformation(
				[step.copy() for step in trunk_steps],
				trunk_state,
				rng or random.Random()
			)
		)
		self.paths: typing.List[typing.List[seqtree.step.Step]] = []

		self.generate_tree()


	def generate_tree (self) -> None:

		"""
		Grow both subtrees of the root and collect their paths.
		"""

		trunk = self.root.value

		self.root.left = self._generate_levels(self.height, trunk, trunk.realize(), True)
		self.root.right = self._generate_levels(self.height, trunk, trunk.realize(), False)

		logger.debug(f"Generated {self.root.count()} nodes and {len(self.paths)} paths at height {self.height}")


	def _generate_levels (
		self,
		levels: int,
		parent: seqtree.transformation.SequenceTransformation,
		path: seqtree.transformation.SequenceTransformation,
		is_left_branch: bool
	) -> typing.Optional[TreeNode]:

		"""
		Build one subtree, extending ``path`` with each new node's realization.
		"""

		if levels <= 0:
			if is_left_branch:
				self.paths.append(path.steps)
			return None

		# Transform the parent's own steps; only the path sees realized output.
		transformed = parent.transform()
		node = TreeNode(transformed)
		merged = path.merge(transformed.realize())

		node.left = self._generate_levels(levels - 1, transformed, merged, True)
		node.right = self._generate_levels(levels - 1, transformed, merged, False)

		return node
