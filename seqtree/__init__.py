"""
seqtree - grow a binary tree of melodic variations from a seed sequence.

A trunk sequence of steps is transformed again and again - transposed by an
octave, melodically inverted, reversed, or partly mutated - into a complete
binary tree of variants. Walking down the tree and concatenating each node's
realized sequence gives "paths": long, evolving phrases that keep returning
to the trunk's material.

- **Four operators.** Transposition, inversion, reversal and mutation, each
  returning a fresh sequence and leaving its input untouched.
- **Realization.** Each sequence plays through the run's shared state:
  truncated to ``length``, ordered forward/backward/pendulum/random, stamped
  with ``transpose`` and ``slew``, and repeated ``repeat`` times.
- **Off-thread generation.** ``GenerationWorker`` answers requests on its own
  thread; ``generate_async()`` does the same from asyncio code, and
  ``GenerationOscServer`` exposes it over OSC.
- **Reproducible when needed.** Every random decision is drawn from one
  ``random.Random``, so ``random.Random(42)`` repeats a run exactly.

Minimal example:

    ```python
    import random
    import seqtree

    trunk = seqtree.Step.from_notes(["C4", "E4", None, "G4"])
    state = seqtree.SequenceState(length=4, order="pendulum")

    generator = seqtree.SequenceTreeGenerator(3, trunk, state, rng=random.Random(42))

    for path in generator.paths:
        print(" ".join(step.note or "-" for step in path))
    ```

Package-level exports: ``Step``, ``SequenceState``, ``SequenceTransformation``,
``SequenceTreeGenerator``, ``GenerationRequest``, ``GenerationWorker``.
"""

import seqtree.step
import seqtree.transformation
import seqtree.tree_generator
import seqtree.worker


Step = seqtree.step.Step
SequenceState = seqtree.step.SequenceState
SequenceTransformation = seqtree.transformation.SequenceTransformation
SequenceTreeGenerator = seqtree.tree_generator.SequenceTreeGenerator
GenerationRequest = seqtree.worker.GenerationRequest
GenerationWorker = seqtree.worker.GenerationWorker
