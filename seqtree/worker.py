"""Request/response boundary that runs tree generation off the caller's thread.

A request carries ``(height, trunk_steps, trunk_state)`` and produces exactly
one response ``(root, paths)`` in which the tree is a plain nested dict and
each path is a list of step dicts. Every request gets a fresh
:class:`~seqtree.tree_generator.SequenceTreeGenerator`, so concurrent requests
share no mutable state.

Two ways in:

- :class:`GenerationWorker` owns one dedicated thread fed by a queue. Post
  requests with :meth:`~GenerationWorker.post_message`; responses arrive on the
  ``on_message`` callback in request order.
- :func:`generate_async` awaits a single generation from asyncio code.

There is no cancellation. A request that has started always runs to
completion; a caller that has lost interest simply ignores the response.
Failures are not turned into responses: the worker reports them through
``on_error`` and the log, and :func:`generate_async` raises them.
"""

import asyncio
import dataclasses
import logging
import queue
import random
import threading
import typing

import seqtree.step
import seqtree.tree_generator


logger = logging.getLogger(__name__)

# Placed on the queue to tell the worker thread to exit.
_STOP = object()


@dataclasses.dataclass
class GenerationRequest:

	"""
	Input of one generation run.
	"""

	height: int
	trunk_steps: typing.List[seqtree.step.Step]
	trunk_state: seqtree.step.SequenceState


	def to_payload (self) -> typing.List[typing.Any]:

		"""Convert to the plain ``[height, steps, state]`` message form."""

		return [
			self.height,
			seqtree.tree_generator.steps_to_dicts(self.trunk_steps),
			self.trunk_state.to_dict(),
		]


	@classmethod
	def from_payload (cls, payload: typing.Sequence[typing.Any]) -> "GenerationRequest":

		"""
		Build a request from ``[height, steps, state]`` plain structures.

		Steps without an id take their list position.

		Raises:
			ValueError: If the trunk ids are not exactly ``0..n-1``.
		"""

		height, steps, state = payload

		trunk_steps = [seqtree.step.Step.from_dict(step, index) for index, step in enumerate(steps)]
		seqtree.step.validate_ids(trunk_steps)

		return cls(
			height = int(height),
			trunk_steps = trunk_steps,
			trunk_state = seqtree.step.SequenceState.from_dict(state),
		)


@dataclasses.dataclass
class GenerationResponse:

	"""
	Output of one generation run: the serialized tree and the collected paths.
	"""

	root: typing.Dict[str, typing.Any]
	paths: typing.List[typing.List[typing.Dict[str, typing.Any]]]


	def to_payload (self) -> typing.List[typing.Any]:

		"""Convert to the plain ``[root, paths]`` message form."""

		return [self.root, self.paths]


ResponseCallback = typing.Callable[[GenerationResponse], typing.Any]
ErrorCallback = typing.Callable[[GenerationRequest, BaseException], typing.Any]


def generate (request: GenerationRequest, rng: typing.Optional[random.Random] = None) -> GenerationResponse:

	"""
	Run one generation synchronously and package the result.

	Raises:
		ValueError: If the height is negative or the trunk cannot be transformed.
	"""

	if request.height < 0:
		raise ValueError(f"Tree height cannot be negative, got {request.height}")

	generator = seqtree.tree_generator.SequenceTreeGenerator(
		request.height,
		request.trunk_steps,
		request.trunk_state,
		rng = rng
	)

	return GenerationResponse(
		root = generator.root.to_dict(),
		paths = [seqtree.tree_generator.steps_to_dicts(path) for path in generator.paths],
	)


async def generate_async (request: GenerationRequest, rng: typing.Optional[random.Random] = None) -> GenerationResponse:

	"""
	Run one generation on a worker thread without blocking the event loop.
	"""

	return await asyncio.to_thread(generate, request, rng)


class GenerationWorker:

	"""
	A dedicated background thread that answers generation requests one at a time.
	"""

	def __init__ (
		self,
		on_message: ResponseCallback,
		on_error: typing.Optional[ErrorCallback] = None,
		rng: typing.Optional[random.Random] = None
	) -> None:

		"""
		Store the callbacks. Call :meth:`start` before posting requests.

		Parameters:
			on_message: Receives each response, called on the worker thread.
			on_error: Receives the request and exception when generation fails.
			rng: Random source shared by every request this worker handles.
		"""

		self._on_message = on_message
		self._on_error = on_error
		self._rng = rng
		self._queue: queue.Queue[typing.Any] = queue.Queue()
		self._thread: typing.Optional[threading.Thread] = None
		self._stop_requested = False


	@property
	def running (self) -> bool:

		"""True while the worker thread is alive."""

		return self._thread is not None and self._thread.is_alive()


	def start (self) -> None:

		"""Start the worker thread."""

		if self.running:
			return

		self._stop_requested = False
		self._thread = threading.Thread(
			target = self._run,
			name = "seqtree-generation",
			daemon = True
		)
		self._thread.start()

		logger.info("Generation worker started")


	def stop (self, timeout: typing.Optional[float] = None) -> None:

		"""
		Finish queued requests, then stop the thread.

		If ``timeout`` expires first the thread keeps its place, so
		:meth:`start` will not launch a second consumer; call ``stop`` again
		to wait for it.
		"""

		if self._thread is None:
			return

		# One stop marker per thread; a repeated stop() only waits.
		if not self._stop_requested:
			self._queue.put(_STOP)
			self._stop_requested = True

		self._thread.join(timeout)

		if self._thread.is_alive():
			logger.warning("Generation worker still busy after stop timeout")
			return

		self._thread = None

		logger.info("Generation worker stopped")


	def post_message (self, request: GenerationRequest) -> None:

		"""Queue a request. Its response arrives later on ``on_message``."""

		if not self.running or self._stop_requested:
			raise RuntimeError("Generation worker is not running; call start() first")

		self._queue.put(request)


	def _run (self) -> None:

		"""Consume requests until the stop marker arrives."""

		while True:

			request = self._queue.get()

			if request is _STOP:
				break

			try:
				response = generate(request, self._rng)

			except Exception as exc:
				logger.exception(f"Generation failed for height {request.height}")

				if self._on_error is not None:
					self._deliver(self._on_error, request, exc)

				continue

			self._deliver(self._on_message, response)


	def _deliver (self, callback: typing.Callable[..., typing.Any], *args: typing.Any) -> None:

		"""Call a consumer callback without letting its errors end the worker thread."""

		try:
			callback(*args)
		except Exception:
			logger.exception(f"Generation callback {getattr(callback, '__name__', callback)!r} failed")
