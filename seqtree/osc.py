"""OSC transport for the generation worker.

The server listens on a UDP port (default 9000) for a trunk, state changes and
generation requests, and sends the collected paths to a target host/port
(default 127.0.0.1:9001). Generation runs on a worker thread, so the event
loop keeps receiving messages while a large tree is being built.

Receive Handlers
────────────────
- ``/trunk <note|"-"> ...``: Replace the trunk sequence (``"-"`` is a rest)
- ``/state/<field> <value>``: Set ``length``, ``order``, ``transpose``, ``slew`` or ``repeat``
- ``/generate <int>``: Generate a tree of the given height

Send Events
───────────
- ``/paths <int>``: Number of paths in the response
- ``/path <int> <note|"-"> ...``: One message per path, in collection order
"""

import asyncio
import dataclasses
import logging
import random
import typing

import pythonosc.dispatcher
import pythonosc.osc_server
import pythonosc.udp_client

import seqtree.config
import seqtree.notes
import seqtree.step
import seqtree.worker


logger = logging.getLogger(__name__)

REST = "-"

_STATE_FIELDS: typing.Dict[str, typing.Callable[[typing.Any], typing.Any]] = {
	"length": int,
	"order": str,
	"transpose": int,
	"slew": float,
	"repeat": int,
}


class GenerationOscServer:

	"""Async OSC server/client that answers generation requests."""

	def __init__ (
		self,
		trunk_steps: typing.List[seqtree.step.Step],
		state: seqtree.step.SequenceState,
		receive_port: int = 9000,
		send_port: int = 9001,
		send_host: str = "127.0.0.1",
		config: typing.Optional[typing.Dict[str, typing.Any]] = None,
		rng: typing.Optional[random.Random] = None
	) -> None:

		self.trunk_steps = trunk_steps
		self.state = state
		self.last_response: typing.Optional[seqtree.worker.GenerationResponse] = None

		self._receive_port = receive_port
		self._send_port = send_port
		self._send_host = send_host
		self._config = config or seqtree.config.DEFAULT_CONFIG
		self._rng = rng

		self._transport: typing.Optional[asyncio.BaseTransport] = None
		self._client: typing.Optional[pythonosc.udp_client.SimpleUDPClient] = None
		self._tasks: typing.Set[asyncio.Task] = set()
		self._dispatcher = pythonosc.dispatcher.Dispatcher()

		self._dispatcher.map("/trunk", self._handle_trunk)
		self._dispatcher.map("/state/*", self._handle_state)
		self._dispatcher.map("/generate", self._handle_generate)


	async def start (self) -> None:

		"""Start the OSC server and client."""

		self._client = pythonosc.udp_client.SimpleUDPClient(self._send_host, self._send_port)

		server = pythonosc.osc_server.AsyncIOOSCUDPServer(
			("0.0.0.0", self._receive_port),
			self._dispatcher,
			asyncio.get_running_loop()  # type: ignore[arg-type]
		)

		transport, _ = await server.create_serve_endpoint()
		self._transport = transport

		logger.info(f"OSC listening on :{self._receive_port}, sending to {self._send_host}:{self._send_port}")


	async def stop (self) -> None:

		"""Wait for in-flight generations, then stop the OSC server."""

		if self._tasks:
			await asyncio.gather(*self._tasks, return_exceptions=True)

		if self._transport:
			self._transport.close()
			self._transport = None
			logger.info("OSC server stopped")


	def send (self, address: str, *args: typing.Any) -> None:

		"""Send an OSC message."""

		if self._client:
			try:
				self._client.send_message(address, list(args))
			except Exception as e:
				logger.warning(f"OSC send error: {e}")


	async def generate (self, height: int) -> seqtree.worker.GenerationResponse:

		"""Generate a tree from the current trunk and state, then send its paths."""

		request = seqtree.worker.GenerationRequest(
			height = height,
			trunk_steps = [step.copy() for step in self.trunk_steps],
			trunk_state = self.state,
		)

		response = await seqtree.worker.generate_async(request, self._rng)
		self.last_response = response

		self.send("/paths", len(response.paths))

		for index, path in enumerate(response.paths):
			self.send("/path", index, *[step["note"] or REST for step in path])

		return response


	# Handlers

	def _handle_trunk (self, address: str, *args: typing.Any) -> None:

		notes = [None if str(arg) == REST else str(arg) for arg in args]

		try:
			for note in notes:
				if note is not None:
					seqtree.notes.note_to_midi(note)
		except ValueError as e:
			logger.warning(f"Invalid OSC trunk: {e}")
			return

		self.trunk_steps = seqtree.step.Step.from_notes(notes)

	def _handle_state (self, address: str, *args: typing.Any) -> None:
		# address is like /state/order
		parts = address.split("/")
		if len(parts) < 3 or not args:
			return
		field = parts[2]
		if field not in _STATE_FIELDS:
			logger.warning(f"Unknown OSC state field: {field}")
			return
		try:
			state = dataclasses.replace(self.state, **{field: _STATE_FIELDS[field](args[0])})
			seqtree.config.validate_state(state, self._config)
		except (ValueError, TypeError) as e:
			logger.warning(f"Invalid OSC state value for {field}: {e}")
			return
		self.state = state

	def _handle_generate (self, address: str, *args: typing.Any) -> None:
		if not args:
			return
		try:
			height = int(args[0])
			seqtree.config.validate_height(height, self._config)
		except (ValueError, TypeError) as e:
			logger.warning(f"Invalid OSC height argument: {e}")
			return
		if not self.trunk_steps:
			logger.warning("Ignoring /generate: trunk is empty")
			return
		task = asyncio.get_running_loop().create_task(self._generate_logged(height))
		self._tasks.add(task)
		task.add_done_callback(self._tasks.discard)

	async def _generate_logged (self, height: int) -> None:

		"""Run a generation requested over OSC, reporting failures in the log."""

		try:
			await self.generate(height)
		except Exception:
			logger.exception(f"OSC generation failed for height {height}")
