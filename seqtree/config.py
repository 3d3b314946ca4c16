"""Control ranges and defaults, loadable from YAML.

The defaults mirror the instrument's front panel: up to seven branch levels,
an eight-step trunk, and the length/order/transpose/repeat/slew controls that
make up a :class:`~seqtree.step.SequenceState`. A YAML file only needs to
name the values it changes::

    tree:
      branches: {max: 5, init: 3}
    sequence:
      scale: {init: minor pentatonic}
      order: {init: pendulum}
"""

import copy
import logging
import os
import random
import typing

import yaml

import seqtree.notes
import seqtree.step


logger = logging.getLogger(__name__)


DEFAULT_CONFIG: typing.Dict[str, typing.Any] = {
	"tree": {
		"branches": {"min": 0, "max": 7, "init": 0},
		# 1-based pick among the 2 ** branches paths; the upper bound follows the height.
		"path": {"min": 1, "init": 1},
	},
	"sequence": {
		"step_number": 8,
		"default_step_duration": 1,
		"scale": {"init": "major", "values": list(seqtree.notes.SCALES)},
		"length": {"min": 1, "max": 8, "init": 8},
		"order": {"init": "forward", "values": list(seqtree.step.ORDERS)},
		"transpose": {"min": -24, "max": 24, "init": 0},
		"repeat": {"min": 1, "max": 8, "init": 1},
		"slew": {"min": 0.0, "max": 1.0, "init": 0.0},
		"tempo": {"min": 30, "max": 220, "init": 120},
		# Steps per whole note: 16 plays a duration-1 step as a sixteenth.
		"time_division": {"init": 16, "values": [2 ** i for i in range(9)]},
	},
}


def _merge (base: typing.Dict[str, typing.Any], override: typing.Dict[str, typing.Any]) -> typing.Dict[str, typing.Any]:

	"""Recursively overlay ``override`` onto a copy of ``base``."""

	merged = copy.deepcopy(base)

	for key, value in override.items():
		if isinstance(value, dict) and isinstance(merged.get(key), dict):
			merged[key] = _merge(merged[key], value)
		else:
			merged[key] = value

	return merged


def load_config (config_path: str = "seqtree.yaml") -> typing.Dict[str, typing.Any]:

	"""
	Load configuration from a YAML file, layered over ``DEFAULT_CONFIG``.
	"""

	if not os.path.exists(config_path):
		logger.warning(f"Config file {config_path} not found. Using defaults.")
		return copy.deepcopy(DEFAULT_CONFIG)

	with open(config_path, "r") as f:
		loaded = yaml.safe_load(f) or {}

	if not isinstance(loaded, dict):
		raise ValueError(f"Config file {config_path} must contain a mapping, got {type(loaded).__name__}")

	logger.info(f"Loaded config from {config_path}")

	return _merge(DEFAULT_CONFIG, loaded)


def _check_range (name: str, value: float, control: typing.Dict[str, typing.Any]) -> None:

	"""Raise ValueError when a value falls outside a control's [min, max]."""

	low = control.get("min")
	high = control.get("max")

	if (low is not None and value < low) or (high is not None and value > high):
		raise ValueError(f"{name} must be between {low} and {high}, got {value}")


def default_state (config: typing.Optional[typing.Dict[str, typing.Any]] = None) -> seqtree.step.SequenceState:

	"""Build the initial SequenceState from the controls' ``init`` values."""

	controls = (config or DEFAULT_CONFIG)["sequence"]

	return seqtree.step.SequenceState(
		length = controls["length"]["init"],
		order = controls["order"]["init"],
		transpose = controls["transpose"]["init"],
		slew = controls["slew"]["init"],
		repeat = controls["repeat"]["init"],
	)


def validate_state (state: seqtree.step.SequenceState, config: typing.Optional[typing.Dict[str, typing.Any]] = None) -> None:

	"""
	Check a state against the configured control ranges.

	Raises:
		ValueError: If any field is out of range.
	"""

	controls = (config or DEFAULT_CONFIG)["sequence"]

	for name in ("length", "transpose", "slew", "repeat"):
		_check_range(name, getattr(state, name), controls[name])

	if state.order not in controls["order"]["values"]:
		raise ValueError(f"order must be one of {controls['order']['values']}, got {state.order!r}")


def validate_height (height: int, config: typing.Optional[typing.Dict[str, typing.Any]] = None) -> None:

	"""Check a tree height against the configured branch range."""

	_check_range("branches", height, (config or DEFAULT_CONFIG)["tree"]["branches"])


def validate_path (path: int, height: int, config: typing.Optional[typing.Dict[str, typing.Any]] = None) -> None:

	"""Check a 1-based path choice against the ``2 ** height`` paths a tree yields."""

	control = dict((config or DEFAULT_CONFIG)["tree"]["path"], max=2 ** height)

	_check_range("path", path, control)


def validate_playback (config: typing.Optional[typing.Dict[str, typing.Any]] = None) -> None:

	"""Check the configured tempo and time division."""

	controls = (config or DEFAULT_CONFIG)["sequence"]

	_check_range("tempo", controls["tempo"]["init"], controls["tempo"])

	if controls["time_division"]["init"] not in controls["time_division"]["values"]:
		raise ValueError(
			f"time_division must be one of {controls['time_division']['values']}, got {controls['time_division']['init']}"
		)


def default_trunk (
	config: typing.Optional[typing.Dict[str, typing.Any]] = None,
	rng: typing.Optional[random.Random] = None
) -> typing.List[seqtree.step.Step]:

	"""Generate a random trunk melody in the configured scale."""

	controls = (config or DEFAULT_CONFIG)["sequence"]

	notes = seqtree.notes.random_melody(controls["scale"]["init"], controls["step_number"], rng)

	return seqtree.step.Step.from_notes(notes, duration=controls["default_step_duration"])
