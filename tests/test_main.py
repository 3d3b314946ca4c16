import json

import seqtree.__main__


def test_prints_paths (tmp_path, capsys) -> None:

	"""The default output lists one numbered line per path."""

	code = seqtree.__main__.main([
		"--config", str(tmp_path / "none.yaml"),
		"--height", "2",
		"--notes", "C4 E4 - G4",
		"--length", "4",
		"--seed", "1",
	])

	lines = capsys.readouterr().out.strip().splitlines()

	assert code == 0
	assert len(lines) == 4
	assert lines[0].split(":", 1)[1].split()[:4] == ["C4", "E4", "-", "G4"]


def test_json_payload (tmp_path, capsys) -> None:

	"""--json dumps [root, paths] as plain structures."""

	code = seqtree.__main__.main([
		"--config", str(tmp_path / "none.yaml"),
		"--height", "1",
		"--scale", "minor pentatonic",
		"--steps", "5",
		"--seed", "3",
		"--json",
	])

	root, paths = json.loads(capsys.readouterr().out)

	assert code == 0
	assert set(root) == {"value", "left", "right"}
	assert len(root["value"]["steps"]) == 5
	assert len(paths) == 2


def test_invalid_values_exit_with_error (tmp_path) -> None:

	"""Out-of-range settings are reported instead of generating."""

	assert seqtree.__main__.main(["--config", str(tmp_path / "none.yaml"), "--height", "9"]) == 2
	assert seqtree.__main__.main(["--config", str(tmp_path / "none.yaml"), "--notes", "C4 Q2"]) == 2
	assert seqtree.__main__.main(["--config", str(tmp_path / "none.yaml"), "--repeat", "0"]) == 2


def test_path_option_prints_one_path (tmp_path, capsys) -> None:

	"""--path keeps its 1-based number and prints only that path."""

	code = seqtree.__main__.main([
		"--config", str(tmp_path / "none.yaml"),
		"--height", "2",
		"--notes", "C4 E4 - G4",
		"--seed", "1",
		"--path", "2",
	])

	lines = capsys.readouterr().out.strip().splitlines()

	assert code == 0
	assert len(lines) == 1
	assert lines[0].startswith("  2:")


def test_path_option_json_and_midi (tmp_path, capsys) -> None:

	"""--json with --path dumps the single path; --midi lists its messages."""

	args = ["--config", str(tmp_path / "none.yaml"), "--height", "1", "--notes", "C4 D4", "--length", "2", "--seed", "4", "--path", "1"]

	assert seqtree.__main__.main(args + ["--json"]) == 0
	path = json.loads(capsys.readouterr().out)
	assert [step["note"] for step in path][:2] == ["C4", "D4"]

	assert seqtree.__main__.main(args + ["--midi"]) == 0
	out = capsys.readouterr().out
	assert "set_tempo" in out
	assert "note_on" in out


def test_path_out_of_range_exits_with_error (tmp_path, capsys) -> None:

	assert seqtree.__main__.main(["--config", str(tmp_path / "none.yaml"), "--height", "2", "--path", "5"]) == 2
	assert seqtree.__main__.main(["--config", str(tmp_path / "none.yaml"), "--height", "2", "--path", "0"]) == 2
	assert capsys.readouterr().out == ""
