import logging

import pytest
from structlog.testing import capture_logs

import mapgen.__main__ as cli
from mapgen.dungeon.config import DungeonConfig
from mapgen.grid import Grid
from mapgen.utils.logging_utils import parse_level


@pytest.fixture(autouse=True)
def _quiet_logging(monkeypatch):
    # Leave structlog unconfigured so capture_logs keeps working in other tests
    monkeypatch.setattr(cli, "setup_logging", lambda *args, **kwargs: None)
    with capture_logs():
        yield


def test_format_grid():
    config = DungeonConfig()
    grid = Grid(3, 2, initial_value=config.wall_threshold)
    grid.set(1, 0, config.floor_threshold)
    grid.set(2, 1, config.corridor_threshold)
    grid.set(0, 1, 0.7)
    assert cli.format_grid(grid, config) == "#.#\n?#,"


def test_main_prints_map(capsys):
    assert cli.main(["--width", "21", "--height", "15", "--seed", "3"]) == 0
    lines = capsys.readouterr().out.splitlines()
    assert len(lines) == 16
    assert lines[0] == "#" * 21
    assert lines[-1].startswith("seed=3 ")


def test_main_with_config_file(tmp_path, capsys):
    path = tmp_path / "dungeon.toml"
    path.write_text("min_room_size = 5\nmax_room_size = 5\n", encoding="utf-8")
    assert cli.main(["--width", "15", "--height", "15", "--config", str(path), "--metrics"]) == 0
    assert '"integers_generated"' in capsys.readouterr().out


def test_main_reports_bad_settings(capsys):
    assert cli.main(["--width", "5", "--height", "5"]) == 1
    assert "max_room_size" in capsys.readouterr().err


def test_parse_level():
    assert parse_level("debug") == logging.DEBUG
    assert parse_level(logging.ERROR) == logging.ERROR
    with pytest.raises(ValueError):
        parse_level("loud")


def test_main_reports_wrong_typed_config(tmp_path, capsys):
    path = tmp_path / "dungeon.yaml"
    path.write_text("tolerance: two\n", encoding="utf-8")
    assert cli.main(["--config", str(path)]) == 1
    assert "tolerance" in capsys.readouterr().err
