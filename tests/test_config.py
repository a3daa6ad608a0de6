import os
from pathlib import Path

from gamebook.config_env import load_env
from gamebook.engine.config import (
    BUNDLED_DATA,
    CRT_FILENAME,
    DEFAULT_PACING,
    find_crt,
    get_pacing,
    get_system_name,
    load_config,
    save_config,
)


def test_pacing_precedence(gamebook_home, monkeypatch):
    monkeypatch.delenv("GAMEBOOK_PACING", raising=False)
    assert get_pacing() == DEFAULT_PACING
    save_config({"pacing": 0.5})
    assert get_pacing() == 0.5
    monkeypatch.setenv("GAMEBOOK_PACING", "0.2")
    assert get_pacing() == 0.2
    assert get_pacing(0) == 0.0
    assert get_pacing(-3) == 0.0


def test_bad_pacing_falls_back(gamebook_home, monkeypatch):
    monkeypatch.setenv("GAMEBOOK_PACING", "slow")
    assert get_pacing() == DEFAULT_PACING


def test_corrupt_config_reads_empty(gamebook_home):
    gamebook_home.mkdir(parents=True)
    (gamebook_home / "config.json").write_text("{not json", encoding="utf-8")
    assert load_config() == {}


def test_system_name_precedence(gamebook_home):
    assert get_system_name(None) == "lonewolf"
    save_config({"system": "custom"})
    assert get_system_name(None) == "custom"
    assert get_system_name("lonewolf") == "lonewolf"
    assert get_system_name("lonewolf", "other") == "other"


def test_find_crt_order(tmp_path, gamebook_home, monkeypatch):
    story = tmp_path / "book" / "story.toml"
    story.parent.mkdir()
    story.write_text("", encoding="utf-8")
    assert find_crt(story) == BUNDLED_DATA / CRT_FILENAME

    beside = story.parent / CRT_FILENAME
    beside.write_text("", encoding="utf-8")
    assert find_crt(story) == beside.resolve()

    save_config({"crt": str(tmp_path / "cfg.toml")})
    assert find_crt(story) == tmp_path / "cfg.toml"

    monkeypatch.setenv("GAMEBOOK_CRT", str(tmp_path / "env.toml"))
    assert find_crt(story) == tmp_path / "env.toml"

    assert find_crt(story, tmp_path / "flag.toml") == tmp_path / "flag.toml"


def test_env_loads_dotenv(tmp_path, monkeypatch):
    (tmp_path / ".env").write_text("GAMEBOOK_LOG_LEVEL=DEBUG\nGAMEBOOK_SYSTEM_NOTE=from_file\n", encoding="utf-8")
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("GAMEBOOK_LOG_LEVEL", "ERROR")
    monkeypatch.delenv("GAMEBOOK_SYSTEM_NOTE", raising=False)

    load_env()

    assert os.getenv("GAMEBOOK_SYSTEM_NOTE") == "from_file"
    assert os.getenv("GAMEBOOK_LOG_LEVEL") == "ERROR"
    monkeypatch.delenv("GAMEBOOK_SYSTEM_NOTE")


def test_home_dir_from_env_is_resolved(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("GAMEBOOK_HOME", raising=False)
    (tmp_path / ".env").write_text("GAMEBOOK_HOME=./.gamebook\n", encoding="utf-8")

    load_env()

    home = os.getenv("GAMEBOOK_HOME")
    assert home
    assert Path(home) == (tmp_path / ".gamebook").resolve()
    monkeypatch.delenv("GAMEBOOK_HOME")
