from pathlib import Path

import pytest

from cannagraph.config import ENV_PREFIX, GraphConfig, find_project_root
from cannagraph.errors import ConfigError

KEYS = ["SIMILAR_TOP_N", "SIMILAR_MIN_SCORE", "SIMILAR_THC_TOLERANCE", "CITY_MIN_PRODUCTS",
        "UNKNOWN_CITY", "IMAGE_BASE_URL", "REPORT_DIR"]

@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    # set-then-delete so values loaded from .env files are removed again on teardown
    for key in KEYS:
        monkeypatch.setenv(ENV_PREFIX + key, "")
        monkeypatch.delenv(ENV_PREFIX + key)

def test_defaults(tmp_path):
    cfg = GraphConfig.from_env(tmp_path)
    assert cfg == GraphConfig()
    assert cfg.as_dict()["similarity"] == {"top_n": 5, "min_score": 3.0, "thc_tolerance": 3.0}
    assert cfg.report_dir is None

def test_env_overrides(tmp_path, monkeypatch):
    monkeypatch.setenv("CANNAGRAPH_SIMILAR_TOP_N", "3")
    monkeypatch.setenv("CANNAGRAPH_SIMILAR_MIN_SCORE", "2.5")
    monkeypatch.setenv("CANNAGRAPH_CITY_MIN_PRODUCTS", "")
    monkeypatch.setenv("CANNAGRAPH_IMAGE_BASE_URL", "https://cdn.example/")
    monkeypatch.setenv("CANNAGRAPH_REPORT_DIR", str(tmp_path / "out"))
    cfg = GraphConfig.from_env(tmp_path)
    assert cfg.similarity.top_n == 3
    assert cfg.similarity.min_score == 2.5
    assert cfg.city_min_products == 10
    assert cfg.image_base_url == "https://cdn.example"
    assert cfg.report_dir == tmp_path / "out"

@pytest.mark.parametrize("key, value", [
    ("SIMILAR_TOP_N", "five"),
    ("SIMILAR_TOP_N", "-1"),
    ("SIMILAR_THC_TOLERANCE", "abc"),
    ("CITY_MIN_PRODUCTS", "2.5"),
])
def test_invalid_values(tmp_path, monkeypatch, key, value):
    monkeypatch.setenv(ENV_PREFIX + key, value)
    with pytest.raises(ConfigError, match=key):
        GraphConfig.from_env(tmp_path)

def test_dotenv_file(tmp_path):
    (tmp_path / ".env").write_text("CANNAGRAPH_CITY_MIN_PRODUCTS=4\nCANNAGRAPH_UNKNOWN_CITY=Unbekannt\n",
                                   encoding="utf-8")
    cfg = GraphConfig.from_env(tmp_path)
    assert cfg.city_min_products == 4
    assert cfg.unknown_city == "Unbekannt"

def test_process_env_wins_over_dotenv(tmp_path, monkeypatch):
    (tmp_path / ".env").write_text("CANNAGRAPH_CITY_MIN_PRODUCTS=4\n", encoding="utf-8")
    monkeypatch.setenv("CANNAGRAPH_CITY_MIN_PRODUCTS", "7")
    assert GraphConfig.from_env(tmp_path).city_min_products == 7

def test_find_project_root(tmp_path):
    (tmp_path / "pyproject.toml").write_text("[project]\n", encoding="utf-8")
    nested = tmp_path / "a" / "b"
    nested.mkdir(parents=True)
    assert find_project_root(nested) == tmp_path.resolve()
    assert isinstance(find_project_root(), Path)
