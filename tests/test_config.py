from pathlib import Path

import pytest
from omegaconf import OmegaConf
from pydantic import ValidationError

from hintrating.config.loader import load_config, rating_config_from, snapshot_and_fingerprint
from hintrating.config.schema import RatingConfig
from hintrating.rating.tutor_hint import Validity

PRESETS = Path(__file__).resolve().parents[1] / "config" / "rating"


def test_defaults():
    config = RatingConfig()
    assert not config.trim_if_childless("script")
    assert not config.use_specific_numeric_literals()
    assert config.highest_required_validity() == Validity.MultipleTutors


def test_policy_questions():
    config = RatingConfig(trim_if_childless_types=["script"], trim_if_parent_is_added_types=["literal"],
                          body_types=["Block"], required_validity="Consensus")
    assert config.trim_if_childless("script")
    assert config.trim_if_parent_is_added("literal")
    assert not config.trim_if_parent_is_added("script")
    assert config.is_body_type("Block")
    assert config.highest_required_validity() == Validity.Consensus


def test_unknown_fields_are_rejected():
    with pytest.raises(ValidationError):
        RatingConfig(trim_childless=["script"])


def test_presets_load():
    snap = rating_config_from(OmegaConf.load(PRESETS / "snap.yaml"))
    assert snap.trim_if_childless("script")
    assert snap.trim_if_parent_is_added("literal")
    python = rating_config_from(OmegaConf.load(PRESETS / "python.yaml"))
    assert python.use_specific_numeric_literals()


def test_load_config_merges_yaml_env_and_overrides(tmp_path, monkeypatch):
    path = tmp_path / "run.yaml"
    path.write_text("data_dir: /data\nrating:\n  name: snap\n  required_validity: OneTutor\n")
    monkeypatch.setenv("HINTRATING__RATING__SPECIFIC_NUMERIC_LITERALS", "true")
    cfg = load_config([str(path)], ["debug=true"])
    assert cfg.data_dir == "/data"
    assert cfg.debug
    assert cfg.rating.name == "snap"
    assert cfg.rating.highest_required_validity() == Validity.OneTutor
    assert cfg.rating.use_specific_numeric_literals()


def test_fingerprint_is_stable():
    a = load_config()
    b = load_config()
    assert snapshot_and_fingerprint(a)[1] == snapshot_and_fingerprint(b)[1]
    blob, _ = snapshot_and_fingerprint(a)
    assert blob["rating"]["required_validity"] == int(Validity.MultipleTutors)


def test_load_config_layers_a_composed_base(monkeypatch):
    monkeypatch.setenv("HINTRATING__DEBUG", "true")
    base = OmegaConf.create({"data_dir": "/data", "rating": {"name": "python",
                                                             "required_validity": "Consensus"}})
    cfg = load_config(base=base, cli_overrides=["write_results=false"])
    assert cfg.data_dir == "/data"
    assert cfg.debug
    assert not cfg.write_results
    assert cfg.rating.name == "python"
    assert cfg.rating.highest_required_validity() == Validity.Consensus


def test_load_config_rejects_unknown_keys():
    with pytest.raises(ValidationError):
        load_config(base={"data_dr": "/data"})
