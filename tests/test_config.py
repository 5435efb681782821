from pathlib import Path

import pytest
from pydantic import ValidationError

from cutout.main import load_config, parse_args
from cutout.schemas.config import AcceptanceBand, CascadeConfig, RemoteConfig

DEFAULT_YAML = Path(__file__).resolve().parents[1] / "configs" / "default.yaml"


def test_default_yaml_loads(monkeypatch):
    monkeypatch.delenv("ENABLE_REMOVE_BG_API", raising=False)
    monkeypatch.delenv("REMOVE_BG_API_KEY", raising=False)
    cfg = load_config(DEFAULT_YAML)
    assert cfg.cascade.method_order[-1] == "forced"
    assert cfg.cascade.advanced.tolerances == [35, 55, 75, 95]
    assert cfg.cascade.flood_fill.max_fraction == 0.65
    assert cfg.run.mode == "cascade"
    assert not cfg.remote.active


def test_remote_settings_from_environment(monkeypatch):
    monkeypatch.setenv("ENABLE_REMOVE_BG_API", "true")
    monkeypatch.setenv("REMOVE_BG_API_KEY", "secret")
    assert load_config(DEFAULT_YAML).remote.active
    monkeypatch.setenv("REMOVE_BG_API_KEY", "")
    assert not RemoteConfig.from_env().active


def test_method_order_must_end_with_forced():
    with pytest.raises(ValidationError):
        CascadeConfig(method_order=["advanced", "flood_fill"])
    with pytest.raises(ValidationError):
        CascadeConfig(method_order=["forced", "advanced"])
    with pytest.raises(ValidationError):
        CascadeConfig(method_order=["advanced", "magic", "forced"])


def test_configs_are_frozen_and_strict():
    cfg = CascadeConfig()
    with pytest.raises(ValidationError):
        cfg.min_contrast_std = 3.0
    with pytest.raises(ValidationError):
        CascadeConfig(unknown=1)
    with pytest.raises(ValidationError):
        AcceptanceBand(min_removed_pct=50, max_removed_pct=10)


def test_cli_overrides():
    args = parse_args(["--limit", "5", "--mode", "multilayer"])
    assert args.limit == 5 and args.mode == "multilayer"
    with pytest.raises(SystemExit):
        parse_args(["--mode", "neural"])
