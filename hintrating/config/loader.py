# hintrating/config/loader.py
from __future__ import annotations

import json
import os
from typing import Any, Dict, List

from omegaconf import DictConfig, OmegaConf

from hintrating.config.schema import AppConfig, RatingConfig
from hintrating.utils.hash_utils import hash_text


def load_config(yaml_paths: List[str] | None = None,
                cli_overrides: List[str] | None = None,
                env_prefix: str = "HINTRATING__",
                base: DictConfig | Dict[str, Any] | None = None) -> AppConfig:
    """
    Validated app config: defaults, then `base` (e.g. the config hydra
    composed), then YAML files, then `HINTRATING__A__B` env vars, then CLI
    dotlist overrides.
    """
    defaults = OmegaConf.create(AppConfig().model_dump(mode="json"))
    if base is not None:
        if isinstance(base, DictConfig):
            base = OmegaConf.to_container(base, resolve=True)
        defaults = OmegaConf.merge(defaults, OmegaConf.create(base))
    yaml_cfg = OmegaConf.create()
    for p in (yaml_paths or []):
        yaml_cfg = OmegaConf.merge(yaml_cfg, OmegaConf.load(p))

    # env like HINTRATING__RATING__SPECIFIC_NUMERIC_LITERALS=true
    env_items = []
    for k, v in os.environ.items():
        if not k.startswith(env_prefix):
            continue
        key = k.removeprefix(env_prefix).lower().replace("__", ".")
        env_items.append(f"{key}={v}")
    env_cfg = OmegaConf.from_dotlist(env_items)

    cli_cfg = OmegaConf.from_dotlist(cli_overrides or [])
    merged = OmegaConf.merge(defaults, yaml_cfg, env_cfg, cli_cfg)
    # validate
    return AppConfig(**OmegaConf.to_container(merged, resolve=True))


def rating_config_from(cfg: DictConfig | Dict[str, Any]) -> RatingConfig:
    """Build a RatingConfig from a hydra/OmegaConf node or a plain mapping."""
    if isinstance(cfg, DictConfig):
        cfg = OmegaConf.to_container(cfg, resolve=True)
    return RatingConfig(**cfg)


def snapshot_and_fingerprint(cfg: AppConfig) -> tuple[dict, str]:
    blob = cfg.model_dump(mode="json")
    s = json.dumps(blob, sort_keys=True, separators=(",", ":"))
    fp = hash_text(s)
    return blob, fp
