# hintrating/main.py
from __future__ import annotations

import logging
from pathlib import Path

import hydra
import yaml
from omegaconf import DictConfig

from hintrating.config.loader import load_config, snapshot_and_fingerprint
from hintrating.config.schema import AppConfig
from hintrating.core.logging import JSONLogger
from hintrating.errors import HintRatingError
from hintrating.rating.rate_hints import rate_dir

logger = logging.getLogger(__name__)


def rate_with(app: AppConfig, log: JSONLogger) -> dict:
    """Rate `app.data_dir` and return per-algorithm, per-assignment mean scores."""
    blob, fingerprint = snapshot_and_fingerprint(app)
    log.log("ConfigLoaded", {"config": blob, "fingerprint": fingerprint})
    if not app.data_dir:
        raise HintRatingError("data_dir is not set")

    logger.info(f"🟢 Rating hints in {app.data_dir} with the {app.rating.name} config")
    log.log("RatingRunStarted", {"data_dir": app.data_dir, "fingerprint": fingerprint})
    try:
        results = rate_dir(app.data_dir, app.rating, write=app.write_results,
                           logger=log, debug=app.debug)
    except HintRatingError as e:
        log.exception(f"Rating failed: {e}", {"data_dir": app.data_dir})
        raise

    summary = {}
    for name, ratings in results.items():
        summary[name] = {}
        for assignment_id in ratings.assignment_ids():
            full, partial = ratings.priority_means(assignment_id)
            summary[name][assignment_id] = {
                "validity": ratings.validity_means(assignment_id).tolist(),
                "priority_full": full,
                "priority_partial": partial,
            }
    log.log("RatingRunCompleted", {"algorithms": list(results)})
    return summary


@hydra.main(config_path="../config", config_name="config", version_base=None)
def run(cfg: DictConfig):
    # Validates the composed config; HINTRATING__* env vars still apply on top
    app = load_config(base=cfg)
    log = JSONLogger(log_path=app.log_path)
    summary = rate_with(app, log)
    save_yaml_result(app.log_path, summary)


def save_yaml_result(log_path: str, result: dict) -> str:
    report_path = str(Path(log_path).with_suffix(".yaml"))
    with open(report_path, "w", encoding="utf-8") as f:
        yaml.dump(result, f, allow_unicode=True, sort_keys=False)
    logger.info(f"✅ Result saved to: {report_path}")
    return report_path


def main():
    logging.basicConfig(level=logging.INFO, format="%(message)s")
    run()


if __name__ == "__main__":
    main()
