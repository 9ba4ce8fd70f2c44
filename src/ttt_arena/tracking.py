"""
Experiment tracking helpers (optional MLflow backend) for arena runs.

MLflow is imported only when tracking is requested; every helper degrades to
a logged no-op when it is not installed or no run is active.
"""
from __future__ import annotations

import importlib.util
import logging
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Dict, Iterator, Optional


def mlflow_available() -> bool:
    return importlib.util.find_spec("mlflow") is not None


def _active_mlflow() -> Optional[Any]:
    if not mlflow_available():
        return None
    import mlflow  # type: ignore

    return mlflow if mlflow.active_run() is not None else None


@contextmanager
def maybe_mlflow_run(enabled: bool, run_name: str, log_dir: Optional[Path] = None) -> Iterator[None]:
    if not enabled:
        yield None
        return
    if not mlflow_available():
        logging.warning("Tracking requested but mlflow is not installed; continuing without it")
        yield None
        return
    import mlflow  # type: ignore

    if log_dir is not None:
        mlflow.set_tracking_uri((Path(log_dir).resolve() / "mlruns").as_uri())
    with mlflow.start_run(run_name=run_name):
        yield None


def log_params(params: Dict[str, object]) -> None:
    mlflow = _active_mlflow()
    if mlflow is not None:
        mlflow.log_params(params)


def log_metrics(metrics: Dict[str, float]) -> None:
    mlflow = _active_mlflow()
    if mlflow is not None:
        mlflow.log_metrics(metrics)


def log_artifact(path: Path, artifact_path: Optional[str] = None) -> None:
    mlflow = _active_mlflow()
    if mlflow is not None:
        mlflow.log_artifact(str(path), artifact_path=artifact_path)
