"""
Worker configuration read from environment variables.

Variable names follow the Camunda / Zeebe client conventions so the same
.env file works for every client of the cluster.
"""

import math
import os
from dataclasses import dataclass, asdict
from typing import Any, Dict, Mapping, Optional

from .scoring import SCORING_STRATEGIES

DEFAULT_TASK_TYPE = "automated-evaluation"
DEFAULT_ZEEBE_ADDRESS = "localhost:26500"
DEFAULT_AUTHORIZATION_SERVER = "https://login.cloud.camunda.io/oauth/token"
DEFAULT_TOKEN_AUDIENCE = "zeebe.camunda.io"
DEFAULT_REGION = "bru-2"

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
SECRET_FIELDS = {"client_secret"}


class ConfigError(ValueError):
    """Raised when an environment variable holds an unusable value."""
    pass


@dataclass
class WorkerSettings:
    zeebe_address: str = ""
    client_id: str = ""
    client_secret: str = ""
    authorization_server: str = DEFAULT_AUTHORIZATION_SERVER
    token_audience: str = DEFAULT_TOKEN_AUDIENCE
    cluster_id: str = ""
    region: str = DEFAULT_REGION

    task_type: str = DEFAULT_TASK_TYPE
    scoring: str = "fixed"
    fixed_score: float = 0.2
    random_seed: Optional[int] = None
    job_timeout_ms: int = 10000
    max_jobs_to_activate: int = 32
    max_running_jobs: int = 32

    log_level: str = "INFO"
    log_dir: str = "logs"

    def __post_init__(self):
        if not self.task_type.strip():
            raise ConfigError("EVAL_TASK_TYPE must be a non-empty string")
        if self.scoring not in SCORING_STRATEGIES:
            raise ConfigError(
                f"EVAL_SCORING must be one of {', '.join(SCORING_STRATEGIES)}, got '{self.scoring}'"
            )
        if math.isnan(self.fixed_score) or not 0.0 <= self.fixed_score <= 1.0:
            raise ConfigError(f"EVAL_FIXED_SCORE must be within [0, 1], got {self.fixed_score}")
        for name, value in (
            ("EVAL_JOB_TIMEOUT_MS", self.job_timeout_ms),
            ("EVAL_MAX_JOBS_TO_ACTIVATE", self.max_jobs_to_activate),
            ("EVAL_MAX_RUNNING_JOBS", self.max_running_jobs),
        ):
            if value <= 0:
                raise ConfigError(f"{name} must be > 0, got {value}")
        if self.log_level not in LOG_LEVELS:
            raise ConfigError(f"LOG_LEVEL must be one of {', '.join(LOG_LEVELS)}, got '{self.log_level}'")
        if bool(self.client_id) != bool(self.client_secret):
            raise ConfigError("ZEEBE_CLIENT_ID and ZEEBE_CLIENT_SECRET must be set together")

    @property
    def has_credentials(self) -> bool:
        return bool(self.client_id and self.client_secret)

    def masked(self) -> Dict[str, Any]:
        """Settings as a dict with secrets hidden, for display."""
        data = asdict(self)
        for key in SECRET_FIELDS:
            if data.get(key):
                data[key] = "****"
        return data


def _get_int(env: Mapping[str, str], name: str, default: Optional[int]) -> Optional[int]:
    raw = env.get(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        raise ConfigError(f"{name} must be an integer, got '{raw}'")


def _get_float(env: Mapping[str, str], name: str, default: float) -> float:
    raw = env.get(name, "").strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        raise ConfigError(f"{name} must be a number, got '{raw}'")


def load_settings(env: Optional[Mapping[str, str]] = None, **overrides: Any) -> WorkerSettings:
    """
    Build WorkerSettings from environment variables.

    Args:
        env: Mapping to read from (default: os.environ)
        **overrides: Field values that take precedence, e.g. from CLI flags.
            None values are ignored.

    Raises:
        ConfigError: If a variable cannot be parsed or fails validation
    """
    if env is None:
        env = os.environ

    values: Dict[str, Any] = {
        "zeebe_address": env.get("ZEEBE_ADDRESS", "").strip(),
        "client_id": env.get("ZEEBE_CLIENT_ID", "").strip(),
        "client_secret": env.get("ZEEBE_CLIENT_SECRET", "").strip(),
        "authorization_server": env.get("ZEEBE_AUTHORIZATION_SERVER_URL", "").strip()
        or DEFAULT_AUTHORIZATION_SERVER,
        "token_audience": env.get("ZEEBE_TOKEN_AUDIENCE", "").strip() or DEFAULT_TOKEN_AUDIENCE,
        "cluster_id": env.get("CAMUNDA_CLUSTER_ID", "").strip(),
        "region": env.get("CAMUNDA_CLUSTER_REGION", "").strip() or DEFAULT_REGION,
        "task_type": env.get("EVAL_TASK_TYPE", "").strip() or DEFAULT_TASK_TYPE,
        "scoring": env.get("EVAL_SCORING", "fixed").strip().lower() or "fixed",
        "fixed_score": _get_float(env, "EVAL_FIXED_SCORE", 0.2),
        "random_seed": _get_int(env, "EVAL_RANDOM_SEED", None),
        "job_timeout_ms": _get_int(env, "EVAL_JOB_TIMEOUT_MS", 10000),
        "max_jobs_to_activate": _get_int(env, "EVAL_MAX_JOBS_TO_ACTIVATE", 32),
        "max_running_jobs": _get_int(env, "EVAL_MAX_RUNNING_JOBS", 32),
        "log_level": env.get("LOG_LEVEL", "INFO").strip().upper() or "INFO",
        "log_dir": env.get("LOG_DIR", "").strip() or "logs",
    }
    values.update({k: v for k, v in overrides.items() if v is not None})
    return WorkerSettings(**values)
