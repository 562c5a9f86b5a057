"""
Tests for environment configuration.
"""

import pytest
from evalworker.config import ConfigError, WorkerSettings, load_settings
from evalworker.env import load_env


class TestLoadSettings:
    """Reading WorkerSettings from environment mappings."""

    def test_defaults(self):
        settings = load_settings({})
        assert settings.zeebe_address == ""
        assert settings.task_type == "automated-evaluation"
        assert settings.scoring == "fixed"
        assert settings.fixed_score == 0.2
        assert settings.random_seed is None
        assert settings.has_credentials is False

    def test_reads_os_environ(self, monkeypatch):
        monkeypatch.setenv("EVAL_SCORING", "random")
        monkeypatch.setenv("EVAL_RANDOM_SEED", "11")
        settings = load_settings()
        assert settings.scoring == "random"
        assert settings.random_seed == 11

    def test_camunda_cloud_credentials(self):
        settings = load_settings({
            "ZEEBE_CLIENT_ID": "id",
            "ZEEBE_CLIENT_SECRET": "secret",
            "CAMUNDA_CLUSTER_ID": "abc-123",
            "CAMUNDA_CLUSTER_REGION": "jfk-1",
        })
        assert settings.has_credentials
        assert settings.cluster_id == "abc-123"
        assert settings.region == "jfk-1"

    def test_overrides_win(self):
        settings = load_settings({"EVAL_SCORING": "fixed"}, scoring="random", log_level=None)
        assert settings.scoring == "random"
        assert settings.log_level == "INFO"

    def test_blank_task_type_falls_back(self):
        assert load_settings({"EVAL_TASK_TYPE": "  "}).task_type == "automated-evaluation"
        assert load_settings({"EVAL_TASK_TYPE": " custom-eval "}).task_type == "custom-eval"

    def test_explicit_localhost_address_kept(self):
        settings = load_settings({"ZEEBE_ADDRESS": "localhost:26500"})
        assert settings.zeebe_address == "localhost:26500"

    def test_scoring_is_case_insensitive(self):
        assert load_settings({"EVAL_SCORING": "RANDOM"}).scoring == "random"

    @pytest.mark.parametrize(
        "name,value",
        [
            ("EVAL_FIXED_SCORE", "high"),
            ("EVAL_JOB_TIMEOUT_MS", "10s"),
            ("EVAL_RANDOM_SEED", "seed"),
        ],
    )
    def test_unparseable_values(self, name, value):
        with pytest.raises(ConfigError, match=name):
            load_settings({name: value})

    def test_config_error_is_value_error(self):
        assert issubclass(ConfigError, ValueError)


class TestWorkerSettingsValidation:
    """Validation in WorkerSettings.__post_init__."""

    def test_unknown_scoring(self):
        with pytest.raises(ConfigError, match="EVAL_SCORING"):
            WorkerSettings(scoring="llm")

    @pytest.mark.parametrize("value", [-0.5, 1.5, float("nan")])
    def test_fixed_score_range(self, value):
        with pytest.raises(ConfigError, match="EVAL_FIXED_SCORE"):
            WorkerSettings(fixed_score=value)

    def test_empty_task_type(self):
        with pytest.raises(ConfigError, match="EVAL_TASK_TYPE"):
            WorkerSettings(task_type="  ")

    @pytest.mark.parametrize("field", ["job_timeout_ms", "max_jobs_to_activate", "max_running_jobs"])
    def test_positive_ints(self, field):
        with pytest.raises(ConfigError, match="must be > 0"):
            WorkerSettings(**{field: 0})

    def test_bad_log_level(self):
        with pytest.raises(ConfigError, match="LOG_LEVEL"):
            WorkerSettings(log_level="VERBOSE")

    def test_half_credentials(self):
        with pytest.raises(ConfigError, match="set together"):
            WorkerSettings(client_id="id")

    def test_masked_hides_secret(self):
        settings = WorkerSettings(client_id="id", client_secret="s3cr3t")
        masked = settings.masked()
        assert masked["client_secret"] == "****"
        assert masked["client_id"] == "id"

    def test_masked_leaves_empty_secret(self):
        assert WorkerSettings().masked()["client_secret"] == ""


class TestLoadEnv:
    """.env loading via python-dotenv."""

    def test_missing_file(self, tmp_path):
        assert load_env(tmp_path / ".env") is False

    def test_loads_values(self, tmp_path, monkeypatch):
        env_file = tmp_path / ".env"
        env_file.write_text("EVAL_SCORING=random\n# comment\nEVAL_TASK_TYPE=custom-eval\n")

        assert load_env(env_file) is True
        settings = load_settings()
        assert settings.scoring == "random"
        assert settings.task_type == "custom-eval"

    def test_existing_environment_wins(self, tmp_path, monkeypatch):
        monkeypatch.setenv("EVAL_SCORING", "fixed")
        env_file = tmp_path / ".env"
        env_file.write_text("EVAL_SCORING=random\n")

        load_env(env_file)
        assert load_settings().scoring == "fixed"

    def test_default_path_is_cwd(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        (tmp_path / ".env").write_text("EVAL_FIXED_SCORE=0.7\n")

        load_env()
        assert load_settings().fixed_score == 0.7
