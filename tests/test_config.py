"""
Tests for environment-driven configuration.
"""

from strategy_conditions.config import (
    CANONICAL_TIMEFRAME_ID_PREFIX,
    Config,
    get_config,
)


class TestConfig:
    """Test config loading and validation."""

    def test_defaults(self, monkeypatch):
        for name in (
            "CONDITIONS_LOG_LEVEL",
            "CONDITIONS_LOG_TO_FILE",
            "CONDITIONS_PRUNE_EMPTY_GROUPS",
            "CONDITIONS_TIMEFRAME_ID_PREFIX",
            "CONDITIONS_MIGRATION_SCAN_NODE_DATA",
        ):
            monkeypatch.delenv(name, raising=False)
        config = get_config()
        assert config.log.level == "INFO"
        assert config.log.log_to_file is False
        assert config.editing.prune_empty_groups is False
        assert config.migration.timeframe_id_prefix == CANONICAL_TIMEFRAME_ID_PREFIX
        assert config.migration.scan_node_data is True

    def test_singleton(self):
        assert get_config() is get_config()
        assert Config() is get_config()

    def test_environment_overrides(self, monkeypatch):
        monkeypatch.setenv("CONDITIONS_LOG_LEVEL", "debug")
        monkeypatch.setenv("CONDITIONS_PRUNE_EMPTY_GROUPS", "yes")
        monkeypatch.setenv("CONDITIONS_MIGRATION_SCAN_NODE_DATA", "0")
        config = get_config()
        assert config.log.level == "debug"
        assert config.editing.prune_empty_groups is True
        assert config.migration.scan_node_data is False

    def test_reload_reads_environment_again(self, monkeypatch):
        monkeypatch.delenv("CONDITIONS_PRUNE_EMPTY_GROUPS", raising=False)
        config = get_config()
        assert config.editing.prune_empty_groups is False

        monkeypatch.setenv("CONDITIONS_PRUNE_EMPTY_GROUPS", "true")
        reloaded = config.reload()
        assert reloaded.editing.prune_empty_groups is True
        assert get_config() is reloaded

    def test_env_file_is_loaded(self, tmp_path, monkeypatch):
        # Registered first so monkeypatch restores the variable load_dotenv sets
        monkeypatch.setenv("CONDITIONS_TIMEFRAME_ID_PREFIX", "placeholder")
        monkeypatch.delenv("CONDITIONS_TIMEFRAME_ID_PREFIX")
        env_file = tmp_path / ".env"
        env_file.write_text("CONDITIONS_TIMEFRAME_ID_PREFIX=tfid_\n", encoding="utf-8")
        config = get_config(str(env_file))
        assert config.migration.timeframe_id_prefix == "tfid_"

    def test_validate(self, monkeypatch):
        monkeypatch.setenv("CONDITIONS_LOG_LEVEL", "LOUD")
        monkeypatch.setenv("CONDITIONS_TIMEFRAME_ID_PREFIX", "tfid_")
        is_valid, messages = get_config().validate()
        assert not is_valid
        assert any("CONDITIONS_LOG_LEVEL" in message for message in messages)
        assert any("re-migrated" in message for message in messages)

    def test_validate_defaults(self, monkeypatch):
        monkeypatch.delenv("CONDITIONS_LOG_LEVEL", raising=False)
        monkeypatch.delenv("CONDITIONS_TIMEFRAME_ID_PREFIX", raising=False)
        assert get_config().validate() == (True, [])

    def test_summary_short(self, monkeypatch):
        monkeypatch.delenv("CONDITIONS_PRUNE_EMPTY_GROUPS", raising=False)
        monkeypatch.delenv("CONDITIONS_LOG_LEVEL", raising=False)
        monkeypatch.delenv("CONDITIONS_TIMEFRAME_ID_PREFIX", raising=False)
        assert get_config().summary_short() == "log=INFO | empty groups=keep | tf prefix=tf_"
