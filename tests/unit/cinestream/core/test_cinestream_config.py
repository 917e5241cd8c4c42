"""Unit tests for the Cinestream Config container and settings."""

import pytest
from pydantic import SecretStr

from cinestream.core.config import Config
from cinestream.core.settings import CinestreamSettings, get_cinestream_config, get_settings


class TestConfig:
    def test_attribute_and_item_access(self):
        config = Config.load(defaults={"CINESTREAM": {"PORT": 8080, "HOST": "0.0.0.0"}})
        assert config.CINESTREAM.PORT == 8080
        assert config["CINESTREAM"]["HOST"] == "0.0.0.0"

    def test_missing_attribute_raises(self):
        config = Config.load(defaults={"CINESTREAM": {"PORT": 8080}})
        with pytest.raises(AttributeError):
            _ = config.CINESTREAM.NOPE
        with pytest.raises(AttributeError):
            _ = config.OTHER

    def test_overrides_win_over_defaults(self):
        config = Config.load(
            defaults={"CINESTREAM": {"PORT": 8080, "MONGO_DB": "cinestream"}},
            overrides={"CINESTREAM": {"PORT": 9000}},
        )
        assert config.CINESTREAM.PORT == 9000
        assert config.CINESTREAM.MONGO_DB == "cinestream"

    def test_env_overlay_coerces_types(self, monkeypatch):
        monkeypatch.setenv("CINESTREAM__PORT", "9100")
        monkeypatch.setenv("CINESTREAM__DEBUG", "true")
        monkeypatch.setenv("CINESTREAM__MAIL_TIMEOUT", "2.5")
        config = Config.load(defaults={"CINESTREAM": {"PORT": 8080, "DEBUG": False, "MAIL_TIMEOUT": 10.0}})
        assert config.CINESTREAM.PORT == 9100
        assert config.CINESTREAM.DEBUG is True
        assert config.CINESTREAM.MAIL_TIMEOUT == 2.5

    def test_env_overlay_keeps_string_settings_as_text(self, monkeypatch):
        monkeypatch.setenv("CINESTREAM__MONGO_DB", "2024")
        monkeypatch.setenv("CINESTREAM__MAIL_FROM", "true")
        config = Config.load(defaults={"CINESTREAM": CinestreamSettings().model_dump()})
        assert config.CINESTREAM.MONGO_DB == "2024"
        assert config.CINESTREAM.MAIL_FROM == "true"
        assert get_settings(config).MONGO_DB == "2024"

    def test_core_package_exports(self):
        from cinestream.core import Config as ExportedConfig
        from cinestream.core import SettingsLike

        assert ExportedConfig is Config
        assert SettingsLike is not None

    def test_env_overlay_ignores_unknown_sections(self, monkeypatch):
        monkeypatch.setenv("SOMETHING__ELSE", "1")
        config = Config.load(defaults={"CINESTREAM": {"PORT": 8080}})
        assert "SOMETHING" not in config

    def test_secrets_stay_wrapped_and_masked(self, monkeypatch):
        monkeypatch.setenv("CINESTREAM__JWT_SECRET", "from-env")
        config = Config.load(defaults={"CINESTREAM": {"JWT_SECRET": SecretStr("default")}})
        secret = config.CINESTREAM.JWT_SECRET
        assert isinstance(secret, SecretStr)
        assert secret.get_secret_value() == "from-env"
        assert "from-env" not in repr(config)
        assert "from-env" not in repr(config.CINESTREAM)

    def test_string_override_of_secret_is_wrapped(self):
        config = Config.load(
            defaults={"CINESTREAM": {"JWT_SECRET": SecretStr("default")}},
            overrides={"CINESTREAM": {"JWT_SECRET": "override"}},
        )
        assert config.CINESTREAM.JWT_SECRET.get_secret_value() == "override"

    def test_section_to_dict_is_a_copy(self):
        config = Config.load(defaults={"CINESTREAM": {"PORT": 8080}})
        values = config.CINESTREAM.to_dict()
        values["PORT"] = 1
        assert config.CINESTREAM.PORT == 8080

    def test_settings_model_as_defaults(self):
        config = Config.load(defaults={"CINESTREAM": CinestreamSettings().model_dump()})
        assert config.CINESTREAM.MONGO_DB == "cinestream"

    def test_unsupported_settings_type(self):
        with pytest.raises(TypeError):
            Config.load(defaults=42)


class TestCinestreamSettings:
    def test_defaults(self):
        settings = CinestreamSettings()
        assert settings.PORT == 8080
        assert settings.CORS_ORIGINS == ["http://localhost:5173"]
        assert settings.JWT_EXPIRES_IN == 3600
        assert settings.BCRYPT_ROUNDS == 10
        assert settings.RESET_TOKEN_BYTES == 32
        assert settings.RESET_TOKEN_TTL == 3600

    def test_cors_origins_from_comma_string(self):
        settings = CinestreamSettings(CORS_ORIGINS="http://a.test, http://b.test,")
        assert settings.CORS_ORIGINS == ["http://a.test", "http://b.test"]

    def test_bcrypt_rounds_lower_bound(self):
        with pytest.raises(ValueError):
            CinestreamSettings(BCRYPT_ROUNDS=4)

    def test_config_is_cached(self):
        assert get_cinestream_config() is get_cinestream_config()

    def test_env_reaches_typed_settings(self, monkeypatch):
        monkeypatch.setenv("CINESTREAM__MONGO_URI", "mongodb://mongo:27017")
        monkeypatch.setenv("CINESTREAM__JWT_SECRET", "s3cr3t")
        settings = get_settings()
        assert settings.MONGO_URI == "mongodb://mongo:27017"
        assert settings.JWT_SECRET.get_secret_value() == "s3cr3t"

    def test_get_settings_from_explicit_config(self, test_config):
        settings = get_settings(test_config)
        assert settings.LOG_LEVEL == "WARNING"
        assert settings.MONGO_URI == ""
