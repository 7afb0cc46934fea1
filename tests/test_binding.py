"""Tests for binding pydantic models to a registry."""

from datetime import timedelta

import pytest
from pydantic import BaseModel, Field, ValidationError

from dotenv_registry import DotEnv
from dotenv_registry.api.binding import field_key, marshal, unmarshal
from dotenv_registry.storage.dotenv_file import read_env_file


class DB(BaseModel):
    host: str = Field("localhost", json_schema_extra={"env": "DB_HOST"})
    port: int = Field(0, json_schema_extra={"env": "DB_PORT"})
    user: str = Field("", json_schema_extra={"env": "DB_USERNAME"})
    password: str = Field("", json_schema_extra={"env": "DB_PASSWORD"})
    database: str = Field("", json_schema_extra={"env": "DB_DATABASE"})
    driver: str = Field("", json_schema_extra={"env": "DB_DRIVER"})


class Log(BaseModel):
    level: str = Field("info", json_schema_extra={"env": "LOG_LEVEL"})
    channel: str = Field("stdout", json_schema_extra={"env": "LOG_CHANNEL"})
    path: str = Field("/var/log/app.log", json_schema_extra={"env": "LOG_PATH"})


class AppConfig(BaseModel):
    api_endpoint: str = Field("http://localhost:8080", json_schema_extra={"env": "API_ENDPOINT"})
    auth_endpoint: str = Field("http://localhost:8080", json_schema_extra={"env": "AUTH_ENDPOINT"})
    does_not_exist: str = Field("default", json_schema_extra={"env": "DOES_NOT_EXIT"})
    some_duration: timedelta = Field(timedelta(seconds=1), json_schema_extra={"env": "SOME_DURATION"})
    db: DB = DB()
    log: Log = Log()


class TestFieldKey:
    """Tests for field_key."""

    def test_explicit_env(self):
        assert field_key("host", DB.model_fields["host"]) == "DB_HOST"

    def test_defaults_to_uppercased_name(self):
        class Plain(BaseModel):
            max_retries: int = 3

        assert field_key("max_retries", Plain.model_fields["max_retries"]) == "MAX_RETRIES"


class TestUnmarshal:
    """Tests for unmarshal."""

    def test_unmarshal_fixture(self, fixtures_dir, store):
        env = DotEnv(fixtures_dir / "test.env", store=store)
        env.load_config()

        config = unmarshal(env, AppConfig)

        assert config == AppConfig(
            api_endpoint="http://localhost:8000/api",
            auth_endpoint="http://localhost:8000/auth",
            does_not_exist="default",
            some_duration=timedelta(seconds=1),
            db=DB(
                host="localhost",
                port=3306,
                user="root",
                password="my-secret-pw",
                database="app",
                driver="mysql",
            ),
            log=Log(level="debug", channel="stack", path="storage/logs/app.log"),
        )

    def test_environment_overrides_file(self, fixtures_dir, store, monkeypatch):
        monkeypatch.setenv("DB_PORT", "5432")
        env = DotEnv(fixtures_dir / "test.env", store=store)

        assert unmarshal(env, AppConfig).db.port == 5432

    def test_duration_string(self, tmp_path, store):
        path = tmp_path / ".env"
        path.write_text("SOME_DURATION=2m30s\n")

        config = unmarshal(DotEnv(path, store=store), AppConfig)

        assert config.some_duration == timedelta(minutes=2, seconds=30)

    def test_empty_value_uses_default(self, tmp_path, store):
        path = tmp_path / ".env"
        path.write_text("LOG_LEVEL=\n")

        config = unmarshal(DotEnv(path, store=store), AppConfig)

        assert config.log.level == "info"

    def test_missing_file_uses_defaults(self, tmp_path, store):
        config = unmarshal(DotEnv(tmp_path / "missing.env", store=store), AppConfig)
        assert config == AppConfig()

    def test_list_and_bool_fields(self, tmp_path, store):
        class Features(BaseModel):
            enabled: bool = False
            hosts: list[str] = []

        path = tmp_path / ".env"
        path.write_text("ENABLED=yes\nHOSTS=a b c\n")

        features = unmarshal(DotEnv(path, store=store), Features)

        assert features.enabled is True
        assert features.hosts == ["a", "b", "c"]

    def test_prefix_applies(self, tmp_path, store):
        class Server(BaseModel):
            port: int = 80

        path = tmp_path / ".env"
        path.write_text("APP_PORT=8443\n")

        server = unmarshal(DotEnv(path, prefix="app", store=store), Server)

        assert server.port == 8443

    def test_invalid_value_raises(self, tmp_path, store):
        path = tmp_path / ".env"
        path.write_text("DB_PORT=not-a-port\n")

        with pytest.raises(ValidationError):
            unmarshal(DotEnv(path, store=store), AppConfig)

    def test_required_field_missing_raises(self, tmp_path, store):
        class Needs(BaseModel):
            token: str

        with pytest.raises(ValidationError):
            unmarshal(DotEnv(tmp_path / "missing.env", store=store), Needs)


class TestMarshal:
    """Tests for marshal."""

    def test_marshal_sets_cache(self, tmp_path, store):
        env = DotEnv(tmp_path / ".env", store=store)
        config = AppConfig(db=DB(port=3306), some_duration=timedelta(minutes=5))

        marshal(env, config)

        assert env.get("DB_PORT") == "3306"
        assert env.get("SOME_DURATION") == "5m0s"
        assert env.get("LOG_LEVEL") == "info"
        assert not (tmp_path / ".env").exists()

    def test_marshal_save_round_trip(self, tmp_path, store):
        path = tmp_path / ".env"
        env = DotEnv(path, store=store)
        config = AppConfig(
            api_endpoint="https://api.example.com",
            db=DB(host="db.internal", port=5432, driver="postgres"),
            log=Log(level="warning"),
        )

        marshal(env, config, save=True)

        assert read_env_file(path)["DB_HOST"] == "db.internal"
        assert unmarshal(env, AppConfig) == config
