"""Unit tests for the database initialization startup policy."""

import pytest

from src.setlist_studio.runtime.config.config_data import AppConfig
from src.setlist_studio.runtime.startup_policy import (
    DatabaseInitializationError,
    InitErrorDecision,
    StartupPolicy,
    decide_init_error,
    handle_database_initialization_error,
)


class TestDecideInitError:
    """The decision is a pure function of environment and container flag."""

    @pytest.mark.parametrize(
        "environment,in_container,expected",
        [
            ("Development", False, InitErrorDecision.PROPAGATE),
            ("Development", True, InitErrorDecision.SUPPRESS),
            ("Production", False, InitErrorDecision.SUPPRESS),
            ("Production", True, InitErrorDecision.SUPPRESS),
            ("Staging", False, InitErrorDecision.SUPPRESS),
            ("Test", False, InitErrorDecision.SUPPRESS),
            ("Testing", True, InitErrorDecision.SUPPRESS),
        ],
    )
    def test_decision_table(self, environment, in_container, expected):
        """Only a local Development host propagates."""
        assert decide_init_error(environment, in_container) is expected

    @pytest.mark.parametrize("environment", ["development", "DEVELOPMENT", " Development"])
    def test_environment_comparison_is_case_sensitive(self, environment):
        """Near-miss spellings of Development are treated as other environments."""
        assert decide_init_error(environment, False) is InitErrorDecision.SUPPRESS


class TestStartupPolicy:
    """The fail-fast flag is computed once at construction."""

    def test_fail_fast_for_local_development(self):
        policy = StartupPolicy(environment="Development", running_in_container=False)
        assert policy.fail_fast_on_init_error is True

    def test_no_fail_fast_in_container(self):
        policy = StartupPolicy(environment="Development", running_in_container=True)
        assert policy.fail_fast_on_init_error is False

    def test_from_app_config_reads_container_signal(self):
        """Only the exact value "true" marks a container."""
        in_container = StartupPolicy.from_app_config(
            AppConfig(environment="Development", container_signal="true")
        )
        not_container = StartupPolicy.from_app_config(
            AppConfig(environment="Development", container_signal="TRUE")
        )

        assert in_container.running_in_container is True
        assert in_container.fail_fast_on_init_error is False
        assert not_container.running_in_container is False
        assert not_container.fail_fast_on_init_error is True

    def test_policy_is_immutable(self):
        policy = StartupPolicy(environment="Production", running_in_container=False)
        with pytest.raises(AttributeError):
            policy.environment = "Development"  # type: ignore[misc]


class TestHandleDatabaseInitializationError:
    """The handler always logs, then raises or returns per the policy."""

    @pytest.mark.parametrize(
        "environment,in_container",
        [("Production", False), ("Staging", True), ("Test", False), ("Development", True)],
    )
    def test_suppressed_errors_are_logged_and_not_raised(
        self, environment, in_container, log_messages
    ):
        """Startup continues outside local development."""
        policy = StartupPolicy(environment=environment, running_in_container=in_container)
        error = RuntimeError("Database connection failed")

        handle_database_initialization_error(error, policy)

        errors = [r for r in log_messages if r["level"] == "ERROR"]
        assert len(errors) == 1
        assert errors[0]["message"] == "Failed to initialize database"
        assert errors[0]["exception"].value is error
        assert any(
            r["level"] == "WARNING" and "Continuing without database initialization" in r["message"]
            for r in log_messages
        )

    def test_local_development_propagates_with_cause(self, log_messages):
        """The original error is kept as the cause of the startup error."""
        policy = StartupPolicy(environment="Development", running_in_container=False)
        error = RuntimeError("Database connection failed")

        with pytest.raises(DatabaseInitializationError) as exc_info:
            handle_database_initialization_error(error, policy)

        assert exc_info.value.__cause__ is error
        assert "development environment" in str(exc_info.value)
        assert any(
            r["level"] == "ERROR" and r["message"] == "Failed to initialize database"
            for r in log_messages
        )

    def test_error_is_logged_before_raising(self, log_messages):
        """The log entry exists even though the handler raised."""
        policy = StartupPolicy(environment="Development", running_in_container=False)

        with pytest.raises(DatabaseInitializationError):
            handle_database_initialization_error(ValueError("schema mismatch"), policy)

        assert [r["level"] for r in log_messages] == ["ERROR"]
