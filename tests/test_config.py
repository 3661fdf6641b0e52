import pytest

from person_dedupe.config import ResolutionConfig
from person_dedupe.errors import ConfigurationError


def test_defaults() -> None:
    config = ResolutionConfig()

    assert config.name_prefix_length == 3
    assert config.corporate_phone_threshold == 5
    assert config.exclude_email_aliases is True
    assert config.test_email_patterns == ("@example.", "@test.")
    assert config.flag_corporate_emails is False
    assert config.refine_domain_blocks is False


@pytest.mark.parametrize(
    "overrides",
    [
        {"corporate_phone_threshold": -1},
        {"corporate_phone_threshold": 1},
        {"name_prefix_length": 0},
        {"corporate_email_threshold": 0},
        {"test_email_patterns": ["@example.", "  "]},
        {"large_block_warning": 3, "corporate_phone_threshold": 5},
        {"unknown_option": True},
    ],
)
def test_invalid_values_raise_configuration_error(overrides: dict) -> None:
    with pytest.raises(ConfigurationError):
        ResolutionConfig(**overrides)


def test_configuration_error_is_a_value_error() -> None:
    with pytest.raises(ValueError):
        ResolutionConfig(name_prefix_length=-3)


def test_patterns_are_lowercased() -> None:
    config = ResolutionConfig(test_email_patterns=["@Sandbox.", "@TEST."])
    assert config.test_email_patterns == ("@sandbox.", "@test.")


def test_values_from_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("PERSON_DEDUPE_CORPORATE_PHONE_THRESHOLD", "8")
    monkeypatch.setenv("PERSON_DEDUPE_EXCLUDE_EMAIL_ALIASES", "false")

    config = ResolutionConfig()

    assert config.corporate_phone_threshold == 8
    assert config.exclude_email_aliases is False


def test_invalid_environment_value_is_a_configuration_error(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("PERSON_DEDUPE_NAME_PREFIX_LENGTH", "-2")
    with pytest.raises(ConfigurationError):
        ResolutionConfig()


def test_config_is_frozen() -> None:
    config = ResolutionConfig()
    with pytest.raises(Exception):
        config.name_prefix_length = 5  # type: ignore[misc]


def test_coerce_accepts_mapping_and_instance() -> None:
    config = ResolutionConfig(name_prefix_length=4)

    assert ResolutionConfig.coerce(config) is config
    assert ResolutionConfig.coerce({"name_prefix_length": 4}).name_prefix_length == 4
    assert ResolutionConfig.coerce(None).name_prefix_length == 3
