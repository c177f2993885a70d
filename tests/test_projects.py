"""
Tests for per-project configuration.
"""

import pytest

from svylabels.projects import (
    DEFAULT_CONFIG,
    PROJECT_CONFIGS,
    all_project_names,
    get_project_config,
    variable_url,
)


def test_known_project_variable_url():
    config = get_project_config("IPUMS-USA")
    assert config.has_variable_url
    assert config.url_builder("ABSENT") == "https://usa.ipums.org/usa-action/variables/ABSENT"


def test_lookup_ignores_case():
    assert get_project_config("ipums-cps") is PROJECT_CONFIGS["IPUMS-CPS"]


def test_project_without_variable_pages():
    config = get_project_config("NHGIS")
    assert not config.has_variable_url
    assert config.url_builder("ANYTHING") == "https://data2.nhgis.org/main"


def test_unknown_project_gets_default():
    config = get_project_config("NOT A PROJECT")
    assert config is DEFAULT_CONFIG
    assert not config.has_variable_url
    assert variable_url("NOT A PROJECT", "YEAR") == "https://www.ipums.org"


def test_all_project_names():
    names = all_project_names()
    assert "IPUMS-INTERNATIONAL" in names
    assert "HIGHER ED" in names
    assert len(names) == 11


def test_table_is_read_only():
    with pytest.raises(TypeError):
        PROJECT_CONFIGS["NEW"] = DEFAULT_CONFIG


def test_config_is_frozen():
    with pytest.raises(AttributeError):
        DEFAULT_CONFIG.has_variable_url = True
