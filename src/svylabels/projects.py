"""
Per-project configuration.

Collects everything that differs between data projects in one place.

Each project has:
    has_variable_url:
        Whether variables (in general) have their own page whose URL can
        be guessed
    url_builder:
        Function from a variable name to a URL, either the variable's page
        or the project's general site, depending on has_variable_url

The table is built once at import and cannot be modified.
"""

from dataclasses import dataclass
from types import MappingProxyType
from typing import Callable, List, Mapping


@dataclass(frozen=True)
class ProjectConfig:
    has_variable_url: bool
    url_builder: Callable[[str], str]


def _variable_pages(base: str) -> ProjectConfig:
    return ProjectConfig(has_variable_url=True, url_builder=lambda var: base + var)


def _site_only(url: str) -> ProjectConfig:
    return ProjectConfig(has_variable_url=False, url_builder=lambda var: url)


PROJECT_CONFIGS: Mapping[str, ProjectConfig] = MappingProxyType({
    "IPUMS-USA": _variable_pages("https://usa.ipums.org/usa-action/variables/"),
    "IPUMS-CPS": _variable_pages("https://cps.ipums.org/cps-action/variables/"),
    "IPUMS-INTERNATIONAL": _variable_pages(
        "https://international.ipums.org/international-action/variables/"
    ),
    # No DDI files exist for DHS yet
    "IPUMS-DHS": _variable_pages("https://www.idhsdata.org/idhs-action/variables/"),
    # NHGIS and TERRA have no per-variable pages
    "NHGIS": _site_only("https://data2.nhgis.org/main"),
    "IPUMS TERRA": _site_only("https://data.terrapop.org/"),
    "ATUS-X": _variable_pages("https://atus.ipums.org/atus-action/variables/"),
    "AHTUS-X": _variable_pages("https://ahtus.ipums.org/ahtus-action/variables/"),
    "MTUS-X": _variable_pages("https://mtus.ipums.org/mtus-action/variables/"),
    "NHIS": _variable_pages("https://ihis.ipums.org/ihis-action/variables/"),
    "HIGHER ED": _variable_pages("https://highered.ipums.org/highered-action/variables/"),
})

DEFAULT_CONFIG = _site_only("https://www.ipums.org")


def get_project_config(project: str) -> ProjectConfig:
    """
    Look up a project's configuration, ignoring case.

    Returns:
        The project's ProjectConfig, or DEFAULT_CONFIG for unknown projects
    """
    return PROJECT_CONFIGS.get(project.upper(), DEFAULT_CONFIG)


def all_project_names() -> List[str]:
    return list(PROJECT_CONFIGS)


def variable_url(project: str, var: str) -> str:
    return get_project_config(project).url_builder(var)
