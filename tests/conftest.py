"""Shared test fixtures for the Opportunity Map test suite."""

import pytest

from opportunity_map.interaction import DeviceMode, InteractionResolver
from opportunity_map.matrix.builder import build_matrix_from_rows
from opportunity_map.settings import OpportunityMapSettings


@pytest.fixture
def settings():
    """Default settings without reading a .env file."""
    return OpportunityMapSettings(_env_file=None)


@pytest.fixture
def label_row():
    """First parsed row: capability display labels, blank metadata."""
    return {
        "solution_id": "",
        "solution_short_name": "",
        "solution_short_desc": "",
        "submission_languages": "",
        "cap_drones": "Drones for anti-poaching",
        "cap_acoustic": "Acoustic monitoring",
        "cap_remote_sensing": "   ",
    }


@pytest.fixture
def sample_rows(label_row):
    """Label row, three projects, and two rows without a usable identifier."""
    return [
        label_row,
        {
            "solution_id": "P1",
            "solution_short_name": "Rangers+",
            "solution_short_desc": "Community ranger patrols",
            "submission_languages": "en",
            "cap_drones": "0.82",
            "cap_acoustic": "0.41",
            "cap_remote_sensing": "0.35",
        },
        {
            "solution_id": "P2",
            "solution_short_name": "Mangrove Guardians",
            "solution_short_desc": "",
            "submission_languages": "es",
            "cap_drones": 0.44,
            "cap_acoustic": "",
            "cap_remote_sensing": "0.91",
        },
        {
            "solution_id": "  ",
            "solution_short_name": "Spacer",
            "solution_short_desc": "",
            "submission_languages": "",
            "cap_drones": "0.99",
            "cap_acoustic": "0.99",
            "cap_remote_sensing": "0.99",
        },
        {
            "solution_id": "P3",
            "solution_short_name": None,
            "solution_short_desc": None,
            "submission_languages": None,
            "cap_drones": "0.12",
            "cap_acoustic": "n/a",
            "cap_remote_sensing": 0.27,
        },
        {
            "solution_id": None,
            "solution_short_name": "Notes: scores are cosine similarities",
            "solution_short_desc": "",
            "submission_languages": "",
            "cap_drones": "",
            "cap_acoustic": "",
            "cap_remote_sensing": "",
        },
    ]


@pytest.fixture
def sample_matrix(sample_rows, settings):
    return build_matrix_from_rows(sample_rows, settings)


@pytest.fixture
def pointer_resolver(sample_matrix):
    return InteractionResolver(sample_matrix, mode=DeviceMode.pointer)


@pytest.fixture
def touch_resolver(sample_matrix):
    return InteractionResolver(sample_matrix, mode=DeviceMode.touch)


@pytest.fixture
def sample_csv(tmp_path):
    """A small export on disk, including a blank line and a trailing note row."""
    path = tmp_path / "matrix.csv"
    path.write_text(
        "solution_id,solution_short_name,solution_short_desc,submission_languages,cap_drones,cap_acoustic\n"
        ",,,,Drones for anti-poaching,Acoustic monitoring\n"
        "P1,Rangers+,Community ranger patrols,en,0.82,0.41\n"
        "\n"
        "P2,Mangrove Guardians,,es,0.44,\n"
        ",Notes: scores are cosine similarities,,,,\n",
        encoding="utf-8",
    )
    return path
