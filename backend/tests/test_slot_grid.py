import pytest

from trainsched.core.exceptions import InvalidSlotError, ValidationError
from trainsched.core.slot_grid import (
    DAY_NAMES,
    all_coordinates,
    day_id_from_name,
    day_name,
    is_valid_day,
    is_valid_slot,
    time_window,
    validate_coordinate,
)


def test_day_ids_map_to_french_day_names():
    assert day_name(1) == "LUNDI"
    assert day_name(3) == "MERCREDI"
    assert day_name(6) == "SAMEDI"
    assert day_id_from_name("mercredi") == 3
    assert [day_id_from_name(name) for name in DAY_NAMES] == [1, 2, 3, 4, 5, 6]


def test_slot_windows_are_fixed():
    assert time_window(1).label == "08:30-11:00"
    window = time_window(2)
    assert (window.start, window.end) == ("11:00", "13:30")
    assert time_window(4).label == "16:00-18:30"
    assert all(time_window(slot).duration_minutes == 150 for slot in (1, 2, 3, 4))


def test_grid_has_twenty_four_coordinates():
    coordinates = all_coordinates()
    assert len(coordinates) == 24
    assert coordinates[0].day_name == "LUNDI"
    assert coordinates[-1].window.label == "16:00-18:30"


@pytest.mark.parametrize("day_id, slot_id", [(0, 1), (7, 1), (1, 0), (1, 5), ("1", 1), (True, 1)])
def test_out_of_range_coordinates_are_rejected(day_id, slot_id):
    with pytest.raises(InvalidSlotError) as exc_info:
        validate_coordinate(day_id, slot_id)
    assert exc_info.value.status_code == 400


def test_validity_helpers_reject_booleans():
    assert is_valid_day(6)
    assert not is_valid_day(False)
    assert is_valid_slot(4)
    assert not is_valid_slot(True)


def test_unknown_day_name_is_a_validation_error():
    with pytest.raises(ValidationError):
        day_id_from_name("DIMANCHE")
