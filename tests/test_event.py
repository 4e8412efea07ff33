from datetime import timedelta

import pytest

from refclip.core.event import (
    AgeLevel,
    Event,
    EventUpdate,
    Gender,
    Official,
    Sport,
    create_default_event,
    is_valid_event,
    is_valid_official,
    validate_event_details,
    validate_event_for_save,
)
from refclip.core.event_manager import EventMetadataManager
from conftest import T0


def _event(**kw):
    kw.setdefault("officiating_crew", [Official("Pat Doe", "Referee")])
    return Event(date=T0, created_on=T0, modified_on=T0, **kw)


def test_defaults():
    event = create_default_event(T0)
    assert (event.gender, event.age_level, event.sport) == (Gender.BOYS, AgeLevel.VARSITY, Sport.BASKETBALL)
    assert event.officiating_crew == []
    assert event.date == event.created_on == event.modified_on == T0


def test_wire_round_trip():
    event = _event(home_team="Tigers", away_team="Lions", video_link="https://example.com/game")
    d = event.to_dict()
    assert d["ageLevel"] == "Varsity"
    assert d["homeTeam"] == "Tigers"
    assert d["officiatingCrew"] == [{"name": "Pat Doe", "position": "Referee"}]
    assert "notes" not in d
    assert Event.from_dict(d) == event


def test_from_dict_tolerates_unknown_enums():
    event = Event.from_dict({"date": "2025-11-15", "gender": "mixed", "sport": "hockey"}, default_time=T0)
    assert event.gender is Gender.BOYS
    assert event.sport is Sport.BASKETBALL
    assert event.date.year == 2025 and event.date.day == 15
    assert not is_valid_event({"date": "2025-11-15", "gender": "mixed", "sport": "hockey"})


def test_is_valid_event_rules():
    assert is_valid_event(_event())
    assert not is_valid_event(_event(officiating_crew=[]))
    assert not is_valid_event(_event(home_team="Tigers", away_team="Tigers"))
    assert not is_valid_event(_event(video_link="not a url"))
    assert not is_valid_event(_event(location=""))
    assert is_valid_event(_event(notes=""))
    assert is_valid_event(_event(video_link="file:///C:/videos/game.mp4"))
    assert not is_valid_event("event")


def test_is_valid_official():
    assert is_valid_official(Official("Pat"))
    assert is_valid_official({"name": "Pat", "position": "R2"})
    assert not is_valid_official({"name": "  "})
    assert not is_valid_official({"name": "Pat", "position": 2})


def test_save_gate_messages():
    assert validate_event_for_save(None) == [
        "Event details are required",
        "At least one official with a name is required",
    ]
    assert validate_event_for_save(_event(officiating_crew=[Official(" ")])) == [
        "At least one official with a name is required"
    ]
    assert validate_event_for_save(_event()) == []


def test_form_messages():
    errors = validate_event_details(_event(home_team="Tigers", away_team="Tigers", video_link="nope"))
    assert errors == ["Home team and away team must be different", "Video link must be a valid URL"]


def test_manager_creates_from_defaults():
    changes = []
    manager = EventMetadataManager(on_change=lambda: changes.append(1))
    event = manager.update_event(location="Main Gym", now=T0)
    assert event.location == "Main Gym"
    assert event.sport is Sport.BASKETBALL
    assert event.created_on == event.modified_on == T0
    assert changes == [1]


def test_manager_merges_and_keeps_created():
    manager = EventMetadataManager()
    manager.update_event(location="Main Gym", home_team="Tigers", now=T0)
    later = T0 + timedelta(hours=1)
    event = manager.update_event(EventUpdate(sport=Sport.VOLLEYBALL, clear=("home_team",)), now=later)
    assert event.location == "Main Gym"
    assert event.home_team is None
    assert event.sport is Sport.VOLLEYBALL
    assert event.created_on == T0 and event.modified_on == later


def test_manager_rejects_mixed_arguments():
    manager = EventMetadataManager()
    with pytest.raises(TypeError):
        manager.update_event(EventUpdate(location="x"), notes="y")
    with pytest.raises(ValueError):
        EventUpdate(clear=("date",))
