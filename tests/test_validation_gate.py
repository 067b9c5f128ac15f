# ruff: noqa: S101
from __future__ import annotations

import pytest

from wipshare.core.errors import RequestValidationFailed
from wipshare.core.validation import validate_payload
from wipshare.modules.tracks.schemas import comment_schemas, track_schemas


def test_track_create_reports_every_violation_at_once() -> None:
    with pytest.raises(RequestValidationFailed) as excinfo:
        validate_payload(track_schemas["create"], {"title": "", "description": "x" * 1001})

    details = excinfo.value.details
    assert [d["field"] for d in details] == ["title", "description"]
    assert details[0]["message"] == "Track title is required"
    assert details[1]["message"] == "Description cannot exceed 1000 characters"
    body = excinfo.value.to_body()
    assert body["error"] == "Validation failed"
    assert len(body["details"]) == 2


def test_track_create_strips_unknown_fields_and_applies_defaults() -> None:
    payload = validate_payload(
        track_schemas["create"],
        {"title": "Demo", "isAdmin": True, "tags": ["rough", "mix"], "channelIds": ["c1"]},
    )

    dumped = payload.model_dump()
    assert "is_admin" not in dumped and "isAdmin" not in dumped
    assert dumped["visibility"] == "private"
    assert dumped["version"] == "001"
    assert dumped["tags"] == ["rough", "mix"]
    assert dumped["channel_ids"] == ["c1"]
    assert dumped["description"] == ""
    assert dumped["project_ids"] == []


def test_track_create_rejects_unknown_visibility_and_bad_tags() -> None:
    with pytest.raises(RequestValidationFailed) as excinfo:
        validate_payload(track_schemas["create"], {"title": "Demo", "visibility": "world", "tags": [1, {"a": 2}]})

    fields = [d["field"] for d in excinfo.value.details]
    assert "visibility" in fields
    assert "tags.0" in fields and "tags.1" in fields


def test_track_create_requires_title() -> None:
    with pytest.raises(RequestValidationFailed) as excinfo:
        validate_payload(track_schemas["create"], {})

    assert excinfo.value.details == [{"field": "title", "message": "Track title is required"}]


def test_track_update_allows_partial_payload() -> None:
    payload = validate_payload(track_schemas["update"], {"description": ""})

    assert payload.model_dump(exclude_unset=True) == {"description": ""}


def test_comment_create_bounds() -> None:
    with pytest.raises(RequestValidationFailed) as excinfo:
        validate_payload(comment_schemas["create"], {"content": "", "timestamp": -1})

    assert excinfo.value.details == [
        {"field": "content", "message": "Comment cannot be empty"},
        {"field": "timestamp", "message": "Timestamp cannot be negative"},
    ]

    ok = validate_payload(comment_schemas["create"], {"content": "love the bridge", "timestamp": 42.5})
    assert ok.timestamp == 42.5
    assert ok.parent_id is None


def test_non_object_payload_is_a_validation_failure() -> None:
    with pytest.raises(RequestValidationFailed):
        validate_payload(track_schemas["create"], ["not", "an", "object"])
