"""Unit tests for JSON Patch application."""

from datetime import date

import pytest

from tour_management.core.validation import ModelState, ValidationResult
from tour_management.schemas.patch import PatchDocument
from tour_management.schemas.tour import TourForUpdate
from tour_management.services.patch_service import PathNotFound, apply_patch, resolve_path


@pytest.fixture
def tour_for_update():
    return TourForUpdate(
        name="Rise of the Phoenix",
        description="Very hot loud music",
        start_date=date(2027, 2, 18),
        end_date=date(2027, 4, 12),
    )


def patch(tour_for_update, *operations):
    model_state = ModelState()
    patched = apply_patch(PatchDocument.validate_python(list(operations)), tour_for_update, model_state)
    return patched, model_state


def test_resolve_path_case_insensitive():
    """Paths match field names regardless of case."""
    fields = {"name": "name", "start_date": "start_date"}

    assert resolve_path("/Name", fields, "TourForUpdate") == "name"
    assert resolve_path("/START_DATE", fields, "TourForUpdate") == "start_date"


@pytest.mark.parametrize(
    "pointer, key, segment",
    [
        ("/unknown", "unknown", "unknown"),
        ("/name/first", "name.first", "first"),
        ("name", "name", "name"),
        ("", "TourForUpdate", ""),
    ],
)
def test_resolve_path_not_found(pointer, key, segment):
    """Unresolvable pointers report their key and segment."""
    with pytest.raises(PathNotFound) as exc_info:
        resolve_path(pointer, {"name": "name"}, "TourForUpdate")

    assert exc_info.value.key == key
    assert exc_info.value.segment == segment


def test_replace(tour_for_update):
    """Test the replace operation."""
    patched, model_state = patch(tour_for_update, {"op": "replace", "path": "/name", "value": "Phoenix Reborn"})

    assert model_state.is_valid
    assert patched.name == "Phoenix Reborn"
    assert patched.description == "Very hot loud music"


def test_target_not_modified(tour_for_update):
    """Patching works on a copy of the target."""
    patch(tour_for_update, {"op": "replace", "path": "/name", "value": "Phoenix Reborn"})

    assert tour_for_update.name == "Rise of the Phoenix"


def test_add_parses_dates(tour_for_update):
    """Added values are parsed by the DTO."""
    patched, _ = patch(tour_for_update, {"op": "add", "path": "/end_date", "value": "2027-05-01"})

    assert patched.end_date == date(2027, 5, 1)


def test_copy_and_move(tour_for_update):
    """Test the copy and move operations."""
    patched, model_state = patch(
        tour_for_update,
        {"op": "copy", "from": "/name", "path": "/description"},
        {"op": "move", "from": "/start_date", "path": "/end_date"},
        {"op": "add", "path": "/start_date", "value": "2027-01-01"},
    )

    assert model_state.is_valid
    assert patched.description == "Rise of the Phoenix"
    assert patched.end_date == date(2027, 2, 18)
    assert patched.start_date == date(2027, 1, 1)


def test_test_operation_passes(tour_for_update):
    """A matching test operation lets the patch continue."""
    patched, model_state = patch(
        tour_for_update,
        {"op": "test", "path": "/start_date", "value": "2027-02-18"},
        {"op": "replace", "path": "/name", "value": "Tested"},
    )

    assert model_state.is_valid
    assert patched.name == "Tested"


def test_test_operation_fails(tour_for_update):
    """A mismatching test operation records an error."""
    patched, model_state = patch(tour_for_update, {"op": "test", "path": "/name", "value": "Other"})

    assert patched is None
    assert model_state["name"] == [
        "The current value 'Rise of the Phoenix' at path '/name' is not equal to the test value 'Other'."
    ]


def test_remove_required_field_fails_validation(tour_for_update):
    """Removing a required field fails validation."""
    patched, model_state = patch(tour_for_update, {"op": "remove", "path": "/description"})
    result = ValidationResult.from_model_state(model_state)

    assert patched is None
    assert result["description"][0].validator_key == "required"
    assert result["description"][0].message == "When updating a tour, the description is required."


def test_errors_collected_across_operations(tour_for_update):
    """A failing operation does not stop later ones, and validation still runs."""
    patched, model_state = patch(
        tour_for_update,
        {"op": "replace", "path": "/unknown", "value": 1},
        {"op": "replace", "path": "/name", "value": ""},
        {"op": "replace", "path": "/Unknown", "value": 2},
    )

    assert patched is None
    assert list(model_state) == ["unknown", "name"]
    assert len(model_state["unknown"]) == 2
    assert model_state["name"] == ["required|The name is required."]


def test_patch_error_keys_merge_with_validation_keys(tour_for_update):
    """Patch errors and validation errors share keys."""
    patched, model_state = patch(
        tour_for_update,
        {"op": "test", "path": "/Name", "value": "nope"},
        {"op": "replace", "path": "/name", "value": "x" * 201},
    )

    assert patched is None
    assert list(model_state) == ["name"]
    assert len(model_state["NAME"]) == 2


def test_start_after_end_reported_on_model(tour_for_update):
    """Out-of-order dates are reported on the DTO."""
    patched, model_state = patch(tour_for_update, {"op": "replace", "path": "/start_date", "value": "2027-12-01"})
    result = ValidationResult.from_model_state(model_state)

    assert patched is None
    assert result["TourForUpdate"][0].validator_key == "startdatebeforeenddate"


def test_patch_document_rejects_unknown_op():
    """Unknown operations are rejected."""
    with pytest.raises(ValueError):
        PatchDocument.validate_python([{"op": "merge", "path": "/name"}])


def test_patch_document_requires_from_for_move():
    """Move operations need a source."""
    with pytest.raises(ValueError):
        PatchDocument.validate_python([{"op": "move", "path": "/name"}])


@pytest.mark.parametrize("op", ["add", "replace", "test"])
def test_patch_document_requires_value(op):
    """Operations that carry a value must state it, even if it is null."""
    with pytest.raises(ValueError, match="require 'value'"):
        PatchDocument.validate_python([{"op": op, "path": "/name"}])


def test_patch_document_accepts_explicit_null_value():
    """An explicit null value is kept apart from a missing one."""
    operations = PatchDocument.validate_python([{"op": "replace", "path": "/description", "value": None}])

    assert operations[0].value is None
    assert "value" in operations[0].model_fields_set
