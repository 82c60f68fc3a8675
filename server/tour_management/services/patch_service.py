"""Application of JSON Patch documents to flat pydantic models.

Operations run in order against a JSON-mode copy of the target. A failing
operation records an error for its path and the remaining operations still
run; the patched document is then validated as a whole so every problem is
reported in one response.
"""

import logging
from typing import Any, Optional, TypeVar

from pydantic import BaseModel, ValidationError

from ..core.validation import ModelState
from ..schemas.patch import PatchOperation, PatchOperationType

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)


class PathNotFound(Exception):
    """A JSON Pointer that does not address a field of the target."""

    def __init__(self, key: str, segment: str):
        self.key = key
        self.segment = segment
        super().__init__(f"The target location specified by path segment '{segment}' was not found.")


class PatchTestFailed(Exception):
    """A ``test`` operation whose value differs from the current one."""

    def __init__(self, key: str, pointer: str, current: Any, expected: Any):
        self.key = key
        super().__init__(
            f"The current value '{current}' at path '{pointer}' is not equal to the test value '{expected}'."
        )


def _unescape(segment: str) -> str:
    return segment.replace("~1", "/").replace("~0", "~")


def resolve_path(pointer: str, fields: dict[str, str], model_name: str) -> str:
    """
    Resolve a JSON Pointer to a top-level field name, case-insensitively.

    Raises:
        PathNotFound: If the pointer is empty, nested or names no field
    """
    if not pointer.startswith("/"):
        raise PathNotFound(pointer or model_name, pointer)

    segments = [_unescape(segment) for segment in pointer[1:].split("/")]
    field = fields.get(segments[0].casefold())
    if field is None:
        raise PathNotFound(".".join(segments) or model_name, segments[0])
    if len(segments) > 1:
        # Flat shapes have no children to descend into
        raise PathNotFound(".".join([field, *segments[1:]]), segments[1])
    return field


def _apply_operation(
    operation: PatchOperation,
    document: dict[str, Any],
    fields: dict[str, str],
    model_name: str,
) -> None:
    target = resolve_path(operation.path, fields, model_name)

    if operation.op in (PatchOperationType.ADD, PatchOperationType.REPLACE):
        document[target] = operation.value
    elif operation.op == PatchOperationType.REMOVE:
        document[target] = None
    elif operation.op == PatchOperationType.MOVE:
        source = resolve_path(operation.from_, fields, model_name)
        value = document[source]
        document[source] = None
        document[target] = value
    elif operation.op == PatchOperationType.COPY:
        source = resolve_path(operation.from_, fields, model_name)
        document[target] = document[source]
    elif operation.op == PatchOperationType.TEST:
        if document[target] != operation.value:
            raise PatchTestFailed(target, operation.path, document[target], operation.value)


def apply_patch(
    operations: list[PatchOperation],
    target: M,
    model_state: ModelState,
) -> Optional[M]:
    """
    Apply a patch document to a model and re-validate the result.

    Args:
        operations: Patch operations, applied in order
        target: Model to patch; it is not modified
        model_state: Receives every patch and validation error

    Returns:
        The validated, patched model, or None if any error was recorded
    """
    model_cls = type(target)
    model_name = model_cls.__name__
    fields = {name.casefold(): name for name in model_cls.model_fields}
    document = target.model_dump(mode="json")

    for operation in operations:
        try:
            _apply_operation(operation, document, fields, model_name)
        except (PathNotFound, PatchTestFailed) as e:
            logger.debug(
                "Patch operation rejected",
                extra={"op": operation.op.value, "path": operation.path, "error": str(e)}
            )
            model_state.add_model_error(e.key, str(e))

    try:
        patched = model_cls.model_validate(document)
    except ValidationError as e:
        model_state.add_validation_error(e, model_name)
        return None

    return patched if model_state.is_valid else None
