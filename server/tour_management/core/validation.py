"""Collection and shaping of validation failures into field-keyed error lists.

Validation messages may carry the validator that produced them as a prefix,
e.g. ``"required|The name is required."``. Shaping splits that prefix off so
clients receive::

    {"name": [{"validator_key": "required", "message": "The name is required."}]}

Field keys compare case-insensitively; the spelling first seen is kept.
"""

from collections.abc import Iterator, MutableMapping
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from pydantic import ValidationError

VALIDATOR_KEY_DELIMITER = "|"

V = TypeVar("V")


class CaseInsensitiveDict(MutableMapping[str, V], Generic[V]):
    """Insertion-ordered mapping whose string keys compare case-insensitively."""

    def __init__(self) -> None:
        self._store: dict[str, tuple[str, V]] = {}

    def __getitem__(self, key: str) -> V:
        return self._store[key.casefold()][1]

    def __setitem__(self, key: str, value: V) -> None:
        folded = key.casefold()
        original = self._store[folded][0] if folded in self._store else key
        self._store[folded] = (original, value)

    def __delitem__(self, key: str) -> None:
        del self._store[key.casefold()]

    def __iter__(self) -> Iterator[str]:
        for original, _ in self._store.values():
            yield original

    def __len__(self) -> int:
        return len(self._store)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({dict(self.items())!r})"


class ModelState(CaseInsensitiveDict[list[str]]):
    """Raw validation messages collected per field while handling a request."""

    def add_model_error(self, key: str, message: str) -> None:
        """Append a message to a field, keeping earlier messages first."""
        if key in self:
            self[key].append(message)
        else:
            self[key] = [message]

    def add_validation_error(self, exc: ValidationError, model_name: str | None = None) -> None:
        """
        Record every error of a pydantic ValidationError.

        Locations are joined with dots (``shows.0.venue``). Errors raised by
        whole-object validators have no location and are keyed by the model
        name instead.
        """
        fallback_key = model_name or exc.title
        for error in exc.errors():
            key = ".".join(str(part) for part in error["loc"]) or fallback_key
            self.add_model_error(key, error["msg"])

    @property
    def is_valid(self) -> bool:
        return not any(self.values())


@dataclass(frozen=True)
class CustomizedValidationError:
    """A single validation failure: the validator that failed and its message."""

    message: str
    validator_key: str = ""

    @classmethod
    def from_message(cls, raw_message: str) -> "CustomizedValidationError":
        # Split on the first delimiter only so the text may itself contain one
        validator_key, delimiter, message = raw_message.partition(VALIDATOR_KEY_DELIMITER)
        if not delimiter:
            return cls(message=raw_message)
        return cls(message=message, validator_key=validator_key)

    def to_dict(self) -> dict[str, str]:
        return {"validator_key": self.validator_key, "message": self.message}


class ValidationResult(CaseInsensitiveDict[list[CustomizedValidationError]]):
    """Field-keyed, client-facing view of a ModelState."""

    @classmethod
    def from_model_state(cls, model_state: ModelState) -> "ValidationResult":
        result = cls()
        for key, messages in model_state.items():
            if messages:
                result[key] = [CustomizedValidationError.from_message(m) for m in messages]
        return result

    def to_dict(self) -> dict[str, list[dict[str, Any]]]:
        return {key: [error.to_dict() for error in errors] for key, errors in self.items()}
