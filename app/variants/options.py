"""Option dimensions and the store that owns them.

An option is a named axis of variation ("Size") with an ordered list of
values ("S", "M", "L"). Options are created open for editing and become
saved only through ``OptionStore.commit``. Validation problems are kept as
per-option ``OptionErrors`` flags rather than raised, so a failed commit
leaves every saved option exactly as it was.
"""
import itertools
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from app.variants.reorder import move_by_id, reorder

logger = logging.getLogger(__name__)

MAX_OPTIONS = 3


class OptionError(str, Enum):
    EMPTY_NAME = "empty_name"
    DUPLICATE_NAME = "duplicate_name"
    EMPTY_VALUES = "empty_values"
    DUPLICATE_VALUE = "duplicate_value"


def _norm(text):
    return (text or "").strip().lower()


@dataclass
class Option:
    id: str
    name: str = ""
    values: List[str] = field(default_factory=lambda: [""])
    editing: bool = True

    def clean_values(self):
        """Non-blank values, trimmed, in order."""
        return [v.strip() for v in self.values if v.strip()]

    @property
    def is_saved(self):
        return not self.editing and bool(self.name.strip()) and bool(self.clean_values())

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "values": list(self.values),
            "editing": self.editing,
        }


@dataclass
class OptionErrors:
    empty_name: bool = False
    duplicate_name: Optional[str] = None
    empty_values: bool = False
    duplicate_values: List[int] = field(default_factory=list)

    def __bool__(self):
        return bool(
            self.empty_name
            or self.duplicate_name
            or self.empty_values
            or self.duplicate_values
        )

    @property
    def codes(self):
        codes = []
        if self.empty_name:
            codes.append(OptionError.EMPTY_NAME)
        if self.duplicate_name:
            codes.append(OptionError.DUPLICATE_NAME)
        if self.empty_values:
            codes.append(OptionError.EMPTY_VALUES)
        if self.duplicate_values:
            codes.append(OptionError.DUPLICATE_VALUE)
        return codes

    def to_dict(self):
        return {
            "codes": [c.value for c in self.codes],
            "duplicate_name": self.duplicate_name,
            "duplicate_values": list(self.duplicate_values),
        }


def find_duplicate_name(option_id, name, options):
    """Return the trimmed name if another option already uses it, else None."""
    trimmed = (name or "").strip()
    if not trimmed:
        return None
    for other in options:
        if other.id != option_id and _norm(other.name) == trimmed.lower():
            return trimmed
    return None


def find_duplicate_values(values):
    """Indices of values that repeat an earlier non-blank value (case-insensitive)."""
    seen = set()
    duplicates = []
    for index, value in enumerate(values):
        key = _norm(value)
        if not key:
            continue
        if key in seen:
            duplicates.append(index)
        else:
            seen.add(key)
    return duplicates


class OptionStore:
    """Ordered option dimensions, editable one at a time through the gate."""

    def __init__(self, gate, max_options=MAX_OPTIONS):
        self.gate = gate
        self.max_options = max_options
        self.options: List[Option] = []
        self.errors = {}
        self._ids = itertools.count()

    def _next_id(self):
        return f"option-{next(self._ids)}"

    # -- queries ----------------------------------------------------------

    def get(self, option_id):
        for option in self.options:
            if option.id == option_id:
                return option
        return None

    def index_of(self, option_id):
        for index, option in enumerate(self.options):
            if option.id == option_id:
                return index
        return None

    def saved_options(self):
        return [o for o in self.options if o.is_saved]

    def live_options(self):
        """Saved options plus the option being edited, when it is usable.

        Feeds the on-screen preview only. An open option with a duplicate
        name or duplicate values stays out until the clash is fixed, so
        preview signatures remain unique.
        """
        return [o for o in self.options if o.is_saved or self._previewable(o)]

    def _previewable(self, option):
        return (
            option.editing
            and bool(option.name.strip())
            and bool(option.clean_values())
            and find_duplicate_name(option.id, option.name, self.options) is None
            and not find_duplicate_values(option.values)
        )

    def errors_for(self, option_id):
        return self.errors.get(option_id) or OptionErrors()

    # -- structural operations -------------------------------------------

    def load(self, named_values):
        """Replace the store with saved options built from (name, values) pairs."""
        self.options = [
            Option(id=self._next_id(), name=name, values=list(values), editing=False)
            for name, values in named_values
        ]
        self.errors = {}

    def replace(self, options):
        self.options = list(options)
        live_ids = {o.id for o in self.options}
        self.errors = {k: v for k, v in self.errors.items() if k in live_ids}

    def add_option(self):
        if len(self.options) >= self.max_options:
            logger.debug("Option limit of %d reached", self.max_options)
            return None
        if self.gate.is_editing:
            logger.debug("Cannot add an option while %s is open", self.gate.editing_id)
            return None

        option = Option(id=self._next_id())
        self.options.append(option)
        self.errors.pop(option.id, None)
        self.gate.open(option.id)
        return option

    def edit_option(self, option_id):
        option = self.get(option_id)
        if option is None:
            return False
        if not self.gate.open(option_id):
            return False
        option.editing = True
        if not option.values or option.values[-1].strip():
            option.values.append("")
        return True

    def remove(self, option_id):
        option = self.get(option_id)
        if option is None:
            return None
        self.options = [o for o in self.options if o.id != option_id]
        self.errors.pop(option_id, None)
        if self.gate.editing_id == option_id:
            self.gate.close(option_id)
        logger.info("Removed option %s (%s)", option_id, option.name)
        return option

    def reorder(self, from_index, to_index):
        if self.gate.is_editing:
            logger.debug("Reorder refused while %s is open", self.gate.editing_id)
            return False
        self.options = reorder(self.options, from_index, to_index)
        return True

    def move_option(self, active_id, over_id):
        """Drag-end adapter for option reordering."""
        if self.gate.is_editing:
            return False
        self.options = move_by_id(self.options, active_id, over_id)
        return True

    # -- live editing -----------------------------------------------------

    def _editing(self, option_id):
        option = self.get(option_id)
        if option is None or not option.editing:
            return None
        return option

    def _update_errors(self, option_id, **changes):
        errors = self.errors.get(option_id) or OptionErrors()
        for attr, value in changes.items():
            setattr(errors, attr, value)
        if errors:
            self.errors[option_id] = errors
        else:
            self.errors.pop(option_id, None)

    def rename_option(self, option_id, name):
        option = self._editing(option_id)
        if option is None:
            return False
        option.name = name
        self._update_errors(
            option_id,
            empty_name=False,
            duplicate_name=find_duplicate_name(option_id, name, self.options),
        )
        return True

    def set_value(self, option_id, index, value):
        option = self._editing(option_id)
        if option is None or not 0 <= index <= len(option.values):
            return False

        if index == len(option.values):
            option.values.append(value)
        else:
            option.values[index] = value
        # Always keep one empty slot ready at the end.
        if value and index == len(option.values) - 1:
            option.values.append("")

        changes = {"duplicate_values": find_duplicate_values(option.values)}
        if option.clean_values():
            changes["empty_values"] = False
        self._update_errors(option_id, **changes)
        return True

    def remove_value(self, option_id, index):
        option = self._editing(option_id)
        if option is None or not 0 <= index < len(option.values):
            return False
        values = option.values[:index] + option.values[index + 1:]
        option.values = values or [""]
        self._update_errors(
            option_id, duplicate_values=find_duplicate_values(option.values)
        )
        return True

    def move_value(self, option_id, from_index, to_index):
        option = self._editing(option_id)
        if option is None:
            return False
        option.values = reorder(option.values, from_index, to_index)
        self._update_errors(
            option_id, duplicate_values=find_duplicate_values(option.values)
        )
        return True

    def validate(self, option_id):
        """Compute the commit-time errors for an option without changing it."""
        option = self.get(option_id)
        errors = OptionErrors()
        if option is None:
            return errors
        if not option.name.strip():
            errors.empty_name = True
        errors.duplicate_name = find_duplicate_name(option_id, option.name, self.options)
        if not option.clean_values():
            errors.empty_values = True
        errors.duplicate_values = find_duplicate_values(option.values)
        return errors

    def commit(self, option_id):
        """The "Done" action. Returns True when the option was saved."""
        option = self._editing(option_id)
        if option is None:
            return False

        errors = self.validate(option_id)
        if errors:
            self.errors[option_id] = errors
            logger.debug("Commit of %s rejected: %s", option_id, errors.codes)
            return False

        option.name = option.name.strip()
        option.values = option.clean_values()
        option.editing = False
        self.errors.pop(option_id, None)
        self.gate.close(option_id)
        logger.info(
            "Committed option %s: %s = %s", option_id, option.name, option.values
        )
        return True
