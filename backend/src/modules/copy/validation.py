"""Field rules for the book copy form.

Each form field maps to an ordered list of rules. A rule is a callable that
takes the current value and returns the next one: sanitizers transform it,
checks return it unchanged or raise ``RuleFailure``. Every rule of every field
runs, so the result always carries fully sanitized values together with the
first failure message of each field.
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional

from markupsafe import escape as escape_markup

from ..common.constants import MAX_RECORD_ID
from .models import IMPRINT_MAX_LENGTH, CopyStatus

Rule = Callable[[Any], Any]


class RuleFailure(ValueError):
    """Raised by a check when a field value is not acceptable."""

    pass


def trim(value: Any) -> Any:
    return value.strip() if isinstance(value, str) else value


def escape(value: Any) -> Any:
    """Escape ``& < > " '`` so the value is safe to embed in markup."""
    if value is None:
        return None
    return str(escape_markup(value))


def required(message: str) -> Rule:
    def check(value: Any) -> Any:
        if value is None or value == "":
            raise RuleFailure(message)
        return value

    return check


def integer_id(message: str) -> Rule:
    def check(value: Any) -> Any:
        if value in (None, ""):
            return value
        try:
            identifier = int(value)
        except (TypeError, ValueError):
            raise RuleFailure(message)
        if not 1 <= identifier <= MAX_RECORD_ID:
            raise RuleFailure(message)
        return value

    return check


def max_length(limit: int, message: str) -> Rule:
    def check(value: Any) -> Any:
        if value is not None and len(value) > limit:
            raise RuleFailure(message)
        return value

    return check


def default(fallback: Any) -> Rule:
    def sanitize(value: Any) -> Any:
        return fallback if value in (None, "") else value

    return sanitize


def one_of(choices: Iterable[str], message: str) -> Rule:
    allowed = frozenset(choices)

    def check(value: Any) -> Any:
        if value not in allowed:
            raise RuleFailure(message)
        return value

    return check


def iso_date(message: str) -> Rule:
    """Parse ISO-8601 text into a ``date``.

    Date-times are accepted and reduced to their calendar date.
    """

    def sanitize(value: Any) -> Any:
        if isinstance(value, date):
            return value
        try:
            return date.fromisoformat(value)
        except (TypeError, ValueError):
            pass
        try:
            return datetime.fromisoformat(value).date()
        except (TypeError, ValueError):
            raise RuleFailure(message)

    return sanitize


def optional(*rules: Rule) -> Rule:
    """Run ``rules`` only when a value was submitted; blank becomes ``None``."""

    def apply(value: Any) -> Any:
        if value is None or value == "":
            return None
        for rule in rules:
            value = rule(value)
        return value

    return apply


COPY_FORM_RULES: Dict[str, List[Rule]] = {
    "book": [
        trim,
        required("Book is a required field."),
        escape,
        integer_id("Book must be selected from the list."),
    ],
    "imprint": [
        trim,
        required("Imprint is a required field."),
        escape,
        max_length(IMPRINT_MAX_LENGTH, "Imprint is too long."),
    ],
    "status": [
        trim,
        escape,
        default(CopyStatus.MAINTENANCE.value),
        one_of((status.value for status in CopyStatus), "Invalid status."),
    ],
    "due_back": [
        trim,
        optional(iso_date("Invalid date")),
    ],
}


@dataclass
class FormResult:
    """Sanitized form values plus the first error message per failing field."""

    values: Dict[str, Any]
    errors: Dict[str, str] = field(default_factory=dict)

    @property
    def is_valid(self) -> bool:
        return not self.errors

    def form_values(self) -> Dict[str, str]:
        """Values as text, ready to fill the form inputs again."""
        rendered: Dict[str, str] = {}
        for name, value in self.values.items():
            if value is None:
                rendered[name] = ""
            elif isinstance(value, date):
                rendered[name] = value.isoformat()
            else:
                rendered[name] = str(value)
        return rendered


def apply_rules(data: Mapping[str, Any], rules: Optional[Mapping[str, List[Rule]]] = None) -> FormResult:
    """Evaluate the rule table against submitted form data.

    Args:
        data: Submitted field values; missing fields are treated as blank
        rules: Rule table, defaults to ``COPY_FORM_RULES``

    Returns:
        FormResult with every field sanitized and every failure collected
    """
    if rules is None:
        rules = COPY_FORM_RULES

    result = FormResult(values={})
    for name, field_rules in rules.items():
        value = data.get(name)
        if value is None:
            value = ""
        for rule in field_rules:
            try:
                value = rule(value)
            except RuleFailure as failure:
                result.errors.setdefault(name, str(failure))
        result.values[name] = value

    return result
