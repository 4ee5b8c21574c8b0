"""Classify closure notices into status categories from their free text."""

import re

from schoolclosings.schema import StatusCategory, StatusScheme

# "non-delay", "non-closing" etc. negate the keyword
_NOT_NEGATED = r"(?<!non-)"


def _rule(pattern: str) -> re.Pattern:
    return re.compile(pattern.format(n=_NOT_NEGATED), re.IGNORECASE)


_DELAY = (
    _rule(r"{n}\bdelay(ed|s)?\b"),
    _rule(r"\blate\s+(start|open)"),
)
_EARLY_DISMISSAL_STRICT = (
    _rule(r"{n}\bearly[\s-]+dismissal\b"),
)
_EARLY_DISMISSAL_LENIENT = (
    _rule(r"{n}\bearly\b"),
    _rule(r"{n}\bdismiss"),
)
_CLOSED = (
    _rule(r"{n}\bclos(ed|ing|ure|ures)\b"),
)

# Scheme → ordered (category, patterns) rules and the fallback category
RULES: dict[StatusScheme, tuple] = {
    StatusScheme.LENIENT: (
        (
            (StatusCategory.DELAY, _DELAY),
            (StatusCategory.EARLY_DISMISSAL, _EARLY_DISMISSAL_LENIENT),
        ),
        StatusCategory.CLOSED,
    ),
    StatusScheme.STRICT: (
        (
            (StatusCategory.DELAY, _DELAY),
            (StatusCategory.EARLY_DISMISSAL, _EARLY_DISMISSAL_STRICT),
            (StatusCategory.CLOSED, _CLOSED),
        ),
        StatusCategory.INFORMATIONAL,
    ),
}


def classify(text: str | None, scheme: StatusScheme = StatusScheme.STRICT) -> StatusCategory:
    """Return the status category for a closure notice.

    The first rule with a matching pattern wins; text that matches nothing
    gets the scheme's default (``closed`` for LENIENT, ``informational``
    for STRICT).
    """
    rules, default = RULES[StatusScheme(scheme)]
    text = text or ""
    for category, patterns in rules:
        if any(p.search(text) for p in patterns):
            return category
    return default


def combined_text(detail: str, label: str, title: str) -> str:
    """Join the fields of a feed row into the classifier input."""
    return " ".join(part for part in (detail, label, title) if part)
