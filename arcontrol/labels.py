"""Label and label-selector helpers for runner resources."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Mapping

LABEL_KEY_RUNNER_TEMPLATE_HASH = "runner-template-hash"
LABEL_KEY_RUNNER_DEPLOYMENT_NAME = "runner-deployment-name"


@dataclass
class LabelSelectorRequirement:
    """A single match expression of a label selector."""

    key: str
    operator: str
    values: list[str] | None = None


@dataclass
class LabelSelector:
    """Selects objects by exact labels and by match expressions."""

    match_labels: dict[str, str] | None = field(default=None)
    match_expressions: list[LabelSelectorRequirement] | None = field(default=None)


def filter_labels(labels: Mapping[str, str] | None, filter_key: str) -> dict[str, str]:
    """Return a copy of ``labels`` without the ``filter_key`` entry."""
    return {k: v for k, v in (labels or {}).items() if k != filter_key}


def clone_and_add_label(
    labels: dict[str, str] | None, label_key: str, label_value: str
) -> dict[str, str] | None:
    """Return a copy of ``labels`` with the label added.

    The given mapping itself is returned when ``label_key`` is empty.
    """
    if label_key == "":
        return labels
    new_labels = dict(labels or {})
    new_labels[label_key] = label_value
    return new_labels


def clone_selector_and_add_label(
    selector: LabelSelector, label_key: str, label_value: str
) -> LabelSelector:
    """Return a deep copy of ``selector`` with the label added to its match labels.

    The given selector itself is returned when ``label_key`` is empty.
    """
    if label_key == "":
        return selector

    match_labels = dict(selector.match_labels or {})
    match_labels[label_key] = label_value

    expressions = None
    if selector.match_expressions is not None:
        expressions = [
            LabelSelectorRequirement(
                key=me.key,
                operator=me.operator,
                values=list(me.values) if me.values is not None else None,
            )
            for me in selector.match_expressions
        ]

    return LabelSelector(match_labels=match_labels, match_expressions=expressions)


def get_int_or_default(value: int | None, default: int) -> int:
    """Return ``value`` unless it is None, in which case ``default``."""
    return default if value is None else value


def get_template_hash(labels: Mapping[str, str] | None) -> str | None:
    """Return the runner template hash label, or None when it is missing."""
    if labels is None:
        return None
    return labels.get(LABEL_KEY_RUNNER_TEMPLATE_HASH)