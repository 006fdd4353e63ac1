from arcontrol.labels import (
    LABEL_KEY_RUNNER_TEMPLATE_HASH,
    LabelSelector,
    LabelSelectorRequirement,
    clone_and_add_label,
    clone_selector_and_add_label,
    filter_labels,
    get_int_or_default,
    get_template_hash,
)

POD_TEMPLATE_HASH = "pod-template-hash"


def test_filter_labels_ok():
    labels = {LABEL_KEY_RUNNER_TEMPLATE_HASH: "abc", POD_TEMPLATE_HASH: "def"}
    assert filter_labels(labels, LABEL_KEY_RUNNER_TEMPLATE_HASH) == {
        POD_TEMPLATE_HASH: "def"
    }


def test_filter_labels_does_not_mutate_input():
    labels = {"a": "1", "b": "2"}
    filter_labels(labels, "a")
    assert labels == {"a": "1", "b": "2"}


def test_filter_labels_none():
    assert filter_labels(None, "a") == {}


def test_clone_and_add_label_empty_key_returns_same_object():
    labels = {"a": "1"}
    assert clone_and_add_label(labels, "", "x") is labels


def test_clone_and_add_label_copies():
    labels = {"a": "1"}
    result = clone_and_add_label(labels, "b", "2")
    assert result == {"a": "1", "b": "2"}
    assert labels == {"a": "1"}


def test_clone_and_add_label_from_none():
    assert clone_and_add_label(None, "b", "2") == {"b": "2"}


def test_clone_selector_empty_key_returns_same_object():
    selector = LabelSelector(match_labels={"foo": "bar"})
    assert clone_selector_and_add_label(selector, "", "x") is selector


def test_clone_selector_adds_label_and_deep_copies():
    values = ["x", "y"]
    selector = LabelSelector(
        match_labels={"foo": "bar"},
        match_expressions=[LabelSelectorRequirement("k", "In", values)],
    )
    result = clone_selector_and_add_label(selector, "hash", "abc")
    assert result.match_labels == {"foo": "bar", "hash": "abc"}
    assert selector.match_labels == {"foo": "bar"}
    assert result.match_expressions == [LabelSelectorRequirement("k", "In", ["x", "y"])]
    result.match_expressions[0].values.append("z")
    assert values == ["x", "y"]


def test_clone_selector_keeps_missing_expressions_none():
    result = clone_selector_and_add_label(LabelSelector(), "hash", "abc")
    assert result.match_labels == {"hash": "abc"}
    assert result.match_expressions is None


def test_clone_selector_keeps_none_values():
    selector = LabelSelector(
        match_expressions=[LabelSelectorRequirement("k", "Exists", None)]
    )
    result = clone_selector_and_add_label(selector, "hash", "abc")
    assert result.match_expressions[0].values is None


def test_get_int_or_default():
    assert get_int_or_default(None, 1) == 1
    assert get_int_or_default(0, 1) == 0
    assert get_int_or_default(5, 1) == 5


def test_get_template_hash():
    assert get_template_hash({LABEL_KEY_RUNNER_TEMPLATE_HASH: "abc"}) == "abc"
    assert get_template_hash({"other": "x"}) is None
    assert get_template_hash(None) is None