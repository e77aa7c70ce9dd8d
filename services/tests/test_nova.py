"""Tests for Nova model descriptors."""

import pytest

from shared.nova import INPUT_IMAGE, TOOL_CALLING, Nova, get_model


def test_model_capabilities():
    assert get_model("nova-pro").supports(INPUT_IMAGE)
    assert not get_model("nova-micro").supports(INPUT_IMAGE)
    assert get_model("nova-micro").supports(TOOL_CALLING)


def test_unknown_model_name():
    with pytest.raises(ValueError, match="Unknown Nova model"):
        get_model("nova-ultra")


def test_options_are_copied_and_ignored_for_equality():
    options = {"temperature": 0.2}
    model = get_model("nova-lite", options)
    options["temperature"] = 0.9

    assert model.options == {"temperature": 0.2}
    assert model == Nova("nova-lite", model.capabilities)
