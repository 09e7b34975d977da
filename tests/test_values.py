import math

import numpy as np
import pytest

from vmprovider.core.values import ContentValues


def test_copy_is_independent():
    original = ContentValues({"a": 1})
    copied = ContentValues(original)
    copied["b"] = "x"

    assert "b" not in original
    assert copied == {"a": 1, "b": "x"}


def test_preserves_insertion_order():
    values = ContentValues(z=1, a=2)
    values["m"] = 3
    assert values.columns() == ["z", "a", "m"]
    assert values.params() == [1, 2, 3]


def test_nan_like_values_become_none():
    values = ContentValues({"a": float("nan"), "b": np.nan, "c": None})
    assert values == {"a": None, "b": None, "c": None}


def test_numpy_scalars_are_unwrapped():
    values = ContentValues({"a": np.int64(4), "b": np.float32(1.5)})
    assert type(values["a"]) is int
    assert math.isclose(values["b"], 1.5)


def test_bytes_and_strings_pass_through():
    values = ContentValues({"blob": bytearray(b"\x00\x01"), "s": "ok"})
    assert values["blob"] == b"\x00\x01"
    assert values.get_as_string("s") == "ok"
    assert values.get_as_string("missing") is None


@pytest.mark.parametrize("bad", [[1, 2], {"a": 1}, object()])
def test_rejects_non_scalars(bad):
    with pytest.raises(TypeError):
        ContentValues({"a": bad})


def test_rejects_empty_column_name():
    with pytest.raises(TypeError):
        ContentValues({"": 1})
