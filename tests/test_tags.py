"""Tests for the immutable tag model."""

import math

import pytest

from nbtedit.errors import NotContainer, PathNotFound, TagValueError
from nbtedit.tags import (
    ByteArrayTag,
    ByteTag,
    CompoundTag,
    DoubleTag,
    FloatTag,
    IntArrayTag,
    IntTag,
    ListTag,
    LongTag,
    ShortTag,
    StringTag,
    TagType,
)


class TestIntegralTags:
    """Exact widths are enforced and preserved."""

    @pytest.mark.parametrize(
        "cls,low,high",
        [
            (ByteTag, -128, 127),
            (ShortTag, -32768, 32767),
            (IntTag, -(2**31), 2**31 - 1),
            (LongTag, -(2**63), 2**63 - 1),
        ],
    )
    def test_range_limits(self, cls, low, high):
        assert cls(low).value == low
        assert cls(high).value == high
        with pytest.raises(TagValueError):
            cls(high + 1)
        with pytest.raises(TagValueError):
            cls(low - 1)

    def test_width_is_part_of_identity(self):
        assert ByteTag(1) != IntTag(1)
        assert ShortTag(5) == ShortTag(5)

    def test_rejects_bool_and_float(self):
        with pytest.raises(TagValueError):
            IntTag(True)
        with pytest.raises(TagValueError):
            IntTag(1.5)

    def test_tag_value_error_is_value_error(self):
        with pytest.raises(ValueError):
            ByteTag(1000)


class TestFloatingTags:
    def test_float_rounds_to_single_precision(self):
        assert FloatTag(0.1).value != 0.1
        assert FloatTag(0.1) == FloatTag(FloatTag(0.1).value)

    def test_nan_compares_equal_to_itself(self):
        assert DoubleTag(math.nan) == DoubleTag(math.nan)
        assert FloatTag(math.nan) == FloatTag(math.nan)

    def test_float_overflow_rejected(self):
        with pytest.raises(TagValueError):
            FloatTag(1e300)

    def test_float_and_double_differ(self):
        assert FloatTag(0.5) != DoubleTag(0.5)


class TestArrayTags:
    def test_byte_array_from_bytes_is_signed(self):
        assert ByteArrayTag(b"\x00\x7f\x80\xff").values == (0, 127, -128, -1)

    def test_out_of_range_element(self):
        with pytest.raises(TagValueError):
            ByteArrayTag((1, 200))

    def test_elements_resolve_as_scalar_tags(self):
        array = IntArrayTag((10, 20, 30))
        assert array.resolve("1") == (1, IntTag(20))

    def test_without_shifts_elements(self):
        assert IntArrayTag((10, 20, 30)).without(0) == IntArrayTag((20, 30))

    @pytest.mark.parametrize("component", ["3", "-1", "x", "01x", ""])
    def test_bad_index(self, component):
        with pytest.raises(PathNotFound):
            IntArrayTag((1, 2, 3)).resolve(component)


class TestListTag:
    def test_element_type_enforced(self):
        with pytest.raises(TagValueError):
            ListTag(TagType.INT, (IntTag(1), ShortTag(2)))

    def test_empty_list_normalised_to_end(self):
        assert ListTag(TagType.COMPOUND).element_type is TagType.END
        assert ListTag(TagType.INT, ()) == ListTag(TagType.END, ())

    def test_list_of_end_cannot_hold_items(self):
        with pytest.raises(TagValueError):
            ListTag(TagType.END, (IntTag(1),))

    def test_unknown_element_type(self):
        with pytest.raises(TagValueError):
            ListTag(42)

    def test_of_infers_element_type(self):
        assert ListTag.of([StringTag("a")]).element_type is TagType.STRING

    def test_deleting_last_item_leaves_empty_list(self):
        single = ListTag.of([IntTag(1)])
        assert single.without(0) == ListTag(TagType.END)


class TestCompoundTag:
    def test_preserves_insertion_order(self):
        compound = CompoundTag([("b", IntTag(1)), ("a", IntTag(2))])
        assert compound.keys() == ("b", "a")

    def test_equality_ignores_order(self):
        left = CompoundTag([("b", IntTag(1)), ("a", IntTag(2))])
        right = CompoundTag([("a", IntTag(2)), ("b", IntTag(1))])
        assert left == right
        assert hash(left) == hash(right)

    def test_repeated_name_keeps_first_position_last_value(self):
        compound = CompoundTag([("a", IntTag(1)), ("b", IntTag(2)), ("a", IntTag(3))])
        assert compound.items() == (("a", IntTag(3)), ("b", IntTag(2)))

    def test_without_and_with_entry_return_copies(self):
        compound = CompoundTag({"a": IntTag(1), "b": IntTag(2)})
        assert compound.without("a") == CompoundTag({"b": IntTag(2)})
        assert compound.with_entry("c", IntTag(3)).keys() == ("a", "b", "c")
        assert compound.keys() == ("a", "b")

    def test_missing_key(self):
        with pytest.raises(PathNotFound):
            CompoundTag().resolve("nope")

    def test_rejects_non_tag_values(self):
        with pytest.raises(TagValueError):
            CompoundTag({"a": 1})


class TestScalarsAreNotContainers:
    @pytest.mark.parametrize("tag", [ByteTag(1), StringTag("x"), DoubleTag(1.0)])
    def test_container_operations_fail(self, tag):
        with pytest.raises(NotContainer):
            tag.resolve("0")
        with pytest.raises(NotContainer):
            tag.without("0")
