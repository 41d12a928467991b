"""Tests for the shape of rendered trees."""

from nbtedit.render import render, summarize
from nbtedit.tags import (
    ByteArrayTag,
    ByteTag,
    CompoundTag,
    DoubleTag,
    IntArrayTag,
    IntTag,
    ListTag,
    LongTag,
    ShortTag,
    StringTag,
    TagType,
)


class TestSummarize:
    def test_containers(self):
        assert summarize(CompoundTag({"a": IntTag(1)})) == "compound[1]"
        assert summarize(ListTag.of([StringTag("x")])) == "list[1] string"
        assert summarize(ListTag(TagType.END)) == "list[0] end"
        assert summarize(ByteArrayTag(b"\x01\x02")) == "array[2] byte"
        assert summarize(IntArrayTag((1,))) == "array[1] int"

    def test_bytes(self):
        assert summarize(ByteTag(65)) == "0x41 'A'"
        assert summarize(ByteTag(10)) == "0x0a"
        assert summarize(ByteTag(-1)) == "0xff"

    def test_integers_show_hex_at_their_width(self):
        assert summarize(IntTag(20)) == "0x14 / 20"
        assert summarize(ShortTag(-1)) == "0xffff / -1"
        assert summarize(LongTag(-1)) == "0xffffffffffffffff / -1"

    def test_floats_and_strings(self):
        assert summarize(DoubleTag(0.5)) == "0.5 / 0x1.0000000000000p-1"
        assert summarize(StringTag("stone")) == '"stone"'


class TestRender:
    def test_full_tree(self, scenario_tree):
        assert render(scenario_tree) == "\n".join(
            [
                "compound[2]",
                "├hp: 0x14 / 20",
                "└items: list[1] compound",
                "  └[0]: compound[1]",
                '    └id: "stone"',
            ]
        )

    def test_depth_one_lists_children_only(self, scenario_tree):
        assert render(scenario_tree, max_depth=1) == "\n".join(
            [
                "compound[2]",
                "├hp: 0x14 / 20",
                "└items: list[1] compound",
            ]
        )

    def test_depth_zero(self, scenario_tree):
        assert render(scenario_tree, max_depth=0) == "compound[2]"

    def test_nested_prefixes(self):
        tree = CompoundTag(
            {
                "a": ListTag.of([IntTag(1), IntTag(2)]),
                "b": ByteTag(0),
            }
        )
        assert render(tree).splitlines() == [
            "compound[2]",
            "├a: list[2] int",
            "│ ├[0]: 0x1 / 1",
            "│ └[1]: 0x2 / 2",
            "└b: 0x00",
        ]

    def test_array_elements(self):
        assert render(IntArrayTag((7,))) == "array[1] int\n└[0]: 0x7 / 7"
