"""Shared fixtures: small trees and gzip files on disk."""
from __future__ import annotations

import pytest

from nbtedit import files
from nbtedit.tags import (
    ByteArrayTag,
    ByteTag,
    CompoundTag,
    DoubleTag,
    FloatTag,
    IntArrayTag,
    IntTag,
    ListTag,
    LongArrayTag,
    LongTag,
    ShortTag,
    StringTag,
    TagType,
)


@pytest.fixture
def scenario_tree() -> CompoundTag:
    """``{"hp": 20, "items": [{"id": "stone"}]}``"""
    return CompoundTag(
        {
            "hp": IntTag(20),
            "items": ListTag.of([CompoundTag({"id": StringTag("stone")})]),
        }
    )


@pytest.fixture
def player_tree() -> CompoundTag:
    """A tree using every tag kind, shaped loosely like a player .dat file."""
    return CompoundTag(
        {
            "DataVersion": IntTag(3465),
            "OnGround": ByteTag(1),
            "Air": ShortTag(300),
            "LastPlayed": LongTag(1700000000000),
            "XpP": FloatTag(0.25),
            "Pos": ListTag.of([DoubleTag(12.5), DoubleTag(64.0), DoubleTag(-3.75)]),
            "Dimension": StringTag("minecraft:overworld"),
            "Inventory": ListTag.of(
                [
                    CompoundTag({"Slot": ByteTag(0), "id": StringTag("minecraft:stone"), "Count": ByteTag(64)}),
                    CompoundTag({"Slot": ByteTag(1), "id": StringTag("minecraft:dirt"), "Count": ByteTag(3)}),
                    CompoundTag({"Slot": ByteTag(2), "id": StringTag("minecraft:torch"), "Count": ByteTag(16)}),
                ]
            ),
            "EnderItems": ListTag(TagType.END),
            "UUID": IntArrayTag((1, -2, 3, -4)),
            "Heights": LongArrayTag((1 << 40, -1)),
            "Flags": ByteArrayTag((0, 1, -1)),
            "Empty": CompoundTag(),
        }
    )


@pytest.fixture
def player_file(tmp_path, player_tree):
    path = tmp_path / "player.dat"
    files.write_file(path, player_tree)
    return path


@pytest.fixture
def scenario_file(tmp_path, scenario_tree):
    path = tmp_path / "scenario.dat"
    files.write_file(path, scenario_tree)
    return path
