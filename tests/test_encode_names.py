from __future__ import annotations

import pytest

from encode.names import encode_name, percent_encode
from models.kinds import TagFormatRule


def test_leading_exclamation_is_escaped() -> None:
    assert encode_name("!important")[:3] == b"%21"
    assert encode_name("!important") == b"%21important"


def test_only_leading_exclamation_is_forced() -> None:
    assert encode_name("a!b") == b"a!b"


@pytest.mark.parametrize("name", ["main", "Foo::bar", "x_1", "a-b.c"])
def test_safe_names_pass_through(name: str) -> None:
    assert encode_name(name) == name.encode()


def test_prefix_is_prepended_verbatim() -> None:
    rule = TagFormatRule(kind_name="var", name_prefix="$ ")

    assert encode_name("count", rule) == b"$ count"


def test_prefixed_exclamation_is_still_escaped() -> None:
    rule = TagFormatRule(kind_name="var", name_prefix="$")

    assert encode_name("!x", rule) == b"$%21x"


def test_percent_space_and_high_bytes_are_escaped() -> None:
    assert encode_name("50% off") == b"50%25%20off"
    assert encode_name("café") == b"caf%C3%A9"
    assert encode_name("tab\there") == b"tab%09here"


def test_unprefixed_name_colliding_with_other_prefix() -> None:
    assert encode_name("$count", None, [b"$"]) == b"%24count"


def test_collision_check_skipped_when_kind_has_prefix() -> None:
    rule = TagFormatRule(kind_name="label", name_prefix="@")

    assert encode_name("$count", rule, [b"$"]) == b"@$count"


def test_collision_escapes_first_byte_once() -> None:
    assert encode_name("::x", None, [b":", b"::"]) == b"%3A:x"


def test_non_matching_prefix_leaves_name_alone() -> None:
    assert encode_name("count", None, [b"$", b"@"]) == b"count"


def test_percent_encode_force() -> None:
    assert percent_encode(b"ab", force=True) == b"%61%62"
    assert percent_encode(b"\x7f\x20") == b"%7F%20"
