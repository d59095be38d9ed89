from dataclasses import dataclass
from typing import Annotated, ClassVar

import pytest

from codegen.attrs import DuplicateAttribute
from codegen.getters import GetterMeta, Visibility, getter, getters


@getters
@dataclass
class Probe:
    label: Annotated[str, getter(vis="pub(crate)"), getter(name="read_label")]
    """Human readable label."""
    count: int
    scale: Annotated[float, getter(name="factor")]
    """
        Multiplier applied to every reading.
    """
    kind: ClassVar[str] = "probe"


class Plain:
    width: int
    height: Annotated[int, getter(vis="pub")]

    def __init__(self, width, height):
        self.width = width
        self.height = height


# ── Visibility / getter() ───────────────────────────────────────────────

@pytest.mark.parametrize(
    "text,expected",
    [
        ("pub", Visibility.PUBLIC),
        ("public", Visibility.PUBLIC),
        ("pub(crate)", Visibility.CRATE),
        ("pub( crate )", Visibility.CRATE),
        ("crate", Visibility.CRATE),
    ],
)
def test_visibility_parse(text: str, expected: Visibility) -> None:
    assert Visibility.parse(text) is expected


def test_visibility_parse_rejects_unknown() -> None:
    with pytest.raises(ValueError, match="Unknown visibility"):
        Visibility.parse("private")


def test_getter_metadata() -> None:
    assert getter() == GetterMeta()
    assert getter(name=" size ", vis="crate") == GetterMeta("size", Visibility.CRATE)


@pytest.mark.parametrize("name", ["", "2nd", "has space", "class"])
def test_getter_rejects_invalid_names(name: str) -> None:
    with pytest.raises(ValueError, match="not a valid identifier"):
        getter(name=name)


# ── Generated accessors ─────────────────────────────────────────────────

def test_default_public_accessor() -> None:
    assert Probe("a", 3, 1.5).get_count() == 3


def test_merged_name_and_visibility() -> None:
    probe = Probe("a", 3, 1.5)
    assert probe._read_label() == "a"
    assert not hasattr(probe, "read_label")
    assert not hasattr(probe, "get_label")


def test_renamed_public_accessor() -> None:
    assert Probe("a", 3, 1.5).factor() == 1.5


def test_description_methods_from_attribute_docstrings() -> None:
    probe = Probe("a", 3, 1.5)
    assert probe.read_label_desc() == "Human readable label."
    assert probe.factor_desc() == "Multiplier applied to every reading."
    assert not hasattr(probe, "get_count_desc")


def test_description_of_crate_accessor_is_public() -> None:
    probe = Probe("a", 3, 1.5)
    assert not hasattr(probe, "_read_label_desc")
    assert probe.read_label_desc() == "Human readable label."


def test_class_vars_are_skipped() -> None:
    assert not hasattr(Probe, "get_kind")


def test_generated_names_recorded() -> None:
    assert set(Probe.__getters__) == {
        "_read_label", "read_label_desc", "get_count", "factor", "factor_desc",
    }


def test_plain_class_without_dataclass() -> None:
    decorated = getters(Plain)
    item = decorated(4, 5)
    assert item.get_width() == 4
    assert item.get_height() == 5


def test_duplicate_option_is_rejected() -> None:
    with pytest.raises(DuplicateAttribute) as info:
        @getters
        class Twice:
            value: Annotated[int, getter(name="a"), getter(name="b")]

    err = info.value
    assert (err.key, err.first, err.second) == ("name", "a", "b")
    assert "Twice.value" in str(err)
    assert "first one here" in str(err)


def test_name_clash_with_existing_method() -> None:
    with pytest.raises(ValueError, match="already defines 'get_value'"):
        @getters
        class Clash:
            value: int

            def get_value(self):
                return 0


def test_name_clash_between_fields() -> None:
    with pytest.raises(ValueError, match="already defines 'same'"):
        @getters
        class Clash:
            a: Annotated[int, getter(name="same")]
            b: Annotated[int, getter(name="same")]


def test_only_classes_accepted() -> None:
    with pytest.raises(TypeError, match="only applies to classes"):
        getters(lambda: None)
