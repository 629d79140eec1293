import pytest

from lazyjson.field_tags import (
    Binding,
    apply_encode_decode_only,
    apply_multiple_keys,
    apply_naming_strategy,
    apply_private_fields,
    calc_field_names,
    extract_option_value,
    lower_case_with_underscores,
)


def test_binding_defaults_follow_tag():
    binding = Binding("Name", {"json": "name,omitempty"})
    assert binding.from_names == ["name"]
    assert binding.to_names == ["name"]


def test_binding_defaults_without_tag_and_hidden():
    assert Binding("Age").to_names == ["Age"]
    assert Binding("Hidden", {"json": "-"}).to_names == []
    assert Binding("private").to_names == []
    assert Binding("_Under").from_names == []


def test_tag_lookup():
    binding = Binding("Name", {"json": "name,<-"})
    assert binding.tag_lookup("json") == "name,<-"
    assert binding.tag_lookup("xml") is None


def test_decode_only():
    name = Binding("Name", {"json": "name,<-"})
    age = Binding("Age", {"json": "age"})
    apply_encode_decode_only([name, age])
    assert name.to_names == []
    assert name.from_names == ["name"]
    assert age.to_names == ["age"]
    assert age.from_names == ["age"]


def test_decode_only_struct_field():
    obj = Binding("Obj", {"json": "obj,<-"})
    apply_encode_decode_only([obj])
    assert obj.to_names == []
    assert obj.from_names == ["obj"]


def test_encode_only():
    name = Binding("Name", {"json": "name,->"})
    age = Binding("Age", {"json": "age"})
    apply_encode_decode_only([name, age])
    assert name.to_names == ["name"]
    assert name.from_names == []
    assert age.from_names == ["age"]


def test_encode_and_decode_only_cancel():
    both = Binding("Name", {"json": "name, -> ,<-"})
    apply_encode_decode_only([both])
    assert both.to_names == ["name"]
    assert both.from_names == ["name"]


@pytest.mark.parametrize(
    "tag, opt, expected",
    [
        ("origin", "<", None),
        ("origin,<:fallback", "<", "fallback"),
        ("origin,<:fallback1 fallback2", "<", "fallback1 fallback2"),
    ],
)
def test_extract_option_value(tag, opt, expected):
    assert extract_option_value(tag, opt) == expected


def test_decode_multiple_keys_one_fallback():
    name = Binding("Name", {"json": "name,<:first_name"})
    age = Binding("Age", {"json": "age"})
    apply_multiple_keys([name, age])
    assert name.from_names == ["name", "first_name"]
    assert name.to_names == ["name"]
    assert age.from_names == ["age"]


def test_decode_multiple_keys_two_fallbacks():
    name = Binding("Name", {"json": "name,<:first_name legal_name"})
    apply_multiple_keys([name])
    assert name.from_names == ["name", "first_name", "legal_name"]


def test_encode_multiple_keys():
    name = Binding("Name", {"json": "name,>:first_name"})
    age = Binding("Age", {"json": "age"})
    apply_multiple_keys([name, age])
    keys = [key for binding in (name, age) for key in binding.to_names]
    assert keys == ["name", "first_name", "age"]
    assert name.from_names == ["name"]


def test_lower_case_with_underscores():
    assert lower_case_with_underscores("helloWorld") == "hello_world"
    assert lower_case_with_underscores("HelloWorld") == "hello_world"


def test_naming_strategy_renames_untagged():
    bindings = [Binding("UserName"), Binding("FirstLanguage")]
    apply_naming_strategy(bindings, lower_case_with_underscores)
    assert [b.to_names for b in bindings] == [["user_name"], ["first_language"]]
    assert [b.from_names for b in bindings] == [["user_name"], ["first_language"]]


def test_naming_strategy_keeps_explicit_names():
    user = Binding("UserName", {"json": "UserName"})
    lang = Binding("FirstLanguage")
    apply_naming_strategy([user, lang], lower_case_with_underscores)
    assert user.to_names == ["UserName"]
    assert lang.to_names == ["first_language"]


def test_naming_strategy_with_omitempty():
    lang = Binding("FirstLanguage", {"json": ",omitempty"})
    apply_naming_strategy([lang], lower_case_with_underscores)
    assert lang.to_names == ["first_language"]


def test_naming_strategy_skips_private_fields():
    bindings = [Binding("UserName"), Binding("userId"), Binding("_UserAge")]
    apply_naming_strategy(bindings, lower_case_with_underscores)
    keys = [key for binding in bindings for key in binding.to_names]
    assert keys == ["user_name"]


def test_private_fields_untagged():
    field1 = Binding("field1")
    assert field1.from_names == []
    apply_private_fields([field1])
    assert field1.from_names == ["field1"]
    assert field1.to_names == ["field1"]


def test_private_fields_tagged_stay_hidden():
    tagged = Binding("secretField", {"json": "renamed"})
    public = Binding("Public")
    apply_private_fields([tagged, public])
    assert tagged.from_names == []
    assert public.to_names == ["Public"]


@pytest.mark.parametrize(
    "original, provided, whole, expected",
    [
        ("Name", "", "", ["Name"]),
        ("Name", "name", "name", ["name"]),
        ("Name", "-", "-", []),
        ("name", "alias", "alias", []),
    ],
)
def test_calc_field_names(original, provided, whole, expected):
    assert calc_field_names(original, provided, whole) == expected