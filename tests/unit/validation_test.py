from __future__ import annotations

from fakes import make_file

from bundle_blitz.core.validation import validate


def test_valid_json_yields_nothing() -> None:
    assert validate(make_file("a.json", '{"x":1}')) == []


def test_empty_json_object_is_info() -> None:
    result = validate(make_file("b.json", "{}"))
    assert len(result) == 1
    assert result[0].severity == "info"
    assert result[0].message == 'JSON file "b.json" is just an empty object.'


def test_invalid_json_is_error() -> None:
    result = validate(make_file("broken.json", '{"x": }'))
    assert len(result) == 1
    assert result[0].severity == "error"
    assert result[0].message.startswith('Invalid JSON in "broken.json":')


def test_json_array_is_fine() -> None:
    assert validate(make_file("list.json", "[]")) == []


def test_blank_json_warns_and_skips_parse() -> None:
    result = validate(make_file("empty.json", "  \n"))
    assert [d.severity for d in result] == ["warning"]
    assert result[0].message == 'JSON configuration file "empty.json" is completely empty.'


def test_blank_messages_per_kind() -> None:
    assert validate(make_file("doc.md", ""))[0].message == 'Markdown documentation "doc.md" has no content.'
    assert validate(make_file("t.txt", "\n"))[0].message == 'Plain text file "t.txt" is blank.'
    assert validate(make_file("x.js", ""))[0].message == 'File "x.js" is empty.'


def test_markdown_without_structure_is_info() -> None:
    result = validate(make_file("notes.md", "just some prose"))
    assert len(result) == 1
    assert result[0].severity == "info"
    assert "lack standard formatting" in result[0].message


def test_markdown_with_header_passes() -> None:
    assert validate(make_file("notes.md", "# Title\nBody")) == []
    assert validate(make_file("list.md", "- one\n- two")) == []


def test_script_content_is_not_checked() -> None:
    assert validate(make_file("a.js", "this is {{ not valid")) == []


def test_validate_does_not_alter_file() -> None:
    file = make_file("b.json", "{}")
    validate(file)
    assert file.content == "{}"
