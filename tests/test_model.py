"""Tests for typedini.ini.model."""

from decimal import Decimal

import pytest

from typedini import (
    FieldNotFound,
    IniBool,
    IniDocument,
    IniField,
    IniNumber,
    IniSection,
    IniText,
    SectionNotFound,
    TypeCoercionFailure,
)
from typedini.ini.model import infer_value, to_value


@pytest.fixture
def doc() -> IniDocument:
    d = IniDocument()
    d.add_section("General")
    d.add_field("General", "Debug", True)
    d.add_field("General", "Retries", 3)
    d.add_field("General", "Name", "acme")
    return d


# ---------------------------------------------------------------------------
# values
# ---------------------------------------------------------------------------

class TestValues:
    def test_number_accepts_int_and_float(self):
        assert IniNumber(3).value == Decimal("3")
        assert IniNumber(0.1).value == Decimal("0.1")

    def test_number_rejects_bool(self):
        with pytest.raises(TypeError):
            IniNumber(True)

    def test_number_rejects_nan(self):
        with pytest.raises(ValueError):
            IniNumber(Decimal("NaN"))

    def test_number_text_has_no_exponent(self):
        assert str(IniNumber(Decimal("1E+2"))) == "100"
        assert str(IniNumber(Decimal("3.50"))) == "3.50"

    def test_bool_text(self):
        assert str(IniBool(True)) == "true"
        assert str(IniBool(False)) == "false"

    def test_text_rejects_non_str(self):
        with pytest.raises(TypeError):
            IniText(5)

    def test_to_value(self):
        assert to_value(True) == IniBool(True)
        assert to_value(7) == IniNumber(7)
        assert to_value("x") == IniText("x")
        assert to_value(IniText("y")) == IniText("y")

    def test_to_value_rejects_others(self):
        with pytest.raises(TypeError):
            to_value([1, 2])
        with pytest.raises(TypeError):
            to_value(None)

    def test_infer_order(self):
        assert infer_value("true") == IniBool(True)
        assert infer_value("FALSE") == IniBool(False)
        assert infer_value("10") == IniNumber(10)
        assert infer_value("-2.5") == IniNumber(Decimal("-2.5"))
        assert infer_value("10abc") == IniText("10abc")
        assert infer_value("1e5") == IniText("1e5")
        assert infer_value("") == IniText("")


# ---------------------------------------------------------------------------
# IniSection
# ---------------------------------------------------------------------------

class TestSection:
    def test_keeps_position_on_overwrite(self):
        s = IniSection("S", {"a": 1, "b": 2, "c": 3})
        s["b"] = "two"
        assert list(s) == ["a", "b", "c"]
        assert s["b"] == IniText("two")

    def test_from_fields(self):
        s = IniSection("S", [IniField("x", IniBool(False)), IniField("y", IniText("z"))])
        assert s.fields() == [IniField("x", IniBool(False)), IniField("y", IniText("z"))]

    def test_to_dict(self):
        s = IniSection("S", {"a": 1, "b": True, "c": "c"})
        assert s.to_dict() == {"a": Decimal(1), "b": True, "c": "c"}

    def test_repr(self):
        s = IniSection("S", {"a": 1})
        assert str(s) == "[S]"
        assert repr(s) == "[S] { .cnt = 1 }"


# ---------------------------------------------------------------------------
# IniDocument: lenient operations
# ---------------------------------------------------------------------------

class TestLenient:
    def test_add_section_is_idempotent(self):
        d = IniDocument()
        d.add_section("A")
        d.add_field("A", "k", 1)
        d.add_section("A")
        assert list(d.sections) == ["A"]
        assert d["A"]["k"] == IniNumber(1)

    def test_add_field_needs_section(self):
        d = IniDocument()
        d.add_field("Missing", "k", 1)
        assert "Missing" not in d

    def test_duplicate_add_field_keeps_first(self, doc):
        doc.add_field("General", "Retries", 99)
        assert doc.get_number_field("General", "Retries") == 3

    def test_added_values_read_back(self, doc):
        assert doc.get_boolean_field("General", "Debug") is True
        assert doc.get_number_field("General", "Retries") == Decimal(3)
        assert doc.get_string_field("General", "Name") == "acme"

    def test_remove_missing_is_noop(self, doc):
        doc.remove_section("Nope")
        doc.remove_field("Nope", "x")
        doc.remove_field("General", "Nope")
        assert list(doc["General"]) == ["Debug", "Retries", "Name"]

    def test_remove(self, doc):
        doc.remove_field("General", "Retries")
        assert list(doc["General"]) == ["Debug", "Name"]
        doc.remove_section("General")
        assert len(doc) == 0

    def test_lookup_does_not_create(self):
        d = IniDocument()
        with pytest.raises(KeyError):
            d["A"]
        assert d.get("A") is None
        assert not d.section_exists("A")
        assert not d.field_exists("A", "k")
        assert len(d) == 0

    def test_get_or_create_section(self):
        d = IniDocument()
        first = d.get_or_create_section("A")
        second = d.get_or_create_section("A")
        assert first is second
        assert len(first) == 0
        assert list(d.sections) == ["A"]

    def test_assign_replaces_fields(self, doc):
        doc["General"] = [IniField("Only", IniText("one"))]
        assert doc["General"].fields() == [IniField("Only", IniText("one"))]
        doc["New"] = {"k": False}
        assert list(doc.sections) == ["General", "New"]

    def test_assign_copies(self):
        d = IniDocument()
        src = {"k": 1}
        d["A"] = src
        src["k"] = 2
        assert d["A"]["k"] == IniNumber(1)

    def test_sections_is_restartable(self, doc):
        doc.add_section("Other")
        names = doc.sections
        assert list(names) == ["General", "Other"]
        assert list(names) == ["General", "Other"]
        doc.add_section("Third")
        assert list(names) == ["General", "Other", "Third"]

    def test_section_names_are_case_sensitive(self, doc):
        assert doc.section_exists("General")
        assert not doc.section_exists("general")
        assert doc.field_exists("General", "Debug")
        assert not doc.field_exists("General", "debug")


# ---------------------------------------------------------------------------
# IniDocument: typed getters / setters
# ---------------------------------------------------------------------------

class TestTyped:
    def test_get_missing_section(self, doc):
        with pytest.raises(SectionNotFound) as exc:
            doc.get_string_field("Nope", "Name")
        assert exc.value.section == "Nope"

    def test_get_missing_field(self, doc):
        with pytest.raises(FieldNotFound) as exc:
            doc.get_string_field("General", "Nope")
        assert exc.value.section == "General"
        assert exc.value.field == "Nope"

    def test_not_found_are_lookup_errors(self, doc):
        with pytest.raises(LookupError):
            doc.get_boolean_field("Nope", "x")

    def test_set_missing_section(self, doc):
        with pytest.raises(SectionNotFound):
            doc.set_string_field("Nope", "Name", "x")
        assert "Nope" not in doc

    def test_set_missing_field(self, doc):
        for setter, value in (
            (doc.set_string_field, "x"),
            (doc.set_boolean_field, True),
            (doc.set_number_field, 1),
        ):
            with pytest.raises(FieldNotFound):
                setter("General", "Nope", value)
        assert not doc.field_exists("General", "Nope")

    def test_set_keeps_position(self, doc):
        doc.set_string_field("General", "Debug", "verbose")
        assert list(doc["General"]) == ["Debug", "Retries", "Name"]
        assert doc["General"]["Debug"] == IniText("verbose")

    def test_setters_write_their_variant(self, doc):
        doc.set_number_field("General", "Name", 1.5)
        doc.set_boolean_field("General", "Retries", False)
        assert doc["General"]["Name"] == IniNumber(Decimal("1.5"))
        assert doc["General"]["Retries"] == IniBool(False)

    def test_setters_check_argument_type(self, doc):
        with pytest.raises(TypeError):
            doc.set_boolean_field("General", "Debug", "yes")
        with pytest.raises(TypeError):
            doc.set_number_field("General", "Retries", True)
        with pytest.raises(TypeError):
            doc.set_string_field("General", "Name", 3)

    def test_boolean_coercion(self, doc):
        doc.add_field("General", "Zero", 0)
        doc.add_field("General", "Word", "TRUE")
        assert doc.get_boolean_field("General", "Retries") is True
        assert doc.get_boolean_field("General", "Zero") is False
        assert doc.get_boolean_field("General", "Word") is True
        with pytest.raises(TypeCoercionFailure):
            doc.get_boolean_field("General", "Name")

    def test_number_coercion(self, doc):
        doc.add_field("General", "Text", "42.5")
        assert doc.get_number_field("General", "Debug") == 1
        assert doc.get_number_field("General", "Text") == Decimal("42.5")
        with pytest.raises(TypeCoercionFailure) as exc:
            doc.get_number_field("General", "Name")
        assert exc.value.target is Decimal
        assert isinstance(exc.value, ValueError)

    def test_string_of_every_variant(self, doc):
        assert doc.get_string_field("General", "Debug") == "true"
        assert doc.get_string_field("General", "Retries") == "3"


# ---------------------------------------------------------------------------
# IniDocument: helpers
# ---------------------------------------------------------------------------

class TestHelpers:
    def test_rename_section(self, doc):
        doc.add_section("Other")
        assert doc.rename_section("General", "Main")
        assert list(doc.sections) == ["Main", "Other"]
        assert doc["Main"].name == "Main"
        assert not doc.rename_section("Nope", "X")
        assert not doc.rename_section("Main", "Other")

    def test_update_merges(self, doc):
        other = IniDocument()
        other["General"] = {"Retries": 5, "Extra": "x"}
        other["Log"] = {"Level": "info"}
        doc.update(other)
        assert list(doc["General"]) == ["Debug", "Retries", "Name", "Extra"]
        assert doc.get_number_field("General", "Retries") == 5
        assert doc.get_string_field("Log", "Level") == "info"

    def test_copy_is_independent(self, doc):
        dup = doc.copy()
        dup.set_string_field("General", "Name", "other")
        assert doc.get_string_field("General", "Name") == "acme"
        assert dup.to_dict()["General"]["Name"] == "other"

    def test_to_dict(self, doc):
        assert doc.to_dict() == {
            "General": {"Debug": True, "Retries": Decimal(3), "Name": "acme"}
        }

    def test_update_takes_dict_update_forms(self, doc):
        doc.update([("Log", {"Level": "info"})], Extra={"on": True})
        doc.update(General=[IniField("Retries", IniNumber(7))])
        assert list(doc.sections) == ["General", "Log", "Extra"]
        assert doc.get_string_field("Log", "Level") == "info"
        assert doc.get_boolean_field("Extra", "on") is True
        assert doc.get_number_field("General", "Retries") == 7
