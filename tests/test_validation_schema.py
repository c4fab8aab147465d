"""Tests for field rules and the per-form validation schema."""

from __future__ import annotations

import pytest

from campusforms.core.types import RuleKind
from campusforms.forms.models import FieldDefinition, FormDefinition, ValidationRule
from campusforms.forms.rules import (
    check_exact_length,
    check_max_length,
    check_min_length,
    check_one_of,
    check_pattern,
    check_required,
)
from campusforms.forms.schema import ValidationSchema, load_form_definition, load_form_definitions

EMAIL_MESSAGE = "Please enter a valid example@vnrvjiet.in email."


class TestRules:
    def test_required_empty(self):
        assert check_required("") is not None
        assert check_required(None) is not None

    def test_required_whitespace_is_a_value(self):
        assert check_required("   ") is None

    @pytest.mark.parametrize("value", ["\u0662\u0660\u0661\u0665", "\uff11\uff12", "1\u0967"])
    def test_pattern_digits_are_ascii_only(self, value):
        assert check_pattern(value, parameter=r"\d+") is not None

    def test_required_ok(self):
        assert check_required("x") is None

    def test_pattern_is_full_match(self):
        assert check_pattern("abc1", parameter=r"[a-z0-9]+") is None
        assert check_pattern("abc1!", parameter=r"[a-z0-9]+") is not None

    def test_lengths(self):
        assert check_min_length("abc", parameter=4) is not None
        assert check_min_length("abcd", parameter=4) is None
        assert check_max_length("abcdefghijklm", parameter=12) is not None
        assert check_max_length("abcdefghijkl", parameter=12) is None
        assert check_exact_length("123456789", parameter=10) is not None
        assert check_exact_length("1234567890", parameter=10) is None

    def test_one_of(self):
        assert check_one_of("CSE", parameter={"CSE", "IT"}) is None
        assert check_one_of("XYZ", parameter={"CSE", "IT"}) is not None


class TestSignInSchema:
    @pytest.fixture
    def schema(self, catalog):
        return catalog.schema("sign_in")

    def test_username_too_short(self, schema):
        check = schema.validate("username", "ab1")
        assert not check.valid
        assert check.message == "username must be at least 4 characters"

    def test_username_bad_characters(self, schema):
        check = schema.validate("username", "ab!1")
        assert not check.valid
        assert check.message == "alphabets and digits only"

    def test_username_valid(self, schema):
        check = schema.validate("username", "abcd1")
        assert check.valid
        assert check.message is None

    def test_username_pattern_reported_before_length(self, schema):
        # "a!" fails both rules; the pattern rule is declared first
        assert schema.validate("username", "a!").message == "alphabets and digits only"

    def test_username_required(self, schema):
        assert schema.validate("username", "").message == "Username is required"

    @pytest.mark.parametrize("value", ["abc", "abcdefghijklm"])
    def test_password_out_of_bounds(self, schema, value):
        check = schema.validate("password", value)
        assert not check.valid
        assert check.message == "Password must be between 6 and 12 characters"

    @pytest.mark.parametrize("value", ["abcdef", "abcdefghijkl"])
    def test_password_bounds_inclusive(self, schema, value):
        assert schema.validate("password", value).valid

    @pytest.mark.parametrize("value", [" " * 6, " " * 12])
    def test_whitespace_password_within_bounds_is_valid(self, schema, value):
        assert schema.validate("password", value).valid

    def test_whitespace_password_too_short(self, schema):
        check = schema.validate("password", "   ")
        assert check.message == "Password must be between 6 and 12 characters"

    def test_whitespace_username_reports_pattern(self, schema):
        check = schema.validate("username", "    ")
        assert not check.valid
        assert check.message == "alphabets and digits only"

    def test_unknown_field(self, schema):
        with pytest.raises(KeyError):
            schema.validate("nope", "x")


class TestSignUpSchema:
    @pytest.fixture
    def schema(self, catalog):
        return catalog.schema("sign_up")

    def test_sign_up_username_messages(self, schema):
        assert schema.validate("username", "ab1").message == "Username must be at least 4 characters"
        assert schema.validate("username", "ab!1").message == "Alphabets and digits only"

    def test_first_name_rules(self, schema):
        assert schema.validate("firstName", "Ravi").valid
        assert schema.validate("firstName", "Ram").message == "First Name must be at least 4 characters"
        assert schema.validate("firstName", "Ravi2").message == "Only alphabets are allowed"
        assert schema.validate("firstName", "").message == "First Name is required"

    def test_last_name_rules(self, schema):
        assert schema.validate("lastName", "Reddy").valid
        assert schema.validate("lastName", "Rao").message == "Last Name must be at least 4 characters"

    @pytest.mark.parametrize("value", ["20071A0501", "20155Aabcd", "19991AZZ99"])
    def test_roll_number_valid(self, schema, value):
        assert schema.validate("rollNumber", value).valid

    @pytest.mark.parametrize("value", ["2007", "20072A0501", "20071B0501", "20071A050", "20071A05011"])
    def test_roll_number_invalid_reports_pattern_first(self, schema, value):
        check = schema.validate("rollNumber", value)
        assert not check.valid
        assert check.message == "Invalid roll number format"

    @pytest.mark.parametrize(
        "value",
        ["\u0662\u0660\u0661\u06651A0501", "\u0968\u0966\u0966\u09677A0501", "\uff12\uff10\uff10\uff171A0501"],
    )
    def test_roll_number_non_ascii_digits_rejected(self, schema, value):
        check = schema.validate("rollNumber", value)
        assert not check.valid
        assert check.message == "Invalid roll number format"

    def test_roll_number_whitespace_reports_pattern(self, schema):
        assert schema.validate("rollNumber", " " * 10).message == "Invalid roll number format"

    def test_roll_number_required(self, schema):
        assert schema.validate("rollNumber", "").message == "Roll number is required"

    def test_department_membership(self, schema):
        assert schema.validate("department", "CSE").valid
        assert schema.validate("department", "XYZ").message == "Please select a valid department"
        assert schema.validate("department", "").message == "Department is required"

    def test_email_has_no_rules(self, schema):
        assert schema.validate("email", "").valid
        assert schema.field("email").read_only

    def test_required_fields(self, schema):
        assert set(schema.required_fields) == {
            "firstName", "lastName", "username", "rollNumber", "department", "password",
        }

    def test_validate_all(self, schema):
        result = schema.validate_all({"firstName": "Sravya", "username": "ab"})
        assert not result.valid
        assert "firstName" not in result.errors
        assert result.errors["username"] == "Username must be at least 4 characters"
        assert result.errors["lastName"] == "Last Name is required"

    def test_validate_all_only(self, schema):
        result = schema.validate_all({"username": "abcd1"}, only=["username"])
        assert result.valid


class TestSendMailSchema:
    @pytest.fixture
    def schema(self, catalog):
        return catalog.schema("send_mail")

    def test_foreign_domain_rejected(self, schema):
        check = schema.validate("email", "foo@gmail.com")
        assert not check.valid
        assert check.message == EMAIL_MESSAGE

    def test_college_domain_accepted(self, schema):
        check = schema.validate("email", "20151A0501@vnrvjiet.in")
        assert check.valid
        assert check.message is None

    def test_empty_rejected_with_same_message(self, schema):
        assert schema.validate("email", "").message == EMAIL_MESSAGE


class TestSchemaConstruction:
    def test_missing_choice_set_raises(self):
        definition = FormDefinition(
            id="f",
            fields=[
                FieldDefinition(
                    name="department",
                    rules=[ValidationRule(kind=RuleKind.ONE_OF, parameter="departments")],
                )
            ],
        )
        with pytest.raises(ValueError, match="departments"):
            ValidationSchema(definition)

    def test_optional_field_skips_rules_when_empty(self):
        definition = FormDefinition(
            id="f",
            fields=[
                FieldDefinition(
                    name="nickname",
                    rules=[ValidationRule(kind=RuleKind.MIN_LENGTH, parameter=3)],
                )
            ],
        )
        schema = ValidationSchema(definition)
        assert schema.validate("nickname", "").valid
        assert not schema.validate("nickname", "ab").valid
        assert schema.required_fields == []

    def test_default_message_when_none_declared(self):
        definition = FormDefinition(
            id="f",
            fields=[
                FieldDefinition(
                    name="code",
                    rules=[ValidationRule(kind=RuleKind.EXACT_LENGTH, parameter=3)],
                )
            ],
        )
        schema = ValidationSchema(definition)
        assert schema.validate("code", "ab").message == "Must be exactly 3 characters"


class TestDefinitionLoading:
    def test_bundled_definitions(self):
        definitions = load_form_definitions()
        assert {"sign_in", "sign_up", "event_request", "send_mail"} <= set(definitions)

    def test_sign_up_field_order(self):
        definitions = load_form_definitions()
        names = [f.name for f in definitions["sign_up"].fields]
        assert names == [
            "firstName", "lastName", "username", "rollNumber", "department", "email", "password",
        ]

    def test_standalone_flag(self):
        definitions = load_form_definitions()
        assert definitions["send_mail"].standalone is False
        assert all(definitions[f].standalone for f in ("sign_in", "sign_up", "event_request"))

    def test_endpoints(self):
        definitions = load_form_definitions()
        assert definitions["sign_in"].endpoint == "/api/login"
        assert definitions["sign_up"].endpoint == "/api/register"
        assert definitions["event_request"].endpoint is None

    def test_load_custom_definition(self, tmp_path):
        path = tmp_path / "feedback.yml"
        path.write_text(
            "id: feedback\n"
            "fields:\n"
            "  - name: comment\n"
            "    rules:\n"
            "      - kind: required\n"
            "        message: Comment is required\n"
        )
        defn = load_form_definition(path)
        assert defn.id == "feedback"
        assert defn.title == "feedback"
        assert defn.fields[0].required
        assert load_form_definitions(tmp_path).keys() == {"feedback"}

    def test_missing_directory(self, tmp_path):
        assert load_form_definitions(tmp_path / "missing") == {}
