"""Tests for request validation shapes and validation error formatting."""

import unittest

from pydantic import ValidationError

from userhub.schemas.auth import SignUpRequest
from userhub.schemas.errors import format_validation_errors
from userhub.schemas.users import Role, UserUpdateRequest


class TestUserUpdateRequest(unittest.TestCase):
    def test_requires_at_least_one_field(self) -> None:
        with self.assertRaises(ValidationError) as ctx:
            UserUpdateRequest.model_validate({})
        details = format_validation_errors(ctx.exception.errors())
        self.assertEqual(details[0].message, "At least one field must be provided for update")

    def test_unknown_fields_only_counts_as_empty(self) -> None:
        with self.assertRaises(ValidationError):
            UserUpdateRequest.model_validate({"password": "hunter22"})

    def test_normalizes_name_and_email(self) -> None:
        body = UserUpdateRequest.model_validate({"name": "  Jane  ", "email": " Jane@X.COM "})
        self.assertEqual(body.name, "Jane")
        self.assertEqual(body.email, "jane@x.com")
        self.assertEqual(body.changes(), {"name": "Jane", "email": "jane@x.com"})

    def test_name_too_short_after_trim(self) -> None:
        with self.assertRaises(ValidationError):
            UserUpdateRequest.model_validate({"name": " J "})

    def test_rejects_unknown_role(self) -> None:
        with self.assertRaises(ValidationError) as ctx:
            UserUpdateRequest.model_validate({"role": "superuser"})
        details = format_validation_errors(ctx.exception.errors())
        self.assertEqual(details[0].field, "role")

    def test_accepts_role(self) -> None:
        body = UserUpdateRequest.model_validate({"role": "admin"})
        self.assertEqual(body.changes(), {"role": Role.ADMIN})

    def test_rejects_invalid_email(self) -> None:
        with self.assertRaises(ValidationError):
            UserUpdateRequest.model_validate({"email": "not-an-email"})


class TestSignUpRequest(unittest.TestCase):
    def test_role_is_not_accepted_from_the_client(self) -> None:
        body = SignUpRequest.model_validate(
            {"name": "Jane", "email": "jane@x.com", "password": "secret123", "role": "admin"}
        )
        self.assertNotIn("role", body.model_dump())

    def test_short_password_rejected(self) -> None:
        with self.assertRaises(ValidationError):
            SignUpRequest.model_validate({"name": "Jane", "email": "jane@x.com", "password": "123"})


class TestFormatValidationErrors(unittest.TestCase):
    def test_json_decode_offset_maps_to_body(self) -> None:
        details = format_validation_errors(
            [{"loc": ("body", 1), "msg": "JSON decode error"}]
        )
        self.assertEqual(details[0].field, "body")

    def test_path_level_error_keeps_its_source(self) -> None:
        details = format_validation_errors([{"loc": ("path",), "msg": "Invalid"}])
        self.assertEqual(details[0].field, "path")

    def test_nested_list_index_is_kept(self) -> None:
        details = format_validation_errors([{"loc": ("body", "tags", 0), "msg": "Invalid"}])
        self.assertEqual(details[0].field, "tags.0")

    def test_strips_source_prefix_and_value_error_prefix(self) -> None:
        errors = [
            {"loc": ("body", "email"), "msg": "value is not a valid email address"},
            {"loc": ("path", "user_id"), "msg": "Input should be greater than 0"},
            {"loc": (), "msg": "Value error, At least one field must be provided for update"},
        ]
        details = format_validation_errors(errors)
        self.assertEqual(
            [(d.field, d.message) for d in details],
            [
                ("email", "value is not a valid email address"),
                ("user_id", "Input should be greater than 0"),
                ("body", "At least one field must be provided for update"),
            ],
        )


if __name__ == "__main__":
    unittest.main()
