"""Validation Capability — per-instance detection of validate_self().

Tests cover:
    - Plain pydantic models are not Validatable (BaseModel.validate is not the hook)
    - A failure from the hook is returned, not raised
    - Passing hooks return None
    - Custom exception classes count as validation failures
"""

from pydantic import BaseModel

from crudserve.core.validation import Validatable, find_validation_error


class Plain(BaseModel):
    name: str


class Checked(BaseModel):
    name: str

    def validate_self(self) -> None:
        if not self.name:
            raise ValueError("name is required")


class SerialRejected(Exception):
    pass


class Serialized(BaseModel):
    serial: str

    def validate_self(self) -> None:
        if not self.serial.startswith("SN-"):
            raise SerialRejected(f"serial {self.serial!r} lacks the SN- prefix")


def test_plain_model_is_not_validatable():
    assert not isinstance(Plain(name="a"), Validatable)
    assert find_validation_error(Plain(name="")) is None


def test_hook_detected_per_instance():
    assert isinstance(Checked(name="a"), Validatable)


def test_failing_hook_returns_error():
    error = find_validation_error(Checked(name=""))
    assert isinstance(error, ValueError)
    assert str(error) == "name is required"


def test_passing_hook_returns_none():
    assert find_validation_error(Checked(name="ok")) is None


def test_custom_exception_is_validation_failure():
    error = find_validation_error(Serialized(serial="42"))
    assert isinstance(error, SerialRejected)
    assert str(error) == "serial '42' lacks the SN- prefix"
    assert find_validation_error(Serialized(serial="SN-42")) is None
