from __future__ import annotations


class OTPError(ValueError):
    """Base class for errors raised while deriving codes or URLs."""


class InvalidCharacter(OTPError):
    def __init__(self, character: str):
        super().__init__(f"Invalid character: {character!r}")
        self.character = character


class InvalidParameter(OTPError):
    def __init__(self, name: str, message: str):
        super().__init__(f"{name}: {message}")
        self.name = name


class MissingLabel(OTPError):
    def __init__(self) -> None:
        super().__init__("label is required")
