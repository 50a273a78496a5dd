from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Mapping, Optional

from utils.errors import ValidationFailure


def _clean(value: Any) -> str:
    # Treat None and whitespace-only values as missing
    return str(value).strip() if value is not None else ''


class ProfileCheck(ABC):
    # Base class for one check on an identity provider profile

    def __init__(self, next_check: Optional["ProfileCheck"] = None) -> None:
        # Points to the next check in the chain
        self._next = next_check

    def set_next(self, next_check: "ProfileCheck") -> "ProfileCheck":
        self._next = next_check
        return next_check

    def handle(self, profile: Mapping[str, Any]) -> None:
        # Raise on the first failing check, otherwise pass along the chain
        problem = self._check(profile)
        if problem:
            raise ValidationFailure(problem)
        if self._next:
            self._next.handle(profile)

    @abstractmethod
    def _check(self, profile: Mapping[str, Any]) -> Optional[str]:
        # Return a message describing the problem, or None when it's fine
        ...


class SubjectCheck(ProfileCheck):
    def _check(self, profile: Mapping[str, Any]) -> Optional[str]:
        if not _clean(profile.get("subject")):
            return "Invalid profile data: missing subject"
        return None


class EmailCheck(ProfileCheck):
    def _check(self, profile: Mapping[str, Any]) -> Optional[str]:
        email = _clean(profile.get("email"))
        if not email or "@" not in email:
            return "Invalid profile data: missing email"
        return None


def build_profile_chain() -> ProfileCheck:
    # subject → email
    first = SubjectCheck()
    first.set_next(EmailCheck())
    return first


def validate_profile(profile: Optional[Mapping[str, Any]]) -> None:
    if not profile:
        raise ValidationFailure("Invalid profile data: empty profile")
    build_profile_chain().handle(profile)
