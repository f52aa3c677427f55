"""Validation of intent manifests and data-access tags."""

from __future__ import annotations

import re
import string
from dataclasses import dataclass
from typing import Iterable, Optional, Protocol

from pin_intent.common.errors import ValidationError
from pin_intent.common.types import IntentManifest, Tag

_MAX_TASK_LENGTH = 1000
_MAX_REQUIREMENT_KEY_LENGTH = 100
_MAX_REQUIREMENT_VALUE_LENGTH = 500
_MAX_CONTEXT_LENGTH = 2000

_MIN_TAG_NAME_LENGTH = 2
_MAX_TAG_NAME_LENGTH = 64
_TAG_NAME_CHARS = frozenset(string.ascii_letters + string.digits + "_-")

_INT64_PATTERN = re.compile(r"[+-]?[0-9]+")
_INT64_MIN = -(2**63)
_INT64_MAX = 2**63 - 1

DEFAULT_TAG_FEE = "10000"


def _byte_length(text: str) -> int:
    return len(text.encode("utf-8"))


def _parse_int64(text: str) -> int:
    """Parse a base-10 signed 64-bit integer with no surrounding whitespace."""
    if not _INT64_PATTERN.fullmatch(text):
        raise ValueError(f"invalid syntax: {text!r}")
    value = int(text)
    if not _INT64_MIN <= value <= _INT64_MAX:
        raise ValueError(f"value out of range: {text!r}")
    return value


class ManifestValidator:
    """Checks the optional manifest attached to an intent."""

    def validate_manifest(self, manifest: Optional[IntentManifest]) -> None:
        """Raise ValidationError if the manifest is malformed; a missing manifest is valid."""
        if manifest is None:
            return

        if not manifest.task.strip():
            raise ValidationError(
                "task",
                manifest.task,
                "Task description cannot be empty when manifest is provided",
            )
        if _byte_length(manifest.task) > _MAX_TASK_LENGTH:
            raise ValidationError(
                "task", manifest.task, "Task description too long (max 1000 characters)"
            )

        for key, value in (manifest.requirements or {}).items():
            if not key.strip():
                raise ValidationError("requirements", key, "Requirement key cannot be empty")
            if _byte_length(key) > _MAX_REQUIREMENT_KEY_LENGTH:
                raise ValidationError(
                    "requirements", key, "Requirement key too long (max 100 characters)"
                )
            if _byte_length(value) > _MAX_REQUIREMENT_VALUE_LENGTH:
                raise ValidationError(
                    "requirements", value, "Requirement value too long (max 500 characters)"
                )

        if manifest.context and _byte_length(manifest.context) > _MAX_CONTEXT_LENGTH:
            raise ValidationError(
                "context", manifest.context, "Context too long (max 2000 characters)"
            )


@dataclass
class TagPolicy:
    """A tag's fee and tradability as held by a data vault."""

    tag_name: str = ""
    tag_fee: str = ""
    is_tradable: bool = False


class PolicyProvider(Protocol):
    """Source of tag policies for a user."""

    def get_tag_policy(self, user_address: str, tag_name: str) -> TagPolicy: ...

    def get_user_tag_policies(self, user_address: str) -> dict[str, TagPolicy]: ...


def is_valid_tag_name(tag_name: str) -> bool:
    """Tell whether a tag name is 2 to 64 letters, digits, underscores or hyphens."""
    if not _MIN_TAG_NAME_LENGTH <= _byte_length(tag_name) <= _MAX_TAG_NAME_LENGTH:
        return False
    return all(char in _TAG_NAME_CHARS for char in tag_name)


class TagValidator:
    """Checks tag names and fees and totals the fees of a tag list."""

    def __init__(self, policy_provider: Optional[PolicyProvider] = None) -> None:
        self.policy_provider = policy_provider

    def validate_tag(self, tag: Optional[Tag]) -> None:
        """Raise ValidationError if the tag's name or fee is invalid."""
        if tag is None:
            raise ValidationError("tag", "", "Tag cannot be nil")
        if not tag.tag_name.strip():
            raise ValidationError("tag_name", tag.tag_name, "Tag name cannot be empty")
        if not is_valid_tag_name(tag.tag_name):
            raise ValidationError("tag_name", tag.tag_name, "Invalid tag name format")
        self._validate_tag_fee(tag.tag_fee)

    def validate_tags(self, tags: Iterable[Tag]) -> None:
        """Validate each tag and reject repeated tag names."""
        seen: set[str] = set()
        for tag in tags:
            self.validate_tag(tag)
            if tag.tag_name in seen:
                raise ValidationError(
                    "relevant_tags", tag.tag_name, "Duplicate tag name found"
                )
            seen.add(tag.tag_name)

    def calculate_total_tag_fee(self, tags: Iterable[Tag]) -> str:
        """Return the sum of the tags' fees as a decimal string.

        Raises ValueError when a fee is not an integer.
        """
        total = 0
        for tag in tags:
            try:
                total += _parse_int64(tag.tag_fee)
            except ValueError as exc:
                raise ValueError(
                    f"invalid tag fee format for tag {tag.tag_name}: {exc}"
                ) from exc
        return str(total)

    @staticmethod
    def _validate_tag_fee(tag_fee: str) -> None:
        if not tag_fee.strip():
            raise ValidationError("tag_fee", tag_fee, "Tag fee cannot be empty")
        try:
            fee = _parse_int64(tag_fee)
        except ValueError:
            raise ValidationError(
                "tag_fee", tag_fee, "Tag fee must be a valid integer"
            ) from None
        if fee < 0:
            raise ValidationError("tag_fee", tag_fee, "Tag fee cannot be negative")


@dataclass
class StaticPolicyProvider:
    """Policy provider that treats every tag as tradable at a fixed fee."""

    default_fee: str = DEFAULT_TAG_FEE

    def get_tag_policy(self, user_address: str, tag_name: str) -> TagPolicy:
        """Return a tradable policy for the tag at the default fee."""
        return TagPolicy(tag_name=tag_name, tag_fee=self.default_fee, is_tradable=True)

    def get_user_tag_policies(self, user_address: str) -> dict[str, TagPolicy]:
        """Return the user's stored policies; none are stored."""
        return {}