import pytest

from pin_intent.common.errors import ErrorCode, ValidationError
from pin_intent.common.types import IntentManifest, Tag
from pin_intent.common.validators import (
    ManifestValidator,
    StaticPolicyProvider,
    TagPolicy,
    TagValidator,
    is_valid_tag_name,
)


@pytest.fixture
def manifest_validator():
    return ManifestValidator()


@pytest.fixture
def tag_validator():
    return TagValidator(StaticPolicyProvider())


def test_missing_manifest_is_valid(manifest_validator):
    assert manifest_validator.validate_manifest(None) is None


def test_valid_manifest_passes(manifest_validator):
    manifest = IntentManifest(task="fetch data", requirements={"region": "eu"}, context="ctx")
    assert manifest_validator.validate_manifest(manifest) is None


def test_blank_task_rejected(manifest_validator):
    with pytest.raises(ValidationError) as info:
        manifest_validator.validate_manifest(IntentManifest(task="   "))
    assert info.value.field == "task"
    assert info.value.code == ErrorCode.VALIDATION_ERROR
    assert info.value.message == "Task description cannot be empty when manifest is provided"


def test_task_length_limit(manifest_validator):
    manifest_validator.validate_manifest(IntentManifest(task="a" * 1000))
    with pytest.raises(ValidationError) as info:
        manifest_validator.validate_manifest(IntentManifest(task="a" * 1001))
    assert info.value.message == "Task description too long (max 1000 characters)"


def test_requirement_key_checks(manifest_validator):
    with pytest.raises(ValidationError) as info:
        manifest_validator.validate_manifest(IntentManifest(task="t", requirements={" ": "v"}))
    assert info.value.message == "Requirement key cannot be empty"
    with pytest.raises(ValidationError) as info:
        manifest_validator.validate_manifest(
            IntentManifest(task="t", requirements={"k" * 101: "v"})
        )
    assert info.value.message == "Requirement key too long (max 100 characters)"


def test_requirement_value_length(manifest_validator):
    with pytest.raises(ValidationError) as info:
        manifest_validator.validate_manifest(
            IntentManifest(task="t", requirements={"k": "v" * 501})
        )
    assert info.value.field == "requirements"
    assert info.value.message == "Requirement value too long (max 500 characters)"


def test_context_length(manifest_validator):
    manifest_validator.validate_manifest(IntentManifest(task="t", context="c" * 2000))
    with pytest.raises(ValidationError) as info:
        manifest_validator.validate_manifest(IntentManifest(task="t", context="c" * 2001))
    assert info.value.field == "context"


@pytest.mark.parametrize("name", ["ab", "tag_name-1", "A" * 64])
def test_valid_tag_names(name):
    assert is_valid_tag_name(name) is True


@pytest.mark.parametrize("name", ["a", "A" * 65, "has space", "bad.tag", "ünï"])
def test_invalid_tag_names(name):
    assert is_valid_tag_name(name) is False


def test_validate_tag_accepts_good_tag(tag_validator):
    assert tag_validator.validate_tag(Tag("location", "100", True)) is None


def test_validate_tag_none(tag_validator):
    with pytest.raises(ValidationError) as info:
        tag_validator.validate_tag(None)
    assert info.value.message == "Tag cannot be nil"


def test_validate_tag_bad_name(tag_validator):
    with pytest.raises(ValidationError) as info:
        tag_validator.validate_tag(Tag("", "1"))
    assert info.value.message == "Tag name cannot be empty"
    with pytest.raises(ValidationError) as info:
        tag_validator.validate_tag(Tag("x!", "1"))
    assert info.value.message == "Invalid tag name format"


@pytest.mark.parametrize(
    "fee, message",
    [
        ("", "Tag fee cannot be empty"),
        ("abc", "Tag fee must be a valid integer"),
        (" 5", "Tag fee must be a valid integer"),
        ("1_000", "Tag fee must be a valid integer"),
        ("99999999999999999999", "Tag fee must be a valid integer"),
        ("-5", "Tag fee cannot be negative"),
    ],
)
def test_validate_tag_bad_fee(tag_validator, fee, message):
    with pytest.raises(ValidationError) as info:
        tag_validator.validate_tag(Tag("name", fee))
    assert info.value.field == "tag_fee"
    assert info.value.message == message


def test_validate_tags_duplicate(tag_validator):
    tags = [Tag("alpha", "1"), Tag("alpha", "2")]
    with pytest.raises(ValidationError) as info:
        tag_validator.validate_tags(tags)
    assert info.value.field == "relevant_tags"
    assert info.value.message == "Duplicate tag name found"


def test_validate_tags_empty_and_unique(tag_validator):
    assert tag_validator.validate_tags([]) is None
    assert tag_validator.validate_tags([Tag("alpha", "1"), Tag("beta", "2")]) is None


def test_total_fee_empty(tag_validator):
    assert tag_validator.calculate_total_tag_fee([]) == "0"


def test_total_fee_single_tag_equals_fee(tag_validator):
    assert tag_validator.calculate_total_tag_fee([Tag("alpha", "10000")]) == "10000"


def test_total_fee_sum(tag_validator):
    tags = [Tag("alpha", "3"), Tag("beta", "4")]
    assert tag_validator.calculate_total_tag_fee(tags) == "7"


def test_total_fee_invalid(tag_validator):
    with pytest.raises(ValueError, match="invalid tag fee format for tag beta"):
        tag_validator.calculate_total_tag_fee([Tag("alpha", "1"), Tag("beta", "x")])


def test_static_provider_policy():
    provider = StaticPolicyProvider()
    policy = provider.get_tag_policy("0xabc", "location")
    assert policy == TagPolicy(tag_name="location", tag_fee="10000", is_tradable=True)


def test_static_provider_user_policies_empty():
    assert StaticPolicyProvider().get_user_tag_policies("0xabc") == {}