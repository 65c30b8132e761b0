import pytest

from src.modules.entitlements.enums.premium_feature import PremiumFeature
from src.modules.entitlements.enums.usage_type import UsageType
from src.modules.entitlements.exceptions import InvalidEntitlementRequestError
from src.modules.entitlements.services.feature_catalog import (
    FEATURE_METADATA,
    FeatureCatalogService,
    FeatureMetadata,
    parse_feature,
    parse_usage_type,
)


def test_every_feature_has_metadata():
    assert set(FEATURE_METADATA) == set(PremiumFeature)
    for metadata in FEATURE_METADATA.values():
        assert metadata.name
        assert metadata.benefits


def test_parse_feature_accepts_enum_and_string():
    assert parse_feature("social_sharing") is PremiumFeature.SOCIAL_SHARING
    assert parse_feature(PremiumFeature.SOCIAL_SHARING) is PremiumFeature.SOCIAL_SHARING


def test_parse_feature_rejects_unknown():
    with pytest.raises(InvalidEntitlementRequestError):
        parse_feature("teleportation")


def test_parse_usage_type():
    assert parse_usage_type("photo_uploads") is UsageType.PHOTO_UPLOADS
    with pytest.raises(ValueError):
        parse_usage_type("video_uploads")


def test_metadata_lookup():
    service = FeatureCatalogService()

    metadata = service.get_metadata("personal_stylist")

    assert metadata.name == "Personal Stylist"
    assert metadata.required_tier == "enterprise"


def test_missing_metadata_falls_back_to_readable_name():
    service = FeatureCatalogService(metadata={})

    metadata = service.get_metadata(PremiumFeature.RENTAL_MARKETPLACE)

    assert metadata.name == "Rental Marketplace"
    assert metadata.benefits == []


def test_benefits_are_copied():
    service = FeatureCatalogService(
        metadata={PremiumFeature.SOCIAL_SHARING: FeatureMetadata(name="Sharing", benefits=["a"])}
    )

    benefits = service.get_feature_benefits(PremiumFeature.SOCIAL_SHARING)
    benefits.append("b")

    assert service.get_feature_benefits(PremiumFeature.SOCIAL_SHARING) == ["a"]
