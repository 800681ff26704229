"""Storefront domain models cached by the local cache layer.

These mirror the payloads returned by the remote commerce API. All models
use Pydantic v2 with camelCase aliases so cached bytes keep the wire shape.
"""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base model for storefront payloads.

    Unknown fields are ignored so that additive API changes do not turn
    every cached entry into a corrupted one.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
        frozen=True,
    )


# ruff: noqa: E402
from storefront.core.model.store import (
    CategoryList,
    MiniProduct,
    ProductPage,
    RatingDistribution,
    ReviewPage,
    ReviewStats,
    SocialLinks,
    StoreCategory,
    StoreProfile,
    StoreResponse,
    StoreReview,
)

__all__ = [
    "CamelModel",
    "CategoryList",
    "MiniProduct",
    "ProductPage",
    "RatingDistribution",
    "ReviewPage",
    "ReviewStats",
    "SocialLinks",
    "StoreCategory",
    "StoreProfile",
    "StoreResponse",
    "StoreReview",
]
