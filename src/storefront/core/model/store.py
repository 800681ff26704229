"""Store-facing payloads: profile, product pages, categories and reviews."""

from __future__ import annotations

from pydantic import Field

from storefront.core.model import CamelModel


class SocialLinks(CamelModel):
    """Social media links shown on a store profile."""

    instagram: str | None = None
    facebook: str | None = None
    twitter: str | None = None
    youtube: str | None = None
    whatsapp: str | None = None


class StoreProfile(CamelModel):
    """Public profile of a store.

    A profile is reachable under several aliases: its internal ``id``, its
    public ``subdomain`` and its ``store_username``.
    """

    id: str = Field(min_length=1)
    store_name: str
    store_username: str = Field(min_length=1)
    subdomain: str | None = None
    store_logo: str | None = None
    store_category: str
    store_description: str = ""
    store_rating: float = 0.0
    products_count: int = 0
    followers_count: int = 0
    location: str | None = None
    social_links: SocialLinks | None = None
    website_url: str | None = None
    map_link: str | None = None
    phone_number: str
    email: str | None = None
    is_following: bool = False
    created_at: int

    @property
    def aliases(self) -> list[str]:
        """Lookup identifiers in priority order, without duplicates."""
        candidates = [self.id, self.subdomain, self.store_username]
        aliases: list[str] = []
        for candidate in candidates:
            if candidate and candidate not in aliases:
                aliases.append(candidate)
        return aliases


class MiniProduct(CamelModel):
    """Product summary used in store listings."""

    id: str
    business_id: str
    name: str
    main_image_url: str
    selling_price: float
    mrp: float | None = None
    average_rating: float | None = None
    main_category: str


class ProductPage(CamelModel):
    """One page of a store's product listing."""

    store_id: str
    page: int = Field(ge=1)
    products: list[MiniProduct]
    total_pages: int = Field(ge=0)
    total_products: int = Field(ge=0)
    has_next_page: bool


class StoreCategory(CamelModel):
    id: str
    name: str
    description: str | None = None
    image_url: str | None = None
    product_count: int = 0


class CategoryList(CamelModel):
    """Consolidated category listing of a store."""

    store_id: str
    categories: list[StoreCategory]
    total_items: int = Field(ge=0)


class StoreResponse(CamelModel):
    """Owner reply attached to a review."""

    response: str
    responder_name: str
    responded_at: int


class StoreReview(CamelModel):
    id: str
    store_id: str
    customer_id: str
    customer_name: str
    customer_avatar: str | None = None
    rating: int = Field(ge=1, le=5)
    comment: str
    review_title: str | None = None
    is_verified_purchase: bool = False
    order_id: str | None = None
    images: list[str] = Field(default_factory=list)
    helpful_count: int = 0
    is_marked_helpful_by_current_user: bool = False
    store_response: StoreResponse | None = None
    created_at: int
    updated_at: int


class RatingDistribution(CamelModel):
    """Number of reviews per star rating."""

    one: int = Field(default=0, alias="1")
    two: int = Field(default=0, alias="2")
    three: int = Field(default=0, alias="3")
    four: int = Field(default=0, alias="4")
    five: int = Field(default=0, alias="5")


class ReviewStats(CamelModel):
    average_rating: float
    total_reviews: int = Field(ge=0)
    rating_distribution: RatingDistribution = Field(default_factory=RatingDistribution)


class ReviewPage(CamelModel):
    """One page of a store's reviews with the aggregate stats of that fetch."""

    store_id: str
    page: int = Field(ge=1)
    reviews: list[StoreReview]
    stats: ReviewStats
    total_pages: int = Field(ge=0)
    total_reviews: int = Field(ge=0)
    has_next_page: bool
