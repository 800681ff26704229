"""Test helpers: a controllable clock and sample storefront payloads."""

from __future__ import annotations

from storefront.core.model import (
    CategoryList,
    MiniProduct,
    ProductPage,
    ReviewPage,
    ReviewStats,
    StoreCategory,
    StoreProfile,
    StoreReview,
)

HOUR_MS = 60 * 60 * 1000


class FakeClock:
    """Epoch-millisecond clock that only moves when told to."""

    def __init__(self, start: int = 1_700_000_000_000) -> None:
        self.now = start

    def __call__(self) -> int:
        return self.now

    def advance(self, ms: int) -> None:
        self.now += ms


def make_profile(
    store_id: str = "store-1",
    subdomain: str | None = "acme",
    username: str = "acme-store",
    name: str = "Acme",
) -> StoreProfile:
    return StoreProfile(
        id=store_id,
        store_name=name,
        store_username=username,
        subdomain=subdomain,
        store_category="electronics",
        store_description="Gadgets and more",
        store_rating=4.5,
        products_count=12,
        followers_count=300,
        phone_number="+911234567890",
        created_at=1_690_000_000_000,
    )


def make_product_page(store_id: str = "store-1", page: int = 1, count: int = 2) -> ProductPage:
    products = [
        MiniProduct(
            id=f"{store_id}-p{page}-{i}",
            business_id=store_id,
            name=f"Product {page}.{i}",
            main_image_url=f"https://cdn.example.com/{store_id}/{page}/{i}.jpg",
            selling_price=99.0 + i,
            main_category="electronics",
        )
        for i in range(count)
    ]
    return ProductPage(
        store_id=store_id,
        page=page,
        products=products,
        total_pages=3,
        total_products=3 * count,
        has_next_page=page < 3,
    )


def make_category_list(store_id: str = "store-1") -> CategoryList:
    return CategoryList(
        store_id=store_id,
        categories=[
            StoreCategory(id="c1", name="Phones", product_count=4),
            StoreCategory(id="c2", name="Laptops", product_count=2),
        ],
        total_items=2,
    )


def make_review_page(store_id: str = "store-1", page: int = 1) -> ReviewPage:
    review = StoreReview(
        id=f"{store_id}-r{page}",
        store_id=store_id,
        customer_id="cust-1",
        customer_name="Asha",
        rating=5,
        comment="Fast delivery",
        created_at=1_695_000_000_000,
        updated_at=1_695_000_000_000,
    )
    return ReviewPage(
        store_id=store_id,
        page=page,
        reviews=[review],
        stats=ReviewStats(average_rating=5.0, total_reviews=1),
        total_pages=2,
        total_reviews=2,
        has_next_page=page < 2,
    )
