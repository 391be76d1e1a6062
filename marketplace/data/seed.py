# marketplace/data/seed.py
from decimal import Decimal

from marketplace.api.auth import create_access_token
from marketplace.data.database import SessionLocal, init_db
from marketplace.data.models import ProductModel, UserModel
from marketplace.domain.enums import Category, Condition, ProductStatus
from marketplace.utils.logging import get_logger
from marketplace.utils.settings import DEFAULT_PRODUCT_IMAGE

logger = get_logger(__name__)

DEMO_EMAIL = "test@example.com"

SAMPLE_PRODUCTS = [
    ("Vintage DSLR Camera",
     "Beautiful vintage DSLR camera in excellent condition. Perfect for photography enthusiasts. "
     "Includes original lens and carrying case.",
     Category.ELECTRONICS, "150", Condition.GOOD, "New York, NY"),
    ("Designer Leather Handbag",
     "Luxury designer handbag, barely used. Genuine leather with gold hardware. Perfect for special occasions.",
     Category.CLOTHING, "300", Condition.LIKE_NEW, "Los Angeles, CA"),
    ("Programming Books Collection",
     "Collection of programming books for web development including React, Node.js, and JavaScript guides.",
     Category.BOOKS, "50", Condition.GOOD, "Chicago, IL"),
    ("Mountain Bike",
     "High-quality mountain bike perfect for outdoor adventures. Recently serviced and in great condition.",
     Category.SPORTS_OUTDOORS, "400", Condition.GOOD, "Denver, CO"),
    ("Garden Tools Set",
     "Complete set of garden tools including shovel, rake, and pruning shears. Perfect for home gardening.",
     Category.HOME_GARDEN, "75", Condition.FAIR, "Portland, OR"),
    ("Board Game Collection",
     "Collection of popular board games including Monopoly, Scrabble, and Chess. Great for family game nights.",
     Category.TOYS_GAMES, "60", Condition.GOOD, "Seattle, WA"),
    ("Car Phone Mount",
     "Universal car phone mount with magnetic attachment. Compatible with all smartphone sizes.",
     Category.AUTOMOTIVE, "25", Condition.LIKE_NEW, "Miami, FL"),
    ("Skincare Set",
     "Premium skincare set including cleanser, moisturizer, and serum. Unopened and sealed.",
     Category.HEALTH_BEAUTY, "80", Condition.NEW, "San Francisco, CA"),
]


def seed() -> UserModel:
    """Demo seller plus sample listings. Listings are only added to an empty catalog."""
    db = SessionLocal()
    try:
        user = db.query(UserModel).filter(UserModel.email == DEMO_EMAIL).first()
        if not user:
            user = UserModel(name="Test User", email=DEMO_EMAIL)
            db.add(user)
            db.flush()

        # not forcing: only seed if empty
        if db.query(ProductModel).first():
            logger.info("Catalog already has products, skipping sample data")
        else:
            for title, description, category, price, condition, location in SAMPLE_PRODUCTS:
                db.add(ProductModel(
                    title=title,
                    description=description,
                    category=category.value,
                    price=Decimal(price),
                    image=DEFAULT_PRODUCT_IMAGE,
                    images=[],
                    condition=condition.value,
                    location=location,
                    seller_id=user.id,
                    status=ProductStatus.AVAILABLE.value,
                ))
            logger.info(f"Seeded {len(SAMPLE_PRODUCTS)} sample products")

        db.commit()
        return user
    finally:
        db.close()


if __name__ == "__main__":
    init_db()
    demo = seed()
    print(f"Demo user {demo.id} ({demo.email})")
    print(f"Bearer token: {create_access_token(demo.id)}")
