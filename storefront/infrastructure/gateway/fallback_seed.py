"""Demo data served by the fallback backend.

Catalog order is the order of _PRODUCTS. Timestamps are assigned when a
store is seeded; dateAdded grows with the product number so dummy-12 is
the newest product.
"""

from __future__ import annotations

from typing import Any

from storefront.application.dtos.auth import UserProfile
from storefront.core.constants import DEFAULT_AVATAR
from storefront.domain.enums import UserRole

_SIZES = ["28", "36", "42"]

_USERS: list[dict[str, Any]] = [
    {
        "uid": "dummy-user-1",
        "email": "test@example.com",
        "password": "password123",
        "display_name": "Test User",
        "address": "123 Demo Street, Sample City, SC 12345",
        "mobile": {"data": {"number": "+1-555-0123", "country": "US"}},
        "role": UserRole.USER,
    },
    {
        "uid": "dummy-admin-1",
        "email": "admin@example.com",
        "password": "admin123",
        "display_name": "Admin User",
        "address": "456 Admin Avenue, Manager City, MC 67890",
        "mobile": {"data": {"number": "+1-555-0456", "country": "US"}},
        "role": UserRole.ADMIN,
    },
]

# (name, brand, price, image no., featured, recommended, colors, maxQuantity, keywords, second image no., description)
_PRODUCTS: list[tuple] = [
    (
        "Premium Wireless Headphones", "AudioTech", 5.99, 1, True, False,
        ["#000000", "#ffffff"], 50,
        ["headphones", "wireless", "audio", "noise cancellation"], 2,
        "High-quality wireless headphones with advanced noise cancellation technology. "
        "Perfect for music lovers and professionals who demand the best audio experience.",
    ),
    (
        "Smart Fitness Watch", "FitTech", 1.99, 2, True, True,
        ["#000000", "#0066cc"], 75,
        ["watch", "fitness", "smart", "heart rate", "GPS"], 3,
        "Advanced fitness tracking smartwatch with heart rate monitoring, GPS, and "
        "long-lasting battery. Track your workouts and stay connected throughout the day.",
    ),
    (
        "Portable Bluetooth Speaker", "SoundWave", 3.99, 3, True, False,
        ["#ff0000", "#00ff00", "#0000ff"], 100,
        ["speaker", "bluetooth", "portable", "wireless", "music"], 4,
        "Compact yet powerful Bluetooth speaker with exceptional sound quality and 12-hour "
        "battery life. Perfect for outdoor adventures and indoor entertainment.",
    ),
    (
        "Wireless Charging Pad", "ChargeTech", 4.99, 4, True, True,
        ["#000000", "#ffffff"], 80,
        ["charger", "wireless", "fast", "Qi", "charging pad"], 5,
        "Fast wireless charging pad compatible with all Qi-enabled devices. Sleek design "
        "with LED indicator and overheat protection for safe charging.",
    ),
    (
        "Gaming Mechanical Keyboard", "GameTech", 5.99, 5, False, True,
        ["#000000", "#ff0000"], 60,
        ["keyboard", "gaming", "mechanical", "RGB", "switches"], 1,
        "RGB backlit mechanical keyboard with customizable keys for the ultimate gaming "
        "experience. Cherry MX switches provide tactile feedback and durability.",
    ),
    (
        "Ergonomic Office Chair", "ComfortPlus", 3.99, 7, False, True,
        ["#000000", "#808080"], 25,
        ["chair", "office", "ergonomic", "comfort", "lumbar"], 2,
        "Premium ergonomic office chair with lumbar support, adjustable height, and "
        "breathable mesh back. Designed for all-day comfort and productivity.",
    ),
    (
        "4K Ultra HD Monitor", "ViewTech", 7.99, 6, True, False,
        ["#000000", "#ffffff"], 30,
        ["monitor", "4K", "UHD", "display", "gaming"], 3,
        "Stunning 27-inch 4K UHD monitor with vibrant colors and sharp details. Ideal for "
        "gaming, graphic design, and immersive entertainment.",
    ),
    (
        "Noise-Cancelling Earbuds", "SoundBuds", 2.99, 8, False, True,
        ["#000000", "#ffffff", "#ff69b4"], 90,
        ["earbuds", "noise-cancelling", "wireless", "audio"], 4,
        "Compact noise-cancelling earbuds with superior sound quality and secure fit. "
        "Perfect for on-the-go listening and workouts.",
    ),
    (
        "Smart Home Hub", "HomeTech", 6.99, 9, True, False,
        ["#000000", "#ffffff"], 40,
        ["smart home", "hub", "automation", "IoT"], 5,
        "Central smart home hub that connects and controls all your smart devices. "
        "Compatible with Alexa, Google Assistant, and Apple HomeKit.",
    ),
    (
        "Action Camera 4K", "CamPro", 8.99, 10, False, True,
        ["#000000", "#00ff00"], 55,
        ["camera", "action", "4K", "waterproof", "adventure"], 1,
        "Durable action camera with 4K recording, waterproof design, and wide-angle lens. "
        "Capture your adventures in stunning detail.",
    ),
    (
        "Electric Toothbrush", "SmileTech", 1.49, 11, False, False,
        ["#000000", "#ffffff", "#ff69b4"], 120,
        ["toothbrush", "electric", "oral care", "dental"], 2,
        "Rechargeable electric toothbrush with multiple brushing modes and a built-in "
        "timer. Achieve a superior clean and healthier gums.",
    ),
    (
        "Laptop Backpack", "BagPro", 4.49, 12, True, True,
        ["#000000", "#808080", "#0066cc"], 70,
        ["backpack", "laptop", "bag", "travel", "school"], 3,
        "Stylish and durable laptop backpack with multiple compartments and padded laptop "
        "sleeve. Perfect for work, school, and travel.",
    ),
]


def _image(n: int) -> str:
    return f"/static/salt-image-{n}.png"


def seed_users(now_ms: int) -> list[dict[str, Any]]:
    """Return fresh user rows (credentials plus profile) for a new store."""
    rows = []
    for u in _USERS:
        rows.append({
            "uid": u["uid"],
            "email": u["email"],
            "password": u["password"],
            "display_name": u["display_name"],
            "photo_url": DEFAULT_AVATAR,
            "creation_time": now_ms,
            "provider_data": [{"providerId": "password"}],
            "profile": UserProfile(
                fullname=u["display_name"],
                email=u["email"],
                address=u["address"],
                mobile=dict(u["mobile"]),
                role=u["role"],
                date_joined=now_ms,
            ).to_dict(),
        })
    return rows


def seed_products(now_ms: int) -> list[dict[str, Any]]:
    """Return fresh product documents in catalog order."""
    products = []
    count = len(_PRODUCTS)
    for i, row in enumerate(_PRODUCTS, start=1):
        (name, brand, price, img, featured, recommended,
         colors, max_qty, keywords, img2, description) = row
        products.append({
            "id": f"dummy-{i}",
            "name": name,
            "name_lower": name.lower(),
            "brand": brand,
            "price": price,
            "description": description,
            "image": _image(img),
            "isFeatured": featured,
            "isRecommended": recommended,
            "availableColors": list(colors),
            "sizes": list(_SIZES),
            "quantity": 1,
            "maxQuantity": max_qty,
            "keywords": list(keywords),
            "imageCollection": [
                {"id": "1", "url": _image(img)},
                {"id": "2", "url": _image(img2)},
            ],
            "dateAdded": now_ms - (count - i) * 60_000,
        })
    return products
