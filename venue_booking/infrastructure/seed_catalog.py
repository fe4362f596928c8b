# venue_booking/infrastructure/seed_catalog.py
"""
Built-in venues and service packages shipped with the system.
Seed records are immutable; owner edits create shadow copies
in the userVenues / servicePackages partitions instead.
"""

from venue_booking.domain.models import ServicePackage, Venue

SYSTEM_OWNER_ID = "owner_system"

_VENUE_DEFS = [
    {
        "id": "v1",
        "name": "The Grand Manila Ballroom",
        "category": "ballroom",
        "location": {
            "city": "Makati",
            "province": "Metro Manila",
            "address": "6750 Ayala Avenue",
            "latitude": 14.5547,
            "longitude": 121.0244,
        },
        "rating": 4.8,
        "totalReviews": 126,
        "capacity": {"min": 100, "max": 500},
        "priceRange": {"min": 20000, "max": 150000},
        "images": [
            "https://picsum.photos/seed/v1a/800/600",
            "https://picsum.photos/seed/v1b/800/600",
        ],
        "coverImage": "https://picsum.photos/seed/v1a/800/600",
        "amenities": ["Air Conditioning", "Parking", "Sound System", "Stage"],
        "description": "Crystal chandeliers and a sprung dance floor in the heart of Makati.",
        "isFeatured": True,
        "ownerId": SYSTEM_OWNER_ID,
        "houseRules": "No confetti. Events must end by midnight.",
        "operatingHours": "8:00 AM - 12:00 AM",
    },
    {
        "id": "v2",
        "name": "Tagaytay Ridge Garden",
        "category": "garden",
        "location": {
            "city": "Tagaytay",
            "province": "Cavite",
            "address": "Aguinaldo Highway, Silang Crossing",
        },
        "rating": 4.6,
        "totalReviews": 88,
        "capacity": {"min": 50, "max": 250},
        "priceRange": {"min": 35000, "max": 90000},
        "images": ["https://picsum.photos/seed/v2a/800/600"],
        "coverImage": "https://picsum.photos/seed/v2a/800/600",
        "amenities": ["Parking", "Garden", "Bridal Suite"],
        "description": "Open-air lawn overlooking Taal Lake.",
        "isFeatured": True,
        "ownerId": SYSTEM_OWNER_ID,
        "operatingHours": "7:00 AM - 10:00 PM",
    },
    {
        "id": "v3",
        "name": "Cebu Business Conference Center",
        "category": "conference",
        "location": {
            "city": "Cebu City",
            "province": "Cebu",
            "address": "Cebu IT Park, Lahug",
        },
        "rating": 4.3,
        "totalReviews": 41,
        "capacity": {"min": 20, "max": 300},
        "priceRange": {"min": 15000, "max": 60000},
        "images": ["https://picsum.photos/seed/v3a/800/600"],
        "coverImage": "https://picsum.photos/seed/v3a/800/600",
        "amenities": ["Air Conditioning", "Projector", "WiFi", "Parking"],
        "description": "Modular halls with full AV support.",
        "isFeatured": False,
        "ownerId": SYSTEM_OWNER_ID,
        "operatingHours": "6:00 AM - 10:00 PM",
    },
    {
        "id": "v4",
        "name": "Casa Davao Restaurant",
        "category": "restaurant",
        "location": {
            "city": "Davao City",
            "province": "Davao del Sur",
            "address": "J.P. Laurel Avenue, Bajada",
        },
        "rating": 4.5,
        "totalReviews": 63,
        "capacity": {"min": 10, "max": 80},
        "priceRange": {"min": 8000, "max": 25000},
        "images": ["https://picsum.photos/seed/v4a/800/600"],
        "coverImage": "https://picsum.photos/seed/v4a/800/600",
        "amenities": ["Air Conditioning", "WiFi"],
        "description": "Private dining room for intimate celebrations.",
        "isFeatured": False,
        "ownerId": SYSTEM_OWNER_ID,
    },
]

_PACKAGE_DEFS = [
    {
        "id": "pkg1",
        "venueId": "v1",
        "name": "Filipino Buffet",
        "type": "catering",
        "description": "Eight-course buffet with lechon carving station.",
        "pricingUnit": "per_person",
        "pricePerPerson": 500,
        "inclusions": ["Lechon", "Pancit", "Dessert bar"],
    },
    {
        "id": "pkg2",
        "venueId": "v1",
        "name": "Ballroom Styling",
        "type": "decoration",
        "description": "Centerpieces, backdrop and lighting.",
        "pricingUnit": "flat_rate",
        "price": 15000,
        "inclusions": ["Centerpieces", "Stage backdrop"],
    },
    {
        "id": "pkg3",
        "venueId": "v2",
        "name": "Sunset Photo Coverage",
        "type": "photography",
        "description": "Two photographers, edited gallery within two weeks.",
        "pricingUnit": "per_hour",
        "price": 4000,
    },
    {
        "id": "pkg4",
        "venueId": "v3",
        "name": "Coffee Break Set",
        "type": "catering",
        "pricingUnit": "per_person",
        "pricePerPerson": 180,
    },
    {
        "id": "pkg5",
        "venueId": "v4",
        "name": "Acoustic Duo",
        "type": "entertainment",
        "pricingUnit": "flat_rate",
        "price": 6000,
    },
]

SEED_VENUES: tuple[Venue, ...] = tuple(
    Venue.model_validate(item) for item in _VENUE_DEFS
)
SEED_PACKAGES: tuple[ServicePackage, ...] = tuple(
    ServicePackage.model_validate(item) for item in _PACKAGE_DEFS
)
