"""Catalog used the first time the store starts with no saved products."""

INITIAL_PRODUCTS = [
    {
        "id": "1",
        "name": "Wireless Earbuds Pro",
        "price": 59.99,
        "weight": 0.2,
        "description": "Crystal-clear sound with active noise cancellation and a 24h battery case.",
        "images": [
            "https://picsum.photos/id/3/600/600",
            "https://picsum.photos/id/4/600/600",
        ],
        "attributes": [
            {"key": "Color", "value": "Black"},
            {"key": "Battery", "value": "24h"},
        ],
        "reviews": [
            {
                "id": "r1",
                "userId": "sara@example.com",
                "userName": "sara",
                "rating": 5,
                "comment": "Amazing sound for the price!",
                "date": "1/12/2026",
            },
        ],
        "category": "Electronics",
    },
    {
        "id": "2",
        "name": "Leather Weekend Bag",
        "price": 120,
        "weight": 1.4,
        "description": "Full-grain leather duffel sized for carry-on travel.",
        "images": ["https://picsum.photos/id/21/600/600"],
        "attributes": [{"key": "Material", "value": "Leather"}],
        "reviews": [],
        "category": "Fashion",
    },
    {
        "id": "3",
        "name": "Smart Watch S2",
        "price": 89.5,
        "weight": 0.1,
        "description": "Track workouts, sleep and notifications from your wrist.",
        "images": ["https://picsum.photos/id/26/600/600"],
        "attributes": [
            {"key": "Display", "value": "AMOLED"},
            {"key": "Water resistance", "value": "5 ATM"},
        ],
        "reviews": [],
        "category": "Electronics",
    },
]
