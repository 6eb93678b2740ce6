"""Faker-based data generators for Locust load test scenarios.

Each generator produces payloads that pass the domain's validation rules
and match the field names expected by the API's Pydantic request schemas.
"""

import random
import uuid

from faker import Faker

fake = Faker()


def party_id(kind: str) -> str:
    """Generate unique party IDs like 'store-LT-a1b2c3d4'."""
    return f"{kind}-LT-{uuid.uuid4().hex[:8]}"


def product_data(supplier_id: str) -> dict:
    """A product priced so a handful of units clears the minimum order."""
    return {
        "product_id": f"prod-LT-{uuid.uuid4().hex[:8]}",
        "supplier_id": supplier_id,
        "price": round(random.uniform(1000.0, 3000.0), 2),
        "stock_quantity": random.randint(50, 500),
    }


def draft_data(store_id: str, supplier_id: str) -> dict:
    return {"store_id": store_id, "supplier_id": supplier_id}


def draft_item_data(product_id: str) -> dict:
    return {"product_id": product_id, "quantity": random.randint(2, 6)}


def submission_data() -> dict:
    delivery_option = random.choice(["pickup", "deliver"])
    payment_method = random.choice(["cash_on_delivery", "gcash"])
    return {
        "payment_method": payment_method,
        "delivery_option": delivery_option,
        "shipping_address": fake.address().replace("\n", ", ") if delivery_option == "deliver" else None,
        "notes": fake.sentence(nb_words=8) if random.random() < 0.3 else None,
        "payment_proof_ref": f"uploads/gcash-{uuid.uuid4().hex[:8]}.png" if payment_method == "gcash" else None,
    }


def message_data() -> dict:
    return {"content": fake.sentence(nb_words=12)}


def rating_data() -> dict:
    return {
        "score": random.choices([1, 2, 3, 4, 5], weights=[1, 1, 2, 4, 6])[0],
        "comment": fake.sentence(nb_words=10) if random.random() < 0.5 else None,
    }
