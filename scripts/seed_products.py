"""Seed the catalog with a small menu through the products API."""

import argparse

import httpx


MENU = [
    {"name": "X-Burger", "price": 25.90, "category": "SANDWICH", "description": "Beef, cheese, bun"},
    {"name": "X-Bacon", "price": 29.90, "category": "SANDWICH", "description": "Beef, bacon, cheese"},
    {"name": "Fries", "price": 12.90, "category": "SIDE"},
    {"name": "Onion Rings", "price": 14.50, "category": "SIDE"},
    {"name": "Cola", "price": 7.00, "category": "DRINK"},
    {"name": "Orange Juice", "price": 9.50, "category": "DRINK"},
    {"name": "Brownie", "price": 11.00, "category": "DESSERT"},
    {"name": "Milkshake", "price": 16.00, "category": "DESSERT", "active": False},
]


def main() -> None:
    """CLI entrypoint; prints the id assigned to each product."""

    parser = argparse.ArgumentParser(description="Create the demo menu in the products service.")
    parser.add_argument("--products-url", default="http://localhost:8001")
    args = parser.parse_args()

    with httpx.Client(base_url=args.products_url, timeout=10.0) as client:
        for item in MENU:
            resp = client.post("/api/products", json=item)
            resp.raise_for_status()
            product = resp.json()
            print(f"id={product['id']} category={product['category']} name={product['name']}")


if __name__ == "__main__":
    main()
