"""Script to import products from products.json through the admin API."""
import argparse
import json
import httpx
from typing import List, Dict, Any, Optional


def load_products(file_path: str) -> List[Dict[str, Any]]:
    """Load products from JSON file."""
    with open(file_path, 'r') as f:
        return json.load(f)


def create_product(client: httpx.Client, product: Dict[str, Any], admin_id: int) -> bool:
    """Create a single product via API."""
    label = f"{product.get('name')} ({product.get('sku') or 'no sku'})"
    try:
        response = client.post(
            "/admin/products",
            json=product,
            headers={"Content-Type": "application/json", "X-User-Id": str(admin_id)},
        )
    except httpx.HTTPError as e:
        print(f"✗ Error creating {label}: {str(e)}")
        return False

    if response.status_code == 201:
        print(f"✓ Created: {label}")
        return True

    print(f"✗ Failed: {label} - {response.status_code}")
    try:
        print(f"  Error: {response.json()}")
    except ValueError:
        print(f"  Error: {response.text}")
    return False


def import_products(
    products: List[Dict[str, Any]],
    api_url: str,
    admin_id: int,
    client: Optional[httpx.Client] = None
) -> Dict[str, int]:
    """
    Post every product to the admin API.

    Args:
        products: Product payloads in the API's JSON shape
        api_url: Base URL of the running API
        admin_id: Id of an admin user, sent as X-User-Id
        client: Preconfigured client; one is created when omitted

    Returns:
        Dictionary with ``succeeded`` and ``failed`` counts
    """
    own_client = client is None
    if own_client:
        client = httpx.Client(base_url=api_url, timeout=30.0)

    succeeded = failed = 0
    try:
        for product in products:
            if create_product(client, product, admin_id):
                succeeded += 1
            else:
                failed += 1
    finally:
        if own_client:
            client.close()

    return {"succeeded": succeeded, "failed": failed}


def main():
    """Main function to import products."""
    parser = argparse.ArgumentParser(description="Import products into the store")
    parser.add_argument("file", nargs="?", default="products.json", help="JSON file with a list of products")
    parser.add_argument("--api-url", default="http://localhost:8000", help="API base URL")
    parser.add_argument("--admin-id", type=int, required=True, help="Admin user id")
    parser.add_argument("--skip", type=int, default=0, help="Skip the first N products")
    args = parser.parse_args()

    all_products = load_products(args.file)
    products = all_products[args.skip:]

    print(f"Found {len(all_products)} products in file, importing {len(products)}...")
    print("-" * 60)

    result = import_products(products, args.api_url, args.admin_id)

    print("-" * 60)
    print(f"Import complete: {result['succeeded']} succeeded, {result['failed']} failed")


if __name__ == "__main__":
    main()
