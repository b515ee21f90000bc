#!/usr/bin/env python
import os

from sdk.pyadmin import ProductsClient

def main():
    c = ProductsClient(base_url=os.environ.get("ADMIN_PANEL_URL", "http://127.0.0.1:8085"))

    # -----------------------------
    # First page
    # -----------------------------
    print("Listing first page...")
    page = c.list_products()
    print(page)
    if not page.get("success"):
        print("Listing failed:", page.get("error"))
        return

    products = page["products"]
    if not products:
        print("No products found.")
        return

    # -----------------------------
    # Next page via cursor
    # -----------------------------
    page_info = page["pageInfo"]
    if page_info.get("hasNextPage"):
        print("\nLoading next page...")
        print(c.list_products(after=page_info["endCursor"]))

    # -----------------------------
    # Update the first product
    # -----------------------------
    first = products[0]
    print(f"\nUpdating {first['id']}...")
    print(c.update_product(first["id"], title=first["title"] + " (edited)", status="ACTIVE"))

    # Upstream validation is passed through untouched
    print("\nUpdating with a blank title...")
    print(c.update_product(first["id"], title=""))

    # -----------------------------
    # Delete the last product on the page
    # -----------------------------
    last = products[-1]
    print(f"\nDeleting {last['id']}...")
    print(c.delete_product(last["id"]))

    print("\nDeleting it again...")
    print(c.delete_product(last["id"]))

if __name__ == "__main__":
    main()
