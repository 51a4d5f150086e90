#!/usr/bin/env python
from __future__ import annotations

import argparse
import csv
import random
from datetime import date, timedelta
from pathlib import Path


HEADER = [
    "Order Date",
    "Marketplace Name",
    "Order Status",
    "Shipping Status",
    "Payment Mode",
    "Selling Price",
    "Item Quantity",
    "Product Name",
    "Shipping State",
    "Category",
]

MARKETPLACES = ["Amazon", "Flipkart", "Meesho", "Website"]
STATUSES = ["Delivered", "Shipped", "Pending", "Cancelled", "Returned", "RTO"]
PAYMENT_MODES = ["COD", "Prepaid"]
PRODUCTS = [
    ("Cotton Kurta", "Apparel"),
    ("Silk Saree", "Apparel"),
    ("Steel Tiffin", "Kitchen"),
    ("Copper Bottle", "Kitchen"),
    ("Bedsheet Set", "Home"),
]
STATES = ["Maharashtra", "Karnataka", "Gujarat", "Delhi", "Tamil Nadu"]


def main() -> None:
    parser = argparse.ArgumentParser(description="Generate a sample marketplace sales CSV")
    parser.add_argument("--output", required=True, help="output file path (.csv)")
    parser.add_argument("--rows", type=int, default=200, help="number of order rows")
    parser.add_argument("--days", type=int, default=30, help="spread orders over this many days")
    parser.add_argument("--seed", type=int, default=7, help="random seed")
    args = parser.parse_args()

    rng = random.Random(args.seed)
    output = Path(args.output)
    output.parent.mkdir(parents=True, exist_ok=True)
    today = date.today()

    with output.open("w", newline="", encoding="utf-8") as fp:
        writer = csv.writer(fp)
        writer.writerow(HEADER)
        for _ in range(args.rows):
            order_date = today - timedelta(days=rng.randrange(max(args.days, 1)))
            status = rng.choice(STATUSES)
            product, category = rng.choice(PRODUCTS)
            writer.writerow(
                [
                    order_date.strftime("%m/%d/%Y"),
                    rng.choice(MARKETPLACES),
                    status,
                    "Delivered" if status == "Delivered" else "",
                    rng.choice(PAYMENT_MODES),
                    f"{rng.randint(199, 4999):,}",
                    rng.randint(1, 4),
                    product,
                    rng.choice(STATES),
                    category,
                ]
            )

    print(f"Wrote {args.rows} rows to {output}")


if __name__ == "__main__":
    main()
