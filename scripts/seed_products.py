"""
Seed the products table with synthetic catalogue data.

Implements deterministic pseudo-random product generation and loading through
the product model, so every seeded record passes the same validations and
callbacks as records created by the application.
"""

from __future__ import annotations

import asyncio
import random
import sys
import time
from typing import Any, Dict, List

import typer

from dynamodel.adapters import get_adapter
from dynamodel.domain.product import define_product_model
from dynamodel.models import Model

app = typer.Typer(help="Generate synthetic products and load them through the product model.")

CATEGORIES = ["books", "games", "garden", "kitchen", "tools"]
ADJECTIVES = ["Compact", "Deluxe", "Classic", "Rugged", "Smart", "Eco"]
NOUNS = ["Lamp", "Kettle", "Backpack", "Drill", "Planter", "Puzzle", "Notebook"]


def _generate_products(count: int, seed: int) -> List[Dict[str, Any]]:
    rng = random.Random(seed)
    products: List[Dict[str, Any]] = []
    for index in range(count):
        name = f"{rng.choice(ADJECTIVES)} {rng.choice(NOUNS)} {index + 1:04d}"
        products.append(
            {
                "name": name,
                "description": f"{name} from the synthetic catalogue.",
                "price": round(rng.uniform(1, 500), 2),
                "category": rng.choice(CATEGORIES),
                "stock": rng.randint(0, 250),
            }
        )
    return products


async def _load(model: Model, products: List[Dict[str, Any]]) -> int:
    for product in products:
        await model.create(product)
    return len(products)


@app.command()
def main(
    count: int = typer.Option(
        50,
        "--count",
        "-n",
        help="Number of products to generate.",
    ),
    seed: int = typer.Option(
        42,
        "--seed",
        help="Deterministic RNG seed.",
    ),
    dry_run: bool = typer.Option(
        False,
        "--dry-run",
        help="Only print the generated products; skip loading.",
    ),
) -> None:
    """
    Generate synthetic products and optionally load them into the configured backend.
    """
    products = _generate_products(count, seed)
    typer.echo(f"Generated {len(products):,} products (seed={seed})")

    if dry_run:
        for product in products:
            typer.echo(f"  {product['category']:<8} {product['name']:<28} {product['price']:>8.2f}")
        return

    start = time.perf_counter()
    loaded = asyncio.run(_load(define_product_model(get_adapter()), products))
    duration = time.perf_counter() - start
    typer.echo(f"Loaded {loaded:,} products in {duration:.2f}s.")


if __name__ == "__main__":
    try:
        app()
    except KeyboardInterrupt:
        typer.echo("Cancelled by user.", err=True)
        sys.exit(130)
