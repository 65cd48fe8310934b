"""
Product description evals.

A stand-in for an LLM call that writes marketing copy. Run with:

    eval-engine examples/product_description_eval.py

The handle below is collected because it is a module-level attribute.
"""

from typing import Annotated

from pydantic import StringConstraints

from evalengine import InputSchema, register

ProductName = Annotated[str, StringConstraints(min_length=1, max_length=80)]

CATALOG = {
    "Wireless Earbuds": "The Wireless Earbuds offer great sound quality and all-day battery life.",
    "iPhone 15 Pro": "The iPhone 15 Pro brings pro camera technology to a titanium design.",
}


def describe_product(product: str) -> str:
    """Pretend model call: look the product up, fall back to a generic blurb."""
    return CATALOG.get(product, f"Meet the {product}, built for everyday use.")


describe = register(describe_product, InputSchema(input=ProductName))

describe.for_all(lambda a: a.ensure_doesnt_contain("VR").ensure_length_over(20))

describe.for_input(
    "Wireless Earbuds",
    lambda a: a.ensure_contains("sound").ensure_matches_pattern(r"battery"),
)
describe.for_input("iPhone 15 Pro", lambda a: a.ensure_contains("camera"))

describe.for_all_containing("Pro", lambda a: a.ensure_contains("technology"))
