import logging
from pydantic import BaseModel, ConfigDict
from typing import Dict, Iterable, List, Sequence

from .schemas import OrderRecord, ProductRecord, TopProduct

logger = logging.getLogger(__name__)

TOP_PRODUCTS_LIMIT = 5


class RankingResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    top_products: List[TopProduct]
    unresolved_line_items: int = 0


def rank_top_products(
    orders: Sequence[OrderRecord],
    products: Iterable[ProductRecord],
    limit: int = TOP_PRODUCTS_LIMIT
) -> RankingResult:
    """
    Rank catalog products by the revenue they earned in the given orders.

    Line items whose product is no longer in the catalog are skipped here
    (they still count towards order totals) and reported through
    `unresolved_line_items`.
    """
    catalog = {product.id: product for product in products}
    product_sales: Dict[str, Dict] = {}
    unresolved = 0

    for order in orders:
        for item in order.items:
            product = catalog.get(item.product_id) if item.product_id else None
            if product is None:
                unresolved += 1
                logger.warning(
                    f"Unresolved product reference {item.product_id!r} in order {order.id}, skipped from ranking"
                )
                continue

            # dicts keep insertion order, so the later stable sort breaks ties by first sale
            if product.id not in product_sales:
                product_sales[product.id] = {
                    'title': product.title,
                    'price': product.price,
                    'revenue': 0.0,
                    'units_sold': 0
                }
            product_sales[product.id]['revenue'] += item.quantity * item.unit_price
            product_sales[product.id]['units_sold'] += item.quantity

    ranked = sorted(product_sales.items(), key=lambda entry: entry[1]['revenue'], reverse=True)[:limit]

    return RankingResult(
        top_products=[
            TopProduct(product_id=product_id, **sales)
            for product_id, sales in ranked
        ],
        unresolved_line_items=unresolved
    )
