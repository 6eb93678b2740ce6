"""Fake catalog adapter: in-process product table for tests and local runs."""

from procurement.catalog.port import CatalogPort, ProductSnapshot


class FakeCatalog(CatalogPort):
    def __init__(self):
        self._products: dict[str, ProductSnapshot] = {}

    def stock(self, product_id, supplier_id, price, stock_quantity) -> ProductSnapshot:
        """Add or replace a product."""
        snapshot = ProductSnapshot(
            product_id=str(product_id),
            supplier_id=str(supplier_id),
            price=float(price),
            stock_quantity=int(stock_quantity),
        )
        self._products[snapshot.product_id] = snapshot
        return snapshot

    def get_product(self, product_id: str) -> ProductSnapshot | None:
        return self._products.get(str(product_id))

    def clear(self) -> None:
        self._products.clear()
