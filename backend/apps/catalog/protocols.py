from __future__ import annotations

from typing import Optional, Protocol

from .models import Product


class ProductRepositoryProtocol(Protocol):
    def get(self, **filters) -> Optional[Product]:
        ...
