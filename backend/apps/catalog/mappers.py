from typing import Iterable, List, Optional

from .dtos import ProductSnapshotDTO
from .models import Product


class ProductSnapshotMapper:
    @staticmethod
    def to_dto(product: Optional[Product]) -> Optional[ProductSnapshotDTO]:
        if product is None:
            return None
        return ProductSnapshotDTO(
            id=product.id,
            name=product.name,
            price=product.price,
            creator_id=product.creator_id,
            images=list(product.images or []),
        )

    @staticmethod
    def many_to_dto(products: Iterable[Product]) -> List[ProductSnapshotDTO]:
        return [ProductSnapshotMapper.to_dto(p) for p in products]
