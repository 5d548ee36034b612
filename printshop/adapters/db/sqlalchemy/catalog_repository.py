from uuid import UUID

from sqlalchemy.orm import Session

from printshop.adapters.db.sqlalchemy import models
from printshop.adapters.db.sqlalchemy.filters import paged, scoped
from printshop.application.ports import CategoryRepository, ProductRepository
from printshop.domain.access import RowFilter
from printshop.domain.catalog import Product, ProductCategory


def _to_category(category_model: models.ProductCategory) -> ProductCategory:
    return ProductCategory(
        id=UUID(category_model.id),
        name=category_model.name,
        created_at=models.aware(category_model.created_at),
        updated_at=models.aware(category_model.updated_at),
    )


class SQLAlchemyCategoryRepository(CategoryRepository):
    def __init__(self, session: Session):
        self.session = session

    def add(self, category: ProductCategory) -> None:
        self.session.add(models.ProductCategory(
            id=str(category.id),
            name=category.name,
            created_at=category.created_at,
            updated_at=category.updated_at,
        ))

    def get(self, category_id: UUID) -> ProductCategory | None:
        category_model = self.session.get(models.ProductCategory, str(category_id))
        if category_model:
            return _to_category(category_model)
        return None

    def list_page(self, skip: int, take: int) -> list[ProductCategory]:
        query = paged(
            self.session.query(models.ProductCategory),
            (models.ProductCategory.created_at, models.ProductCategory.id),
            skip,
            take,
        )
        return [_to_category(category_model) for category_model in query.all()]

    def count(self) -> int:
        return self.session.query(models.ProductCategory).count()

    def update(self, category: ProductCategory) -> None:
        category_model = self.session.get(models.ProductCategory, str(category.id))
        category_model.name = category.name
        category_model.updated_at = category.updated_at

    def delete(self, category_id: UUID) -> None:
        self.session.query(models.ProductCategory).filter_by(id=str(category_id)).delete()


def _to_product(product_model: models.Product) -> Product:
    return Product(
        id=UUID(product_model.id),
        user_id=UUID(product_model.user_id),
        category_id=UUID(product_model.category_id) if product_model.category_id else None,
        size=product_model.size,
        material=product_model.material,
        shape=product_model.shape,
        printing_side=product_model.printing_side,
        parcel_color=list(product_model.parcel_color),
        ink_color=list(product_model.ink_color),
        unit_price=product_model.unit_price,
        amount=product_model.amount,
        sub_total=product_model.sub_total,
        is_purchased=product_model.is_purchased,
        note=product_model.note,
        created_at=models.aware(product_model.created_at),
        updated_at=models.aware(product_model.updated_at),
    )


_PRODUCT_FIELDS = (
    "size", "material", "shape", "printing_side", "parcel_color", "ink_color", "unit_price",
    "amount", "sub_total", "is_purchased", "note", "created_at", "updated_at",
)


class SQLAlchemyProductRepository(ProductRepository):
    def __init__(self, session: Session):
        self.session = session

    @staticmethod
    def _write(product_model: models.Product, product: Product) -> None:
        product_model.category_id = str(product.category_id) if product.category_id else None
        for field in _PRODUCT_FIELDS:
            setattr(product_model, field, getattr(product, field))

    def _query(self, where: RowFilter, category_id: UUID | None):
        query = scoped(self.session.query(models.Product), models.Product.user_id, where)
        if category_id is not None:
            query = query.filter(models.Product.category_id == str(category_id))
        return query

    def add(self, product: Product) -> None:
        product_model = models.Product(id=str(product.id), user_id=str(product.user_id))
        self._write(product_model, product)
        self.session.add(product_model)
        self.session.flush()

    def get(self, product_id: UUID) -> Product | None:
        product_model = self.session.get(models.Product, str(product_id))
        if product_model:
            return _to_product(product_model)
        return None

    def list_page(
        self, where: RowFilter, skip: int, take: int, category_id: UUID | None = None
    ) -> list[Product]:
        query = paged(
            self._query(where, category_id),
            (models.Product.created_at, models.Product.id),
            skip,
            take,
        )
        return [_to_product(product_model) for product_model in query.all()]

    def count(self, where: RowFilter, category_id: UUID | None = None) -> int:
        return self._query(where, category_id).count()

    def update(self, product: Product) -> None:
        product_model = self.session.get(models.Product, str(product.id))
        self._write(product_model, product)

    def delete(self, product_id: UUID) -> None:
        self.session.query(models.Product).filter_by(id=str(product_id)).delete()
