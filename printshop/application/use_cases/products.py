import logging
from uuid import UUID

from printshop.application.dto import (
    Page,
    PageRequest,
    ProductInput,
    ProductUpdateInput,
    ProductWithFileOutput,
    Upload,
)
from printshop.application.ports import ObjectStorage, UnitOfWork
from printshop.application.use_cases.files import discard_objects
from printshop.application.use_cases.operations import operation
from printshop.domain.access import (
    Action,
    ResourceKind,
    RowFilter,
    authorize,
    authorize_collection,
    ensure_not_purchased,
    row_filter,
)
from printshop.domain.catalog import Product
from printshop.domain.errors import BadRequestError, ForbiddenError, NotFoundError
from printshop.domain.file import StoredFile
from printshop.domain.user import Actor

logger = logging.getLogger(__name__)


class ProductService:
    def __init__(self, uow: UnitOfWork, storage: ObjectStorage):
        self.uow = uow
        self.storage = storage

    def _ensure_category(self, category_id: UUID | None) -> None:
        if category_id is not None and self.uow.categories.get(category_id) is None:
            raise NotFoundError("Category not found")

    @operation("insert product")
    def create_product(self, actor: Actor, input: ProductInput) -> Product:
        authorize_collection(actor, ResourceKind.PRODUCT, Action.CREATE)
        with self.uow:
            self._ensure_category(input.category_id)
            product = Product.create(user_id=actor.id, **input.model_dump())
            self.uow.products.add(product)
            self.uow.commit()
        return product

    @operation("insert product with file")
    def create_product_with_file(self, actor: Actor, input: ProductInput, upload: Upload) -> ProductWithFileOutput:
        """Create a product and its first artwork file as one unit.

        The object is stored first; the product and file rows are then written
        in a single transaction. If that transaction fails the stored object is
        deleted again, so neither half survives on its own.
        """
        authorize_collection(actor, ResourceKind.PRODUCT, Action.CREATE)
        if not upload.data:
            raise BadRequestError("No file uploaded")
        with self.uow:
            self._ensure_category(input.category_id)

        stored = self.storage.put(upload.data, upload.content_type, upload.filename)
        product = Product.create(user_id=actor.id, **input.model_dump())
        file = StoredFile(
            user_id=actor.id,
            product_id=product.id,
            category_id=product.category_id,
            key=stored.key,
            type=stored.type,
            size=stored.size,
            display_name=upload.filename,
        )
        try:
            with self.uow:
                self.uow.products.add(product)
                self.uow.files.add(file)
                self.uow.commit()
        except Exception:
            logger.warning("Rolling back stored object %s after a failed product insert", stored.key)
            self.storage.delete(stored.key)
            raise
        return ProductWithFileOutput(product=product, file=file)

    @operation("find all products")
    def list_products(
        self, actor: Actor, page: PageRequest, category_id: UUID | None = None
    ) -> Page[Product]:
        where = row_filter(actor, ResourceKind.PRODUCT)
        with self.uow:
            if category_id is not None:
                self._ensure_category(category_id)
            products = self.uow.products.list_page(where, page.skip, page.limit, category_id)
            total = self.uow.products.count(where, category_id)
        return Page.build(products, total, page)

    @operation("find products of user")
    def list_products_for_user(self, actor: Actor, user_id: UUID, page: PageRequest) -> Page[Product]:
        where = RowFilter(owner_id=user_id)
        with self.uow:
            if self.uow.users.get(user_id) is None:
                raise NotFoundError("User not found")
            authorize_collection(actor, ResourceKind.PRODUCT, Action.READ, owner_id=user_id)
            products = self.uow.products.list_page(where, page.skip, page.limit)
            total = self.uow.products.count(where)
        return Page.build(products, total, page)

    @operation("find product")
    def get_product(self, actor: Actor, product_id: UUID) -> Product:
        with self.uow:
            return authorize(actor, ResourceKind.PRODUCT, self.uow.products.get(product_id), Action.READ)

    @operation("update product")
    def update_product(self, actor: Actor, product_id: UUID, input: ProductUpdateInput) -> Product:
        changes = input.changes()
        with self.uow:
            product = authorize(actor, ResourceKind.PRODUCT, self.uow.products.get(product_id), Action.UPDATE)
            if "is_purchased" in changes and not actor.is_admin:
                raise ForbiddenError("Only an administrator can change the purchase state")
            ensure_not_purchased(product, ResourceKind.PRODUCT, Action.UPDATE)
            self._ensure_category(changes.get("category_id"))
            product = product.with_changes(changes)
            self.uow.products.update(product)
            self.uow.commit()
        return product

    @operation("delete product")
    def delete_product(self, actor: Actor, product_id: UUID) -> None:
        with self.uow:
            product = authorize(actor, ResourceKind.PRODUCT, self.uow.products.get(product_id), Action.DELETE)
            ensure_not_purchased(product, ResourceKind.PRODUCT, Action.DELETE)
            # ファイル行はFKのカスケードで消える。実体はコミット後に消す
            keys = [file.key for file in self.uow.files.list_by_product(product_id)]
            self.uow.products.delete(product_id)
            self.uow.commit()
        discard_objects(self.storage, keys)
