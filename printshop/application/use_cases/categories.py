from uuid import UUID

from printshop.application.dto import CategoryInput, Page, PageRequest
from printshop.application.ports import UnitOfWork
from printshop.application.use_cases.operations import operation
from printshop.domain.access import Action, ResourceKind, authorize, authorize_collection, row_filter
from printshop.domain.catalog import ProductCategory
from printshop.domain.user import Actor


class CategoryService:
    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    @operation("insert category")
    def create_category(self, actor: Actor, input: CategoryInput) -> ProductCategory:
        authorize_collection(actor, ResourceKind.CATEGORY, Action.CREATE)
        category = ProductCategory(name=input.name)
        with self.uow:
            self.uow.categories.add(category)
            self.uow.commit()
        return category

    @operation("find all categories")
    def list_categories(self, actor: Actor, page: PageRequest) -> Page[ProductCategory]:
        row_filter(actor, ResourceKind.CATEGORY)
        with self.uow:
            categories = self.uow.categories.list_page(page.skip, page.limit)
            total = self.uow.categories.count()
        return Page.build(categories, total, page)

    @operation("find category")
    def get_category(self, actor: Actor, category_id: UUID) -> ProductCategory:
        with self.uow:
            return authorize(actor, ResourceKind.CATEGORY, self.uow.categories.get(category_id), Action.READ)

    @operation("update category")
    def update_category(self, actor: Actor, category_id: UUID, input: CategoryInput) -> ProductCategory:
        with self.uow:
            category = authorize(actor, ResourceKind.CATEGORY, self.uow.categories.get(category_id), Action.UPDATE)
            category = category.rename(input.name)
            self.uow.categories.update(category)
            self.uow.commit()
        return category

    @operation("delete category")
    def delete_category(self, actor: Actor, category_id: UUID) -> None:
        with self.uow:
            authorize(actor, ResourceKind.CATEGORY, self.uow.categories.get(category_id), Action.DELETE)
            self.uow.categories.delete(category_id)
            self.uow.commit()
