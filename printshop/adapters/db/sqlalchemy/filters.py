from sqlalchemy.orm import Query

from printshop.domain.access import RowFilter


def scoped(query: Query, owner_column, where: RowFilter) -> Query:
    """Apply the row-level owner filter to a listing query."""
    if where.owner_id is not None:
        query = query.filter(owner_column == str(where.owner_id))
    return query


def paged(query: Query, order_columns: tuple, skip: int, take: int) -> Query:
    return query.order_by(*order_columns).offset(skip).limit(take)
