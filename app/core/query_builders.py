from datetime import date
from typing import Any, List, Optional

from sqlalchemy import Select, and_, asc, desc, func, or_, select


class BaseQueryBuilder:
    """Base query builder with common filtering and sorting capabilities."""

    def __init__(self, model_class):
        self.model_class = model_class
        self.query = select(model_class)
        self.filters = []
        self.order_by_clauses = []
        self._skip = 0
        self._limit: Optional[int] = None

    def where(self, condition):
        """Add a WHERE condition to the query."""
        self.filters.append(condition)
        return self

    def where_equals(self, field, value: Any):
        """Add ``field == value`` unless value is None."""
        if value is not None:
            self.filters.append(field == value)
        return self

    def where_in(self, field, values: List[Any]):
        """Add WHERE field IN (values) condition."""
        if values:
            self.filters.append(field.in_(values))
        return self

    def where_text_search(self, fields: List, query: Optional[str]):
        """Add multi-field text search using OR conditions."""
        if query and fields:
            search_conditions = []
            for field in fields:
                search_conditions.append(func.lower(field).contains(query.lower()))
            self.filters.append(or_(*search_conditions))
        return self

    def where_date_range(
        self, field, start_date: Optional[date], end_date: Optional[date]
    ):
        """Add date range filtering."""
        if start_date:
            self.filters.append(field >= start_date)
        if end_date:
            self.filters.append(field <= end_date)
        return self

    def order_by(self, field, direction: str = "asc"):
        """Add ORDER BY clause."""
        if direction.lower() == "desc":
            self.order_by_clauses.append(desc(field))
        else:
            self.order_by_clauses.append(asc(field))
        return self

    def paginate(self, skip: int = 0, limit: int = 100):
        """Add pagination to the query."""
        self._skip = skip
        self._limit = limit
        return self

    def build_count(self) -> Select:
        """Count of matching rows, ignoring pagination and ordering."""
        stmt = select(func.count()).select_from(self.model_class)
        if self.filters:
            stmt = stmt.where(and_(*self.filters))
        return stmt

    def build(self) -> Select:
        """Build the final query with all conditions applied."""
        query = self.query
        if self.filters:
            query = query.where(and_(*self.filters))

        if self.order_by_clauses:
            query = query.order_by(*self.order_by_clauses)

        if self._skip:
            query = query.offset(self._skip)
        if self._limit is not None:
            query = query.limit(self._limit)

        return query


class PropertyQueryBuilder(BaseQueryBuilder):
    """Specialized query builder for property listings."""

    def filter_by_owner(self, owner_id: Optional[int]):
        return self.where_equals(self.model_class.owner_id, owner_id)

    def filter_by_active(self, active: Optional[bool]):
        return self.where_equals(self.model_class.active, active)

    def search_by_name(self, search_text: Optional[str]):
        return self.where_text_search([self.model_class.name], search_text)


class ReservationQueryBuilder(BaseQueryBuilder):
    """Specialized query builder for reservation searches."""

    def filter_by_property(self, property_id: Optional[int]):
        return self.where_equals(self.model_class.property_id, property_id)

    def filter_by_status(self, status):
        return self.where_equals(self.model_class.status, status)

    def filter_by_platform(self, platform):
        return self.where_equals(self.model_class.platform, platform)

    def filter_by_check_in(self, start_date: Optional[date], end_date: Optional[date]):
        """Filter by check-in date range (both ends inclusive)."""
        return self.where_date_range(
            self.model_class.check_in_date, start_date, end_date
        )

    def search_by_guest(self, guest_name: Optional[str]):
        return self.where_text_search([self.model_class.guest_name], guest_name)

    def filter_overlapping(self, check_in: date, check_out: date):
        """Reservations whose stay overlaps ``[check_in, check_out)``."""
        return self.where(
            and_(
                self.model_class.check_in_date < check_out,
                self.model_class.check_out_date > check_in,
            )
        )


class FinancialDocumentQueryBuilder(BaseQueryBuilder):
    """Specialized query builder for financial document listings."""

    def filter_by_type(self, document_type):
        return self.where_equals(self.model_class.type, document_type)

    def filter_by_status(self, status):
        return self.where_equals(self.model_class.status, status)

    def filter_by_entity(self, entity_type, entity_id: Optional[int]):
        self.where_equals(self.model_class.entity_type, entity_type)
        return self.where_equals(self.model_class.entity_id, entity_id)

    def filter_by_dates(self, start_date: Optional[date], end_date: Optional[date]):
        return self.where_date_range(self.model_class.date, start_date, end_date)
