"""Category domain service."""

from typing import Optional

from orbis.database.base import Database
from orbis.domain.entities import Category, CategoryType, TransactionType
from orbis.domain.errors import NotFoundError, category_not_found


UNCATEGORIZED_CATEGORY_ID = "cat_10"
UNKNOWN_CATEGORY_NAME = "Desconhecido"
UNKNOWN_CATEGORY_COLOR = "#9AA0C3"

DEFAULT_CATEGORIES: tuple[Category, ...] = (
    Category(id="cat_1", name="Salário", type=CategoryType.INCOME, color="#8AFFC1"),
    Category(id="cat_2", name="Freelance", type=CategoryType.INCOME, color="#4ADE80"),
    Category(id="cat_3", name="Investimentos", type=CategoryType.INCOME, color="#60A5FA"),
    Category(id="cat_4", name="Alimentação", type=CategoryType.EXPENSE, color="#FF8A8A"),
    Category(id="cat_5", name="Moradia", type=CategoryType.EXPENSE, color="#F87171"),
    Category(id="cat_6", name="Transporte", type=CategoryType.EXPENSE, color="#FBBF24"),
    Category(id="cat_7", name="Lazer", type=CategoryType.EXPENSE, color="#A78BFA"),
    Category(id="cat_8", name="Saúde", type=CategoryType.EXPENSE, color="#34D399"),
    Category(id="cat_9", name="Educação", type=CategoryType.EXPENSE, color="#60A5FA"),
    Category(id="cat_11", name="Assinaturas", type=CategoryType.EXPENSE, color="#C084FC"),
    Category(id=UNCATEGORIZED_CATEGORY_ID, name="Outros", type=CategoryType.BOTH, color="#9AA0C3"),
)


class CategoryService:
    """Service for reading the category reference set."""

    def __init__(self, db: Database):
        """Initialize category service.

        Args:
            db: Database instance
        """
        self.db = db

    def list_categories(
        self, transaction_type: Optional[TransactionType] = None
    ) -> list[Category]:
        """List categories.

        Args:
            transaction_type: If given, only categories that accept this type

        Returns:
            List of category entities
        """
        categories = self.db.list_categories()
        if transaction_type is None:
            return categories
        return [c for c in categories if c.accepts(transaction_type)]

    def get_category(self, category_id: str) -> Optional[Category]:
        """Get category by ID."""
        return self.db.get_category(category_id)

    def require_category(self, category_id: str) -> Category:
        """Get category by ID or raise NotFoundError."""
        category = self.db.get_category(category_id)
        if category is None:
            raise NotFoundError(category_not_found(category_id))
        return category

    def resolve_category(self, value: str) -> Category:
        """Resolve a category by ID or case-insensitive name.

        Raises:
            NotFoundError: If nothing matches
        """
        category = self.db.get_category(value)
        if category is not None:
            return category
        needle = value.strip().lower()
        for candidate in self.db.list_categories():
            if candidate.name.lower() == needle:
                return candidate
        raise NotFoundError(category_not_found(value))
