"""Category domain service."""

from typing import Any, Optional

from kakeibo.database.base import Database
from kakeibo.domain.entities import CATEGORY_TYPES, Category
from kakeibo.domain.errors import (
    NotFoundError,
    ValidationError,
    category_path_not_found,
    invalid_choice,
)


class CategoryService:
    """Service for managing categories."""

    def __init__(self, db: Database):
        """Initialize category service.

        Args:
            db: Database instance
        """
        self.db = db

    def create_category(
        self, name: str, category_type: str = "expense", parent_path: Optional[str] = None
    ) -> int:
        """Create a category.

        Args:
            name: Category name
            category_type: income or expense
            parent_path: Optional parent category name; only one level of
                nesting is allowed

        Returns:
            Category ID

        Raises:
            ValidationError: If the type is unknown, or the parent is itself a
                subcategory or of a different type
            NotFoundError: If parent category doesn't exist
        """
        if category_type not in CATEGORY_TYPES:
            raise ValidationError(invalid_choice("category type", category_type, CATEGORY_TYPES))

        parent_id = None
        if parent_path is not None:
            parent = self.require_category_by_path(parent_path)
            if parent.parent_id is not None:
                raise ValidationError(f"Category '{parent_path}' is already a subcategory")
            if parent.category_type != category_type:
                raise ValidationError(
                    f"Category type '{category_type}' does not match parent type '{parent.category_type}'"
                )
            parent_id = parent.id

        return self.db.create_category(name=name, category_type=category_type, parent_id=parent_id)

    def get_category(self, category_id: int) -> Optional[Category]:
        return self.db.get_category(category_id)

    def require_category_by_path(self, path: str) -> Category:
        """Get category by path or raise NotFoundError."""
        category = self.db.get_category_by_path(path)
        if category is None:
            raise NotFoundError(category_path_not_found(path))
        return category

    def get_category_tree(self) -> list[dict[str, Any]]:
        """Get full category tree.

        Returns:
            List of root categories with nested children
        """
        return self.db.get_category_tree()

    def format_category_path(self, category_id: int) -> str:
        """Get full path for a category (e.g., "Food > Groceries")."""
        cat = self.get_category(category_id)
        if cat is None:
            return ""
        if cat.parent_id is None:
            return cat.name
        parent = self.get_category(cat.parent_id)
        if parent is None:
            return cat.name
        return f"{parent.name} > {cat.name}"
