"""ORM models. Importing this package registers every table on Base.metadata."""

from rabbitry.models.breed import AlternateName, Breed, Category, breed_category

__all__ = ["AlternateName", "Breed", "Category", "breed_category"]
