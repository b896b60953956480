"""Category service - animal category management and matching.

Categories are rules, not stored memberships: every change to a
category invalidates the cached targets of the whole farm, since any
batch may reference it.
"""

from collections.abc import Callable
from datetime import date
from uuid import UUID

from feed_engine.config import settings
from feed_engine.core.errors import ConflictError, NotFoundError, ProtectedDefault, ValidationError
from feed_engine.core.matcher import matching_animals
from feed_engine.core.snapshot import AnimalSnapshot
from feed_engine.core.target_cache import ResultCache
from feed_engine.infra.logging import get_logger
from feed_engine.models.animal_category import AnimalCategory
from feed_engine.repositories.animals import AnimalSnapshotReader
from feed_engine.repositories.categories import CategoryRepository
from feed_engine.schemas.category import CategoryCreate, CategoryUpdate

logger = get_logger(__name__)


def _check_age_bounds(min_age_days: int | None, max_age_days: int | None) -> None:
    if min_age_days is not None and max_age_days is not None and min_age_days > max_age_days:
        raise ValidationError(
            "Minimum age cannot be greater than maximum age",
            min_age_days=min_age_days,
            max_age_days=max_age_days,
        )


class CategoryService:
    """Create, edit, delete and evaluate animal categories of a farm."""

    def __init__(
        self,
        categories: CategoryRepository,
        animals: AnimalSnapshotReader,
        cache: ResultCache,
        today: Callable[[], date] = date.today,
    ) -> None:
        self.categories = categories
        self.animals = animals
        self.cache = cache
        self._today = today

    async def get_categories(self, farm_id: UUID) -> list[AnimalCategory]:
        return await self.categories.list_all(farm_id)

    async def get_category(self, farm_id: UUID, category_id: UUID) -> AnimalCategory:
        """Fetch a category of the farm.

        Raises:
            NotFoundError: If the category does not exist in this farm
        """
        category = await self.categories.get(farm_id, category_id)
        if category is None:
            raise NotFoundError("Animal category not found", category_id=str(category_id))
        return category

    async def create_category(self, farm_id: UUID, data: CategoryCreate) -> AnimalCategory:
        """Create a category.

        Raises:
            ValidationError: If the age bounds are inverted
            ConflictError: If the name is already used in the farm
        """
        _check_age_bounds(data.min_age_days, data.max_age_days)
        await self._ensure_unique_name(farm_id, data.name)

        sort_order = data.sort_order
        if sort_order is None:
            current_max = await self.categories.max_sort_order(farm_id)
            sort_order = (current_max or 0) + 1

        category = await self.categories.add(
            AnimalCategory(
                farm_id=farm_id,
                name=data.name,
                description=data.description,
                min_age_days=data.min_age_days,
                max_age_days=data.max_age_days,
                gender=data.gender,
                production_status=data.production_status,
                characteristics=data.characteristics.model_dump(exclude_none=True),
                is_default=False,
                sort_order=sort_order,
            )
        )
        self.cache.invalidate_farm(farm_id)

        logger.info(
            "Animal category created",
            farm_id=str(farm_id),
            category_id=str(category.id),
            name=category.name,
        )
        return category

    async def update_category(
        self,
        farm_id: UUID,
        category_id: UUID,
        data: CategoryUpdate,
    ) -> AnimalCategory:
        """Apply a partial update; age bounds are checked against the merged values."""
        category = await self.get_category(farm_id, category_id)
        changes = data.model_dump(exclude_unset=True)

        _check_age_bounds(
            changes.get("min_age_days", category.min_age_days),
            changes.get("max_age_days", category.max_age_days),
        )
        if changes.get("name") is not None and changes["name"].casefold() != category.name.casefold():
            await self._ensure_unique_name(farm_id, changes["name"])

        if "characteristics" in changes:
            flags = changes.pop("characteristics") or {}
            category.characteristics = {k: v for k, v in flags.items() if v is not None}

        for field, value in changes.items():
            if field == "name" and value is None:
                continue
            setattr(category, field, value)

        category = await self.categories.save(category)
        self.cache.invalidate_farm(farm_id)

        logger.info(
            "Animal category updated",
            farm_id=str(farm_id),
            category_id=str(category_id),
            fields=sorted(data.model_fields_set),
        )
        return category

    async def delete_category(self, farm_id: UUID, category_id: UUID) -> None:
        """Delete a category.

        Raises:
            NotFoundError: If the category does not exist in this farm
            ProtectedDefault: If the category is a farm default
        """
        category = await self.get_category(farm_id, category_id)
        if category.is_default:
            raise ProtectedDefault(
                "Default categories cannot be deleted",
                category_id=str(category_id),
            )

        await self.categories.delete(category)
        self.cache.invalidate_farm(farm_id)
        logger.info("Animal category deleted", farm_id=str(farm_id), category_id=str(category_id))

    async def get_matching_animals(
        self,
        farm_id: UUID,
        category_id: UUID,
        limit: int | None = None,
    ) -> tuple[list[AnimalSnapshot], int, int]:
        """Active animals currently matching a category.

        Args:
            farm_id: Farm scope
            category_id: Category to evaluate
            limit: Page size (defaults to settings, capped at the configured maximum)

        Returns:
            Tuple of (page, total matches, applied limit)
        """
        category = await self.get_category(farm_id, category_id)

        page_size = limit or settings.matching_animals_default_limit
        page_size = min(page_size, settings.matching_animals_max_limit)

        animals = await self.animals.list_active(farm_id)
        page, total = matching_animals(category, animals, self._today(), limit=page_size)

        logger.debug(
            "Matching animals evaluated",
            farm_id=str(farm_id),
            category_id=str(category_id),
            candidates=len(animals),
            total=total,
        )
        return page, total, page_size

    async def _ensure_unique_name(self, farm_id: UUID, name: str) -> None:
        key = name.strip().casefold()
        for existing in await self.categories.list_all(farm_id):
            if existing.name.strip().casefold() == key:
                raise ConflictError(
                    "An animal category with this name already exists",
                    name=name,
                )
