"""Category variants produced by the bookmark classifier.

A category is one of five shapes, tagged by ``type``. Every shape carries the
technology tag and a confidence score; technology categories are the only
ones whose confidence depends on the match count.
"""

from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter

from utils.config import CategoryType

DOMAIN_CONFIDENCE = 0.8
PATTERN_CONFIDENCE_STEP = 0.3
PATTERN_CONFIDENCE_CAP = 0.9


class _CategoryBase(BaseModel):
    model_config = ConfigDict(frozen=True)

    tech: str
    confidence: float = Field(ge=0.0, le=1.0)


class TechnologyCategory(_CategoryBase):
    type: Literal["technology"] = "technology"


class RepositoryCategory(_CategoryBase):
    type: Literal["repository"] = "repository"
    confidence: float = Field(DOMAIN_CONFIDENCE, ge=0.0, le=1.0)


class DocumentationCategory(_CategoryBase):
    type: Literal["documentation"] = "documentation"
    confidence: float = Field(DOMAIN_CONFIDENCE, ge=0.0, le=1.0)


class PackageCategory(_CategoryBase):
    type: Literal["package"] = "package"
    confidence: float = Field(DOMAIN_CONFIDENCE, ge=0.0, le=1.0)


class GeneralCategory(_CategoryBase):
    type: Literal["general"] = "general"
    tech: str = "general"
    confidence: float = Field(DOMAIN_CONFIDENCE, ge=0.0, le=1.0)


Category = Annotated[
    Union[
        TechnologyCategory,
        RepositoryCategory,
        DocumentationCategory,
        PackageCategory,
        GeneralCategory,
    ],
    Field(discriminator="type"),
]

CATEGORY_BY_TYPE: dict[CategoryType, type[_CategoryBase]] = {
    CategoryType.TECHNOLOGY: TechnologyCategory,
    CategoryType.REPOSITORY: RepositoryCategory,
    CategoryType.DOCUMENTATION: DocumentationCategory,
    CategoryType.PACKAGE: PackageCategory,
    CategoryType.GENERAL: GeneralCategory,
}

category_adapter: TypeAdapter[Category] = TypeAdapter(Category)


def make_category(category_type: CategoryType, tech: str, confidence: float) -> Category:
    """Build the variant matching ``category_type``."""
    return CATEGORY_BY_TYPE[category_type](tech=tech, confidence=confidence)  # type: ignore[return-value]
