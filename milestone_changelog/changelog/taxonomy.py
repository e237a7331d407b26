"""Label taxonomy driving changelog classification."""

from pathlib import Path
from typing import Self

import structlog
from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator
from ruamel.yaml import YAMLError

from milestone_changelog.configuration.exceptions import TaxonomyConfigurationError
from milestone_changelog.utils.constants import (
    DEFAULT_ANNOTATIONS,
    DEFAULT_AUDIENCE_LABEL,
    DEFAULT_CATEGORIES,
    DEFAULT_TYPE_LABEL_PREFIX,
)
from milestone_changelog.utils.yaml import dump_yaml_to_file, load_yaml_file

logger = structlog.get_logger(__name__)


class CategoryDefinition(BaseModel):
    """A changelog heading and the type label that selects it."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(min_length=1)
    label: str = Field(min_length=1)


class AnnotationDefinition(BaseModel):
    """A label that adds a short tag to a changelog entry."""

    model_config = ConfigDict(frozen=True)

    label: str = Field(min_length=1)
    tag: str = Field(min_length=1)


def _default_categories() -> list[CategoryDefinition]:
    return [CategoryDefinition(name=name, label=label) for name, label in DEFAULT_CATEGORIES]


def _default_annotations() -> list[AnnotationDefinition]:
    return [AnnotationDefinition(label=label, tag=tag) for label, tag in DEFAULT_ANNOTATIONS]


class LabelTaxonomy(BaseModel):
    """Maps pull request labels to audiences, categories and annotation tags.

    Category and annotation order is significant: categories are rendered in
    the order they are declared and tags are listed in the order their
    annotation labels are declared, whatever order the labels arrive in.
    """

    model_config = ConfigDict(frozen=True)

    audience_label: str = Field(default=DEFAULT_AUDIENCE_LABEL, min_length=1)
    type_label_prefix: str = Field(default=DEFAULT_TYPE_LABEL_PREFIX, min_length=1)
    categories: list[CategoryDefinition] = Field(default_factory=_default_categories)
    annotations: list[AnnotationDefinition] = Field(default_factory=_default_annotations)

    @model_validator(mode="after")
    def check_consistency(self) -> Self:
        """Reject taxonomies that would make classification ambiguous."""
        names = [category.name for category in self.categories]
        if len(names) != len(set(names)):
            raise ValueError(f"Category names must be unique: {names}")
        labels = [category.label for category in self.categories]
        if len(labels) != len(set(labels)):
            raise ValueError(f"Category labels must be unique: {labels}")
        for label in labels:
            if not label.startswith(self.type_label_prefix):
                raise ValueError(f"Category label '{label}' does not start with the type label prefix '{self.type_label_prefix}'")
        annotation_labels = [annotation.label for annotation in self.annotations]
        if len(annotation_labels) != len(set(annotation_labels)):
            raise ValueError(f"Annotation labels must be unique: {annotation_labels}")
        return self

    @property
    def category_names(self) -> list[str]:
        """Category names in heading order."""
        return [category.name for category in self.categories]

    def is_type_label(self, label: str) -> bool:
        """Whether a label carries a change category."""
        return label.startswith(self.type_label_prefix)

    def category_for_label(self, label: str) -> str | None:
        """Return the category selected by a type label, if any."""
        for category in self.categories:
            if category.label == label:
                return category.name
        return None

    def annotation_tags(self, labels: frozenset[str]) -> tuple[str, ...]:
        """Return the tags for a label set, in declared annotation order."""
        return tuple(annotation.tag for annotation in self.annotations if annotation.label in labels)


DEFAULT_TAXONOMY = LabelTaxonomy()


def load_taxonomy(path: Path) -> LabelTaxonomy:
    """Load a label taxonomy from a YAML file."""
    if not path.is_file():
        raise TaxonomyConfigurationError(f"Taxonomy file not found: {path.absolute()}")
    try:
        data = load_yaml_file(path)
    except YAMLError as exc:
        raise TaxonomyConfigurationError(f"Failed to parse taxonomy file {path}: {exc}") from exc
    except (UnicodeDecodeError, OSError) as exc:
        raise TaxonomyConfigurationError(f"Failed to read taxonomy file {path}: {exc}") from exc
    try:
        taxonomy = LabelTaxonomy.model_validate(data or {})
    except ValidationError as exc:
        raise TaxonomyConfigurationError(f"Invalid taxonomy file {path}: {exc}") from exc
    logger.info("Loaded label taxonomy", path=str(path), categories=taxonomy.category_names)
    return taxonomy


def dump_taxonomy(taxonomy: LabelTaxonomy, path: Path) -> None:
    """Write a label taxonomy to a YAML file."""
    dump_yaml_to_file(taxonomy.model_dump(mode="python"), path)
    logger.info("Wrote label taxonomy", path=str(path))
