"""Serialized form of a unified schema."""

from typing import Annotated, List, Literal, Optional, Union

from pydantic import BaseModel, Field


class AttributeModel(BaseModel):
    """An attribute of a unified class."""

    kind: Literal["attribute"] = "attribute"
    name: str = Field(..., description="Attribute name (JSON key)")
    type: str = Field(..., description="Primitive type name")
    lower_bound: int = Field(0, ge=0, description="Minimum number of values")
    upper_bound: int = Field(1, ge=-1, description="Maximum number of values, -1 for unbounded")


class ReferenceModel(BaseModel):
    """A reference of a unified class, identified by its target's name."""

    kind: Literal["reference"] = "reference"
    name: str = Field(..., description="Reference name (JSON key)")
    target: str = Field(..., description="Target class name, or primitive type name")
    lower_bound: int = Field(0, ge=0, description="Minimum number of targets")
    upper_bound: int = Field(1, ge=-1, description="Maximum number of targets, -1 for unbounded")


FeatureModel = Annotated[Union[AttributeModel, ReferenceModel], Field(discriminator="kind")]


class ClassModel(BaseModel):
    """A class of the unified schema with its features in declaration order."""

    name: str
    abstract: bool = False
    features: List[FeatureModel] = Field(default_factory=list)


class UnifiedSchemaModel(BaseModel):
    """A unified schema as written to disk."""

    name: str = Field(..., description="Schema (package) name")
    ns_uri: str = Field(..., description="Namespace URI")
    ns_prefix: str = Field(..., description="Namespace prefix")
    classes: List[ClassModel] = Field(default_factory=list)
    sources: Optional[List[str]] = Field(None, description="Names of the composed sources")


class SourceSchemaModel(BaseModel):
    """The schema discovered for one source, as written by ``discover``."""

    name: str = Field(..., description="Source name")
    classes: List[ClassModel] = Field(default_factory=list)
