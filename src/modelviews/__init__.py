"""modelviews — Get, Create and Patch views derived from one model definition."""

from modelviews.domain.declare import ViewPolicy, policy, schema_from_model
from modelviews.domain.derive import derive
from modelviews.domain.errors import DefinitionError
from modelviews.domain.patch import Patch
from modelviews.domain.policies import CreatePolicy, GetPolicy, Mode, PatchPolicy
from modelviews.domain.schema import DerivedViews, FieldSpec, ModelSchema, ViewField, ViewSchema
from modelviews.domain.shapes import ShapeRegistry, default_registry
from modelviews.infrastructure.models import (
    CreateView,
    GetView,
    PatchView,
    WireCreateView,
    WireGetView,
    WirePatchView,
)
from modelviews.views import ModelViews, has_view, view_for, views, views_of

__version__ = "0.3.0"

__all__ = [
    "CreatePolicy",
    "CreateView",
    "DefinitionError",
    "DerivedViews",
    "FieldSpec",
    "GetPolicy",
    "GetView",
    "Mode",
    "ModelSchema",
    "ModelViews",
    "Patch",
    "PatchPolicy",
    "PatchView",
    "ShapeRegistry",
    "ViewField",
    "ViewPolicy",
    "ViewSchema",
    "WireCreateView",
    "WireGetView",
    "WirePatchView",
    "default_registry",
    "derive",
    "has_view",
    "policy",
    "schema_from_model",
    "view_for",
    "views",
    "views_of",
]
