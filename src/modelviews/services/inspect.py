"""InspectService — report the derived views of a model."""

from __future__ import annotations

from typing import Any

from modelviews.domain.policies import Mode
from modelviews.domain.schema import ViewSchema
from modelviews.infrastructure.codegen import ShapeFormatter
from modelviews.services.base import BaseService, TargetError
from modelviews.services.result import ServiceResult


class InspectService(BaseService):
    """Describe each view a model produces, field by field."""

    def inspect(self, target: str) -> ServiceResult:
        """Return the view shapes of *target* (``module:Model``).

        ``data.views`` lists the produced views in get/create/patch order;
        ``data.missing`` lists the modes that produced no view.
        """
        try:
            model_views = self._load_views(target)
        except TargetError as exc:
            return self._error("inspect", exc)

        schema = model_views.schema
        derived = model_views.derived
        formatter = ShapeFormatter(core_module=schema.core_module)
        views = [_describe(view, formatter) for view in derived]
        missing = [str(mode) for mode in Mode if derived.for_mode(mode) is None]

        warnings = [f"{schema.name} has no {mode} view" for mode in missing]
        return ServiceResult(
            ok=True,
            op="inspect",
            data={
                "model": schema.name,
                "target": target,
                "wire": schema.wire,
                "fields": list(schema.field_names),
                "views": views,
                "missing": missing,
            },
            warnings=warnings,
        )


def _describe(view: ViewSchema, formatter: ShapeFormatter) -> dict[str, Any]:
    return {
        "name": view.name,
        "mode": str(view.mode),
        "fields": [
            {
                "name": view_field.name,
                "type": formatter.format(view_field.shape),
                "optional": view_field.optional,
                "omit_when_absent": view_field.omit_when_absent,
            }
            for view_field in view.fields
        ],
    }
