"""GenerateService — render derived views as Python source."""

from __future__ import annotations

import logging
from pathlib import Path

from modelviews.domain.schema import DEFAULT_CORE_MODULE, ModelSchema
from modelviews.infrastructure.codegen import collect_views, render_module
from modelviews.services.base import BaseService, TargetError
from modelviews.services.result import ServiceResult

logger = logging.getLogger(__name__)


class GenerateService(BaseService):
    """Emit a module of view class definitions for one or more models."""

    def generate(
        self,
        targets: list[str],
        *,
        output: Path | None = None,
        core_module: str | None = None,
    ) -> ServiceResult:
        """Render the views of *targets* and nested models they use.

        Args:
            targets: ``module:Model`` strings.
            output: Write the source here; when None the source is returned
                in ``data.source``.
            core_module: Module the generated code imports the core types
                from. When None, a module declared on the models with
                ``@views(core_module=...)`` is used, then
                ``[codegen] core_module``.
        """
        if not targets:
            return ServiceResult.failure("generate", "NO_TARGETS", "No models given")

        roots: list[type] = []
        models: list[str] = []
        schemas: list[ModelSchema] = []
        try:
            for target in targets:
                model_views = self._load_views(target)
                schemas.append(model_views.schema)
                models.append(model_views.schema.name)
                roots.extend(model_views.classes().values())
        except TargetError as exc:
            return self._error("generate", exc)

        if core_module is None:
            declared = sorted(
                {s.core_module for s in schemas if s.core_module != DEFAULT_CORE_MODULE}
            )
            if len(declared) > 1:
                return ServiceResult.failure(
                    "generate",
                    "CORE_MODULE_CONFLICT",
                    f"Models declare different core modules: {', '.join(declared)}",
                    core_modules=declared,
                )
            core_module = declared[0] if declared else self._settings.codegen.core_module

        views = collect_views(roots)
        source = render_module(
            views,
            core_module=core_module,
            header=self._settings.codegen.header,
            project_root=self._settings.project_root,
        )

        data: dict[str, object] = {
            "models": models,
            "views": [view.name for view in views],
        }
        if output is None:
            data["source"] = source
        else:
            try:
                output.parent.mkdir(parents=True, exist_ok=True)
                output.write_text(source, encoding="utf-8")
            except OSError as exc:
                return ServiceResult.failure(
                    "generate", "WRITE_ERROR", f"Cannot write {output}: {exc}", path=str(output)
                )
            logger.debug("Wrote generated module to %s", output)
            data["path"] = str(output)

        return ServiceResult(ok=True, op="generate", data=data)
