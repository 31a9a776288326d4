"""BaseService — shared target loading for the CLI services.

Services receive the CLI settings and a shape registry at construction
time. Targets are ``module:Model`` strings naming a model class.
"""

from __future__ import annotations

import importlib
import logging
import sys
from pathlib import Path
from typing import TYPE_CHECKING, Any

from modelviews.domain.errors import DefinitionError
from modelviews.domain.shapes import ShapeRegistry, default_registry
from modelviews.services.result import ServiceResult
from modelviews.views import ModelViews, declare_views

if TYPE_CHECKING:
    from modelviews.config.settings import ModelViewsSettings

logger = logging.getLogger(__name__)


class TargetError(Exception):
    """A target string could not be turned into a declared model."""

    def __init__(self, code: str, message: str, **detail: Any) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.detail = detail


class BaseService:
    """Base for service-layer classes."""

    def __init__(
        self,
        settings: ModelViewsSettings,
        registry: ShapeRegistry | None = None,
    ) -> None:
        self._settings = settings
        self._registry = registry if registry is not None else default_registry

    def _load_views(self, target: str) -> ModelViews:
        """Import *target* and return its views, declaring them if needed.

        Raises:
            TargetError: On a malformed target, an import failure, a missing
                attribute, or a definition error.
        """
        model = load_target(target, search_path=self._settings.project_root)
        existing = model.__dict__.get("__views__") if isinstance(model, type) else None
        if isinstance(existing, ModelViews):
            return existing

        logger.debug("Declaring views on the fly for %s", target)
        try:
            return declare_views(
                model,
                wire=self._settings.derive.wire,
                registry=self._registry,
            )
        except DefinitionError as exc:
            detail = {"target": target, **exc.to_detail()}
            raise TargetError("DEFINITION_ERROR", str(exc), **detail) from exc

    @staticmethod
    def _error(op: str, exc: TargetError) -> ServiceResult:
        return ServiceResult.failure(op, exc.code, exc.message, **exc.detail)


def load_target(target: str, *, search_path: Path | None = None) -> Any:
    """Resolve ``package.module:Model`` (or ``package.module.Model``) to an object.

    *search_path* (the project root for CLI runs) is put at the front of
    ``sys.path`` first, so project modules import without being installed.

    Raises:
        TargetError: With code ``INVALID_TARGET``, ``IMPORT_ERROR``,
            ``NOT_FOUND``, or ``DEFINITION_ERROR`` when a ``@views``
            declaration in the imported module is invalid.
    """
    if ":" in target:
        module_name, _, attr_path = target.partition(":")
    else:
        module_name, _, attr_path = target.rpartition(".")
    if not module_name or not attr_path:
        msg = f"Target must look like 'package.module:Model', got {target!r}"
        raise TargetError("INVALID_TARGET", msg, target=target)

    if search_path is not None:
        _prepend_sys_path(search_path)

    try:
        obj: Any = importlib.import_module(module_name)
    except ImportError as exc:
        msg = f"Cannot import module {module_name!r}: {exc}"
        raise TargetError("IMPORT_ERROR", msg, target=target) from exc
    except DefinitionError as exc:
        detail = {"target": target, **exc.to_detail()}
        raise TargetError("DEFINITION_ERROR", str(exc), **detail) from exc

    for part in attr_path.split("."):
        try:
            obj = getattr(obj, part)
        except AttributeError as exc:
            msg = f"Module {module_name!r} has no attribute {attr_path!r}"
            raise TargetError("NOT_FOUND", msg, target=target) from exc
    return obj


def _prepend_sys_path(directory: Path) -> None:
    entry = str(directory.resolve())
    if entry not in sys.path:
        sys.path.insert(0, entry)
        importlib.invalidate_caches()
