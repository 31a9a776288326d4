"""Definition-time failures.

INVARIANT: every error raised while declaring, deriving or resolving views
is a DefinitionError. Once a model's views are built, nothing in this
package raises at run time except pydantic's own ValidationError.
"""

from __future__ import annotations


class DefinitionError(ValueError):
    """A model's view declaration is inconsistent and cannot be used.

    Attributes:
        model: Name of the model being declared, if known.
        field: Name of the offending field, if the error is field-scoped.
        mode: View mode involved (``"get"``, ``"create"``, ``"patch"``).
        token: The unrecognized policy token, for policy errors.
    """

    def __init__(
        self,
        message: str,
        *,
        model: str | None = None,
        field: str | None = None,
        mode: str | None = None,
        token: object = None,
    ) -> None:
        super().__init__(message)
        self.model = model
        self.field = field
        self.mode = mode
        self.token = token

    def to_detail(self) -> dict[str, str]:
        """Return the populated context attributes as a plain dict."""
        detail = {"model": self.model, "field": self.field, "mode": self.mode}
        if self.token is not None:
            detail["token"] = str(self.token)
        return {key: value for key, value in detail.items() if value is not None}
