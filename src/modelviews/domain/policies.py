"""View modes and per-field visibility policies.

Each field carries three independent policies, one per mode:

- get:    required | optional | forbidden   (default: required)
- create: required | optional | forbidden   (default: required)
- patch:  patch | optional | forbidden      (default: patch)

``forbidden`` drops the field from that mode's view. ``optional`` under
patch is the OptionalPatch policy: ``Patch[Optional[T]]``.
"""

from __future__ import annotations

from enum import StrEnum

from modelviews.domain.errors import DefinitionError


class Mode(StrEnum):
    """The three derived views of a model."""

    GET = "get"
    CREATE = "create"
    PATCH = "patch"

    @property
    def suffix(self) -> str:
        """Class-name suffix of the view for this mode (``Get``, ``Create``, ``Patch``)."""
        return self.value.capitalize()


class GetPolicy(StrEnum):
    """Policies for the read view."""

    REQUIRED = "required"
    OPTIONAL = "optional"
    FORBIDDEN = "forbidden"


class CreatePolicy(StrEnum):
    """Policies for the create view."""

    REQUIRED = "required"
    OPTIONAL = "optional"
    FORBIDDEN = "forbidden"


class PatchPolicy(StrEnum):
    """Policies for the partial-update view."""

    PATCH = "patch"
    OPTIONAL = "optional"
    FORBIDDEN = "forbidden"


type Policy = GetPolicy | CreatePolicy | PatchPolicy

POLICY_TYPES: dict[Mode, type[GetPolicy] | type[CreatePolicy] | type[PatchPolicy]] = {
    Mode.GET: GetPolicy,
    Mode.CREATE: CreatePolicy,
    Mode.PATCH: PatchPolicy,
}

DEFAULT_POLICIES: dict[Mode, Policy] = {
    Mode.GET: GetPolicy.REQUIRED,
    Mode.CREATE: CreatePolicy.REQUIRED,
    Mode.PATCH: PatchPolicy.PATCH,
}


def parse_policy(
    mode: Mode | str,
    token: object,
    *,
    field: str | None = None,
    model: str | None = None,
) -> Policy:
    """Resolve *token* to the policy enum for *mode*.

    ``None`` selects the mode's default. Enum members of the right type pass
    through; strings are matched against the mode's vocabulary.

    Raises:
        DefinitionError: If *token* is not a policy of *mode*.
    """
    mode = Mode(mode)
    if token is None:
        return DEFAULT_POLICIES[mode]

    policy_type = POLICY_TYPES[mode]
    if isinstance(token, policy_type):
        return token
    if isinstance(token, str) and not isinstance(token, StrEnum):
        try:
            return policy_type(token)
        except ValueError:
            pass

    where = f"field '{field}'" if field else "field"
    if model:
        where = f"{where} of {model}"
    allowed = ", ".join(p.value for p in policy_type)
    msg = f"unknown {mode} policy {token!r} on {where} (expected one of: {allowed})"
    raise DefinitionError(msg, model=model, field=field, mode=str(mode), token=token)


def is_forbidden(policy: Policy) -> bool:
    """True when *policy* excludes the field from its mode's view."""
    return policy.value == "forbidden"
