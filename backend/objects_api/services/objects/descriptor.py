"""
Static per-resource configuration.

A controller is built from one ``ResourceConfig``: the immutable
``ResourceDescriptor`` plus the query var policy, the optional query and
trash hooks, and the registry of additional fields. Nothing here is
discovered at runtime; the hosting application passes it in.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Mapping

from shared.config.constants import DEFAULT_PRIVATE_QUERY_VARS, DEFAULT_PUBLIC_QUERY_VARS
from .fields import FieldRegistry

# (query_args, request_parameters) -> query_args
QueryHook = Callable[[dict[str, Any], Mapping[str, Any]], dict[str, Any]]
# (allowed_vars) -> allowed_vars
AllowListHook = Callable[[set[str]], set[str]]
# (default, obj) -> bool
TrashableHook = Callable[[bool, Any], bool]


@dataclass(frozen=True, slots=True)
class ResourceDescriptor:
    """
    Identity and capabilities of a resource type.

    Attributes:
        type: Unique object type identifier (e.g. "page")
        hierarchical: Objects carry a parent ID relationship
        supports_eager_loading: Hydrate a page of IDs with one batch fetch
    """

    type: str
    hierarchical: bool = False
    supports_eager_loading: bool = False


@dataclass(frozen=True)
class QueryVarPolicy:
    """
    Snapshot of the query vars a request may influence.

    Attributes:
        public_vars: Settable by any requester
        private_vars: Additionally settable by requesters who can edit
        policy_hook: Final say over the computed allow-list
        var_filters: Per-var value rewrites applied while copying allowed vars
    """

    public_vars: frozenset[str] = DEFAULT_PUBLIC_QUERY_VARS
    private_vars: frozenset[str] = DEFAULT_PRIVATE_QUERY_VARS
    policy_hook: AllowListHook | None = None
    var_filters: Mapping[str, Callable[[Any], Any]] = field(default_factory=dict)


@dataclass(frozen=True)
class ResourceConfig:
    """
    Everything a controller needs to know about one resource type.

    Attributes:
        descriptor: Resource identity and capabilities
        rest_base: Collection path segment (e.g. "pages")
        query_vars: Allow-list policy
        query_hook: Rewrites translated query args before execution
        trashable: Overrides soft delete support per object
        fields: Additional response/update fields
    """

    descriptor: ResourceDescriptor
    rest_base: str
    query_vars: QueryVarPolicy = field(default_factory=QueryVarPolicy)
    query_hook: QueryHook | None = None
    trashable: TrashableHook | None = None
    fields: FieldRegistry = field(default_factory=FieldRegistry)

    @property
    def object_type(self) -> str:
        return self.descriptor.type
