"""
Query var allow-list.

Decides which store query vars a request may set. Requesters who can edit
the resource type also get the private vars; the core vars are always
allowed, whatever the policy hook returns.
"""

from __future__ import annotations

from shared.config.constants import CORE_QUERY_VARS
from .descriptor import QueryVarPolicy


def compute_allowed_vars(policy: QueryVarPolicy, is_privileged: bool) -> set[str]:
    """
    Compute the allowed query vars for one request.

    Args:
        policy: Public/private var snapshot and hook for the resource type
        is_privileged: Requester can edit objects of this type

    Returns:
        Set of query var names the request may set.
    """
    allowed = set(policy.public_vars)
    if is_privileged:
        allowed |= set(policy.private_vars)
    allowed |= CORE_QUERY_VARS

    if policy.policy_hook is not None:
        allowed = set(policy.policy_hook(set(allowed)))

    return allowed | CORE_QUERY_VARS
