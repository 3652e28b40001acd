"""
Status aggregator.

Joins services, function resources and ingresses into one ConsolidatedInfo
per requested function. Each namespace's collections are fetched once per
call, whatever the number of names requested in it.
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Union

from ..client import ControlPlaneClient
from ..core.exceptions import (
    AmbiguityWarning,
    FetchError,
    KubefnError,
    MalformedRoutingRecord,
    NotFoundError,
)
from ..models import ConsolidatedInfo, FunctionResource, NetworkRecord, RoutingRecord

logger = logging.getLogger("kubefn.aggregator")

Outcome = Union[ConsolidatedInfo, KubefnError]


@dataclass(frozen=True)
class Snapshot:
    """Immutable view of one namespace's collections."""

    services: Sequence[NetworkRecord]
    functions: Sequence[FunctionResource]
    ingresses: Sequence[RoutingRecord]


def _labelled(records: Iterable, name: str) -> List:
    return [r for r in records if r.labels.get("function") == name]


def resolve(name: str, snapshot: Snapshot) -> Outcome:
    """Join the records for one function. Errors are returned, not raised."""
    function = next((f for f in snapshot.functions if f.name == name), None)
    if function is None:
        return NotFoundError(name, "functions")

    warnings: List[AmbiguityWarning] = []

    services = _labelled(snapshot.services, name)
    if not services:
        return NotFoundError(name, "services")
    if len(services) > 1:
        warnings.append(AmbiguityWarning(name, "services", len(services)))

    routing = None
    url = None
    ingresses = _labelled(snapshot.ingresses, name)
    if ingresses:
        if len(ingresses) > 1:
            warnings.append(AmbiguityWarning(name, "ingresses", len(ingresses)))
        routing = ingresses[0]
        try:
            url = routing.url(name)
        except MalformedRoutingRecord as exc:
            return exc

    return ConsolidatedInfo(
        function=function,
        service=services[0],
        routing=routing,
        url=url,
        warnings=warnings,
    )


class StatusAggregator:
    def __init__(self, client: ControlPlaneClient):
        self.client = client

    async def fetch_snapshot(self, namespace: str) -> Union[Snapshot, FetchError]:
        """Fetch the three collections of a namespace concurrently."""
        results = await asyncio.gather(
            self.client.list_services(namespace),
            self.client.list_functions(namespace),
            self.client.list_ingresses(namespace),
            return_exceptions=True,
        )
        for result in results:
            if isinstance(result, FetchError):
                logger.error(f"Could not read namespace {namespace}: {result}")
                return result
            if isinstance(result, BaseException):
                raise result
        services, functions, ingresses = results
        return Snapshot(services=services, functions=functions, ingresses=ingresses)

    async def aggregate(
        self,
        names: Iterable[str],
        namespaces: Optional[Mapping[str, str]] = None,
    ) -> Dict[str, Outcome]:
        """
        Consolidated status for every requested name.

        Args:
            names: Function names; duplicates are collapsed, order kept
            namespaces: Optional name -> namespace overrides

        Returns:
            name -> ConsolidatedInfo, or the error that prevented building it
        """
        ordered = list(dict.fromkeys(names))
        namespaces = namespaces or {}

        groups: Dict[str, List[str]] = {}
        for name in ordered:
            groups.setdefault(namespaces.get(name) or self.client.namespace, []).append(name)

        keys = list(groups)
        snapshots = await asyncio.gather(*(self.fetch_snapshot(ns) for ns in keys))

        outcomes: Dict[str, Outcome] = {}
        for namespace, snapshot in zip(keys, snapshots):
            for name in groups[namespace]:
                if isinstance(snapshot, FetchError):
                    outcomes[name] = snapshot
                else:
                    outcomes[name] = resolve(name, snapshot)

        return {name: outcomes[name] for name in ordered}
