import logging
from typing import Any, Dict, List, Optional

import httpx
from pydantic import ValidationError

from .config import KubefnConfig
from .core.exceptions import FetchError, SubmissionError
from .models import FunctionResource, NetworkRecord, RoutingRecord

logger = logging.getLogger("kubefn.client")

SERVICES = "services"
FUNCTIONS = "functions"
INGRESSES = "ingresses"


def _remote_message(response: httpx.Response) -> str:
    """Prefer the Status.message of a JSON error body, else the raw text."""
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, dict) and body.get("message"):
        return str(body["message"])
    return response.text or response.reason_phrase


def _item_name(item: Any) -> str:
    if isinstance(item, dict):
        return str((item.get("metadata") or {}).get("name") or "<unnamed>")
    return "<unnamed>"


class ControlPlaneClient:
    """
    HTTP client for the three resource collections a function spans.

    All reads return fresh snapshots; nothing is cached between calls.
    """

    def __init__(
        self,
        client: httpx.AsyncClient,
        namespace: str = "default",
        core_prefix: str = "/api/v1",
        functions_prefix: str = "/apis/k8s.io/v1",
        extensions_prefix: str = "/apis/extensions/v1beta1",
    ):
        self.client = client
        self.namespace = namespace
        self._prefixes = {
            SERVICES: core_prefix.rstrip("/"),
            FUNCTIONS: functions_prefix.rstrip("/"),
            INGRESSES: extensions_prefix.rstrip("/"),
        }

    @classmethod
    def from_config(cls, client: httpx.AsyncClient, config: KubefnConfig) -> "ControlPlaneClient":
        return cls(
            client,
            namespace=config.NAMESPACE,
            core_prefix=config.CORE_API_PREFIX,
            functions_prefix=config.FUNCTIONS_API_PREFIX,
            extensions_prefix=config.EXTENSIONS_API_PREFIX,
        )

    def collection_url(self, collection: str, namespace: Optional[str] = None) -> str:
        ns = namespace or self.namespace
        return f"{self._prefixes[collection]}/namespaces/{ns}/{collection}"

    async def _get(self, collection: str, url: str) -> Dict[str, Any]:
        try:
            response = await self.client.get(url)
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            raise FetchError(
                collection, _remote_message(exc.response), exc.response.status_code
            ) from exc
        except httpx.RequestError as exc:
            raise FetchError(collection, exc) from exc

        try:
            return response.json()
        except ValueError as exc:
            raise FetchError(collection, f"invalid JSON body: {exc}", response.status_code) from exc

    async def _list(self, collection: str, namespace: Optional[str]) -> List[Dict[str, Any]]:
        url = self.collection_url(collection, namespace)
        items = (await self._get(collection, url)).get("items") or []
        logger.debug(f"Fetched {len(items)} {collection} from {url}")
        return items

    async def _parsed(self, collection: str, factory, namespace: Optional[str]) -> List:
        """Parse every item of a collection, skipping the ones that do not fit the model."""
        records = []
        for item in await self._list(collection, namespace):
            try:
                records.append(factory(item))
            except (ValidationError, AttributeError) as exc:
                name = _item_name(item)
                logger.warning(
                    f"Skipping malformed item {name} in {collection}: {exc}",
                    extra={"collection": collection, "item": name},
                )
        return records

    async def list_services(self, namespace: Optional[str] = None) -> List[NetworkRecord]:
        return await self._parsed(SERVICES, NetworkRecord.from_manifest, namespace)

    async def list_functions(self, namespace: Optional[str] = None) -> List[FunctionResource]:
        return await self._parsed(FUNCTIONS, FunctionResource.from_manifest, namespace)

    async def list_ingresses(self, namespace: Optional[str] = None) -> List[RoutingRecord]:
        return await self._parsed(INGRESSES, RoutingRecord.from_manifest, namespace)

    async def get_function(
        self, name: str, namespace: Optional[str] = None
    ) -> Optional[FunctionResource]:
        """Fetch one function resource; None when the control plane has no such object."""
        url = f"{self.collection_url(FUNCTIONS, namespace)}/{name}"
        try:
            item = await self._get(FUNCTIONS, url)
        except FetchError as exc:
            if exc.status_code == 404:
                return None
            raise
        try:
            return FunctionResource.from_manifest(item)
        except (ValidationError, AttributeError) as exc:
            raise FetchError(FUNCTIONS, f"malformed function {name}: {exc}") from exc

    async def put_function(
        self, manifest: Dict[str, Any], namespace: Optional[str] = None
    ) -> Dict[str, Any]:
        """
        Replace the function resource named in the manifest.

        Raises:
            SubmissionError: the control plane rejected the write
            FetchError: the control plane could not be reached
        """
        name = manifest["metadata"]["name"]
        url = f"{self.collection_url(FUNCTIONS, namespace)}/{name}"
        try:
            response = await self.client.put(url, json=manifest)
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            raise SubmissionError(
                name, exc.response.status_code, _remote_message(exc.response)
            ) from exc
        except httpx.RequestError as exc:
            raise FetchError(FUNCTIONS, exc) from exc

        try:
            return response.json()
        except ValueError:
            return {}
