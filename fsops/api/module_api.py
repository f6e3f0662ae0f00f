from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict, List, Optional

from fsops.exceptions import TransportError

if TYPE_CHECKING:
    from fsops.api.api import Api


class ModuleApi:
    """Base class for concrete API clients."""

    def __init__(self, api: "Api"):
        self._api = api

    def _endpoint_prefix(self) -> str:
        raise NotImplementedError()

    @property
    def endpoint(self) -> str:
        return self._endpoint_prefix().rstrip("/")


class ListableModuleApi(ModuleApi):
    """Mixin with helpers for endpoints that return a collection."""

    def _list_params(self) -> Optional[Dict[str, Any]]:
        return None

    def _coerce_to_model(self, data: Any) -> Any:
        raise NotImplementedError()

    def get_list(self) -> List[Any]:
        response = self._api.get(method=self.endpoint, params=self._list_params())
        return self._coerce_list(self._decode_json(response))

    async def get_list_async(self) -> List[Any]:
        response = await self._api.get_async(method=self.endpoint, params=self._list_params())
        return self._coerce_list(self._decode_json(response))

    @staticmethod
    def _decode_json(response) -> Any:
        try:
            return response.json()
        except ValueError as exc:
            raise TransportError(f"invalid JSON from {response.url}: {exc}") from exc

    def _coerce_list(self, payload: Any) -> List[Any]:
        return [self._coerce_to_model(item) for item in self._unwrap_collection(payload)]

    def _unwrap_collection(self, data: Any) -> List[Any]:
        if isinstance(data, dict):
            if "items" in data and isinstance(data["items"], list):
                return data["items"]
            if "data" in data and isinstance(data["data"], list):
                return data["data"]
            return [data]
        if isinstance(data, list):
            return data
        if data is None:
            return []
        return [data]
