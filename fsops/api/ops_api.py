import logging
from typing import List

from fsops.api.module_api import ListableModuleApi
from fsops.domain.types.op import (
    OpDescription,
    UndecodableOpDescription,
    parse_op_description,
)

logger = logging.getLogger(__name__)


class OpsApi(ListableModuleApi):
    """Asynchronous operations tracked by the filesystem service."""

    def _endpoint_prefix(self) -> str:
        return "simplefs/ops"

    def _coerce_to_model(self, data) -> OpDescription:
        description = parse_op_description(data)
        if isinstance(description, UndecodableOpDescription):
            logger.warning("Could not decode operation: %s", description.error_message())
        return description

    def get_list(self) -> List[OpDescription]:
        """
        Fetch every operation the service currently tracks, in service order.

        Undecodable entries are kept in place as
        :class:`~fsops.domain.types.op.UndecodableOpDescription`.

        :raises TransportError: if the service cannot be queried.
        """
        return super().get_list()

    async def get_list_async(self) -> List[OpDescription]:
        """
        Async variant of :meth:`get_list` over httpx.

        The underlying ``httpx.AsyncClient`` stays open between calls; use the
        client as ``async with Api(...) as api:`` or call ``await api.aclose()``.

        :raises TransportError: if the service cannot be queried.
        """
        return await super().get_list_async()
