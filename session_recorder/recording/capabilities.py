"""Capabilities the recorder consumes from the browser layer.

The instance pool and the individual browser tools live outside this
package. Replay and recording only need the narrow surface below.
Implementations may return ``ToolResult`` objects or plain
``{"success", "data", "error"}`` mappings.
"""

from typing import Any, Optional, Protocol


class InstancePool(Protocol):
    """Creates and looks up browser instances."""

    async def create_instance(self, config: dict, metadata: Optional[dict] = None) -> Any:
        """Create an instance; the result's data carries ``instanceId``."""
        ...

    def get_instance(self, instance_id: str) -> Any:
        """Return a handle exposing ``.page``, or None if unknown."""
        ...


class ToolExecutor(Protocol):
    """Executes a browser tool by name."""

    async def execute_tool(self, name: str, parameters: dict) -> Any:
        """Run a tool and return its outcome."""
        ...
