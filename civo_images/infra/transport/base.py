from abc import ABC, abstractmethod


class TransportBase(ABC):
    """Abstract signed-HTTP transport for the Civo API.

    Every method returns the raw response body. Failures raise a
    ``TransportError`` subclass already classified by the implementation.
    """

    @abstractmethod
    async def get(self, path: str) -> bytes: ...

    @abstractmethod
    async def post(self, path: str, json_body: object) -> bytes: ...

    @abstractmethod
    async def delete(self, path: str) -> bytes: ...

    async def aclose(self) -> None:
        """Release any held connections. No-op by default."""
