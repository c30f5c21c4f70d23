"""
Meeting provider interface definition.

A MeetingProvider resolves one credential per batch and then creates one
remote meeting per record. Concrete adapters implement the blocking
`*_sync` methods; the async entrypoints offload them to a worker thread so
the event loop only suspends at these I/O boundaries.
"""

from abc import ABC, abstractmethod
from typing import ClassVar

import anyio

from webinar_wrapper.webinars.models import (
    MeetingProviderType,
    MeetingRecord,
    ProviderCredential,
    WebinarRecord,
)


class CredentialResolver(ABC):
    """Produces a usable credential for one provider."""

    provider_type: ClassVar[MeetingProviderType]

    async def resolve(self) -> ProviderCredential:
        return await anyio.to_thread.run_sync(self.resolve_sync)

    @abstractmethod
    def resolve_sync(self) -> ProviderCredential:
        """Obtain a credential.

        Raises:
            CredentialError: the credential cannot be obtained and the batch
                must abort before any provisioning call.
        """
        ...


class MeetingProvider(ABC):
    """Abstract interface for video-conferencing providers."""

    provider_type: ClassVar[MeetingProviderType]
    display_name: ClassVar[str]
    # Noun used in summary and error messages.
    resource_name: ClassVar[str] = "meeting"

    def __init__(self, credential_resolver: CredentialResolver) -> None:
        self._credential_resolver = credential_resolver

    async def resolve_credential(self) -> ProviderCredential:
        return await self._credential_resolver.resolve()

    async def provision(self, record: WebinarRecord, credential: ProviderCredential) -> MeetingRecord:
        return await anyio.to_thread.run_sync(self.provision_sync, record, credential)

    @abstractmethod
    def provision_sync(self, record: WebinarRecord, credential: ProviderCredential) -> MeetingRecord:
        """Create the remote meeting for one record.

        Raises:
            ProviderError: the provider rejected the call or the record
                cannot be turned into a meeting.
        """
        ...

    def close(self) -> None:
        """Release transport resources owned by the adapter."""
