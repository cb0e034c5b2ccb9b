# src/workboard/core/container.py
"""
Dependency Injection Container

Builds the repositories for the configured storage backend and the services
on top of them, so business logic never picks an adapter itself.

Usage:
    from workboard.core.container import container

    board_service = container.board_service()
    configuration = await board_service.get_board_configuration(project_id)
"""

import logging
from typing import Optional

from ..config import WorkboardConfig, get_config

logger = logging.getLogger(__name__)

SUPPORTED_BACKENDS = ("supabase", "memory")


class Container:
    """
    Dependency injection container.

    Repositories and services are created on first use and cached.
    Configuration comes from ``get_config()`` unless passed in.
    """

    def __init__(self, config: Optional[WorkboardConfig] = None):
        self._config = config
        self._storage_backend: Optional[str] = None
        self._reset_instances()

    def _reset_instances(self):
        self._store = None
        self._supabase_client = None
        self._ticket_repository = None
        self._epic_repository = None
        self._board_repository = None
        self._auth_repository = None
        self._ticket_service = None
        self._epic_service = None
        self._board_service = None

    @property
    def config(self) -> WorkboardConfig:
        if self._config is None:
            self._config = get_config()
        return self._config

    @property
    def storage_backend(self) -> str:
        backend = self._storage_backend or self.config.storage_backend
        if backend not in SUPPORTED_BACKENDS:
            raise ValueError(f"Unknown storage backend: {backend}")
        return backend

    # =============================================================================
    # REPOSITORIES
    # =============================================================================

    def memory_store(self):
        """Shared store for the in-memory backend."""
        if self._store is None:
            from ..adapters.memory import MemoryStore
            self._store = MemoryStore()
        return self._store

    def _supabase_kwargs(self) -> dict:
        """
        Client and credentials for the Supabase adapters.

        Without an injected client the adapters resolve the shared one lazily,
        from the configured URL and key, falling back to the environment.
        """
        supabase = self.config.supabase
        return {
            "client": self._supabase_client,
            "url": supabase.url or None,
            "key": supabase.key or None,
        }

    def ticket_repository(self):
        if self._ticket_repository is None:
            if self.storage_backend == "memory":
                from ..adapters.memory import InMemoryTicketRepository
                self._ticket_repository = InMemoryTicketRepository(self.memory_store())
            else:
                from ..adapters.supabase import SupabaseTicketRepository
                self._ticket_repository = SupabaseTicketRepository(**self._supabase_kwargs())
        return self._ticket_repository

    def epic_repository(self):
        if self._epic_repository is None:
            if self.storage_backend == "memory":
                from ..adapters.memory import InMemoryEpicRepository
                self._epic_repository = InMemoryEpicRepository(self.memory_store())
            else:
                from ..adapters.supabase import SupabaseEpicRepository
                self._epic_repository = SupabaseEpicRepository(**self._supabase_kwargs())
        return self._epic_repository

    def board_repository(self):
        if self._board_repository is None:
            if self.storage_backend == "memory":
                from ..adapters.memory import InMemoryBoardRepository
                self._board_repository = InMemoryBoardRepository(self.memory_store())
            else:
                from ..adapters.supabase import SupabaseBoardRepository
                self._board_repository = SupabaseBoardRepository(**self._supabase_kwargs())
        return self._board_repository

    def auth_repository(self):
        """Auth is Supabase-only."""
        if self._auth_repository is None:
            from ..adapters.supabase import SupabaseAuthRepository
            self._auth_repository = SupabaseAuthRepository(**self._supabase_kwargs())
        return self._auth_repository

    # =============================================================================
    # SERVICES
    # =============================================================================

    def ticket_service(self):
        if self._ticket_service is None:
            from ..services import TicketService
            self._ticket_service = TicketService(self.ticket_repository(), self.epic_repository())
        return self._ticket_service

    def epic_service(self):
        if self._epic_service is None:
            from ..services import EpicService
            self._epic_service = EpicService(
                self.epic_repository(),
                self.ticket_service(),
                completed_status=self.config.completed_status,
            )
        return self._epic_service

    def board_service(self):
        if self._board_service is None:
            from ..services import BoardService
            self._board_service = BoardService(
                self.board_repository(),
                default_columns=self.config.board.default_columns,
            )
        return self._board_service

    # =============================================================================
    # UTILITY
    # =============================================================================

    def reset(self):
        """Reset all cached instances (useful for testing)."""
        self._reset_instances()
        logger.info("Container reset")

    def configure(self, storage_backend: Optional[str] = None, supabase_client=None):
        """
        Reconfigure the container at runtime.

        Args:
            storage_backend: "supabase" or "memory"
            supabase_client: AsyncClient to hand to the Supabase adapters
        """
        self._reset_instances()
        if storage_backend:
            self._storage_backend = storage_backend
        self._supabase_client = supabase_client
        logger.info(f"Container reconfigured: storage={self.storage_backend}")


# Global container instance
container = Container()
