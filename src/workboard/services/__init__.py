"""
Services - use-case orchestrators composing the rules with the storage ports.
"""

from .board_service import BoardLocks, BoardService
from .epic_service import EpicService
from .ticket_service import TicketService

__all__ = [
    "BoardLocks",
    "BoardService",
    "EpicService",
    "TicketService",
]
