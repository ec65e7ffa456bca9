"""
Room Manager for PokerPlan

The rooms operation surface. Acts as a facade over the repository,
lifecycle, and participant services.
"""

import logging
from typing import List, Optional

from src.core.models import Participant, Room
from src.core.results import MutationResult
from src.services.concurrency_control_service import ConcurrencyControlService
from src.services.participant_management_service import ParticipantManagementService
from src.services.room_lifecycle_service import RoomLifecycleService
from src.services.room_repository_service import RoomRepositoryService

logger = logging.getLogger(__name__)


class RoomManager:
    """Manages rooms, their lifecycle flags, and their participants."""

    def __init__(self, player_directory, rng=None):
        self.player_directory = player_directory
        self.concurrency_control = ConcurrencyControlService()
        self.repository = RoomRepositoryService()
        self.lifecycle = RoomLifecycleService(self.repository, self.concurrency_control, player_directory, rng=rng)
        self.participants = ParticipantManagementService(self.repository, self.concurrency_control, player_directory)

    # Queries
    def get_room(self, room_id: str) -> Optional[Room]:
        """
        Get a room by its ID.

        Args:
            room_id: ID of the room

        Returns:
            A copy of the room, or None if it doesn't exist
        """
        return self.lifecycle.get_room(room_id)

    def room_exists(self, room_id: str) -> bool:
        return self.lifecycle.room_exists(room_id)

    def get_all_rooms(self) -> List[str]:
        """
        Get list of all room IDs.

        Returns:
            List of room ID strings
        """
        return self.lifecycle.get_all_room_ids()

    def count_rooms(self) -> int:
        return self.repository.count()

    def get_participants(self, room_id: str) -> List[Participant]:
        return self.participants.get_participants(room_id)

    # Room Lifecycle Operations
    def create_room(self, room_name: str, vote_system: str, player_reveal: bool = False,
                    player_change_vote: bool = False, player_add_ticket: bool = False,
                    *, session_id: str) -> str:
        """
        Create a room with the session's player as its admin.

        Args:
            room_name: Display name the room id is derived from
            vote_system: Card set identifier
            player_reveal: Whether non-admins may reveal votes
            player_change_vote: Whether votes may change after reveal
            player_add_ticket: Whether non-admins may set the story URL
            session_id: Session of the acting player

        Returns:
            The final room id

        Raises:
            PlayerNotFoundError: If no player is bound to session_id
            RoomIdConflictError: If no free room id could be allocated
        """
        return self.lifecycle.create_room(
            room_name, vote_system, player_reveal, player_change_vote, player_add_ticket, session_id
        )

    def remove_room(self, room_id: str) -> MutationResult:
        return self.lifecycle.remove_room(room_id)

    def update_lock(self, room_id: str, is_locked: bool) -> MutationResult:
        return self.lifecycle.update_lock(room_id, is_locked)

    def update_reveal(self, room_id: str, is_revealed: bool) -> MutationResult:
        return self.lifecycle.update_reveal(room_id, is_revealed)

    def update_current_story_url(self, room_id: str, current_story_url: str) -> MutationResult:
        return self.lifecycle.update_current_story_url(room_id, current_story_url)

    # Participant Operations
    def add_participant(self, room_id: str, player_id: str) -> MutationResult:
        """
        Add a player to a room. Adding an existing member changes nothing.

        Args:
            room_id: ID of the room
            player_id: External ID of the player

        Returns:
            MutationResult describing what happened
        """
        return self.participants.add_participant(room_id, player_id)

    def cast_vote(self, room_id: str, player_id: str, vote: str) -> MutationResult:
        return self.participants.cast_vote(room_id, player_id, vote)

    def clear(self) -> None:
        """Drop every room (useful for testing)."""
        for room_id in self.repository.get_all_room_ids():
            self.concurrency_control.cleanup_room_lock(room_id)
        self.repository.clear()
