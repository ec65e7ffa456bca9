"""
Room Lifecycle Service for PokerPlan

Handles room creation, removal, and the lock / reveal / story-url flags.
"""

import logging
import random
from typing import List, Optional

from src.config.room_settings import get_room_settings
from src.core.errors import PlayerNotFoundError, RoomIdConflictError
from src.core.models import Participant, Room, RoomPermissions
from src.core.results import MutationResult
from src.utils.room_id_generator import append_random_suffix, format_string_to_room_id

logger = logging.getLogger(__name__)


class RoomLifecycleService:
    """Manages room creation, deletion, and lifecycle flag transitions."""

    def __init__(self, room_repository, concurrency_control_service, player_directory, rng: Optional[random.Random] = None):
        self.room_repository = room_repository
        self.concurrency_control_service = concurrency_control_service
        self.player_directory = player_directory
        self.room_settings = get_room_settings()
        self._rng = rng or random.Random()

    def _create_initial_room(self, room_id: str, room_name: str, vote_system: str,
                             permissions: RoomPermissions, creator_doc_id: str) -> Room:
        """Create initial room record with the creator as its only (admin) participant."""
        admin = Participant(player_doc_id=creator_doc_id, vote='', is_admin=True, is_allowed_vote=True)
        return Room(
            room_id=room_id,
            pretty_name=room_name,
            vote_system=vote_system,
            is_locked=False,
            is_revealed=False,
            current_story_url='',
            participants={creator_doc_id: admin},
            permissions=permissions,
        )

    def _candidate_room_ids(self, base_room_id: str):
        yield base_room_id
        for _ in range(self.room_settings.room_id_max_attempts - 1):
            yield append_random_suffix(base_room_id, self.room_settings.room_id_suffix_digits, self._rng)

    def create_room(self, room_name: str, vote_system: str, player_reveal: bool, player_change_vote: bool,
                    player_add_ticket: bool, session_id: str) -> str:
        """
        Create a new room owned by the player bound to session_id.

        Args:
            room_name: Display name; the room id is derived from it
            vote_system: Card set identifier
            player_reveal: Whether non-admin participants may reveal votes
            player_change_vote: Whether votes may change after reveal
            player_add_ticket: Whether non-admin participants may set the story URL
            session_id: Session of the acting player

        Returns:
            The final room id (the slug, or the slug plus a random suffix)

        Raises:
            PlayerNotFoundError: If no player is bound to session_id
            ValueError: If room_name yields an empty room id
            RoomIdConflictError: If every candidate id is taken
        """
        creator = self.player_directory.get_by_session_id(session_id)
        if creator is None:
            logger.error(f"Creator player not found: {session_id}")
            raise PlayerNotFoundError(session_id)

        base_room_id = format_string_to_room_id(room_name, self.room_settings.max_room_name_length)
        if not base_room_id:
            raise ValueError(f"Room name '{room_name}' does not produce a usable room id")

        permissions = RoomPermissions(
            player_reveal=player_reveal,
            player_change_vote=player_change_vote,
            player_add_ticket=player_add_ticket,
        )

        for candidate in self._candidate_room_ids(base_room_id):
            room = self._create_initial_room(candidate, room_name, vote_system, permissions, creator.doc_id)
            if self.room_repository.insert_if_absent(room):
                logger.info(f"Created room {candidate} ({room_name!r}) for player {creator.player_id}")
                return candidate
            logger.debug(f"Room id {candidate} already taken")

        raise RoomIdConflictError(base_room_id, self.room_settings.room_id_max_attempts)

    def get_room(self, room_id: str) -> Optional[Room]:
        return self.room_repository.get(room_id)

    def room_exists(self, room_id: str) -> bool:
        return self.room_repository.exists(room_id)

    def get_all_room_ids(self) -> List[str]:
        return self.room_repository.get_all_room_ids()

    def remove_room(self, room_id: str) -> MutationResult:
        """
        Delete a room.

        Returns:
            SUCCESS if the room was deleted, NOT_FOUND if it didn't exist
        """
        with self.concurrency_control_service.room_operation(room_id):
            deleted = self.room_repository.delete(room_id)
            self.concurrency_control_service.cleanup_room_lock(room_id)

        if not deleted:
            logger.warning(f"Remove requested for unknown room {room_id}")
            return MutationResult.not_found(room_id, f"Room {room_id} not found")

        logger.info(f"Removed room {room_id}")
        return MutationResult.success(room_id)

    def _patch_room(self, room_id: str, **fields) -> MutationResult:
        """Set fields on a room. Setting a field to its current value is a successful no-op."""
        with self.concurrency_control_service.room_operation(room_id):
            room = self.room_repository.get(room_id)
            if room is None:
                logger.warning(f"Update of {', '.join(fields)} requested for unknown room {room_id}")
                return MutationResult.not_found(room_id, f"Room {room_id} not found")

            changed = any(getattr(room, name) != value for name, value in fields.items())
            if not changed:
                return MutationResult.success(room_id, changed=False)

            for name, value in fields.items():
                setattr(room, name, value)

            if not self.room_repository.save(room):
                return MutationResult.not_found(room_id, f"Room {room_id} not found")

        logger.info(f"Updated room {room_id}: {fields}")
        return MutationResult.success(room_id)

    def update_lock(self, room_id: str, is_locked: bool) -> MutationResult:
        return self._patch_room(room_id, is_locked=is_locked)

    def update_reveal(self, room_id: str, is_revealed: bool) -> MutationResult:
        return self._patch_room(room_id, is_revealed=is_revealed)

    def update_current_story_url(self, room_id: str, current_story_url: str) -> MutationResult:
        return self._patch_room(room_id, current_story_url=current_story_url)
