"""
Participant Management Service for PokerPlan

Handles room membership and per-participant votes.
"""

import logging
from typing import List

from src.config.room_settings import get_room_settings
from src.core.models import Participant, Room
from src.core.results import MutationResult, MutationStatus

logger = logging.getLogger(__name__)


class ParticipantManagementService:
    """Manages participant operations within rooms."""

    def __init__(self, room_repository, concurrency_control_service, player_directory):
        self.room_repository = room_repository
        self.concurrency_control_service = concurrency_control_service
        self.player_directory = player_directory
        self.room_settings = get_room_settings()

    def _create_participant(self, player_doc_id: str) -> Participant:
        """Create participant data structure with default vote and role."""
        return Participant(
            player_doc_id=player_doc_id,
            vote='',
            is_admin=False,
            is_allowed_vote=True,
        )

    def _check_admission(self, room: Room) -> MutationStatus:
        """Decide whether a new (not yet member) player may join the room."""
        if room.is_locked and self.room_settings.enforce_room_lock:
            return MutationStatus.LOCKED

        if len(room.participants) >= self.room_settings.max_participants_per_room:
            return MutationStatus.FULL

        return MutationStatus.SUCCESS

    def add_participant(self, room_id: str, player_id: str) -> MutationResult:
        """
        Add a player to a room.

        Adding an existing member is a successful no-op.

        Args:
            room_id: ID of the room
            player_id: External ID of the player

        Returns:
            SUCCESS (changed=True if a participant was added), NOT_FOUND if the
            room does not exist, PLAYER_NOT_FOUND if the player does not, LOCKED or
            FULL if admission was refused
        """
        player = self.player_directory.get_by_player_id(player_id)
        if player is None:
            logger.warning(f"Player not found: {player_id}")
            return MutationResult.player_not_found(room_id, player_id)

        with self.concurrency_control_service.room_operation(room_id):
            room = self.room_repository.get(room_id)
            if room is None:
                logger.warning(f"Room not found: {room_id}")
                return MutationResult.not_found(room_id, f"Room {room_id} not found")

            if room.has_participant(player.doc_id):
                logger.info(f"Participant {player_id} already in room {room_id}")
                return MutationResult.success(room_id, changed=False)

            admission = self._check_admission(room)
            if admission != MutationStatus.SUCCESS:
                logger.info(f"Refused participant {player_id} in room {room_id}: {admission.value}")
                return MutationResult.rejected(admission, room_id, f"Room {room_id} is {admission.value}")

            room.participants[player.doc_id] = self._create_participant(player.doc_id)
            if not self.room_repository.save(room):
                return MutationResult.not_found(room_id, f"Room {room_id} not found")

        logger.info(f"Player {player.name} ({player_id}) joined room {room_id}")
        return MutationResult.success(room_id)

    def cast_vote(self, room_id: str, player_id: str, vote: str) -> MutationResult:
        """
        Record a participant's vote. An empty vote withdraws it.

        Returns:
            SUCCESS, NOT_FOUND, PLAYER_NOT_FOUND, NOT_A_PARTICIPANT, or
            FORBIDDEN when the participant is an observer
        """
        player = self.player_directory.get_by_player_id(player_id)
        if player is None:
            logger.warning(f"Player not found: {player_id}")
            return MutationResult.player_not_found(room_id, player_id)

        with self.concurrency_control_service.room_operation(room_id):
            room = self.room_repository.get(room_id)
            if room is None:
                logger.warning(f"Room not found: {room_id}")
                return MutationResult.not_found(room_id, f"Room {room_id} not found")

            participant = room.get_participant(player.doc_id)
            if participant is None:
                return MutationResult.rejected(
                    MutationStatus.NOT_A_PARTICIPANT, room_id,
                    f"Player {player_id} is not in room {room_id}"
                )

            if not participant.is_allowed_vote:
                return MutationResult.rejected(
                    MutationStatus.FORBIDDEN, room_id,
                    f"Player {player_id} is not allowed to vote in room {room_id}"
                )

            if participant.vote == vote:
                return MutationResult.success(room_id, changed=False)

            participant.vote = vote
            if not self.room_repository.save(room):
                return MutationResult.not_found(room_id, f"Room {room_id} not found")

        logger.debug(f"Player {player_id} voted in room {room_id}")
        return MutationResult.success(room_id)

    def get_participants(self, room_id: str) -> List[Participant]:
        """
        Get all participants in a room, in join order.

        Returns:
            List of participants (empty if the room doesn't exist)
        """
        room = self.room_repository.get(room_id)
        if not room:
            return []
        return room.participant_list()

    def is_participant(self, room_id: str, player_id: str) -> bool:
        player = self.player_directory.get_by_player_id(player_id)
        room = self.room_repository.get(room_id)
        if not player or not room:
            return False
        return room.has_participant(player.doc_id)
