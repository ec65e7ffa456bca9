"""
Participant Management Service Unit Tests

Tests room membership (idempotent adds, admission control) and votes.
"""

import threading

from config_factory import override_config
from src.config.room_settings import get_room_settings
from src.core.models import Participant, Room
from src.core.results import MutationStatus
from src.services.concurrency_control_service import ConcurrencyControlService
from src.services.participant_management_service import ParticipantManagementService
from src.services.player_directory_service import PlayerDirectoryService
from src.services.room_repository_service import RoomRepositoryService


class TestParticipantManagementService:

    def setup_method(self):
        self.repository = RoomRepositoryService()
        self.directory = PlayerDirectoryService()
        self.service = ParticipantManagementService(self.repository, ConcurrencyControlService(), self.directory)

        self.admin = self.directory.create_player('s-admin', 'Admin', 'admin')
        self.player = self.directory.create_player('s-ada', 'Ada', 'ada')
        room = Room(room_id='sprint-12', pretty_name='Sprint 12', vote_system='fibonacci')
        room.participants[self.admin.doc_id] = Participant(player_doc_id=self.admin.doc_id, is_admin=True)
        self.repository.insert_if_absent(room)

    def test_add_participant(self):
        result = self.service.add_participant('sprint-12', 'ada')

        assert result.ok and result.changed
        participants = self.service.get_participants('sprint-12')
        assert [p.player_doc_id for p in participants] == [self.admin.doc_id, self.player.doc_id]
        added = participants[1]
        assert added.is_admin is False
        assert added.is_allowed_vote is True
        assert added.vote == ''

    def test_add_participant_twice_keeps_single_entry(self):
        self.service.add_participant('sprint-12', 'ada')
        result = self.service.add_participant('sprint-12', 'ada')

        assert result.ok
        assert result.changed is False
        assert len(self.service.get_participants('sprint-12')) == 2

    def test_unknown_room_is_not_found_without_state_change(self):
        result = self.service.add_participant('ghost', 'ada')

        assert result.status == MutationStatus.NOT_FOUND
        assert self.repository.get('ghost') is None

    def test_unknown_player_is_not_found_without_state_change(self):
        result = self.service.add_participant('sprint-12', 'nobody')

        assert result.status == MutationStatus.PLAYER_NOT_FOUND
        assert len(self.service.get_participants('sprint-12')) == 1

    def test_locked_room_refuses_new_participants(self):
        room = self.repository.get('sprint-12')
        room.is_locked = True
        self.repository.save(room)

        result = self.service.add_participant('sprint-12', 'ada')

        assert result.status == MutationStatus.LOCKED
        assert not self.service.is_participant('sprint-12', 'ada')

    def test_locked_room_still_accepts_existing_member(self):
        room = self.repository.get('sprint-12')
        room.is_locked = True
        self.repository.save(room)

        result = self.service.add_participant('sprint-12', 'admin')

        assert result.ok
        assert result.changed is False

    def test_lock_enforcement_can_be_disabled(self):
        override_config('enforce_room_lock', False)
        assert get_room_settings().enforce_room_lock is False

        room = self.repository.get('sprint-12')
        room.is_locked = True
        self.repository.save(room)

        assert self.service.add_participant('sprint-12', 'ada').ok

    def test_full_room_refuses_new_participants(self):
        override_config('max_participants_per_room', 1)

        result = self.service.add_participant('sprint-12', 'ada')

        assert result.status == MutationStatus.FULL

    def test_concurrent_adds_of_same_player_create_one_entry(self):
        barrier = threading.Barrier(6)
        results = []

        def add():
            barrier.wait()
            results.append(self.service.add_participant('sprint-12', 'ada'))

        threads = [threading.Thread(target=add) for _ in range(6)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert sum(1 for r in results if r.changed) == 1
        assert len(self.service.get_participants('sprint-12')) == 2

    def test_concurrent_adds_of_different_players_are_not_lost(self):
        players = [self.directory.create_player(f's-{i}', f'P{i}', f'p{i}') for i in range(10)]
        threads = [
            threading.Thread(target=self.service.add_participant, args=('sprint-12', p.player_id))
            for p in players
        ]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert len(self.service.get_participants('sprint-12')) == 11

    def test_cast_vote(self):
        self.service.add_participant('sprint-12', 'ada')

        result = self.service.cast_vote('sprint-12', 'ada', '5')

        assert result.ok and result.changed
        room = self.repository.get('sprint-12')
        assert room.participants[self.player.doc_id].vote == '5'
        assert room.participants[self.player.doc_id].has_voted is True

    def test_same_vote_again_is_unchanged(self):
        self.service.add_participant('sprint-12', 'ada')
        self.service.cast_vote('sprint-12', 'ada', '5')

        result = self.service.cast_vote('sprint-12', 'ada', '5')

        assert result.ok
        assert result.changed is False

    def test_empty_vote_withdraws(self):
        self.service.add_participant('sprint-12', 'ada')
        self.service.cast_vote('sprint-12', 'ada', '5')

        self.service.cast_vote('sprint-12', 'ada', '')

        assert self.repository.get('sprint-12').participants[self.player.doc_id].has_voted is False

    def test_vote_by_non_participant(self):
        result = self.service.cast_vote('sprint-12', 'ada', '5')

        assert result.status == MutationStatus.NOT_A_PARTICIPANT

    def test_vote_by_observer_is_forbidden(self):
        self.service.add_participant('sprint-12', 'ada')
        room = self.repository.get('sprint-12')
        room.participants[self.player.doc_id].is_allowed_vote = False
        self.repository.save(room)

        result = self.service.cast_vote('sprint-12', 'ada', '5')

        assert result.status == MutationStatus.FORBIDDEN

    def test_vote_in_unknown_room(self):
        assert self.service.cast_vote('ghost', 'ada', '5').status == MutationStatus.NOT_FOUND

    def test_vote_by_unknown_player(self):
        assert self.service.cast_vote('sprint-12', 'nobody', '5').status == MutationStatus.PLAYER_NOT_FOUND

    def test_get_participants_of_unknown_room(self):
        assert self.service.get_participants('ghost') == []
