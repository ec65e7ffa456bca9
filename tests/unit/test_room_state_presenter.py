"""
Room State Presenter Unit Tests

Tests the client view of rooms, in particular that votes stay hidden until
the room is revealed.
"""

import math

from src.core.models import Participant, Room, RoomPermissions
from src.services.player_directory_service import PlayerDirectoryService
from src.services.room_state_presenter import RoomStatePresenter


class TestRoomStatePresenter:

    def setup_method(self):
        self.directory = PlayerDirectoryService()
        self.presenter = RoomStatePresenter(self.directory)

        self.ada = self.directory.create_player('s-ada', 'Ada', 'ada')
        self.bob = self.directory.create_player('s-bob', 'Bob', 'bob')
        self.room = Room(room_id='sprint-12', pretty_name='Sprint 12', vote_system='fibonacci',
                         permissions=RoomPermissions(player_reveal=True))
        self.room.participants[self.ada.doc_id] = Participant(player_doc_id=self.ada.doc_id, vote='3', is_admin=True)
        self.room.participants[self.bob.doc_id] = Participant(player_doc_id=self.bob.doc_id, vote='8')

    def test_room_state_shape(self):
        state = self.presenter.create_room_state(self.room)

        assert state['room_id'] == 'sprint-12'
        assert state['pretty_name'] == 'Sprint 12'
        assert state['vote_system'] == 'fibonacci'
        assert state['is_locked'] is False
        assert state['is_revealed'] is False
        assert state['permissions'] == {
            'player_reveal': True,
            'player_change_vote': False,
            'player_add_ticket': False,
        }
        assert state['vote_summary'] is None

    def test_participants_in_join_order_with_hidden_votes(self):
        participants = self.presenter.create_room_state(self.room)['participants']

        assert [p['player_id'] for p in participants] == ['ada', 'bob']
        assert [p['name'] for p in participants] == ['Ada', 'Bob']
        assert all(p['has_voted'] for p in participants)
        assert all(p['vote'] is None for p in participants)
        assert participants[0]['is_admin'] is True

    def test_viewer_sees_own_vote_only(self):
        participants = self.presenter.create_room_state(self.room, viewer=self.bob)['participants']

        assert participants[0]['vote'] is None
        assert participants[0]['is_you'] is False
        assert participants[1]['vote'] == '8'
        assert participants[1]['is_you'] is True

    def test_revealed_room_shows_votes_and_summary(self):
        self.room.is_revealed = True

        state = self.presenter.create_room_state(self.room)

        assert [p['vote'] for p in state['participants']] == ['3', '8']
        assert state['vote_summary'] == {'total_votes': 2, 'counts': {'3': 1, '8': 1}, 'average': 5.5}

    def test_summary_ignores_non_numeric_and_observers(self):
        carol = self.directory.create_player('s-carol', 'Carol', 'carol')
        self.room.participants[carol.doc_id] = Participant(player_doc_id=carol.doc_id, vote='?')
        dave = self.directory.create_player('s-dave', 'Dave', 'dave')
        self.room.participants[dave.doc_id] = Participant(player_doc_id=dave.doc_id, vote='100',
                                                          is_allowed_vote=False)

        summary = self.presenter.create_vote_summary(self.room)

        assert summary['total_votes'] == 3
        assert summary['counts']['?'] == 1
        assert summary['average'] == 5.5

    def test_summary_without_numeric_votes(self):
        for participant in self.room.participants.values():
            participant.vote = 'coffee'

        assert self.presenter.create_vote_summary(self.room)['average'] is None

    def test_summary_skips_non_finite_votes(self):
        for player_id, vote in (('carol', 'nan'), ('dave', 'inf'), ('erin', '-inf'), ('frank', '1e999')):
            player = self.directory.create_player(f's-{player_id}', player_id.title(), player_id)
            self.room.participants[player.doc_id] = Participant(player_doc_id=player.doc_id, vote=vote)

        summary = self.presenter.create_vote_summary(self.room)

        assert summary['total_votes'] == 6
        assert summary['counts']['nan'] == 1
        assert summary['average'] == 5.5

    def test_summary_average_of_huge_votes_stays_finite(self):
        for participant in self.room.participants.values():
            participant.vote = '9.99e307'

        assert math.isfinite(self.presenter.create_vote_summary(self.room)['average'])

    def test_unknown_player_reference_is_tolerated(self):
        self.room.participants['ghost'] = Participant(player_doc_id='ghost')

        participants = self.presenter.create_participant_list(self.room)

        assert participants[-1]['player_id'] is None
        assert participants[-1]['name'] is None

    def test_room_removed_payload(self):
        assert self.presenter.create_room_removed('sprint-12') == {'room_id': 'sprint-12', 'removed': True}
