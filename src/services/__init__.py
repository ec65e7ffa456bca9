"""
Services package for PokerPlan

Contains decomposed service classes that follow Single Responsibility Principle.
"""

from .room_repository_service import RoomRepositoryService
from .room_lifecycle_service import RoomLifecycleService
from .participant_management_service import ParticipantManagementService
from .concurrency_control_service import ConcurrencyControlService
from .player_directory_service import PlayerDirectoryService
from .room_permission_service import RoomPermissionService, RoomAction
from .room_state_presenter import RoomStatePresenter

__all__ = [
    'RoomRepositoryService',
    'RoomLifecycleService',
    'ParticipantManagementService',
    'ConcurrencyControlService',
    'PlayerDirectoryService',
    'RoomPermissionService',
    'RoomAction',
    'RoomStatePresenter'
]
