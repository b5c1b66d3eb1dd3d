from .users import User, GhostBuster, GhostBusterFightsGhost
from .ghosts import Ghost, GhostComment
from .sightings import Sighting, SightingReportsGhost, SightingComment
from .tours import Tour, TourIncludes, TourSignUp

__all__ = [
    'User', 'GhostBuster', 'GhostBusterFightsGhost',
    'Ghost', 'GhostComment',
    'Sighting', 'SightingReportsGhost', 'SightingComment',
    'Tour', 'TourIncludes', 'TourSignUp',
]
