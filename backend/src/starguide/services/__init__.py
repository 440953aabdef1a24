"""Team generation, rating and pull-advice services."""

from starguide.services.composition_selector import CompositionSelector
from starguide.services.modal_queue import ModalQueue
from starguide.services.pull_advisor import PullAdvisor
from starguide.services.relationship_lookup import RelationshipLookup
from starguide.services.support_team_generator import SupportTeamGenerator
from starguide.services.team_generator import TeamGenerator
from starguide.services.team_rating_service import TeamRatingService

__all__ = [
    "CompositionSelector",
    "ModalQueue",
    "PullAdvisor",
    "RelationshipLookup",
    "SupportTeamGenerator",
    "TeamGenerator",
    "TeamRatingService",
]
