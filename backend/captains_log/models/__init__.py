from captains_log.models.user import User
from captains_log.models.trip import PrivacyLevel, Trip, TripStatus, trip_companions, trip_tag_assignments
from captains_log.models.location import Location
from captains_log.models.activity import Activity
from captains_log.models.transportation import Transportation
from captains_log.models.lodging import Lodging
from captains_log.models.journal import JournalEntry
from captains_log.models.photo import Photo, PhotoAlbum, album_photos
from captains_log.models.entity_link import EntityLink
from captains_log.models.companion import Companion
from captains_log.models.checklist import Checklist, ChecklistItem
from captains_log.models.tag import TripTag

__all__ = [
    "Activity",
    "Checklist",
    "ChecklistItem",
    "Companion",
    "EntityLink",
    "JournalEntry",
    "Location",
    "Lodging",
    "Photo",
    "PhotoAlbum",
    "PrivacyLevel",
    "Transportation",
    "Trip",
    "TripStatus",
    "TripTag",
    "User",
    "album_photos",
    "trip_companions",
    "trip_tag_assignments",
]
