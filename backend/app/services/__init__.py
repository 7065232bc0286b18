"""Service layer package."""

from app.services import (
    user_service,
    auth_service,
    tag_service,
    revision_service,
    interaction_service,
    city_service,
    geocoding_service,
    entry_service,
    comment_service,
)
