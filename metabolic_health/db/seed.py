"""Default educational content for the catalog."""
import logging

from metabolic_health.db.storage import ContentCatalog
from metabolic_health.schemas.content import ContentCreate

logger = logging.getLogger(__name__)

_PLACEHOLDER_VIDEO = "https://www.youtube.com/embed/dQw4w9WgXcQ"

DEFAULT_CONTENT = [
    ContentCreate(
        title="Low-Fat Smoothie Recipe",
        description="Easy-to-digest smoothie recipe specifically designed to help manage nausea during GLP-1 treatment.",
        type="nutrition",
        tags=["nausea", "high-fiber"],
        url=_PLACEHOLDER_VIDEO,
        duration="5 min read",
    ),
    ContentCreate(
        title="5-Minute Energy Boost Walk",
        description="Gentle walking routine designed to combat fatigue while maintaining your treatment schedule.",
        type="exercise",
        tags=["fatigue"],
        url=_PLACEHOLDER_VIDEO,
        duration="8 min watch",
    ),
    ContentCreate(
        title="Managing Treatment Plateaus",
        description="Proven strategies to overcome weight loss plateaus during GLP-1 treatment.",
        type="behavioral",
        tags=["plateau", "motivation"],
        url=_PLACEHOLDER_VIDEO,
        duration="12 min watch",
    ),
    ContentCreate(
        title="Anti-Nausea Meal Planning",
        description="Weekly meal plans designed to minimize digestive side effects.",
        type="nutrition",
        tags=["nausea", "meal-planning"],
        url=_PLACEHOLDER_VIDEO,
        duration="7 min read",
    ),
]


def seed_content(catalog: ContentCatalog) -> int:
    """Insert DEFAULT_CONTENT if the catalog is empty. Returns the number of items created."""
    if catalog.count_content() > 0:
        logger.info("Content catalog already populated; skipping seed")
        return 0
    for item in DEFAULT_CONTENT:
        catalog.create_content(item)
        logger.info("Created content: %s", item.title)
    return len(DEFAULT_CONTENT)
