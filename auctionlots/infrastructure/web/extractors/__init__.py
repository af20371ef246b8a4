"""Site extractors, one per auction house and scrape mode.

``SCHEDULED_EXTRACTORS`` lists the scheduled sources in their declared
order; aggregated results keep this order regardless of which source
finishes first.
"""

from .base import (
    ExtractionContext,
    PageFetcher,
    ScheduledExtractor,
    SiteExtractor,
    SourceRun,
    UnsupportedPageError,
)
from .bonhams import BonhamsExtractor
from .broad_arrow import BroadArrowExtractor
from .rm_sothebys import RMSothebysExtractor
from .rm_sothebys_live import RMSothebysLiveExtractor, has_rendered_lots

SCHEDULED_EXTRACTORS: tuple[type[ScheduledExtractor], ...] = (
    RMSothebysExtractor,
    BonhamsExtractor,
    BroadArrowExtractor,
)


def scheduled_extractors(keys=None) -> list[ScheduledExtractor]:
    """Instantiate scheduled extractors in declared order.

    Args:
        keys: Optional iterable of source keys to keep.

    Raises:
        ValueError: If ``keys`` names an unknown source.
    """
    available = {cls.key: cls for cls in SCHEDULED_EXTRACTORS}
    if keys is None:
        return [cls() for cls in SCHEDULED_EXTRACTORS]
    wanted = set(keys)
    unknown = sorted(wanted - set(available))
    if unknown:
        raise ValueError(
            f"Unknown source(s): {', '.join(unknown)} (choose from {', '.join(available)})"
        )
    return [cls() for cls in SCHEDULED_EXTRACTORS if cls.key in wanted]


__all__ = [
    "BonhamsExtractor",
    "BroadArrowExtractor",
    "ExtractionContext",
    "PageFetcher",
    "RMSothebysExtractor",
    "RMSothebysLiveExtractor",
    "SCHEDULED_EXTRACTORS",
    "ScheduledExtractor",
    "SiteExtractor",
    "SourceRun",
    "UnsupportedPageError",
    "has_rendered_lots",
    "scheduled_extractors",
]
