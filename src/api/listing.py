import logging
from collections.abc import Mapping
from typing import Any

from src.api.errors import raise_for_errors
from src.components.listing import (
    ListingSpec,
    ListQueryPort,
    ListResultPage,
    resolve_list_query,
    run_list,
)
from src.rules.models import Rules

logger = logging.getLogger(__name__)


def fetch_page(
    params: Mapping[str, str],
    spec: ListingSpec,
    *,
    repo: ListQueryPort[Any],
    rules: Rules,
    degrade: bool = False,
) -> ListResultPage[Any]:
    """
    Resolve query parameters and run the list query.

    With `degrade`, a failed query yields an empty page instead of an error
    response (storefront pages stay up while the back office reports it).
    """
    descriptor = resolve_list_query(
        params,
        spec,
        max_per_page=rules.listing.max_per_page,
        default_per_page=rules.listing.default_per_page,
    )
    result = run_list(descriptor, repo=repo, timeout_seconds=rules.timeouts.query_seconds)
    if result.success and result.page is not None:
        return result.page

    if degrade:
        logger.warning("Serving empty '%s' page after failed query", spec.name)
        return ListResultPage.empty(descriptor)
    raise_for_errors(result.errors)
