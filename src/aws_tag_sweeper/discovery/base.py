"""
Base discoverer and shared helpers for paging and tag extraction
"""
import logging
from typing import Any, Dict, Iterable, Iterator, List, Optional

from ..context import RunContext
from ..exceptions import DiscoveryError
from ..models import GLOBAL_LOCALITY, RESERVED_TAG_PREFIX, ResourceRecord

logger = logging.getLogger(__name__)


def iter_pages(client,
               operation_name: str,
               token_param: Optional[str] = None,
               token_field: Optional[str] = None,
               **kwargs) -> Iterator[Dict[str, Any]]:
    """
    Iterate over every response page of a list operation

    Uses the client's botocore paginator. Operations botocore cannot paginate
    (e.g. lightsail get_buckets) are paged by hand through token_param and
    token_field.

    Args:
        client: Boto3 client
        operation_name: Client method name, e.g. 'describe_instances'
        token_param: Request parameter carrying the token, for manual paging
        token_field: Response field holding the next token, for manual paging
        **kwargs: Fixed request parameters

    Yields:
        Each response page
    """
    if client.can_paginate(operation_name):
        paginator = client.get_paginator(operation_name)
        yield from paginator.paginate(**kwargs)
        return

    if not token_param or not token_field:
        raise ValueError(f"{operation_name} has no paginator and no continuation token fields")

    operation = getattr(client, operation_name)
    token = None
    while True:
        params = dict(kwargs)
        if token:
            params[token_param] = token
        page = operation(**params)
        yield page

        token = page.get(token_field)
        if not token:
            break


def extract_tags(raw_tags: Optional[Iterable[Any]],
                 key_field: str = 'Key',
                 value_field: str = 'Value') -> Dict[str, str]:
    """
    Normalize a provider tag list (or mapping) into a dict

    Tags under the reserved 'aws:' prefix are dropped.
    """
    tags = {}
    if not raw_tags:
        return tags

    if isinstance(raw_tags, dict):
        items = raw_tags.items()
    else:
        items = ((tag.get(key_field), tag.get(value_field)) for tag in raw_tags)

    for key, value in items:
        if not key or key.startswith(RESERVED_TAG_PREFIX):
            continue
        tags[key] = value if value is not None else ''
    return tags


class Discoverer:
    """Lists resources of one kind (or a bulk listing) for one locality"""

    name = 'discoverer'
    service: Optional[str] = None
    is_global = False

    def __init__(self, context: RunContext):
        self.context = context

    def client(self, locality: str):
        return self.context.client(self.service, locality)

    def discover(self, locality: str = GLOBAL_LOCALITY) -> List[ResourceRecord]:
        """
        Discover resources in a locality

        Raises:
            DiscoveryError: when listing fails; callers treat it as an empty result
        """
        try:
            records = self._discover(locality)
        except DiscoveryError:
            raise
        except Exception as e:
            raise DiscoveryError(self.name, locality, e) from e

        logger.debug(f"{self.name} found {len(records)} resources in {locality}")
        return records

    def _discover(self, locality: str) -> List[ResourceRecord]:
        raise NotImplementedError

    def __repr__(self):
        return f"{self.__class__.__name__}()"
