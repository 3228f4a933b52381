"""
Region enumeration: the scan universe for a run
"""
import logging
from typing import List

from ..context import RunContext
from ..exceptions import RegionEnumerationError

logger = logging.getLogger(__name__)


class RegionEnumerator:
    """Lists the regions enabled for the account"""

    def __init__(self, context: RunContext):
        self.context = context

    def list_regions(self) -> List[str]:
        """
        Query EC2 once for the region list

        Raises:
            RegionEnumerationError: if the call fails or returns no region names
        """
        try:
            response = self.context.client('ec2').describe_regions()
        except Exception as e:
            raise RegionEnumerationError(f"Could not list regions: {e}") from e

        regions = [r.get('RegionName') for r in response.get('Regions') or []]
        regions = [r for r in regions if r]
        if not regions:
            raise RegionEnumerationError("Region listing returned no regions")
        return regions
