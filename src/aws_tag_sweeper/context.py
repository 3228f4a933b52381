"""
Process-scoped run context: session, home region, client cache and account id
"""
import logging
import threading
from typing import Dict, Optional, Tuple

import boto3

from .models import GLOBAL_LOCALITY

logger = logging.getLogger(__name__)

UNKNOWN_ACCOUNT = 'unknown'
DEFAULT_PARTITION = 'aws'


class RunContext:
    """Shared AWS access for every discoverer and tagger in a run"""

    def __init__(self,
                 home_region: str,
                 session: Optional[boto3.Session] = None):
        """
        Initialize the context

        Args:
            home_region: Region used for global API calls (IAM, STS, region listing)
            session: Boto3 session
        """
        self.home_region = home_region
        self.session = session or boto3.Session()

        self._clients: Dict[Tuple[str, str], object] = {}
        self._client_lock = threading.Lock()

        self._account_id: Optional[str] = None
        self._account_lock = threading.Lock()

    def resolve_region(self, locality: Optional[str]) -> str:
        """Map a locality to the region API calls should be sent to"""
        if not locality or locality == GLOBAL_LOCALITY:
            return self.home_region
        return locality

    def partition(self, locality: Optional[str] = None) -> str:
        """ARN partition of a locality's region: aws, aws-cn, aws-us-gov, ..."""
        region = self.resolve_region(locality)
        try:
            return self.session.get_partition_for_region(region)
        except Exception as e:
            logger.debug(f"Could not resolve partition for {region}: {e}")
            return DEFAULT_PARTITION

    def client(self, service: str, locality: Optional[str] = None):
        """Get a cached boto3 client for a service in a locality"""
        region = self.resolve_region(locality)
        key = (service, region)

        # boto3 sessions are not safe for concurrent client creation
        with self._client_lock:
            client = self._clients.get(key)
            if client is None:
                client = self.session.client(service, region_name=region)
                self._clients[key] = client
        return client

    @property
    def account_id(self) -> str:
        """AWS account id, fetched from STS at most once per run"""
        with self._account_lock:
            if self._account_id is None:
                self._account_id = self._fetch_account_id()
            return self._account_id

    def _fetch_account_id(self) -> str:
        try:
            response = self.client('sts').get_caller_identity()
            return response.get('Account') or UNKNOWN_ACCOUNT
        except Exception as e:
            logger.error(f"Error getting account ID: {e}")
            return UNKNOWN_ACCOUNT
