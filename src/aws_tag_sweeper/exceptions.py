"""
Exception hierarchy for the tagging pipeline
"""


class TagSweeperError(Exception):
    """Base class for all tagging pipeline errors"""


class ConfigurationError(TagSweeperError):
    """Invalid configuration file or values"""


class RegionEnumerationError(TagSweeperError):
    """Region listing failed; the scan universe is unknown and the run must abort"""


FatalEnumerationError = RegionEnumerationError


class DiscoveryError(TagSweeperError):
    """One discoverer failed to list resources in one locality"""

    def __init__(self, discoverer: str, locality: str, cause: Exception):
        super().__init__(f"{discoverer} failed in {locality}: {cause}")
        self.discoverer = discoverer
        self.locality = locality
        self.cause = cause


class TaggingError(TagSweeperError):
    """A tag-apply call for one resource failed"""

    def __init__(self, identity: str, message: str):
        super().__init__(f"{identity}: {message}")
        self.identity = identity
