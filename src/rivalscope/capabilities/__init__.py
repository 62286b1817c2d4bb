"""External search and reasoning capabilities addressed by logical id."""

from .base import (
    DEEP_RESEARCH,
    DEFAULT_RESEARCH_CAPABILITIES,
    SOCIAL_SEARCH,
    THINKING,
    WEB_SEARCH,
    CapabilityProvider,
    CapabilityRegistry,
    MissingCapabilityError,
)
from .gateway_tools import McpToolCapability, register_from_gateway
from .social import XaiSocialSearch
from .tavily import TavilyCapability

__all__ = [
    "DEEP_RESEARCH",
    "DEFAULT_RESEARCH_CAPABILITIES",
    "SOCIAL_SEARCH",
    "THINKING",
    "WEB_SEARCH",
    "CapabilityProvider",
    "CapabilityRegistry",
    "MissingCapabilityError",
    "McpToolCapability",
    "TavilyCapability",
    "XaiSocialSearch",
    "register_from_gateway",
]
