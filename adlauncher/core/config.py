"""
Configuration management for AdLauncher
"""

import os
from typing import Optional
from dotenv import load_dotenv

# Load environment variables
load_dotenv()


def _optional_float(name: str) -> Optional[float]:
    value = os.getenv(name, '').strip()
    return float(value) if value else None


class Config:
    """Application configuration"""

    # Meta Ads API (Facebook/Instagram)
    META_GRAPH_API_TOKEN: str = os.getenv('META_GRAPH_API_TOKEN', '')
    META_GRAPH_API_BASE: str = os.getenv('META_GRAPH_API_BASE', 'https://graph.facebook.com')
    META_GRAPH_API_VERSION: str = os.getenv('META_GRAPH_API_VERSION', 'v24.0')
    META_AD_ACCOUNT_ID: str = os.getenv('META_AD_ACCOUNT_ID', '')  # e.g., "act_123456789"

    # None = whatever httpx defaults to; the pipeline never imposes its own
    META_HTTP_TIMEOUT: Optional[float] = _optional_float('META_HTTP_TIMEOUT')

    # Creative defaults
    DEFAULT_CALL_TO_ACTION: str = os.getenv('DEFAULT_CALL_TO_ACTION', 'LEARN_MORE')

    # Logging
    LOG_LEVEL: str = os.getenv('LOG_LEVEL', 'INFO')

    @classmethod
    def graph_base_url(cls) -> str:
        """Versioned Graph API root, e.g. https://graph.facebook.com/v24.0"""
        return f"{cls.META_GRAPH_API_BASE.rstrip('/')}/{cls.META_GRAPH_API_VERSION}"

    @classmethod
    def validate(cls) -> bool:
        """Validate required configuration"""
        required = {
            'META_GRAPH_API_TOKEN': cls.META_GRAPH_API_TOKEN,
        }

        missing = [k for k, v in required.items() if not v]

        if missing:
            raise ValueError(f"Missing required configuration: {', '.join(missing)}")

        return True
