# SPDX-License-Identifier: Apache-2.0

"""
Environment configuration for the civic issue tracker.
"""

import os
from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class Settings:
    """Runtime settings read from environment variables."""
    environment: str = 'development'
    otel_enabled: bool = True
    service_name: str = 'civic-issues'
    service_version: str = '1.0.0'
    otlp_endpoint: Optional[str] = None

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            environment=os.getenv('ENVIRONMENT', 'development'),
            otel_enabled=os.getenv('OTEL_ENABLED', 'true').lower() == 'true',
            service_version=os.getenv('SERVICE_VERSION', '1.0.0'),
            otlp_endpoint=os.getenv('OTEL_EXPORTER_OTLP_ENDPOINT') or None,
        )

    @property
    def is_production(self) -> bool:
        return self.environment == 'production'
