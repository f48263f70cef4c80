"""
Models for the overall topology document.
"""
import re
from typing import Dict, Any, List, Union
from pydantic import BaseModel, ConfigDict
from .service_definition import ServiceDefinition

COMPOSE_VERSION = "3.5"

def natural_key(name: str) -> List[Union[int, str]]:
    """
    Sort key that orders embedded numbers by value, so alpha2 sorts before alpha10.
    """
    return [int(part) if part.isdigit() else part for part in re.split(r'(\d+)', name)]

class OrchestrationConfig(BaseModel):
    """
    Complete configuration for a generated cluster.
    Equivalent to a docker-compose.yml file.
    """
    model_config = ConfigDict(frozen=True)

    version: str = COMPOSE_VERSION
    services: Dict[str, ServiceDefinition]
    volumes: Dict[str, Dict[str, str]] = {}

    def to_compose(self) -> Dict[str, Any]:
        """
        Returns the document as a plain mapping with services in natural name order.
        """
        return {
            'version': self.version,
            'services': {
                name: self.services[name].to_compose()
                for name in sorted(self.services, key=natural_key)
            },
            'volumes': {name: dict(attrs) for name, attrs in sorted(self.volumes.items())},
        }
