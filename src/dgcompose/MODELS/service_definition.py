"""
Models for defining services and their mounts in a generated compose file.
"""
from typing import List, Dict, Optional, Any
from pydantic import BaseModel, ConfigDict, Field
from enum import Enum

class MountType(str, Enum):
    """
    Kinds of volume mounts a service can declare.
    """
    BIND = "bind"
    VOLUME = "volume"

class VolumeMount(BaseModel):
    """
    Defines a mapping between a host path (or named volume) and a service path.
    """
    model_config = ConfigDict(frozen=True)

    type: MountType = MountType.BIND
    source: str
    target: str
    read_only: bool = False

class ServiceDefinition(BaseModel):
    """
    The full definition of a single service in the topology document.

    Field order is the order keys appear in the rendered compose file.
    """
    model_config = ConfigDict(frozen=True)

    name: str = Field(exclude=True)
    image: str
    container_name: str
    working_dir: str

    # Lifecycle
    depends_on: List[str] = []

    # Metadata
    labels: Dict[str, str] = {}
    environment: List[str] = []

    # Networking
    ports: List[str] = []

    # Storage
    volumes: List[VolumeMount] = []
    tmpfs: List[str] = []

    user: Optional[str] = None
    command: str = ""

    def to_compose(self) -> Dict[str, Any]:
        """
        Returns the service as a plain mapping ready for YAML output.

        Empty ``depends_on``, ``tmpfs`` and ``user`` entries are omitted.
        """
        data = self.model_dump(mode="json")
        for key in ("depends_on", "tmpfs", "user"):
            if not data[key]:
                del data[key]
        return data
