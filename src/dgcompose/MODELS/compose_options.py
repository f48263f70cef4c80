"""
Models for the parameters that drive topology generation.
"""
from pydantic import BaseModel, ConfigDict

DEFAULT_OUT_FILE = "./docker-compose.yml"

class ComposeOptions(BaseModel):
    """
    User-supplied generation parameters.

    Instances are immutable; the option resolver returns adjusted copies.
    """
    model_config = ConfigDict(frozen=True)

    num_zeros: int = 3
    num_alphas: int = 3
    num_groups: int = 1
    lru_mb: int = 1024

    # Storage
    data_vol: bool = False
    data_dir: str = ""
    tmpfs: bool = False

    # Features
    enterprise_mode: bool = False
    acl_secret: str = ""
    user_ownership: bool = False
    jaeger: bool = False
    test_port_range: bool = True

    verbosity: int = 2
    out_file: str = DEFAULT_OUT_FILE
