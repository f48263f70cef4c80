"""
Utilities for deriving deterministic port numbers for cluster nodes.
"""

ZERO_BASE_PORT = 5080
ALPHA_BASE_PORT = 7080
TEST_PORT_OFFSET = 100
GRPC_PORT_OFFSET = 1000

def index_offset(idx: int) -> int:
    """
    Port offset for the node with the given 1-based index.
    The first node keeps the base port.
    """
    if idx == 1:
        return 0
    return idx

def exposed_port(port: int) -> str:
    """
    Publishes a container port on the same host port, e.g. "5080:5080".
    """
    return f"{port}:{port}"

def zero_grpc_port(idx: int) -> int:
    return ZERO_BASE_PORT + index_offset(idx)

def alpha_internal_port(idx: int, test_port_range: bool = False) -> int:
    base = TEST_PORT_OFFSET if test_port_range else 0
    return ALPHA_BASE_PORT + base + index_offset(idx)
