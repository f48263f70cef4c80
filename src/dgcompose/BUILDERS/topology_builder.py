"""
Builders for deriving the service topology of a test cluster from options.
"""
import math
from typing import Callable, Dict, List, Optional
from ..MODELS.compose_options import ComposeOptions
from ..MODELS.orchestration_config import OrchestrationConfig
from ..MODELS.service_definition import ServiceDefinition, VolumeMount, MountType
from ..UTILS.port_allocation import (
    ZERO_BASE_PORT,
    GRPC_PORT_OFFSET,
    TEST_PORT_OFFSET,
    exposed_port,
    zero_grpc_port,
    alpha_internal_port,
)
from ..UTILS.user_identity import current_uid

IMAGE = "dgraph/dgraph:latest"
BINARY = "/gobin/dgraph"
BINARY_MOUNT = VolumeMount(type=MountType.BIND, source="$GOPATH/bin", target="/gobin", read_only=True)
DATA_VOLUME = "data"
LABELS = {"cluster": "test"}
WHITELIST = "10.0.0.0/8,172.16.0.0/12,192.168.0.0/16"
ACL_SECRET_TARGET = "/secret/hmac"
JAEGER_COLLECTOR = "http://jaeger:14268"

def node_name(prefix: str, idx: int) -> str:
    return f"{prefix}{idx}"

class TopologyBuilder:
    """
    Derives zero, alpha and optional jaeger service definitions from validated options.
    """
    def __init__(self, options: ComposeOptions, uid_lookup: Callable[[], str] = current_uid):
        """
        Initializes the builder.

        :param options: Options already checked by the option resolver.
        :param uid_lookup: Returns the uid used for user-ownership mode.
        """
        self.options = options
        self.uid_lookup = uid_lookup
        self._uid: Optional[str] = None

    def build(self) -> OrchestrationConfig:
        """
        Builds the complete topology document.

        :return: The document holding every generated service.
        :raises OSError: If the current user cannot be resolved in user-ownership mode.
        """
        services: Dict[str, ServiceDefinition] = {}

        for idx in range(1, self.options.num_zeros + 1):
            svc = self.build_zero(idx)
            services[svc.name] = svc

        for idx in range(1, self.options.num_alphas + 1):
            svc = self.build_alpha(idx)
            services[svc.name] = svc

        if self.options.jaeger:
            svc = self.build_jaeger()
            services[svc.name] = svc

        volumes = {DATA_VOLUME: {}} if self.options.data_vol else {}
        return OrchestrationConfig(services=services, volumes=volumes)

    def build_zero(self, idx: int) -> ServiceDefinition:
        """
        Builds the definition of the zero node with the given 1-based index.
        """
        basename = "zero"
        name = node_name(basename, idx)
        grpc_port = zero_grpc_port(idx)
        replicas = math.ceil(self.options.num_alphas / self.options.num_groups)

        command = self._command_prefix(name)
        command += f" zero -o {idx - 1} --idx={idx}"
        command += f" --my={name}:{grpc_port}"
        command += f" --replicas={replicas}"
        command += f" --logtostderr -v={self.options.verbosity}"
        if idx == 1:
            command += " --bindall"
        else:
            command += f" --peer={node_name(basename, 1)}:{ZERO_BASE_PORT}"

        return self._service(
            basename, idx, grpc_port,
            volumes=self._volumes(),
            tmpfs=[f"/data/{name}/zw"] if self.options.tmpfs else [],
            command=command,
        )

    def build_alpha(self, idx: int) -> ServiceDefinition:
        """
        Builds the definition of the alpha node with the given 1-based index.
        """
        basename = "alpha"
        name = node_name(basename, idx)
        base_offset = TEST_PORT_OFFSET if self.options.test_port_range else 0
        internal_port = alpha_internal_port(idx, self.options.test_port_range)
        grpc_port = internal_port + GRPC_PORT_OFFSET
        volumes = self._volumes()

        command = self._command_prefix(name)
        command += f" alpha -o {base_offset + idx - 1}"
        command += f" --my={name}:{internal_port}"
        command += f" --lru_mb={self.options.lru_mb}"
        command += f" --zero={node_name('zero', 1)}:{ZERO_BASE_PORT}"
        command += f" --logtostderr -v={self.options.verbosity}"
        command += f" --whitelist={WHITELIST}"
        if self.options.enterprise_mode:
            command += " --enterprise_features"
            if self.options.acl_secret:
                command += f" --acl_secret_file={ACL_SECRET_TARGET} --acl_access_ttl 10s"
                volumes.append(VolumeMount(
                    type=MountType.BIND,
                    source=self.options.acl_secret,
                    target=ACL_SECRET_TARGET,
                    read_only=True,
                ))

        return self._service(
            basename, idx, grpc_port,
            volumes=volumes,
            tmpfs=[f"/data/{name}/w"] if self.options.tmpfs else [],
            command=command,
        )

    def build_jaeger(self) -> ServiceDefinition:
        """
        Builds the tracing sidecar that collects spans from every node.
        """
        return ServiceDefinition(
            name="jaeger",
            image="jaegertracing/all-in-one:latest",
            container_name="jaeger",
            working_dir="/working/jaeger",
            ports=[exposed_port(16686)],
            environment=["COLLECTOR_ZIPKIN_HTTP_PORT=9411"],
            command="--memory.max-traces=1000000",
        )

    def _service(self, basename: str, idx: int, grpc_port: int,
                 volumes: List[VolumeMount], tmpfs: List[str], command: str) -> ServiceDefinition:
        """
        Assembles the fields shared by zero and alpha nodes.
        """
        name = node_name(basename, idx)
        user = None
        working_dir = f"/data/{name}"
        if self.options.user_ownership:
            user = f"${{UID:-{self._current_uid()}}}"
            working_dir = f"/working/{name}"

        return ServiceDefinition(
            name=name,
            image=IMAGE,
            container_name=name,
            working_dir=working_dir,
            depends_on=[node_name(basename, idx - 1)] if idx > 1 else [],
            labels=dict(LABELS),
            ports=[
                exposed_port(grpc_port),
                exposed_port(grpc_port + GRPC_PORT_OFFSET),  # http port
            ],
            volumes=volumes,
            tmpfs=tmpfs,
            user=user,
            command=command,
        )

    def _volumes(self) -> List[VolumeMount]:
        """
        Returns the mounts every node gets: the binary directory plus the data source, if any.
        """
        volumes = [BINARY_MOUNT]
        if self.options.data_vol:
            volumes.append(VolumeMount(type=MountType.VOLUME, source=DATA_VOLUME, target="/data"))
        elif self.options.data_dir:
            volumes.append(VolumeMount(type=MountType.BIND, source=self.options.data_dir, target="/data"))
        return volumes

    def _command_prefix(self, name: str) -> str:
        command = BINARY
        if self.options.user_ownership:
            command += f" --cwd=/data/{name}"
        if self.options.jaeger:
            command += f" --jaeger.collector={JAEGER_COLLECTOR}"
        return command

    def _current_uid(self) -> str:
        # Resolved once per build; a failure aborts the run.
        if self._uid is None:
            self._uid = self.uid_lookup()
        return self._uid
