"""
Unit tests for the topology builder.
"""
import pytest
from dgcompose.MODELS.compose_options import ComposeOptions
from dgcompose.MODELS.service_definition import MountType
from dgcompose.BUILDERS.topology_builder import TopologyBuilder, WHITELIST
from dgcompose.RESOLVERS.option_resolver import OptionResolver


def build(uid_lookup=lambda: "1000", **kwargs):
    options = OptionResolver().resolve(ComposeOptions(**kwargs))
    return TopologyBuilder(options, uid_lookup=uid_lookup).build()


def test_single_node_cluster():
    config = build(num_zeros=1, num_alphas=1)
    assert set(config.services) == {"zero1", "alpha1"}

    zero = config.services["zero1"]
    assert zero.ports == ["5080:5080", "6080:6080"]
    assert zero.command == (
        "/gobin/dgraph zero -o 0 --idx=1 --my=zero1:5080 --replicas=1 --logtostderr -v=2 --bindall"
    )
    assert "--peer" not in zero.command
    assert zero.depends_on == []

    alpha = config.services["alpha1"]
    assert alpha.ports == ["8180:8180", "9180:9180"]
    assert alpha.command == (
        "/gobin/dgraph alpha -o 100 --my=alpha1:7180 --lru_mb=1024 --zero=zero1:5080"
        f" --logtostderr -v=2 --whitelist={WHITELIST}"
    )


@pytest.mark.parametrize("zeros,alphas", [(1, 1), (3, 3), (2, 7), (99, 99)])
def test_record_counts(zeros, alphas):
    config = build(num_zeros=zeros, num_alphas=alphas)
    names = list(config.services)
    assert len([n for n in names if n.startswith("zero")]) == zeros
    assert len([n for n in names if n.startswith("alpha")]) == alphas
    assert len(set(names)) == zeros + alphas


@pytest.mark.parametrize("test_ports", [True, False])
def test_ports_are_injective_per_role(test_ports):
    config = build(num_zeros=99, num_alphas=99, test_port_range=test_ports)
    for role in ("zero", "alpha"):
        ports = [
            port
            for name, svc in config.services.items() if name.startswith(role)
            for port in svc.ports
        ]
        assert len(ports) == len(set(ports))


def test_second_zero_peers_with_first():
    config = build(num_zeros=3, num_alphas=1)
    zero2 = config.services["zero2"]
    assert zero2.ports == ["5082:5082", "6082:6082"]
    assert "--my=zero2:5082" in zero2.command
    assert zero2.command.endswith("--peer=zero1:5080")
    assert "zero -o 1 --idx=2" in zero2.command
    assert zero2.depends_on == ["zero1"]
    assert config.services["zero3"].depends_on == ["zero2"]


def test_alpha_ports_without_test_range():
    config = build(num_alphas=2, test_port_range=False)
    alpha2 = config.services["alpha2"]
    assert alpha2.ports == ["8082:8082", "9082:9082"]
    assert "alpha -o 1 --my=alpha2:7082" in alpha2.command
    assert alpha2.depends_on == ["alpha1"]


@pytest.mark.parametrize("alphas,groups,replicas", [(3, 1, 3), (5, 2, 3), (4, 2, 2), (1, 3, 1)])
def test_replica_factor(alphas, groups, replicas):
    config = build(num_zeros=1, num_alphas=alphas, num_groups=groups)
    assert f"--replicas={replicas}" in config.services["zero1"].command


def test_shared_fields():
    config = build(num_zeros=1, num_alphas=1)
    for name in ("zero1", "alpha1"):
        svc = config.services[name]
        assert svc.image == "dgraph/dgraph:latest"
        assert svc.container_name == name
        assert svc.working_dir == f"/data/{name}"
        assert svc.labels == {"cluster": "test"}
        assert svc.user is None
        assert svc.tmpfs == []
        assert len(svc.volumes) == 1
        binary = svc.volumes[0]
        assert binary.type == MountType.BIND
        assert binary.source == "$GOPATH/bin"
        assert binary.target == "/gobin"
        assert binary.read_only
    assert config.volumes == {}


def test_named_data_volume():
    config = build(num_zeros=1, num_alphas=1, data_vol=True)
    assert config.volumes == {"data": {}}
    data = config.services["zero1"].volumes[1]
    assert data.type == MountType.VOLUME
    assert data.source == "data"
    assert data.target == "/data"
    assert not data.read_only


def test_host_data_dir():
    config = build(num_zeros=1, num_alphas=1, data_dir="/srv/dgraph")
    assert config.volumes == {}
    data = config.services["alpha1"].volumes[1]
    assert data.type == MountType.BIND
    assert data.source == "/srv/dgraph"


def test_user_ownership():
    config = build(num_zeros=1, num_alphas=1, data_dir="/srv/dgraph", user_ownership=True)
    zero = config.services["zero1"]
    assert zero.user == "${UID:-1000}"
    assert zero.working_dir == "/working/zero1"
    assert zero.command.startswith("/gobin/dgraph --cwd=/data/zero1 zero ")
    assert config.services["alpha1"].command.startswith("/gobin/dgraph --cwd=/data/alpha1 alpha ")


def test_user_lookup_failure_is_fatal():
    def broken():
        raise OSError("unable to get current user: no passwd entry")

    with pytest.raises(OSError, match="unable to get current user"):
        build(uid_lookup=broken, data_dir="/srv/dgraph", user_ownership=True)


def test_user_lookup_only_when_needed():
    def broken():
        raise AssertionError("uid should not be looked up")

    build(uid_lookup=broken)


def test_tmpfs_paths():
    config = build(num_zeros=1, num_alphas=1, tmpfs=True)
    assert config.services["zero1"].tmpfs == ["/data/zero1/zw"]
    assert config.services["alpha1"].tmpfs == ["/data/alpha1/w"]


def test_enterprise_without_acl():
    config = build(num_zeros=1, num_alphas=1, enterprise_mode=True)
    alpha = config.services["alpha1"]
    assert alpha.command.endswith(" --enterprise_features")
    assert "--acl_secret_file" not in alpha.command
    assert "--enterprise_features" not in config.services["zero1"].command


def test_acl_secret_implies_enterprise():
    config = build(num_zeros=1, num_alphas=2, acl_secret="./hmac-secret")
    for name in ("alpha1", "alpha2"):
        alpha = config.services[name]
        assert alpha.command.endswith(
            " --enterprise_features --acl_secret_file=/secret/hmac --acl_access_ttl 10s"
        )
        secret = alpha.volumes[-1]
        assert secret.source == "./hmac-secret"
        assert secret.target == "/secret/hmac"
        assert secret.read_only
    assert len(config.services["zero1"].volumes) == 1


def test_jaeger_sidecar():
    config = build(num_zeros=1, num_alphas=1, jaeger=True)
    jaeger = config.services["jaeger"]
    assert jaeger.image == "jaegertracing/all-in-one:latest"
    assert jaeger.container_name == "jaeger"
    assert jaeger.working_dir == "/working/jaeger"
    assert jaeger.ports == ["16686:16686"]
    assert jaeger.environment == ["COLLECTOR_ZIPKIN_HTTP_PORT=9411"]
    assert jaeger.command == "--memory.max-traces=1000000"
    assert jaeger.volumes == []
    assert "--jaeger.collector=http://jaeger:14268 zero" in config.services["zero1"].command
    assert "--jaeger.collector=http://jaeger:14268 alpha" in config.services["alpha1"].command


def test_no_jaeger_by_default():
    config = build()
    assert "jaeger" not in config.services
