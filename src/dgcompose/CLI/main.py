"""
Command Line Interface for dgcompose.
"""
import click
from dotenv import load_dotenv
from ..MODELS.compose_options import ComposeOptions, DEFAULT_OUT_FILE
from ..RESOLVERS.option_resolver import OptionResolver
from ..BUILDERS.topology_builder import TopologyBuilder
from ..CONVERTERS.to_compose_yaml import ComposeYamlConverter

ENVVAR_PREFIX = "DGCOMPOSE"

class InvocationCommand(click.Command):
    """
    Command that records the raw arguments it was invoked with.
    """
    def parse_args(self, ctx, args):
        ctx.meta['dgcompose.argv'] = [ctx.info_name or "dgcompose"] + list(args)
        return super().parse_args(ctx, args)

def warn(message: str):
    click.echo(f"dgcompose: {message}", err=True)

@click.command("dgcompose", cls=InvocationCommand, context_settings={'help_option_names': ['-h', '--help']},
               epilog="Example: dgcompose --num_zeros=3 --num_alphas=3 -O - | docker-compose -f- up")
@click.option('--num_zeros', '-z', type=int, default=3, show_default=True, help='number of zeros in dgraph cluster')
@click.option('--num_alphas', '-a', type=int, default=3, show_default=True, help='number of alphas in dgraph cluster')
@click.option('--num_groups', '-g', type=int, default=1, show_default=True, help='number of groups in dgraph cluster')
@click.option('--lru_mb', type=int, default=1024, show_default=True, help='approximate size of LRU cache')
@click.option('--data_vol', '-o', is_flag=True, help='mount a docker volume as /data in containers')
@click.option('--data_dir', '-d', default='', help='mount a host directory as /data in containers')
@click.option('--enterprise', '-e', 'enterprise_mode', is_flag=True, envvar=f'{ENVVAR_PREFIX}_ENTERPRISE',
              help='enable enterprise features in alphas')
@click.option('--acl_secret', default='', help='enable ACL feature with specified HMAC secret file')
@click.option('--user', '-u', 'user_ownership', is_flag=True, envvar=f'{ENVVAR_PREFIX}_USER',
              help='run as the current user rather than root')
@click.option('--tmpfs', is_flag=True, help='store w and zw directories on a tmpfs filesystem')
@click.option('--jaeger', '-j', is_flag=True, help='include jaeger service')
@click.option('--test_ports/--no-test_ports', 'test_port_range', default=True, show_default=True,
              envvar=f'{ENVVAR_PREFIX}_TEST_PORTS',
              help='use alpha ports expected by regression tests')
@click.option('--verbosity', '-v', type=int, default=2, show_default=True, help='glog verbosity level')
@click.option('--out', '-O', 'out_file', default=DEFAULT_OUT_FILE, envvar=f'{ENVVAR_PREFIX}_OUT', show_default=True,
              help='name of output file, or - for stdout')
@click.pass_context
def cli(ctx, **params):
    """
    docker-compose config file generator for dgraph.

    Dynamically generate a docker-compose.yml file for running a dgraph cluster.
    """
    argv = ctx.meta.get('dgcompose.argv', [ctx.info_name])
    try:
        options = ComposeOptions(**params)
        options = OptionResolver(on_warning=warn).resolve(options)
        config = TopologyBuilder(options).build()
        ComposeYamlConverter(config, argv).convert(options.out_file)
    except (ValueError, OSError) as e:
        raise click.ClickException(str(e))

def main():
    """
    Main entry point for the CLI.
    """
    load_dotenv(".env", override=False)
    cli(auto_envvar_prefix=ENVVAR_PREFIX)

if __name__ == '__main__':
    main()
