# Copyright 2024 Michael Maillet, Damien Davison, Sacha Davison
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""
Converters for rendering a topology document as a docker-compose YAML file.
"""
from typing import List, TextIO
import click
import yaml
from jinja2 import Template
from ..MODELS.orchestration_config import OrchestrationConfig

STDOUT = "-"

COMPOSE_TEMPLATE = """\
# Auto-generated with: [{{ argv | join(' ') }}]
#
{{ body }}"""


class ComposeYamlConverter:
    """
    Renders a topology document as docker-compose YAML with a provenance header.
    """

    def __init__(self, config: OrchestrationConfig, argv: List[str]):
        """
        Initializes the converter.

        :param config: The generated topology document.
        :param argv: The invocation arguments recorded in the header.
        """
        self.config = config
        self.argv = list(argv)
        self.template = Template(COMPOSE_TEMPLATE, keep_trailing_newline=True)

    def render(self) -> str:
        """
        Renders the full file contents.

        :return: The header followed by the YAML body.
        """
        body = yaml.safe_dump(
            self.config.to_compose(),
            default_flow_style=False,
            sort_keys=False,
            width=float("inf"),
        )
        return self.template.render(argv=self.argv, body=body)

    def write(self, stream: TextIO):
        """
        Writes the rendered document to an open text stream.
        """
        stream.write(self.render())
        stream.flush()

    def convert(self, out_file: str = STDOUT):
        """
        Writes the rendered document to a file, or to stdout when out_file is "-".

        :param out_file: Destination path.
        :return: The destination that was written.
        :raises OSError: If the destination cannot be opened or written.
        """
        if out_file != STDOUT:
            click.echo(f"writing file: {out_file}", err=True)
        try:
            f = click.open_file(out_file, "w")
        except OSError as e:
            raise OSError(f"unable to open file for writing: {e}") from e
        with f:
            self.write(f)
        return out_file
