#!/usr/bin/env python3
"""Service Documentation Generator - Entry point."""
import json
import logging
import os
import sys

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

import click
from colorama import Fore, Style, init

from config import ALL_REPORTS, AppConfig
from servicedocgen import __version__
from servicedocgen.analyzer import ServiceAnalyzer
from servicedocgen.exporter.json_exporter import JsonExporter
from servicedocgen.generation import ServicesGenerator
from servicedocgen.introspection import TypeIntrospector
from servicedocgen.scanner import ServiceLoadError, ServiceScanner

# Initialize colorama
init(autoreset=True)

logger = logging.getLogger(__name__)


def print_banner():
    """Print application banner."""
    print(f"{Fore.CYAN}{'=' * 44}")
    print(f"{Fore.CYAN}║   {Fore.WHITE}Service Documentation Generator{Fore.CYAN}      ║")
    print(f"{Fore.CYAN}║   {Fore.WHITE}HTML and OpenAPI from service code{Fore.CYAN}   ║")
    print(f"{Fore.CYAN}{'=' * 44}{Style.RESET_ALL}")
    print()


def load_config(config_file, packages, service_class, classname_regex, introspect_fields) -> AppConfig:
    """Merge the config file (or environment) with command line options."""
    config = AppConfig.from_file(config_file) if config_file else AppConfig.from_env()
    if packages:
        config.source_packages = list(packages)
    if service_class:
        config.service_class = service_class
    if classname_regex:
        config.classname_regex = classname_regex
    if introspect_fields:
        config.introspect_fields = True
    return config


def analyze(config: AppConfig):
    """Scan and analyze the configured services."""
    if os.getcwd() not in sys.path:
        sys.path.insert(0, os.getcwd())

    scanner = ServiceScanner(config.classname_regex)
    if config.service_class:
        service_classes = [scanner.load(config.service_class)]
    else:
        service_classes = scanner.scan(config.source_packages)

    if not service_classes:
        logger.warning("No service classes found")

    analyzer = ServiceAnalyzer(config.services, TypeIntrospector(config.introspect_fields))
    return analyzer.analyze(service_classes)


def source_options(function):
    """Options selecting the analyzed services."""
    options = [
        click.option("--config", "config_file", type=click.Path(exists=True), help="YAML config file"),
        click.option("--package", "packages", multiple=True, help="Package to scan (repeatable)"),
        click.option("--service-class", help="Qualified name of a single service class"),
        click.option("--classname-regex", help="Regex service class names must match"),
        click.option("--introspect-fields", is_flag=True, help="Document all fields instead of public properties"),
    ]
    for option in reversed(options):
        function = option(function)
    return function


@click.group()
@click.version_option(version=__version__)
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
def cli(verbose):
    """Service Documentation Generator - Document REST services as HTML and OpenAPI."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )


@cli.command()
@source_options
@click.option("--output-dir", type=click.Path(), help="Directory for the generated reports")
@click.option(
    "--report",
    "reports",
    multiple=True,
    type=click.Choice(ALL_REPORTS, case_sensitive=False),
    help="Report to generate (repeatable, default all)",
)
@click.option("--template-dir", type=click.Path(exists=True), help="Directory overriding the templates")
def generate(config_file, packages, service_class, classname_regex, introspect_fields, output_dir, reports, template_dir):
    """Generate the documentation reports."""
    print_banner()

    config = load_config(config_file, packages, service_class, classname_regex, introspect_fields)
    output_dir = output_dir or config.output_dir
    reports = list(reports) or config.reports

    try:
        services = analyze(config)
    except ServiceLoadError as e:
        click.echo(f"{Fore.RED}❌ {e}")
        sys.exit(1)

    generator = ServicesGenerator(template_dir or config.template_dir)
    for output_file in generator.generate(services, output_dir, reports):
        click.echo(f"{Fore.GREEN}✅ {output_file}")


@cli.command()
@source_options
@click.option(
    "--format",
    "schema_format",
    type=click.Choice(["json", "yaml"], case_sensitive=False),
    default="json",
    help="Schema flavor",
)
def schema(config_file, packages, service_class, classname_regex, introspect_fields, schema_format):
    """Print the component schemas of the services."""
    config = load_config(config_file, packages, service_class, classname_regex, introspect_fields)
    try:
        services = analyze(config)
    except ServiceLoadError as e:
        click.echo(f"{Fore.RED}❌ {e}", err=True)
        sys.exit(1)

    if schema_format.lower() == "json":
        click.echo(services.schema_definition_json)
    else:
        click.echo(services.schema_definition_yaml)


@cli.command()
@source_options
@click.option("--output", type=click.Path(), help="Write the model to this JSON file")
def describe(config_file, packages, service_class, classname_regex, introspect_fields, output):
    """Dump the analyzed service model as JSON."""
    config = load_config(config_file, packages, service_class, classname_regex, introspect_fields)
    try:
        services = analyze(config)
    except ServiceLoadError as e:
        click.echo(f"{Fore.RED}❌ {e}", err=True)
        sys.exit(1)

    exporter = JsonExporter()
    if output:
        exporter.export(output, services)
        click.echo(f"{Fore.GREEN}✅ Model written to {output}")
    else:
        click.echo(json.dumps(exporter.to_dict(services), indent=2, default=str))


if __name__ == "__main__":
    cli()
