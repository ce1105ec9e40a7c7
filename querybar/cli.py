# querybar/cli.py - Command-line interface
"""
Command-line interface for querybar.

Renders the Database panel of a recorded request from a JSON query log.
"""

import click
import json
import sys
import time
from pathlib import Path

from querybar.utils.logger import setup_logging, get_logger
from querybar.utils.config import Config


logger = get_logger(__name__)


@click.group()
@click.option('--log-level', default='WARNING', type=click.Choice(['DEBUG', 'INFO', 'WARNING', 'ERROR']))
@click.option('--log-file', type=click.Path(), help='Log file path')
@click.pass_context
def cli(ctx, log_level, log_file):
    """
    querybar - Database panel of a request debug toolbar

    Collects the queries of a request and renders the Database panel.
    """
    ctx.ensure_object(dict)

    setup_logging(level=log_level, log_file=log_file)

    ctx.obj['log_level'] = log_level
    ctx.obj['log_file'] = log_file


def load_query_log(path: str) -> dict:
    """
    Load a recorded query log.

    The log is a JSON object with a "queries" list (sql, connection_alias,
    start_time, duration) and an optional "connections" list (alias,
    connect_start, connect_duration).

    Args:
        path: Path to JSON file

    Returns:
        Parsed log dictionary
    """
    with open(Path(path), 'r') as f:
        data = json.load(f)

    if not isinstance(data, dict) or not isinstance(data.get('queries', []), list):
        raise click.ClickException(f"{path}: expected an object with a 'queries' list")

    return data


def serve_metrics(exporter, duration=None):
    """
    Serve the exporter's metrics until interrupted or `duration` seconds pass.

    Args:
        exporter: PrometheusExporter with metrics already recorded
        duration: Seconds to serve, or None to serve until Ctrl+C
    """
    try:
        exporter.start()
    except OSError as e:
        raise click.ClickException(f"Failed to serve metrics on port {exporter.port}: {e}")

    click.echo(f"Serving metrics on http://localhost:{exporter.port}/metrics", err=True)

    start_time = time.time()
    try:
        while duration is None or time.time() - start_time < duration:
            time.sleep(1)
    except KeyboardInterrupt:
        logger.info("Stopping metrics server...")


@cli.command()
@click.argument('query_log', type=click.Path(exists=True, dir_okay=False))
@click.option('--config', 'config_file', type=click.Path(exists=True), help='Configuration file')
@click.option('--format', 'output_format', type=click.Choice(['stdout', 'json', 'prometheus']), help='Output format')
@click.option('--output-dir', type=click.Path(file_okay=False), help='Output directory (for JSON format)')
@click.option('--max-queries', type=click.IntRange(min=0), help='Maximum number of queries retained')
@click.option('--precision', type=click.IntRange(min=0), help='Fractional digits kept on durations')
@click.option('--no-color', is_flag=True, help='Disable colored output')
@click.option('--serve', is_flag=True, help='Serve metrics over HTTP (prometheus format)')
@click.option('--port', type=click.IntRange(min=1, max=65535), help='Metrics port (overrides output.prometheus_port)')
@click.option('--duration', type=click.IntRange(min=0), help='Seconds to keep serving (default: until Ctrl+C)')
def render(query_log, config_file, output_format, output_dir, max_queries, precision, no_color,
           serve, port, duration):
    """
    Render the Database panel for a recorded query log.

    Example:
        querybar render request.json
        querybar render request.json --format json --output-dir reports
        querybar render request.json --max-queries 20 --precision 3
        querybar render request.json --format prometheus --serve --port 9100
    """
    from querybar.collector.events import ConnectionInfo, QueryEvent
    from querybar.collector.request_scope import RequestScope
    from querybar.toolbar import Toolbar

    cfg = Config(config_file)

    # Override config with CLI options
    if output_format:
        cfg.set('output.format', output_format)
    if output_dir:
        cfg.set('output.output_dir', output_dir)
    if max_queries is not None:
        cfg.set('toolbar.max_queries', max_queries)
    if precision is not None:
        cfg.set('toolbar.display_precision', precision)
    if port is not None:
        cfg.set('output.prometheus_port', port)

    try:
        data = load_query_log(query_log)
        scope = RequestScope(cfg, request_id=data.get('request_id'))

        for item in data.get('connections', []):
            info = ConnectionInfo.from_dict(item)
            scope.connections.add(info.alias, info.connect_start, info.connect_duration)

        events = [QueryEvent.from_dict(item) for item in data['queries']]
    except (OSError, ValueError, KeyError, TypeError) as e:
        raise click.ClickException(f"Failed to read query log {query_log}: {e}")

    for event in events:
        scope.record(event)

    logger.info(f"Loaded {len(events)} queries, retained {scope.collector.badge_count()}")

    report = Toolbar.for_scope(scope).report()
    fmt = cfg.get('output.format', 'stdout')

    if serve and fmt != 'prometheus':
        raise click.UsageError("--serve requires --format prometheus")

    if fmt == 'json':
        from querybar.exporters.json_exporter import JSONExporter
        path = JSONExporter(cfg.get('output.output_dir')).export_report(report)
        click.echo(path)
    elif fmt == 'prometheus':
        from prometheus_client import CollectorRegistry
        from querybar.exporters.prometheus import PrometheusExporter
        exporter = PrometheusExporter(cfg.get('output.prometheus_port', 9090), registry=CollectorRegistry())
        exporter.record_collector(scope.collector)
        click.echo(exporter.get_metrics_text(), nl=False)

        if serve:
            serve_metrics(exporter, duration)
    else:
        from querybar.exporters.stdout import StdoutExporter
        exporter = StdoutExporter(
            use_colors=not no_color,
            slow_threshold_ms=cfg.get('display.slow_threshold_ms', 10.0),
            very_slow_threshold_ms=cfg.get('display.very_slow_threshold_ms', 100.0)
        )
        exporter.print_report(report)


@cli.command()
@click.option('--config', 'config_file', type=click.Path(exists=True), help='Configuration file')
def config(config_file):
    """
    Show the effective configuration as YAML.

    Example:
        querybar config --config configs/default.yaml
    """
    try:
        cfg = Config(config_file)
    except Exception as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    click.echo(cfg.to_yaml(), nl=False)


if __name__ == '__main__':
    cli(obj={})
