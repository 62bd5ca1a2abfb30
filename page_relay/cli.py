# === FILE: page_relay/cli.py ===
#!/usr/bin/env python3
"""
Точка входа для запуска ретранслятора PageRelay через командную строку.

Команды:
  serve     Запустить HTTP-ретранслятор
  config    Показать текущую конфигурацию

Общие опции:
  --config PATH       Путь к YAML/JSON-конфигу (default: configs/default.yaml, если есть)
  --log-level LEVEL   Уровень логирования (DEBUG, INFO, ...)
  --log-file PATH     Файл для логов (stdout, если не указан)
  --log-format FORMAT Формат логирования (e.g. "%(asctime)s %(levelname)s %(message)s")

Команда serve опции:
  --host HOST         Адрес для прослушивания (override host)
  --port INT          Порт для прослушивания (override port)

Дополнительно:
  --version, -v       Показать версию PageRelay

Пример:
  page-relay --config configs/default.yaml serve --port 8080
"""
import sys
from pathlib import Path

import click

from page_relay import __version__
from page_relay.config import load_config
from page_relay.logger import init_logging
from page_relay.server import run_server

CONTEXT_SETTINGS = dict(help_option_names=["--help"])

def print_error(message: str):
    click.secho(message, fg='red', err=True)
    sys.exit(1)

@click.group(context_settings=CONTEXT_SETTINGS)
@click.version_option(__version__, '--version', '-v', message='PageRelay, version %(version)s')
@click.option(
    '--config', '-c', 'config_path',
    default=None,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help='Путь к файлу конфигурации YAML/JSON.'
)
@click.option(
    '--log-level', 'log_level',
    default='INFO', show_default=True,
    type=click.Choice(['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']),
    help='Уровень логирования'
)
@click.option(
    '--log-file', 'log_file',
    default=None,
    type=click.Path(writable=True, dir_okay=False, path_type=Path),
    help='Путь к файлу логов (stdout, если не указан)'
)
@click.option(
    '--log-format', 'log_format',
    default='%(asctime)s %(levelname)s %(message)s',
    show_default=True,
    help='Строка формата для логов'
)
@click.pass_context
def cli(ctx, config_path, log_level, log_file, log_format):
    """Группа команд PageRelay CLI."""
    init_logging(
        level=log_level,
        log_file=str(log_file) if log_file else None,
        log_format=log_format
    )
    try:
        cfg = load_config(config_path)
    except Exception as e:
        print_error(f'Ошибка загрузки конфигурации: {e}')
    ctx.ensure_object(dict)
    ctx.obj['config'] = cfg

@cli.command('serve', context_settings=CONTEXT_SETTINGS)
@click.option(
    '--host', '-H', 'host',
    default=None,
    help='Адрес для прослушивания (override host)'
)
@click.option(
    '--port', '-p', 'port',
    type=click.IntRange(1, 65535),
    default=None,
    help='Порт для прослушивания (override port)'
)
@click.pass_context
def serve(ctx, host, port):
    """Запустить HTTP-ретранслятор."""
    cfg = ctx.obj['config']
    overrides = {k: v for k, v in (('host', host), ('port', port)) if v is not None}
    if overrides:
        cfg = cfg.model_copy(update=overrides)
    click.echo(f'Starting relay on {cfg.host}:{cfg.port}')
    try:
        run_server(cfg)
    except OSError as e:
        print_error(f'Не удалось запустить сервер: {e}')

@cli.command('config', context_settings=CONTEXT_SETTINGS)
@click.pass_context
def show_config(ctx):
    """Показать текущую конфигурацию в JSON."""
    cfg = ctx.obj['config']
    click.echo(cfg.model_dump_json(indent=2))


if __name__ == "__main__":
    cli()
