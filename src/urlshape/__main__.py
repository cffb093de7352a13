from __future__ import annotations

import argparse
import inspect
import os
from pathlib import Path
from subprocess import run
import sys
from tempfile import gettempdir
from typing import Iterable, Iterator, Sequence

from . import config
from .common import Url, UrlshapeError, logger, default_config_path, user_config_file, iter_urls, with_scheme
from .optimize import resolve_threshold
from .parser import Parser


def load_config(config_file: Path | None) -> config.Config:
    if config_file is not None and config_file.exists():
        config.load_from(config_file)
    else:
        logger.debug("config %s doesn't exist, using defaults", config_file)
        config.instance = config.Config()
    return config.get()


def _parse_threshold(s: str) -> int | list[int]:
    '''
    >>> _parse_threshold('30')
    30
    >>> _parse_threshold('30,1')
    [30, 1]
    '''
    parts = [int(x) for x in s.split(',')]
    if len(parts) not in {1, 2}:
        raise argparse.ArgumentTypeError(f'expected N or N,CUTOFF, got {s!r}')
    threshold = parts[0] if len(parts) == 1 else parts
    try:
        resolve_threshold(threshold, [])
    except ValueError as e:
        raise argparse.ArgumentTypeError(str(e)) from e
    return threshold


def read_lines(inputs: Sequence[str]) -> Iterator[str]:
    if len(inputs) == 0:
        inputs = ['-']
    for i in inputs:
        if i == '-':
            yield from sys.stdin.read().splitlines()
        else:
            yield from Path(i).read_text(encoding='utf8').splitlines()


def collect_urls(lines: Iterable[str], *, cfg: config.Config, extract: bool) -> Iterator[Url]:
    for line in lines:
        urls: Iterable[Url] = (with_scheme(u) for u in iter_urls(line)) if extract else [line.strip()]
        for u in urls:
            if u == '':
                continue
            if cfg.filtered(u):
                logger.debug('filtered out: %s', u)
                continue
            yield u


def do_update(
        *,
        config_file: Path | None,
        inputs: Sequence[str],
        state: Path | None = None,
        threshold: int | list[int] | None = None,
        features: Sequence[str] = (),
        extract: bool = False,
        dry: bool = False,
        max_samples: int | None = None,
) -> int:
    cfg = load_config(config_file)
    try:
        state = cfg.state if state is None else state
        parser = Parser.load(
            state,
            threshold=cfg.THRESHOLD if threshold is None else threshold,
            dynamic_features=[*cfg.DYNAMIC_FEATURES, *features],
        )
        urls = list(collect_urls(read_lines(inputs), cfg=cfg, extract=extract))
        logger.info('processing %d urls', len(urls))
        parser.update(urls)
    except UrlshapeError as e:
        logger.exception(e)
        logger.error('aborting, state %s is left untouched', state)
        return 1
    finally:
        # mainly for tests, so the same config isn't reused by accident
        config.reset()

    parser.print(max_samples=cfg.MAX_SAMPLES if max_samples is None else max_samples)
    if dry:
        logger.warning("DRY MODE: won't save the state")
    else:
        parser.save(state)
    return 0


def do_show(
        *,
        config_file: Path | None,
        state: Path | None = None,
        origin: str | None = None,
        dynamic_only: bool = False,
        max_samples: int | None = None,
) -> int:
    cfg = load_config(config_file)
    config.reset()
    state = cfg.state if state is None else state
    try:
        parser = Parser.load(state, threshold=cfg.THRESHOLD)
    except UrlshapeError as e:
        logger.exception(e)
        return 1
    parser.print(
        origin=origin,
        dynamic_only=dynamic_only,
        max_samples=cfg.MAX_SAMPLES if max_samples is None else max_samples,
    )
    return 0


def read_example_config() -> str:
    from .misc import config_example
    return inspect.getsource(config_example)


def config_create(args: argparse.Namespace) -> None:
    cfg: Path = args.config
    if cfg.exists():
        logger.error('Config %s already exists. Aborting', cfg)
        sys.exit(1)
    cfg.parent.mkdir(parents=True, exist_ok=True)
    cfg.write_text(read_example_config())
    logger.info("Created a stub config in '%s'. Edit it to tune to your liking.", cfg)


def config_check(args: argparse.Namespace) -> None:
    cfg: Path = args.config
    errors = list(_config_check(cfg))
    if len(errors) == 0:
        logger.info('OK')
    else:
        for e in errors:
            logger.error(e)
        logger.error('CHECK FAILED')
        sys.exit(1)


def _config_check(cfg: Path) -> Iterator[Exception]:
    logger.info('config: %s', cfg)
    if not cfg.exists():
        yield FileNotFoundError(cfg)
        return

    logger.info('Checking syntax...')
    res = run(
        [sys.executable, '-m', 'compileall', '-q', str(cfg)],
        env={
            **os.environ,
            # if config is on read only partition, the command would fail due to generated bytecode
            'PYTHONPYCACHEPREFIX': gettempdir(),
        },
        check=False,
    )
    if res.returncode > 0:
        yield SyntaxError(f'{cfg} failed to compile')
        return

    logger.info('Checking values...')
    try:
        config.import_config(cfg).check()
    except Exception as e:
        yield e


def main() -> None:
    F = lambda prog: argparse.ArgumentDefaultsHelpFormatter(prog, width=120)
    p = argparse.ArgumentParser(formatter_class=F, description='Infers route patterns (e.g. /users/:param) from concrete urls')
    subp = p.add_subparsers(dest='mode')

    def add_common_args(parser: argparse.ArgumentParser) -> None:
        parser.add_argument('--config', type=Path, default=default_config_path(), help='Config path')
        parser.add_argument('--state', type=Path, default=None, help='Path to the json state (overrides the config)')
        parser.add_argument('--max-samples', type=int, default=None, help='Number of samples to print for dynamic patterns')

    up = subp.add_parser('update', help='Feed new urls and update the inferred patterns', formatter_class=F)
    add_common_args(up)
    up.add_argument('--threshold', type=_parse_threshold, default=None, help='N or N,CUTOFF (overrides the config)')
    up.add_argument('--feature', action='append', default=[], dest='features', help='Extra dynamic feature: preset name or regex')
    up.add_argument('--extract', action='store_true', help='Extract urls from free text (e.g. logs) instead of reading one url per line')
    up.add_argument('--dry', action='store_true', help="Dry run, won't save the state")
    up.add_argument('inputs', nargs='*', help="Files to read urls from, '-' for stdin")

    sp = subp.add_parser('show', help='Print the inferred patterns', formatter_class=F)
    add_common_args(sp)
    sp.add_argument('--origin', type=str, default=None, help='Only print patterns for this origin')
    sp.add_argument('--dynamic-only', action='store_true', help='Only print dynamic patterns')

    cp = subp.add_parser('config', help='Config management')
    cp.set_defaults(func=lambda *_args: cp.print_help())
    scp = cp.add_subparsers()
    ccp = scp.add_parser('check', help='Check config')
    ccp.set_defaults(func=config_check)
    ccp.add_argument('--config', type=Path, default=default_config_path(), help='Config path')
    icp = scp.add_parser('create', help='Create user config')
    icp.add_argument('--config', type=Path, default=user_config_file(), help='Config path')
    icp.set_defaults(func=config_create)

    args = p.parse_args()

    mode: str | None = args.mode
    if mode is None:
        print('ERROR: Please specify a mode', file=sys.stderr)
        p.print_help(sys.stderr)
        sys.exit(1)

    logger.debug('CLI args: %s', args)

    if mode == 'update':
        sys.exit(do_update(
            config_file=args.config,
            inputs=args.inputs,
            state=args.state,
            threshold=args.threshold,
            features=args.features,
            extract=args.extract,
            dry=args.dry,
            max_samples=args.max_samples,
        ))
    elif mode == 'show':
        sys.exit(do_show(
            config_file=args.config,
            state=args.state,
            origin=args.origin,
            dynamic_only=args.dynamic_only,
            max_samples=args.max_samples,
        ))
    elif mode == 'config':
        args.func(args)
    else:
        raise AssertionError(f'unexpected mode {mode}')


if __name__ == '__main__':
    main()
