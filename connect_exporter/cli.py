"""CLI for connect-export."""

import argparse
import contextlib
import locale
import logging
import os
import re
import shutil
import subprocess
import sys
from typing import Callable

from connect_exporter.catalog_fetcher import CatalogFetcher
from connect_exporter.detail_exporter import DetailExporter
from connect_exporter.domain.constants import COMPONENT_TYPES, ComponentType
from connect_exporter.domain.enums import DetailOutcome, SkipDecision
from connect_exporter.domain.models import DetailResult, ExportOptions, ExportResult
from connect_exporter.instance_resolver import InstanceResolver
from connect_exporter.name_encoder import CharsetCheckError, NameEncoder, normalize_codepage
from connect_exporter.output.catalog_store import CatalogStore
from connect_exporter.output.file_writer import FileWriter
from connect_exporter.remote_call import RemoteCallAdapter, audit_logger
from connect_exporter.skip_controller import SkipController

logger = logging.getLogger(__name__)


@contextlib.contextmanager
def audit_log(path: str):
    """Append every remote invocation of the run to path."""
    handler = logging.FileHandler(path, mode='a', encoding='utf-8')
    handler.setFormatter(logging.Formatter('%(asctime)s  %(message)s'))
    audit_logger.addHandler(handler)
    audit_logger.setLevel(logging.INFO)
    audit_logger.propagate = False
    try:
        yield handler
    finally:
        audit_logger.removeHandler(handler)
        handler.close()


def _abort(result: ExportResult, step: str, *hints: str) -> ExportResult:
    result.exit_code = 1
    result.failed_step = step
    print(f"Error: {step}", file=sys.stderr)
    for hint in hints:
        print(f"  {hint}", file=sys.stderr)
    return result


def _unpublished_hints(component: ComponentType, detail: DetailResult) -> tuple[str, ...]:
    return (
        f"{component.label} '{detail.name}' could not be exported: {detail.error}.",
        "Publish it in the instance console, or rerun with --skip-unpublished to leave it out.",
    )


def export_instance(
    output_dir: str,
    options: ExportOptions,
    runner: Callable[..., subprocess.CompletedProcess] = subprocess.run,
) -> ExportResult:
    """Main orchestration: instance -> catalogs -> detail files."""
    output_dir = os.path.normpath(output_dir)
    alias = os.path.basename(output_dir)
    parent = os.path.dirname(os.path.abspath(output_dir))
    result = ExportResult(exit_code=0, output_dir=output_dir)

    encoder = NameEncoder(options.codepage)
    if not options.bypass_charset_check:
        try:
            encoder.self_test()
        except CharsetCheckError as e:
            return _abort(
                result, f"charset check failed: {e}",
                "Set a codepage that matches the file system with --codepage,",
                "or rerun with --ignore-charset-check to export anyway.",
            )

    if os.path.exists(output_dir) and not options.force:
        return _abort(result, f"{output_dir} already exists", "Rerun with --force to overwrite it.")

    log_path = os.path.join(parent, f"{alias}.log")
    with contextlib.ExitStack() as stack:
        try:
            os.makedirs(parent, exist_ok=True)
            stack.enter_context(audit_log(log_path))
        except OSError as e:
            return _abort(result, f"cannot open audit log {log_path}: {e}")
        return _export(alias, output_dir, options, encoder, RemoteCallAdapter(options, runner=runner), result)


def _export(
    alias: str,
    output_dir: str,
    options: ExportOptions,
    encoder: NameEncoder,
    adapter: RemoteCallAdapter,
    result: ExportResult,
) -> ExportResult:
    instance = InstanceResolver(adapter).resolve(alias)
    if instance is None:
        return _abort(result, f"instance '{alias}' not found",
                      "The output directory name must match the instance alias.")

    writer = FileWriter(output_dir)
    try:
        if os.path.exists(output_dir):
            shutil.rmtree(output_dir)
        os.makedirs(output_dir)
        writer.write_instance(instance.data)
    except OSError as e:
        return _abort(result, f"cannot write {output_dir}: {e}")
    print(f"Instance {instance.alias} ({instance.id})")

    adapter = adapter.for_instance(instance.id)
    store = CatalogStore()
    fetcher = CatalogFetcher(adapter, options, writer, store)
    exporter = DetailExporter(adapter, encoder, writer, store)
    controller = SkipController(options, store)

    for component in COMPONENT_TYPES:
        fetched = fetcher.fetch(component)
        if not fetched.ok:
            return _abort(result, fetched.error)
        print(f"{component.label}: {fetched.count} ({fetcher.describe_filters(component)})")
        result.counts[component.key] = fetched.count
        if not component.has_detail:
            continue

        for detail in exporter.export_all(component, fetched.entries):
            if controller.handle(component, detail, fetched.path) is SkipDecision.ABORT:
                result.skipped = controller.skipped
                if detail.outcome is DetailOutcome.UNPUBLISHED:
                    return _abort(result, f"{component.describe_operation} {detail.name}",
                                  *_unpublished_hints(component, detail))
                return _abort(result, f"{component.describe_operation} {detail.name}: {detail.error}",
                              "Exclude the entry with --ignore-prefix if it cannot be exported.")

        result.counts[component.key] -= len(controller.skipped.get(component.key, []))

    result.skipped = controller.skipped
    return result


def _print_summary(result: ExportResult) -> None:
    for key, count in result.counts.items():
        skipped = result.skipped.get(key, [])
        suffix = f" ({len(skipped)} skipped)" if skipped else ''
        print(f"  {key}: {count}{suffix}")


def _default_codepage() -> str:
    return os.environ.get('CONNECT_EXPORT_CODEPAGE') or locale.getpreferredencoding(False)


def main(argv=None):
    parser = argparse.ArgumentParser(
        prog='connect-export',
        description='Export a contact-center instance configuration to JSON files',
    )
    parser.add_argument('directory', help='Output directory; its name is the instance alias')
    parser.add_argument('-f', '--force', action='store_true', help='Overwrite an existing output directory')
    parser.add_argument('-s', '--skip-unpublished', action='store_true',
                        help='Leave out unpublished flows and modules instead of failing')
    parser.add_argument('-e', '--ignore-charset-check', action='store_true',
                        help='Export even if accented names cannot be encoded reliably')
    parser.add_argument('-p', '--profile', default=os.environ.get('AWS_PROFILE'),
                        help='CLI profile used for authentication')
    parser.add_argument('-r', '--region', help='Region of the instance')
    parser.add_argument('-i', '--include-prefix', help='Only export flows and modules starting with this prefix')
    parser.add_argument('-x', '--ignore-prefix', help='Skip components whose name matches this pattern')
    parser.add_argument('-c', '--codepage', default=_default_codepage(),
                        help='Codepage of local names (default: from the locale)')
    parser.add_argument('-v', '--verbose', action='store_true', help='Debug logging')

    args = parser.parse_args(argv)

    try:
        codepage = normalize_codepage(args.codepage)
    except LookupError:
        parser.error(f"unknown codepage: {args.codepage}")
    if args.ignore_prefix:
        try:
            re.compile(args.ignore_prefix)
        except re.error as e:
            parser.error(f"invalid ignore pattern {args.ignore_prefix!r}: {e}")

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format='%(asctime)s  %(levelname)s  %(message)s',
        datefmt='%H:%M:%S',
    )

    options = ExportOptions(
        codepage=codepage,
        force=args.force,
        skip_unpublished=args.skip_unpublished,
        bypass_charset_check=args.ignore_charset_check,
        profile=args.profile,
        region=args.region,
        include_prefix=args.include_prefix,
        ignore_prefix=args.ignore_prefix,
        aws_command=os.environ.get('AWS_CLI', 'aws'),
    )

    print(f"Exporting {args.directory} (codepage {codepage})...")
    result = export_instance(args.directory, options)
    print("Done!" if result.ok else "Export aborted.")
    _print_summary(result)
    sys.exit(result.exit_code)


if __name__ == '__main__':
    main()
