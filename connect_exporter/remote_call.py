"""Invocation of the remote contact-center API through the local CLI."""

import logging
import shlex
import subprocess
from typing import Callable

from connect_exporter.domain.constants import API_OUTPUT_ENCODING, LIST_PAGE_LIMITS, SERVICE
from connect_exporter.domain.models import CallResult, ExportOptions
from connect_exporter.name_encoder import normalize_codepage

logger = logging.getLogger(__name__)
audit_logger = logging.getLogger('connect_exporter.audit')


class RemoteCallAdapter:
    """
    Runs one remote operation at a time and returns its raw result.

    Every invocation is written to the audit log before it runs. Diagnostic
    output is logged and surfaced but never turned into a failure on its own:
    only the exit status decides, and the caller decides what a failure means.

    Args:
        options: Run configuration.
        instance_id: Instance passed to every call, when known.
        runner: Callable with the ``subprocess.run`` signature.
    """

    def __init__(
        self,
        options: ExportOptions,
        instance_id: str | None = None,
        runner: Callable[..., subprocess.CompletedProcess] = subprocess.run,
    ) -> None:
        self.options = options
        self.instance_id = instance_id
        self._runner = runner
        self._transcode = normalize_codepage(options.codepage) != API_OUTPUT_ENCODING

    def for_instance(self, instance_id: str) -> 'RemoteCallAdapter':
        """Return an adapter bound to the given instance."""
        return RemoteCallAdapter(self.options, instance_id=instance_id, runner=self._runner)

    def build_args(self, operation: str, *args: str) -> list[str]:
        command = [self.options.aws_command, SERVICE, operation, *args]
        if self.instance_id:
            command += ['--instance-id', self.instance_id]
        if operation.startswith('list-'):
            limit = min(self.options.max_results, LIST_PAGE_LIMITS.get(operation, self.options.max_results))
            command += ['--max-results', str(limit)]
        if self.options.profile:
            command += ['--profile', self.options.profile]
        if self.options.region:
            command += ['--region', self.options.region]
        command += ['--output', 'json']
        return command

    def call(self, operation: str, *args: str) -> CallResult:
        command = self.build_args(operation, *args)
        audit_logger.info("%s", shlex.join(command))

        try:
            completed = self._runner(command, capture_output=True, check=False)
        except FileNotFoundError as e:
            result = CallResult(args=command, returncode=127, stderr=f"{command[0]}: {e.strerror or e}")
            self._report_stderr(result)
            return result

        result = CallResult(
            args=command,
            returncode=completed.returncode,
            stdout=self._normalize_charset(completed.stdout or b''),
            stderr=_as_text(completed.stderr),
        )
        self._report_stderr(result)
        if not result.ok:
            logger.debug("%s exited with status %d", operation, result.returncode)
        return result

    def _normalize_charset(self, output: bytes) -> bytes:
        if not self._transcode or not output:
            return output
        try:
            return output.decode(self.options.codepage).encode(API_OUTPUT_ENCODING)
        except UnicodeError as e:
            logger.warning("Could not transcode output from %s, keeping it unchanged: %s",
                           self.options.codepage, e)
            return output

    @staticmethod
    def _report_stderr(result: CallResult) -> None:
        message = result.stderr.strip()
        if not message:
            return
        audit_logger.info("%s", message)
        logger.warning("%s", message)


def _as_text(stream: bytes | str | None) -> str:
    if stream is None:
        return ''
    if isinstance(stream, bytes):
        return stream.decode('utf-8', errors='replace')
    return stream
