"""
Filename-safe encoding of component display names.

Names returned by the remote instance may contain any Unicode character.
Output file names are built from an encoded token instead of the raw name:

1. ASCII letters, digits and ``. ~ _ -`` pass through unchanged.
2. Every other character is encoded to bytes in the active codepage and
   each byte is written as ``%XX`` (uppercase hex).
3. The carriage-return byte (``%0D``) is never emitted.

Example:
    >>> NameEncoder('utf-8').encode('Café Flow')
    'Caf%C3%A9%20Flow'
"""

import codecs
import logging
import string
import sys
from urllib.parse import unquote_to_bytes

from connect_exporter.domain.constants import CHARSET_PROBE

logger = logging.getLogger(__name__)

SAFE_CHARACTERS = frozenset(string.ascii_letters + string.digits + '.~_-')

_CARRIAGE_RETURN = 0x0D


class CharsetCheckError(Exception):
    """The encoder cannot represent names correctly in the active codepage."""
    pass


def normalize_codepage(codepage: str) -> str:
    """Return the canonical codec name. Raises LookupError for unknown codepages."""
    return codecs.lookup(codepage).name


class NameEncoder:
    """
    Percent-encodes names relative to one codepage.

    Characters the codepage cannot represent fall back to their UTF-8 bytes, with a warning,
    so encoding never fails on a remote name.

    Args:
        codepage: Codec name used for non-ASCII characters.
    """

    def __init__(self, codepage: str = 'utf-8') -> None:
        self.codepage = normalize_codepage(codepage)

    def encode(self, name: str) -> str:
        """Encode a display name into a filesystem and shell safe token."""
        parts = []
        for char in name:
            if char in SAFE_CHARACTERS:
                parts.append(char)
                continue
            parts.append(_percent_encode(b for b in self._char_bytes(char) if b != _CARRIAGE_RETURN))
        return ''.join(parts)

    def decode(self, token: str) -> str:
        """Inverse of ``encode`` for names encodable in the codepage."""
        return unquote_to_bytes(token).decode(self.codepage)

    def self_test(self, filesystem_encoding: str | None = None) -> None:
        """
        Verify that an accented character encodes the way the file system expects.

        The probe is encoded under the active codepage and compared with its
        encoding under the file system encoding. A mismatch means file names
        would not describe the names the local system renders.

        Args:
            filesystem_encoding: Reference encoding, defaults to
                ``sys.getfilesystemencoding()``.

        Raises:
            CharsetCheckError: If the codepage cannot represent the probe
                character or disagrees with the file system encoding.
        """
        try:
            CHARSET_PROBE.encode(self.codepage)
        except UnicodeEncodeError:
            raise CharsetCheckError(f"Codepage {self.codepage} cannot represent {CHARSET_PROBE!r}")

        reference = normalize_codepage(filesystem_encoding or sys.getfilesystemencoding())
        token = self.encode(CHARSET_PROBE)
        expected = _percent_encode(CHARSET_PROBE.encode(reference))
        if token != expected:
            raise CharsetCheckError(
                f"Encoding {CHARSET_PROBE!r} under {self.codepage} gave {token}, "
                f"but the file system encoding {reference} expects {expected}"
            )
        logger.debug("Charset self-test passed: %r -> %s (%s)", CHARSET_PROBE, token, self.codepage)

    def _char_bytes(self, char: str) -> bytes:
        try:
            return char.encode(self.codepage)
        except UnicodeEncodeError:
            logger.warning("Codepage %s cannot represent %r, using its UTF-8 bytes; "
                           "encoded names may collide", self.codepage, char)
            return char.encode('utf-8')


def _percent_encode(data) -> str:
    return ''.join(f'%{b:02X}' for b in data)
