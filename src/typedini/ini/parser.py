# -*- encoding: utf-8 -*-
# @File   : parser.py
# @Time   : 2024/10/10 01:04:45
# @Author : Kariko Lin

"""Readers and writers of `IniDocument`.

The INI dialect handled here is the plain one:

    ```ini
    ; comment lines start with a semicolon.
    [General]
    Debug=true
    Retries=3
    Name=acme
    ```

- every value gets classified on reading: `true`/`false` (any case) as
boolean, then invariant decimals (`-1`, `3.50`, `.5`) as numbers,
anything else as text. No quoting, no escaping, no multi-line values.
- the first `=` splits key and value, the rest belongs to the value.
- comments and blank lines are dropped, and never written back.

JSON and YAML handlers are also provided, mainly for exporting to tools
that don't speak INI.
"""

import json
import logging
import warnings
from collections.abc import Mapping
from decimal import Decimal
from io import StringIO, TextIOBase
from os import PathLike
from typing import IO, Any

import chardet
import yaml

from ..abstract import FileHandler
from .model import (
    IniDocument,
    IniError,
    IniNumber,
    IniSection,
    IniText,
    IniValue,
    infer_value,
    to_value
)


class IniParseError(IniError, ValueError):
    """To record errors when reading INI (or exported) files."""
    def __init__(
        self, message: str,
        lineno: int | None = None, line: str | None = None
    ) -> None:
        if lineno is not None:
            message = f'line {lineno}: {message}'
        super().__init__(message)
        self.lineno = lineno
        self.line = line


class IniFileError(IniError, OSError):
    """The file is unable to open, read or write."""
    def __init__(self, filename: str | PathLike[str], reason: str) -> None:
        super().__init__(f'Unable to access "{filename}": {reason}')
        self.path = filename


class IniFormatError(IniError, ValueError):
    """A name or value the INI format is unable to hold (no escaping)."""
    pass


class IniParser(FileHandler[IniDocument]):
    def __init__(
        self,
        filename: str | PathLike[str],
        encoding: str | None = None, *,
        default_section: str | None = None,
        strict: bool = False
    ) -> None:
        """Handler of a single INI file.

        Args:
            encoding: codec to read and write with. When `None`, reading
                tries UTF-8 and falls back to `chardet`, writing uses UTF-8.
            default_section: where to put pairs found before any section
                header. When `None`, such pairs are a `IniParseError`.
            strict: raise `IniParseError` on a key repeated in one section,
                instead of warning and keeping the last value.
        """
        super().__init__(filename)
        self._codec = encoding
        self._default = default_section
        self._strict = strict

    def readstream(
        self, buf: TextIOBase | IO[str], ins: IniDocument | None = None
    ) -> IniDocument:
        """Read a decoded chars stream, into `ins` if given.

        Pairs already in `ins` get overwritten silently, but a key repeated
        within `buf` itself is a duplicate.

        If no special needs, just call `self.read()`.
        """
        if ins is None:
            ins = IniDocument()
        this_sect: IniSection | None = None
        seen: set[tuple[str, str]] = set()
        for lineno, i in enumerate(buf, 1):
            line = i.strip()
            if not line or line[0] == ';':
                continue
            if line[0] == '[':
                this_sect = ins.get_or_create_section(
                    line.lstrip('[').rstrip(']').strip())
                continue
            if '=' not in line:
                raise IniParseError('expected "key=value".', lineno, i)
            key, val = (j.strip() for j in line.split('=', 1))
            if not key:
                raise IniParseError('empty key.', lineno, i)
            if this_sect is None:
                if self._default is None:
                    raise IniParseError(
                        f'"{key}" appears before any section header.',
                        lineno, i)
                this_sect = ins.get_or_create_section(self._default)
            if (this_sect.name, key) in seen:
                if self._strict:
                    raise IniParseError(
                        f'duplicate key "{key}" in {this_sect}.', lineno, i)
                warnings.warn(
                    f'duplicate key "{key}" in {this_sect} (line {lineno}), '
                    'the previous value is overwritten.')
            seen.add((this_sect.name, key))
            this_sect[key] = infer_value(val)
        return ins

    @staticmethod
    def _decode_file(
        filename: str | PathLike[str], tried: str = 'utf-8'
    ) -> StringIO:
        with open(filename, 'rb') as fp:
            raw = fp.read()

        codec = chardet.detect(raw)
        encoding = codec['encoding']
        if encoding is None or codec['confidence'] < 0.8:
            encoding = 'gbk'
        logging.info(
            f'"{filename}" is not {tried}, decoding as {encoding} '
            f'(confidence {codec["confidence"]:.2f}).')

        # fallbacks
        try:
            buf = raw.decode(encoding)
        except (UnicodeDecodeError, LookupError):
            try:
                buf = raw.decode('gbk')
            except UnicodeDecodeError as e:
                raise IniParseError(
                    f'unable to decode "{filename}": {e.reason}') from e
        return StringIO(buf)

    def read(self) -> IniDocument:
        """Read the file `IniParser` instance specified."""
        try:
            try:
                with open(self._fn, 'r', encoding=self._codec or 'utf-8-sig') as fp:
                    return self.readstream(fp)
            except UnicodeDecodeError:
                logging.warning(
                    f'"{self._fn}" cannot be decoded as '
                    f'{self._codec or "utf-8"}, guessing with chardet.')
                return self.readstream(
                    self._decode_file(self._fn, self._codec or 'utf-8'))
        except OSError as e:
            raise IniFileError(self._fn, e.strerror or str(e)) from e

    @staticmethod
    def check_writable(instance: IniDocument, delimiter: str = '=') -> None:
        """Raise `IniFormatError` if anything in `instance` would not read
        back as the same section, key or line.

        Note that text values are written verbatim, so `IniText('10')` or
        `IniText(' a ')` still come back as `IniNumber(10)` and `'a'`.
        """
        if delimiter.strip() != '=':
            raise IniFormatError(
                f'delimiter {delimiter!r} should be "=" with optional spaces.')
        for section, data in instance.items():
            if (
                section != section.strip()
                or section.startswith('[')
                or any(c in section for c in ']\r\n')
            ):
                raise IniFormatError(f'section name {section!r} is not writable.')
            for key, val in data.items():
                if (
                    not key or key != key.strip()
                    or key[0] in ';['
                    or any(c in key for c in '=\r\n')
                ):
                    raise IniFormatError(
                        f'key {key!r} in [{section}] is not writable.')
                if any(c in str(val) for c in '\r\n'):
                    raise IniFormatError(
                        f'[{section}] {key}: multi-line values are not writable.')

    def writestream(
        self, instance: IniDocument, buf: TextIOBase | IO[str], *,
        blank_lines: int = 1,
        delimiter: str = '='
    ) -> None:
        self.check_writable(instance, delimiter)
        for section, data in instance.items():
            buf.write(f'[{section}]\n')
            for key, val in data.items():
                buf.write(f'{key}{delimiter}{val}\n')
            buf.write('\n' * blank_lines)

    def write(
        self, instance: IniDocument, *,
        blank_lines: int = 1,
        delimiter: str = '='
    ) -> None:
        """Save to the file, each section followed by `blank_lines`."""
        # before opening, so a bad document leaves the old file untouched.
        self.check_writable(instance, delimiter)
        try:
            with open(self._fn, 'w', encoding=self._codec or 'utf-8') as fp:
                self.writestream(
                    instance, fp,
                    blank_lines=blank_lines, delimiter=delimiter)
        except OSError as e:
            raise IniFileError(self._fn, e.strerror or str(e)) from e

    def __str__(self) -> str:
        return f'INI file: {super().__str__()} ({self._codec or "auto"})'


def _export_value(val: IniValue) -> str | bool | int | float:
    if isinstance(val, IniNumber):
        num = val.value
        # json & yaml have no decimal, and float may lose digits.
        return int(num) if num == num.to_integral_value() else float(num)
    return val.value


def _import_value(val: Any, where: str) -> IniValue:
    if val is None:  # yaml `key:` with nothing
        return IniText('')
    try:
        return to_value(val)
    except (TypeError, ValueError) as e:
        raise IniParseError(f'{where}: {e}') from e


# should keep this base class for better type hinting.
class IniMappingParser(FileHandler[IniDocument]):
    """Handlers of `{section: {key: value}}` shaped documents."""
    def __init__(
        self, filename: str | PathLike[str], encoding: str = 'utf-8'
    ) -> None:
        super().__init__(filename)
        self._codec = encoding

    @staticmethod
    def to_mapping(
        instance: IniDocument
    ) -> dict[str, dict[str, str | bool | int | float]]:
        return {
            sect: {k: _export_value(v) for k, v in data.items()}
            for sect, data in instance.items()
        }

    @staticmethod
    def from_mapping(src: Any) -> IniDocument:
        if not isinstance(src, Mapping):
            raise IniParseError('the root should be a mapping of sections.')
        ret = IniDocument()
        for sect, data in src.items():
            if data is None:
                data = {}
            if not isinstance(data, Mapping):
                raise IniParseError(f'[{sect}] should be a mapping of pairs.')
            ret[str(sect)] = {
                str(k): _import_value(v, f'[{sect}] {k}')
                for k, v in data.items()
            }
        return ret


class IniJsonParser(IniMappingParser):
    def read(self) -> IniDocument:
        try:
            with open(self._fn, 'r', encoding=self._codec) as fp:
                src = json.load(fp, parse_float=Decimal)
        except OSError as e:
            raise IniFileError(self._fn, e.strerror or str(e)) from e
        except json.JSONDecodeError as e:
            raise IniParseError(e.msg, e.lineno) from e
        return self.from_mapping(src)

    def write(self, instance: IniDocument, indent: int = 2) -> None:
        """Convert to a JSON object of section objects."""
        try:
            with open(self._fn, 'w', encoding=self._codec) as fp:
                json.dump(
                    self.to_mapping(instance), fp,
                    ensure_ascii=False, indent=indent)
        except OSError as e:
            raise IniFileError(self._fn, e.strerror or str(e)) from e


class IniYamlParser(IniMappingParser):
    def read(self) -> IniDocument:
        try:
            with open(self._fn, 'r', encoding=self._codec) as fp:
                src = yaml.safe_load(fp)
        except OSError as e:
            raise IniFileError(self._fn, e.strerror or str(e)) from e
        except yaml.YAMLError as e:
            mark = getattr(e, 'problem_mark', None)
            raise IniParseError(
                str(e), None if mark is None else mark.line + 1) from e
        return self.from_mapping({} if src is None else src)

    def write(self, instance: IniDocument, indent: int = 2) -> None:
        """Convert to yaml file, keeping the order of sections and keys."""
        try:
            with open(self._fn, 'w', encoding=self._codec) as fp:
                yaml.safe_dump(
                    self.to_mapping(instance), fp,
                    allow_unicode=True, indent=indent, sort_keys=False)
        except OSError as e:
            raise IniFileError(self._fn, e.strerror or str(e)) from e
