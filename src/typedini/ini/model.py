# -*- encoding: utf-8 -*-
# @File   : model.py
# @Time   : 2024/10/10 00:57:10
# @Author : Kariko Lin

"""
Basically INI Structure, with typed values.

Each value is exactly one of `IniText`, `IniBool` or `IniNumber`.
Reading and writing files is up to `ini.parser`.
"""

import re
from collections.abc import Iterable, Iterator, KeysView, Mapping, MutableMapping
from dataclasses import dataclass
from decimal import Decimal
from typing import Any

# invariant format: no thousands separator, no exponent, `.` as the point.
NUMBER_PATTERN = re.compile(r'[+-]?(\d+(\.\d*)?|\.\d+)')


class IniError(Exception):
    """Base of every error raised by `typedini`."""
    pass


class SectionNotFound(IniError, LookupError):
    def __init__(self, section: str) -> None:
        super().__init__(f'The section "{section}" does not exist!')
        self.section = section


class FieldNotFound(IniError, LookupError):
    def __init__(self, section: str, field: str) -> None:
        super().__init__(
            f'The field "{field}" does not exist in the section "{section}"!')
        self.section = section
        self.field = field


class TypeCoercionFailure(IniError, ValueError):
    """A stored value can't be read as the type the getter asks for."""
    def __init__(
        self, section: str, field: str, target: type, value: 'IniValue'
    ) -> None:
        super().__init__(
            f'[{section}] {field}={value} cannot be read as {target.__name__}.')
        self.section = section
        self.field = field
        self.target = target
        self.value = value


def parse_bool(raw: str) -> bool | None:
    """`true`/`false` in any case, otherwise `None`."""
    match raw.strip().lower():
        case 'true':
            return True
        case 'false':
            return False
        case _:
            return None


def parse_number(raw: str) -> Decimal | None:
    raw = raw.strip()
    if NUMBER_PATTERN.fullmatch(raw) is None:
        return None
    return Decimal(raw)


@dataclass(frozen=True, slots=True)
class IniText:
    value: str

    def __post_init__(self) -> None:
        if not isinstance(self.value, str):
            raise TypeError(f'IniText expects str, got {self.value!r}')

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True, slots=True)
class IniBool:
    value: bool

    def __post_init__(self) -> None:
        if not isinstance(self.value, bool):
            raise TypeError(f'IniBool expects bool, got {self.value!r}')

    def __str__(self) -> str:
        return 'true' if self.value else 'false'


@dataclass(frozen=True, slots=True)
class IniNumber:
    """Decimal number. `int` and `float` are accepted and converted,
    floats through their shortest `repr()` (so `0.1` stays `0.1`)."""
    value: Decimal

    def __post_init__(self) -> None:
        num = self.value
        if isinstance(num, bool) or not isinstance(num, int | float | Decimal):
            raise TypeError(f'IniNumber expects a number, got {num!r}')
        if isinstance(num, float):
            num = Decimal(repr(num))
        elif isinstance(num, int):
            num = Decimal(num)
        if not num.is_finite():
            raise ValueError(f'IniNumber must be finite, got {num}')
        object.__setattr__(self, 'value', num)

    def __str__(self) -> str:
        # never the exponent form, which wouldn't read back as a number.
        return format(self.value, 'f')


IniValue = IniText | IniBool | IniNumber


def to_value(obj: object) -> IniValue:
    """Wrap a plain python object into the value union."""
    match obj:
        case IniText() | IniBool() | IniNumber():
            return obj
        case bool():  # before int, since bool is an int.
            return IniBool(obj)
        case int() | float() | Decimal():
            return IniNumber(obj)
        case str():
            return IniText(obj)
    raise TypeError(
        f'INI values can only be str, bool or numbers, got {type(obj).__name__}')


def infer_value(raw: str) -> IniValue:
    """Classify a raw INI value: boolean first, then number, then text."""
    if (flag := parse_bool(raw)) is not None:
        return IniBool(flag)
    if (num := parse_number(raw)) is not None:
        return IniNumber(num)
    return IniText(raw)


@dataclass(frozen=True, slots=True)
class IniField:
    name: str
    value: IniValue


def _iter_pairs(
    pairs: Mapping[str, Any] | Iterable[IniField] | Iterable[tuple[str, Any]]
) -> Iterator[tuple[str, Any]]:
    if isinstance(pairs, Mapping):
        yield from pairs.items()
        return
    for i in pairs:
        if isinstance(i, IniField):
            yield i.name, i.value
        else:
            key, val = i
            yield key, val


class IniSection(MutableMapping[str, IniValue]):
    """Ordered pairs of an INI section.

    Keys are unique and case-sensitive. Assigning to an existing key
    keeps its position; anything assigned goes through `to_value()`,
    so a section never holds a value outside the union.
    """
    def __init__(
        self, name: str,
        pairs: Mapping[str, Any] | Iterable[IniField] | None = None
    ) -> None:
        self._name = name
        self._data: dict[str, IniValue] = {}
        if pairs is not None:
            for k, v in _iter_pairs(pairs):
                self[k] = v

    @property
    def name(self) -> str:
        return self._name

    def __getitem__(self, key: str) -> IniValue:
        return self._data[key]

    def __setitem__(self, key: str, value: object) -> None:
        self._data[key] = to_value(value)

    def __delitem__(self, key: str) -> None:
        del self._data[key]

    def __contains__(self, key: object) -> bool:
        return key in self._data

    def __len__(self) -> int:
        return len(self._data)

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def __str__(self) -> str:
        return f'[{self._name}]'

    def __repr__(self) -> str:
        return '[%s] { .cnt = %d }' % (self._name, len(self._data))

    def fields(self) -> list[IniField]:
        return [IniField(k, v) for k, v in self._data.items()]

    def to_dict(self) -> dict[str, str | bool | Decimal]:
        """Pairs with the values unwrapped to plain python objects."""
        return {k: v.value for k, v in self._data.items()}


class IniDocument(MutableMapping[str, IniSection]):
    """A whole INI file, as ordered sections.

    `doc[name]` only looks up (`KeyError` if absent);
    use `get_or_create_section()` when creating is wanted.
    Assigning `doc[name] = ...` replaces the section with a copy of
    whatever pairs given.

    The `add_*`/`remove_*` methods never complain about missing names,
    while the typed getters/setters raise `SectionNotFound` or
    `FieldNotFound`, and setters never create keys.
    """
    def __init__(self) -> None:
        self.__raw: dict[str, IniSection] = {}

    def __getitem__(self, key: str) -> IniSection:
        return self.__raw[key]

    def __setitem__(
        self, key: str,
        value: Mapping[str, Any] | Iterable[IniField]
    ) -> None:
        # shouldn't keep ptr to external pairs.
        self.__raw[key] = IniSection(key, value)

    def __delitem__(self, key: str) -> None:
        del self.__raw[key]

    def __contains__(self, key: object) -> bool:
        return key in self.__raw

    def __len__(self) -> int:
        return len(self.__raw)

    def __iter__(self) -> Iterator[str]:
        return iter(self.__raw)

    def __repr__(self) -> str:
        return 'IniDocument(%s)' % ', '.join(
            repr(i) for i in self.__raw.values())

    @property
    def sections(self) -> KeysView[str]:
        """Section names in order. A live view, iterable again and again."""
        return self.__raw.keys()

    def section_exists(self, section: str) -> bool:
        return section in self.__raw

    def field_exists(self, section: str, field: str) -> bool:
        return section in self.__raw and field in self.__raw[section]

    def setdefault(
        self, key: str,
        default: Mapping[str, Any] | Iterable[IniField] | None = None
    ) -> IniSection:
        if key not in self.__raw:
            self[key] = () if default is None else default
        return self.__raw[key]

    def get_or_create_section(self, section: str) -> IniSection:
        return self.setdefault(section)

    def add_section(self, section: str) -> None:
        self.setdefault(section)

    def add_field(self, section: str, field: str, value: object) -> None:
        """Add a pair only if `section` exists and `field` doesn't.

        Otherwise nothing happens, and the existing value is kept.
        """
        if not self.section_exists(section) or self.field_exists(section, field):
            return
        self.__raw[section][field] = value

    def remove_section(self, section: str) -> None:
        self.__raw.pop(section, None)

    def remove_field(self, section: str, field: str) -> None:
        if self.field_exists(section, field):
            del self.__raw[section][field]

    def clear(self) -> None:
        self.__raw.clear()

    def rename_section(self, old: str, new: str) -> bool:
        """Rename a section, keeping its position.

        Returns:
            `True` if succeed, otherwise `False`.
            May not success if `old` is not found or `new` already exists.
        """
        if old not in self.__raw or new in self.__raw:
            return False
        # rebuild in place, so views from `self.sections` stay alive.
        pairs = [((new if k == old else k), v) for k, v in self.__raw.items()]
        self.__raw.clear()
        self.__raw.update(pairs)
        self.__raw[new]._name = new
        return True

    def update(
        self,
        another: Mapping[str, Any] | Iterable[tuple[str, Any]] = (), /,
        **kwds: Any
    ) -> None:
        """To merge `another` (and `kwds`) into self. Their pairs win.

        Takes the same forms as `dict.update()`: a mapping of sections,
        an iterable of `(section, pairs)`, or keyword sections.
        """
        for decl, data in dict(another, **kwds).items():
            sect = self.setdefault(decl)
            for k, v in _iter_pairs(data):
                sect[k] = v

    def copy(self) -> 'IniDocument':
        ret = IniDocument()
        for k, v in self.__raw.items():
            ret[k] = v
        return ret

    def to_dict(self) -> dict[str, dict[str, str | bool | Decimal]]:
        return {k: v.to_dict() for k, v in self.__raw.items()}

    # typed access

    def _lookup(self, section: str, field: str) -> IniValue:
        if section not in self.__raw:
            raise SectionNotFound(section)
        if field not in self.__raw[section]:
            raise FieldNotFound(section, field)
        return self.__raw[section][field]

    def _assign(self, section: str, field: str, value: IniValue) -> None:
        self._lookup(section, field)
        self.__raw[section][field] = value

    def get_boolean_field(self, section: str, field: str) -> bool:
        value = self._lookup(section, field)
        match value:
            case IniBool(flag):
                return flag
            case IniNumber(num):
                return num != 0
            case IniText(text):
                if (flag := parse_bool(text)) is not None:
                    return flag
        raise TypeCoercionFailure(section, field, bool, value)

    def get_number_field(self, section: str, field: str) -> Decimal:
        value = self._lookup(section, field)
        match value:
            case IniNumber(num):
                return num
            case IniBool(flag):
                return Decimal(int(flag))
            case IniText(text):
                if (num := parse_number(text)) is not None:
                    return num
        raise TypeCoercionFailure(section, field, Decimal, value)

    def get_string_field(self, section: str, field: str) -> str:
        return str(self._lookup(section, field))

    def set_boolean_field(self, section: str, field: str, value: bool) -> None:
        if not isinstance(value, bool):
            raise TypeError(f'expected bool, got {type(value).__name__}')
        self._assign(section, field, IniBool(value))

    def set_number_field(
        self, section: str, field: str, value: Decimal | int | float
    ) -> None:
        if isinstance(value, bool) or not isinstance(value, int | float | Decimal):
            raise TypeError(f'expected a number, got {type(value).__name__}')
        self._assign(section, field, IniNumber(value))

    def set_string_field(self, section: str, field: str, value: str) -> None:
        if not isinstance(value, str):
            raise TypeError(f'expected str, got {type(value).__name__}')
        self._assign(section, field, IniText(value))
