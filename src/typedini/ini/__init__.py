# -*- encoding: utf-8 -*-
# @File   : __init__.py
# @Time   : 2024/10/10 01:16:53
# @Author : Kariko Lin

from .model import (
    IniBool,
    IniDocument,
    IniError,
    IniField,
    IniNumber,
    IniSection,
    IniText,
    IniValue,
    FieldNotFound,
    SectionNotFound,
    TypeCoercionFailure,
    infer_value,
    to_value
)
from .parser import (
    IniFileError,
    IniFormatError,
    IniJsonParser,
    IniMappingParser,
    IniParseError,
    IniParser,
    IniYamlParser
)
