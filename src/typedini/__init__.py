# -*- encoding: utf-8 -*-
# @File   : __init__.py
# @Time   : 2023/11/14 20:01:52
# @Author : Chloride

import logging

from .ini import (
    IniBool, IniNumber, IniText, IniValue, IniField,
    IniSection, IniDocument,
    IniParser, IniJsonParser, IniYamlParser,
    IniError, SectionNotFound, FieldNotFound, TypeCoercionFailure,
    IniParseError, IniFileError, IniFormatError
)

__all__ = [
    'IniBool', 'IniNumber', 'IniText', 'IniValue', 'IniField',
    'IniSection', 'IniDocument',
    'IniParser', 'IniJsonParser', 'IniYamlParser',
    'IniError', 'SectionNotFound', 'FieldNotFound', 'TypeCoercionFailure',
    'IniParseError', 'IniFileError', 'IniFormatError'
]

logging.basicConfig(level=logging.INFO,
                    format='[%(asctime)s] %(levelname)s: %(message)s')
