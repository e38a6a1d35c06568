"""Rendering of test doubles and record factories as Swift source."""

from swift_test_doubles.generator.base import build_import_block
from swift_test_doubles.generator.engine import CodeGenerator
from swift_test_doubles.generator.protocol_double import ProtocolDoubleRenderer
from swift_test_doubles.generator.record_factory import RecordFactoryRenderer

__all__ = [
    "CodeGenerator",
    "ProtocolDoubleRenderer",
    "RecordFactoryRenderer",
    "build_import_block",
]
