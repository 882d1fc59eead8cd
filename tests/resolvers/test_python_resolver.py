"""Tests for the Python symbol resolver."""

import pytest

from relatedfiles.file_access import SmartFileAccess
from relatedfiles.files import InMemoryFileBackend
from relatedfiles.models import SourceFile, Symbol
from relatedfiles.resolvers import PythonSymbolResolver

FILES = {
    "src/shop/__init__.py": "",
    "src/shop/models.py": (
        "from abc import ABC, abstractmethod\n"
        "\n"
        "\n"
        "class Base(ABC):\n"
        "    @abstractmethod\n"
        "    def save(self): ...\n"
        "\n"
        "\n"
        "class Order(Base):\n"
        "    def save(self): ...\n"
    ),
    "src/shop/util.py": "class Tool:\n    pass\n",
    "src/shop/services/__init__.py": "",
    "src/shop/services/orders.py": (
        "import json\n"
        "from shop import models\n"
        "from ..models import Order as O\n"
        "from shop.util import *\n"
        "\n"
        "\n"
        "def run():\n"
        "    return O(), models.Base, json.dumps, Tool(), Local()\n"
        "\n"
        "\n"
        "class Local:\n"
        "    pass\n"
    ),
    "scripts/tool.py": "print('hi')\n",
    "src/shop/broken.py": "def broken(:\n",
}

ORDERS = SourceFile.from_path("src/shop/services/orders.py")
MODELS = SourceFile.from_path("src/shop/models.py")


@pytest.fixture
def resolver():
    access = SmartFileAccess(InMemoryFileBackend("/repo", dict(FILES)))
    return PythonSymbolResolver(access)


class TestModuleNames:
    def test_src_layout(self, resolver):
        assert resolver.module_name("src/shop/services/orders.py") == "shop.services.orders"

    def test_package_init(self, resolver):
        assert resolver.module_name("src/shop/__init__.py") == "shop"

    def test_flat_layout(self, resolver):
        assert resolver.module_name("scripts/tool.py") == "scripts.tool"

    def test_non_python(self, resolver):
        assert resolver.module_name("README.md") is None


class TestResolveReference:
    def test_relative_import_alias(self, resolver):
        symbol = resolver.resolve_reference(ORDERS, "O")
        assert symbol.qualified_name == "shop.models.Order"
        assert symbol.file == MODELS

    def test_module_attribute(self, resolver):
        symbol = resolver.resolve_reference(ORDERS, "models.Base")
        assert symbol.qualified_name == "shop.models.Base"
        assert symbol.is_interface_like

    def test_star_import(self, resolver):
        assert resolver.resolve_reference(ORDERS, "Tool").qualified_name == "shop.util.Tool"

    def test_same_module(self, resolver):
        assert resolver.resolve_reference(ORDERS, "Local").qualified_name == "shop.services.orders.Local"

    def test_third_party_name(self, resolver):
        symbol = resolver.resolve_reference(ORDERS, "json.dumps")
        assert symbol.qualified_name == "json.dumps"
        assert symbol.file is None
        assert not symbol.decompilable

    def test_unbound_name(self, resolver):
        assert resolver.resolve_reference(ORDERS, "print") is None


class TestResolveImport:
    def test_relative_class_import(self, resolver):
        assert resolver.resolve_import(ORDERS, "..models.Order").qualified_name == "shop.models.Order"

    def test_module_import(self, resolver):
        symbol = resolver.resolve_import(ORDERS, "shop.models")
        assert symbol.qualified_name == "shop.models"
        assert symbol.file == MODELS

    def test_external_module(self, resolver):
        symbol = resolver.resolve_import(ORDERS, "json")
        assert symbol.file is None


class TestFileQueries:
    def test_import_tokens(self, resolver):
        assert list(resolver.import_tokens(ORDERS)) == [
            "json", "shop.models", "..models.Order", "shop.util",
        ]

    def test_declared_symbols(self, resolver):
        declared = resolver.declared_symbols(MODELS)
        assert [(s.qualified_name, s.is_interface_like) for s in declared] == [
            ("shop.models.Base", True),
            ("shop.models.Order", False),
        ]

    def test_package_of(self, resolver):
        assert resolver.get_package_of(ORDERS) == "shop.services"
        assert resolver.get_package_of(SourceFile.from_path("src/shop/__init__.py")) == "shop"

    def test_package_of_unparsable_file(self, resolver):
        assert resolver.get_package_of(SourceFile.from_path("src/shop/broken.py")) is None

    def test_owning_file(self, resolver):
        assert resolver.get_owning_file(Symbol("shop.models.Order")) == MODELS
        assert resolver.get_owning_file(Symbol("json.dumps")) is None

    def test_no_decompilation(self, resolver):
        assert resolver.get_decompiled_text(Symbol("json.dumps")) is None


class TestImplementers:
    def test_subclasses(self, resolver):
        base = resolver.resolve_reference(MODELS, "Base")
        assert [s.qualified_name for s in resolver.find_implementers(base, "shop")] == ["shop.models.Order"]

    def test_scope_hint(self, resolver):
        base = resolver.resolve_reference(MODELS, "Base")
        assert list(resolver.find_implementers(base, "other")) == []
