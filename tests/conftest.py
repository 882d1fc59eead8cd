"""Pytest configuration and shared fixtures."""

import pytest
from pathlib import Path

from relatedfiles.cancellation import CancellationToken
from relatedfiles.config import TraversalPolicy
from relatedfiles.extractor import ContentExtractor
from relatedfiles.file_access import SmartFileAccess
from relatedfiles.files import InMemoryFileBackend
from relatedfiles.resolvers import InMemorySymbolResolver
from relatedfiles.traversal import DependencyTraversal


SERVICE = "src/com/acme/app/Service.java"
HELPER = "src/com/acme/util/Helper.java"
SERVICE_IMPL = "src/com/acme/app/impl/ServiceImpl.java"


class FakeProject:
    """A reference graph described symbol by symbol, plus the file texts."""

    def __init__(self):
        self.resolver = InMemorySymbolResolver()
        self.files = InMemoryFileBackend("/fake/repo")

    def add_class(
        self,
        path: str,
        qualified_name: str,
        references=(),
        imports=(),
        interface_like: bool = False,
        implements=(),
        broken: bool = False,
    ):
        package = qualified_name.rsplit(".", 1)[0]
        self.resolver.add_symbol(
            qualified_name, file=path, interface_like=interface_like, implements=implements
        )
        self.files.add_file(path, f"// {qualified_name}\n")
        return self.resolver.add_file(
            path,
            package=package,
            references=references,
            imports=imports,
            declares=[qualified_name],
            broken=broken,
        )

    def add_library_class(self, qualified_name: str, text: str | None = None, error: str | None = None):
        if text is None and error is None:
            text = f"public class {qualified_name} {{ }}"
        return self.resolver.add_symbol(qualified_name, decompiled_text=text, decompile_error=error)

    def traversal(self, policy=None, cancel_token=None, progress=None) -> DependencyTraversal:
        policy = policy or TraversalPolicy(smart_pruning=False)
        extractor = ContentExtractor(SmartFileAccess(self.files))
        return DependencyTraversal(
            self.resolver,
            extractor,
            policy,
            cancel_token=cancel_token or CancellationToken(),
            progress=progress,
        )

    def run(self, root_path: str, **policy_fields):
        policy_fields.setdefault("smart_pruning", False)
        root = self.resolver.file_for_path(root_path)
        return self.traversal(TraversalPolicy(**policy_fields)).run(root)


@pytest.fixture
def project() -> FakeProject:
    """An empty fake project."""
    return FakeProject()


@pytest.fixture
def acme(project: FakeProject) -> FakeProject:
    """Service imports Helper and is implemented by ServiceImpl."""
    project.add_class(HELPER, "com.acme.util.Helper")
    project.add_class(
        SERVICE,
        "com.acme.app.Service",
        imports=["com.acme.util.Helper"],
        interface_like=True,
    )
    project.add_class(
        SERVICE_IMPL,
        "com.acme.app.impl.ServiceImpl",
        imports=["com.acme.app.Service"],
        implements=["com.acme.app.Service"],
    )
    return project


@pytest.fixture
def java_repo(tmp_path: Path) -> Path:
    """A small Maven-style Java project on disk."""
    repo = tmp_path / "shop"
    base = repo / "src" / "main" / "java" / "com" / "acme"
    (base / "app" / "impl").mkdir(parents=True)
    (base / "util").mkdir(parents=True)
    (repo / "pom.xml").write_text("<project/>\n")

    (base / "util" / "Helper.java").write_text(
        "package com.acme.util;\n"
        "\n"
        "public class Helper {\n"
        "    public static String trim(String s) { return s.trim(); }\n"
        "}\n"
    )
    (base / "app" / "Service.java").write_text(
        "package com.acme.app;\n"
        "\n"
        "import com.acme.util.Helper;\n"
        "import java.util.List;\n"
        "\n"
        "/** Entry point for orders. */\n"
        "public interface Service {\n"
        "    List<String> names(Helper helper);\n"
        "}\n"
    )
    (base / "app" / "impl" / "ServiceImpl.java").write_text(
        "package com.acme.app.impl;\n"
        "\n"
        "import com.acme.app.Service;\n"
        "import java.util.List;\n"
        "\n"
        "public class ServiceImpl implements Service {\n"
        "    public List<String> names(com.acme.util.Helper helper) { return List.of(); }\n"
        "}\n"
    )
    (repo / "README.md").write_text("# Shop\n")
    return repo
