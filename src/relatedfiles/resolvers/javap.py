"""Decompiled-text capability backed by the JDK's ``javap`` tool."""

from __future__ import annotations

import logging
import os
import shutil
import subprocess

from ..errors import DecompilationError

logger = logging.getLogger(__name__)


class JavapDecompiler:
    """Produce public API listings for library classes on a classpath.

    ``javap -public`` prints the declarations (signatures, no bodies) of a
    compiled class, which is enough context to paste next to source code.
    """

    def __init__(
        self,
        classpath: list[str],
        javap_path: str | None = None,
        timeout: int = 30,
    ) -> None:
        self.classpath = list(classpath)
        self.javap_path = javap_path or shutil.which("javap")
        self.timeout = timeout

    @property
    def available(self) -> bool:
        return bool(self.javap_path and self.classpath)

    def decompile(self, qualified_name: str) -> str:
        """Return the ``javap`` listing for *qualified_name*.

        Raises:
            DecompilationError: javap missing, failing, or timing out.
        """
        if not self.available:
            raise DecompilationError("javap or classpath not configured", qualified_name)

        candidates = [qualified_name]
        if "." in qualified_name:
            # Nested classes are addressed by their binary name: Outer$Inner
            head, tail = qualified_name.rsplit(".", 1)
            candidates.append(f"{head}${tail}")

        last_error = ""
        for candidate in candidates:
            try:
                result = subprocess.run(
                    [
                        self.javap_path,
                        "-public",
                        "-classpath",
                        os.pathsep.join(self.classpath),
                        candidate,
                    ],
                    capture_output=True,
                    text=True,
                    timeout=self.timeout,
                )
            except (OSError, subprocess.TimeoutExpired) as e:
                raise DecompilationError(f"javap failed: {e}", qualified_name) from e

            if result.returncode == 0 and result.stdout.strip():
                return result.stdout
            last_error = (result.stderr or result.stdout).strip()
            logger.debug("javap could not load %s: %s", candidate, last_error)

        raise DecompilationError(last_error or "class not found", qualified_name)
