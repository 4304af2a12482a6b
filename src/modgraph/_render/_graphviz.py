"""Rendering graphs to images with the Graphviz ``dot`` program."""

from __future__ import annotations

import logging
import shlex
import shutil
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Protocol

from ._dot import GraphingError, write_dot

if TYPE_CHECKING:
    from modgraph._graph import Graph

logger = logging.getLogger(__name__)

# Exit status of a shell that could not find the command.
COMMAND_NOT_FOUND = 127

OUTPUT_FORMATS = (
    "ps",  # PostScript
    "svg",  # Scalable Vector Graphics
    "svgz",
    "fig",  # XFig
    "mif",  # FrameMaker
    "hpgl",  # HP pen plotters
    "pcl",  # LaserJet printers
    "jpg",
    "png",
    "gif",
    "jpeg",
    "pdf",
)


class GraphvizNotFoundError(GraphingError):
    """Raised when the Graphviz executable is not available.

    The DOT file has already been written when this is raised, so callers can
    keep it and skip the image.
    """

    def __init__(self, message: str, dot_file: Path | None = None) -> None:
        self.dot_file = dot_file
        super().__init__(message)


@dataclass(frozen=True, slots=True)
class RenderResult:
    """Outcome of a successful rendering run."""

    dot_file: Path
    output_file: Path
    returncode: int
    stdout: str
    stderr: str


class GraphRenderer(Protocol):
    """A renderer of static (non-interactive) graph images."""

    @property
    def output_formats(self) -> tuple[str, ...]: ...

    def supports_output_format(self, fmt: str) -> bool: ...

    def render(self, graph: Graph, output_file: Path) -> RenderResult: ...


class GraphvizRenderer:
    """Render a graph by writing DOT text and running Graphviz on it.

    The DOT file is written next to the output file with the same stem; the
    image format is taken from the output file extension.

    Example:
        >>> renderer = GraphvizRenderer()
        >>> result = renderer.render(graph, Path("build/graph/modules.png"))
        >>> result.dot_file
        PosixPath('build/graph/modules.dot')

    """

    def __init__(self, executable: str = "dot") -> None:
        self.executable = executable

    @property
    def output_formats(self) -> tuple[str, ...]:
        return OUTPUT_FORMATS

    def supports_output_format(self, fmt: str) -> bool:
        return fmt.lower() in OUTPUT_FORMATS

    def render(self, graph: Graph, output_file: Path) -> RenderResult:
        """Render ``graph`` to ``output_file``.

        Args:
            graph: The graph to draw.
            output_file: Image to create; its extension selects the format.

        Returns:
            The paths produced and the captured output of the Graphviz run.

        Raises:
            GraphingError: If the format is unsupported or Graphviz fails.
            GraphvizNotFoundError: If the Graphviz executable cannot be run.

        """
        output_file = Path(output_file)
        fmt = output_file.suffix.removeprefix(".").lower()
        if not self.supports_output_format(fmt):
            msg = f"Unsupported output format '{fmt}' for {output_file}. Supported: {', '.join(OUTPUT_FORMATS)}"
            raise GraphingError(msg)

        workdir = output_file.resolve().parent
        workdir.mkdir(parents=True, exist_ok=True)
        dot_file = write_dot(graph, output_file.with_suffix(".dot"))

        executable = shutil.which(self.executable)
        if executable is None:
            msg = f"Graphviz '{self.executable}' command not found on system path"
            raise GraphvizNotFoundError(msg, dot_file)

        cmd = [executable, f"-T{fmt}", dot_file.name, "-o", output_file.name]
        logger.info(f"Executing: {shlex.join(cmd)}")
        try:
            result = subprocess.run(  # noqa: S603
                cmd,
                cwd=workdir,
                capture_output=True,
                text=True,
                check=False,
            )
        except FileNotFoundError as e:
            msg = f"Graphviz '{self.executable}' command could not be started"
            raise GraphvizNotFoundError(msg, dot_file) from e
        except OSError as e:
            msg = f"Can't run graphviz: {shlex.join(cmd)}"
            raise GraphingError(msg) from e

        if result.returncode == COMMAND_NOT_FOUND:
            msg = f"Graphviz '{self.executable}' command not found on system path (exit code {COMMAND_NOT_FOUND})"
            raise GraphvizNotFoundError(msg, dot_file)
        if result.returncode != 0:
            msg = f"Graphviz execution failed, exit code: '{result.returncode}'"
            if result.stderr.strip():
                msg += f": {result.stderr.strip()}"
            raise GraphingError(msg)

        logger.debug(f"Rendered {output_file}")
        return RenderResult(
            dot_file=dot_file,
            output_file=output_file,
            returncode=result.returncode,
            stdout=result.stdout,
            stderr=result.stderr,
        )
