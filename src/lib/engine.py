"""
Engine: runs every tool's strategies over the project

For each tool and each of its strategies the engine discovers matching
files, groups them by directory, resolves each file's directives for that
tool, hands the batch to the strategy's transform, and writes or deletes
whatever the transform asks for. Once a tool's strategies are done its
on_finish callback (if any) gets the metadata every transform returned.

The engine is also the read capability handed to transforms, on_finish
callbacks and pipeline stages (file_read / files_read).
"""

import os
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

from ..config import appsettings
from ..models.config import (
    FactoryConfig,
    OnFinishContext,
    ReadFileOptions,
    SourceFile,
    Strategy,
    TransformContext,
    onFinishResult_coerce,
    transformResult_coerce,
)
from ..models.diagnostics import DiagnosticKind
from ..models.visitation import VisitationSet
from .errors import CircularDependencyError
from .fileio import files_delete, files_find, files_write, raw_read
from .log import Diagnostics, LOG
from .paths import PathLike, path_normalize, path_resolveFromRoot
from .pipelines import PipelineRegistry, pipelines_execute
from .preprocessor import directives_process


class Engine:
    """
    Orchestrates directive resolution and user callbacks for a project

    Attributes:
        config: The factory configuration
        root: Absolute project root
        output_root: Where relative output paths are written (defaults to root)
        registry: Built-in plus configured pipeline stages
        diagnostics: Sink for every recoverable condition of the run
        written: Every output path written so far
    """

    def __init__(
        self,
        config: FactoryConfig,
        root: PathLike,
        output_root: Optional[PathLike] = None,
        diagnostics: Optional[Diagnostics] = None,
        verbose: bool = False,
    ) -> None:
        self.config = config
        self.root = path_normalize(root)
        self.output_root = path_normalize(output_root) if output_root is not None else self.root
        self.registry = PipelineRegistry(config.pipelines)

        use_logs = appsettings.use_logs if config.use_logs is None else config.use_logs
        self.diagnostics = diagnostics if diagnostics is not None else Diagnostics(verbose=verbose or use_logs)
        self.written: List[Path] = []

    def sourceFile_make(self, path: Path, content: str) -> SourceFile:
        """Describe a resolved file relative to the project root"""
        return SourceFile(
            name=path.name,
            content=content,
            path=str(path),
            relative_path=os.path.relpath(path, self.root),
            extension=path.suffix,
        )

    def content_resolve(self, raw: str, path: Path, tool: str, strategy: str) -> str:
        """Resolve one top-level document with its own visitation set"""
        return directives_process(
            raw,
            tool=tool,
            strategy=strategy,
            registry=self.registry,
            root=self.root,
            current_file=path,
            visited=VisitationSet(),
            engine=self,
            diagnostics=self.diagnostics,
        )

    def file_read(self, file_path: PathLike, options: ReadFileOptions) -> SourceFile:
        """
        Read and resolve a single file by name.

        Bare relative paths are taken against the project root (not against
        any including file). If ``options.pipelines`` is set, that chain runs
        over the resolved content.

        Raises:
            FileNotFoundError: If the file does not exist
            CircularDependencyError: If the file's includes form a cycle
        """
        path = path_resolveFromRoot(file_path, self.root)
        raw = raw_read(path)
        content = self.content_resolve(raw, path, options.tool_name, options.strategy_name)

        if options.pipelines:
            content = pipelines_execute(
                content,
                options.pipelines,
                self.registry,
                options.tool_name,
                options.strategy_name,
                engine=self,
                diagnostics=self.diagnostics,
            )

        return self.sourceFile_make(path, content)

    def files_read(self, patterns: Sequence[str], options: ReadFileOptions) -> List[SourceFile]:
        """Read and resolve every file under the root matching the glob patterns"""
        return [self.file_read(path, options) for path in files_find(patterns, self.root)]

    def outputs_apply(self, files: Sequence[Any], delete_patterns: Sequence[str]) -> None:
        """Write requested files, then delete requested glob patterns"""
        if files:
            self.written.extend(files_write(files, self.output_root, self.diagnostics))
        if delete_patterns:
            files_delete(delete_patterns, self.output_root, self.diagnostics)

    def directories_group(self, paths: Sequence[Path]) -> Dict[Path, List[Path]]:
        """Group paths by parent directory, keeping first-seen order"""
        groups: Dict[Path, List[Path]] = {}
        for path in paths:
            groups.setdefault(path.parent, []).append(path)
        return groups

    def strategy_run(self, tool_name: str, strategy: Strategy) -> List[Any]:
        """
        Run one strategy of one tool.

        Returns:
            Metadata returned by each directory batch's transform

        Raises:
            CircularDependencyError: If a discovered file includes itself
        """
        self.diagnostics.info(f"  > Strategy: {strategy.name} ({tool_name})")
        metadata: List[Any] = []

        matches = files_find(strategy.matches, self.root)
        LOG(f"{strategy.name}: {len(matches)} files matched", level=2)

        for directory, paths in self.directories_group(matches).items():
            sources = []
            for path in paths:
                raw = raw_read(path)
                try:
                    content = self.content_resolve(raw, path, tool_name, strategy.name)
                except CircularDependencyError as e:
                    self.diagnostics.error(DiagnosticKind.CIRCULAR_DEPENDENCY, str(e), path=str(path))
                    raise
                sources.append(self.sourceFile_make(path, content))

            context = TransformContext(
                files=sources,
                dir=str(directory),
                root=str(self.root),
                config=self.config,
                engine=self,
            )

            try:
                result = transformResult_coerce(strategy.transform(context))
                self.outputs_apply(result.files, result.delete_files)
            except Exception as e:
                self.diagnostics.error(
                    DiagnosticKind.TRANSFORM_FAILURE,
                    f"Error in strategy '{strategy.name}' at dir '{directory}': {e}",
                    path=str(directory),
                )
                continue

            if result.metadata is not None:
                metadata.append(result.metadata)

        return metadata

    def run(self) -> Dict[str, Any]:
        """
        Run every tool in configuration order.

        Transform and on_finish failures are reported and skipped; a
        circular include propagates.

        Returns:
            dict with run summary (tools, files_written, diagnostics)
        """
        self.diagnostics.info(f"Starting engine at {self.root}...")

        for tool_name, tool_config in self.config.tools.items():
            self.diagnostics.info(f"Processing tool: {tool_name}")
            tool_metadata: List[Any] = []

            for strategy in tool_config.strategies:
                tool_metadata.extend(self.strategy_run(tool_name, strategy))

            if tool_config.on_finish is not None:
                self.diagnostics.info(f"  > Finalizing {tool_name}...")
                try:
                    finished = onFinishResult_coerce(
                        tool_config.on_finish(OnFinishContext(metadata=tool_metadata, engine=self))
                    )
                    self.outputs_apply(finished.files, finished.delete_files)
                except Exception as e:
                    self.diagnostics.error(
                        DiagnosticKind.ON_FINISH_FAILURE,
                        f"Error in onFinish for tool '{tool_name}': {e}",
                    )

        self.diagnostics.info("Done.")
        return {
            'status': True,
            'tools': list(self.config.tools),
            'files_written': [str(p) for p in self.written],
            'diagnostics': list(self.diagnostics.records),
        }
