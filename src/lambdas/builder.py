"""Abstract base for per-runtime Lambda build helpers."""

from abc import ABC, abstractmethod
from pathlib import Path

from src.config.settings import get_settings
from src.logging.structured import get_logger
from src.project.models import Module, PathMapping
from src.sam.template import find_function, load_template, resolve_code_uri

logger = get_logger("lambdas")


class LambdaBuilder(ABC):
    """Computes source and build locations for a runtime group."""

    @abstractmethod
    def handler_base_directory(self, module: Module, handler_file: Path) -> Path | None:
        """Return the directory the handler's code is built from.

        None means the base directory cannot be determined (e.g. the
        project has no dependency manifest yet); callers must not treat
        that as fatal.
        """
        ...

    def get_build_directory(self, module: Module) -> Path:
        """Root of the SAM build output for a module."""
        if not module.content_roots:
            raise ValueError(f"Module '{module.name}' has no content root")

        settings = get_settings()
        return module.content_roots[0] / settings.sam_build_dir / settings.sam_build_subdir

    def build_directory_for(self, module: Module, logical_id: str) -> Path:
        """Build output directory for a single template resource."""
        return self.get_build_directory(module) / logical_id

    def default_path_mappings(self, template_path: Path, logical_id: str, build_dir: Path) -> list[PathMapping]:
        """Local -> runtime path mappings for debugging a function.

        The build-local mapping comes first; consumers apply mappings in order.
        """
        task_path = get_settings().lambda_task_path
        function = find_function(load_template(template_path), logical_id)
        code_uri = resolve_code_uri(template_path, function)

        mappings = [
            PathMapping(str(build_dir / logical_id), task_path),
            PathMapping(str(code_uri), task_path),
        ]
        logger.debug(
            "Default path mappings computed",
            extra={"fields": {
                "logical_id": logical_id,
                "template": str(template_path),
                "mappings": [(m.local_root, m.remote_root) for m in mappings],
            }},
        )
        return mappings
