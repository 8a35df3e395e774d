"""Node.js build helpers.

A Node.js function's base directory is the nearest directory holding a
package.json, searched from the handler file upward but never above the
module content root the handler lives in.
"""

from pathlib import Path

from src.config.settings import get_settings
from src.lambdas.builder import LambdaBuilder
from src.logging.structured import get_logger
from src.project.models import Module, normalize

logger = get_logger("lambdas.nodejs")

HANDLER_EXTENSION = ".js"


def infer_source_root(content_root: Path, handler_file: Path, manifest: str) -> Path | None:
    """Walk up from the handler's directory to the first one containing `manifest`.

    The walk never leaves `content_root`; a handler outside it yields None.
    """
    content_root = normalize(content_root)
    current = normalize(handler_file).parent
    while current.is_relative_to(content_root):
        if (current / manifest).is_file():
            return current
        if current == content_root:
            break
        current = current.parent
    return None


def find_handler_file(code_dir: Path, handler: str) -> Path | None:
    """Map a handler string ("src/app.lambdaHandler") to its source file."""
    module_path, sep, export_name = handler.rpartition(".")
    if not sep or not module_path or not export_name:
        return None

    candidate = code_dir / f"{module_path}{HANDLER_EXTENSION}"
    return candidate if candidate.is_file() else None


class NodeJsLambdaBuilder(LambdaBuilder):

    def handler_base_directory(self, module: Module, handler_file: Path) -> Path | None:
        handler_file = normalize(handler_file)
        content_root = module.content_root_for(handler_file)
        if content_root is None:
            logger.debug(
                "Handler is outside the module content roots",
                extra={"fields": {"module": module.name, "handler_file": str(handler_file)}},
            )
            return None

        manifest = get_settings().nodejs_manifest_file
        base_dir = infer_source_root(content_root, handler_file, manifest)
        if base_dir is None:
            logger.info(
                "No manifest found for handler",
                extra={"fields": {
                    "module": module.name,
                    "handler_file": str(handler_file),
                    "manifest": manifest,
                }},
            )
        return base_dir
