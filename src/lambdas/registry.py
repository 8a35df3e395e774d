"""Builder registry: singleton map of runtime group -> builder instance."""

from src.lambdas.builder import LambdaBuilder
from src.lambdas.nodejs import NodeJsLambdaBuilder
from src.lambdas.runtimes import NODEJS, runtime_group

_BUILDER_TYPES: dict[str, type[LambdaBuilder]] = {
    NODEJS: NodeJsLambdaBuilder,
}

_builders: dict[str, LambdaBuilder] = {}


def get_builder(runtime: str) -> LambdaBuilder:
    """Get or create the builder for a runtime identifier."""
    group = runtime_group(runtime)
    if group not in _builders:
        _builders[group] = _BUILDER_TYPES[group]()
    return _builders[group]
