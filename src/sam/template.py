"""SAM template reading.

Loads SAM/CloudFormation templates (YAML or JSON) and extracts the
properties the build helpers need from a function resource.

Intrinsic function tags (!Ref, !Sub, !GetAtt, ...) are accepted and kept
as plain data so that templates using them still parse.
"""

import os
from dataclasses import dataclass
from pathlib import Path

import yaml

SERVERLESS_FUNCTION = "AWS::Serverless::Function"
LAMBDA_FUNCTION = "AWS::Lambda::Function"


class TemplateError(ValueError):
    """Raised when a template cannot be read or lacks a usable function."""


class _TemplateLoader(yaml.SafeLoader):
    """SafeLoader that tolerates CloudFormation short-form tags."""


def _construct_intrinsic(loader: yaml.SafeLoader, tag_suffix: str, node: yaml.Node) -> dict:
    if isinstance(node, yaml.ScalarNode):
        value = loader.construct_scalar(node)
    elif isinstance(node, yaml.SequenceNode):
        value = loader.construct_sequence(node, deep=True)
    else:
        value = loader.construct_mapping(node, deep=True)

    if tag_suffix == "Ref":
        return {"Ref": value}
    if tag_suffix == "GetAtt" and isinstance(value, str):
        value = value.split(".", 1)
    return {f"Fn::{tag_suffix}": value}


_TemplateLoader.add_multi_constructor("!", _construct_intrinsic)


@dataclass(frozen=True)
class FunctionResource:
    logical_id: str
    code_uri: str | None
    handler: str | None
    runtime: str | None


def load_template(path: Path) -> dict:
    """Parse a template file into a dict."""
    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.load(f, Loader=_TemplateLoader)
    except OSError as e:
        raise TemplateError(f"Cannot read template {path}: {e}") from e
    except yaml.YAMLError as e:
        raise TemplateError(f"Invalid template {path}: {e}") from e

    if not isinstance(data, dict):
        raise TemplateError(f"Template {path} is not a mapping")
    return data


def find_function(template: dict, logical_id: str) -> FunctionResource:
    """Look up a function resource, applying Globals.Function defaults."""
    resource = (template.get("Resources") or {}).get(logical_id)
    if not isinstance(resource, dict):
        raise TemplateError(f"No resource named '{logical_id}' in template")

    resource_type = resource.get("Type")
    props = resource.get("Properties") or {}
    globals_ = (template.get("Globals") or {}).get("Function") or {}

    if resource_type == SERVERLESS_FUNCTION:
        code_uri = props.get("CodeUri", globals_.get("CodeUri"))
        handler = props.get("Handler", globals_.get("Handler"))
        runtime = props.get("Runtime", globals_.get("Runtime"))
    elif resource_type == LAMBDA_FUNCTION:
        # Only local paths are usable; S3Bucket/ZipFile mappings are not
        code = props.get("Code")
        code_uri = code if isinstance(code, str) else None
        handler = props.get("Handler")
        runtime = props.get("Runtime")
    else:
        raise TemplateError(f"Resource '{logical_id}' is not a Lambda function (type: {resource_type})")

    if code_uri is not None and not isinstance(code_uri, str):
        raise TemplateError(f"CodeUri of '{logical_id}' must be a local path")

    for name, value in (("Handler", handler), ("Runtime", runtime)):
        if value is not None and not isinstance(value, str):
            raise TemplateError(f"{name} of '{logical_id}' must be a literal string, not an intrinsic function")

    return FunctionResource(
        logical_id=logical_id,
        code_uri=code_uri,
        handler=handler,
        runtime=runtime,
    )


def resolve_code_uri(template_path: Path, function: FunctionResource) -> Path:
    """Resolve a function's CodeUri against the template's directory.

    SAM defaults a missing CodeUri to the template directory.
    """
    template_dir = template_path.parent
    if not function.code_uri:
        return template_dir
    if function.code_uri.startswith("s3://"):
        raise TemplateError(f"CodeUri of '{function.logical_id}' points to S3: {function.code_uri}")

    code_path = Path(function.code_uri)
    if code_path.is_absolute():
        return code_path
    return Path(os.path.normpath(template_dir / code_path))
