"""Lambda runtime identifiers and their runtime groups."""

NODEJS = "nodejs"

# Runtime identifier -> runtime group
_RUNTIME_GROUPS: dict[str, str] = {
    "nodejs10.x": NODEJS,
    "nodejs12.x": NODEJS,
    "nodejs14.x": NODEJS,
}


def supported_runtimes() -> list[str]:
    return sorted(_RUNTIME_GROUPS)


def runtime_group(runtime: str) -> str:
    """Map a runtime identifier (e.g. "nodejs12.x") to its group."""
    try:
        return _RUNTIME_GROUPS[runtime]
    except KeyError:
        supported = ", ".join(supported_runtimes())
        raise ValueError(f"Unsupported runtime: {runtime} (supported: {supported})") from None
