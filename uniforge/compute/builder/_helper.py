from __future__ import annotations

import os

from uniforge.config import Config


def _quote(value: str) -> str:
    if value and all(c.isalnum() or c in "._-/" for c in value):
        return value
    escaped = value.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


def _render(value, indent: int) -> str:
    pad = "    " * indent
    if isinstance(value, dict):
        lines = ["("]
        for key, item in value.items():
            lines.append(f"{pad}    {_quote(key)}:{_render(item, indent + 1)}")
        lines.append(f"{pad})")
        return "\n".join(lines)
    if isinstance(value, list):
        return "[" + " ".join(_quote(str(item)) for item in value) + "]"
    return _quote(str(value))


def render_manifest(config: Config, source_dir: str | None = None) -> str:
    """Render the unikernel manifest for a configuration.

    Args:
        config: Configuration.
        source_dir: Directory program and files are relative to,
            e.g. an extracted package.
    """
    run_config = config.run_config
    program = run_config.program

    def host_path(path: str) -> str:
        if source_dir and not os.path.isabs(path):
            return os.path.join(source_dir, path)
        return os.path.abspath(path)

    children: dict = {}
    for path in [program, *config.files]:
        children[os.path.basename(path)] = {"contents": {"host": host_path(path)}}
    for directory in config.dirs:
        children[os.path.basename(directory.rstrip("/"))] = {
            "contents": {"host": host_path(directory)}
        }

    manifest: dict = {
        "children": children,
        "program": f"/{os.path.basename(program)}",
        "arguments": run_config.args or [os.path.basename(program)],
    }
    if config.env:
        manifest["environment"] = dict(config.env)
    if run_config.klibs:
        manifest["klibs"] = {klib: "t" for klib in run_config.klibs}
    if run_config.mounts:
        manifest["mounts"] = dict(run_config.mounts)
    return _render(manifest, 0) + "\n"
