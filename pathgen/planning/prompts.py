"""Prompt text sent to the provider for path plans and per-file content."""

from __future__ import annotations

from pathlib import PurePosixPath
from typing import Iterable, Sequence

from ..models import ExistingPathsSummary, PathKind

PLAN_SYSTEM_TEMPLATE = """You are an assistant that designs directory and file layouts for software projects.

## Responsibilities
- Design files and folders that fit the user's request.
- Take the current workspace into account and avoid duplicating what exists.
- Follow the conventions of the languages and frameworks involved.

## Current workspace
- Existing directories: {directories}
- Existing files: {files}
- Total: {total} paths

## Rules
1. Relative paths only: no absolute paths, no drive letters, never start with /.
2. Never use ".." to refer to a parent directory.
3. Reply with a single valid JSON object and nothing else.
4. Avoid paths that already exist in the workspace.
5. Path kinds: {kind_rule}
6. Use descriptive names that follow the language or framework conventions.
7. Build a sensible hierarchy.
8. Include every file that another planned file imports.
9. Reuse existing files when that is the better fit.

## Reply format
```json
{{
  "paths": ["src/components", "src/utils"],
  "files": ["src/components/Header.jsx", "src/utils/helpers.js"]
}}
```

When only one kind is requested, omit the other key:
```json
{{
  "paths": ["src/components", "src/utils"]
}}
```

## Examples
**React component:**
- paths: ["src/components", "src/hooks", "src/utils"]
- files: ["src/components/Button.jsx", "src/components/Header.jsx", "src/hooks/useLocalStorage.js"]

**Node.js API:**
- paths: ["src/routes", "src/controllers", "src/models", "src/middleware"]
- files: ["src/routes/user.js", "src/controllers/userController.js", "src/models/User.js"]

**Python package:**
- paths: ["package_name", "package_name/utils", "tests"]
- files: ["package_name/__init__.py", "package_name/main.py", "tests/test_main.py"]
"""

PLAN_USER_TEMPLATE = """## Request
{instructions}

## Notes
- Path kinds: {kind_rule}
- The workspace already has content; avoid duplicates.
- Produce a complete structure that fits the request.

Reply with a JSON object containing only "paths" and "files"."""

CONTENT_SYSTEM_TEMPLATE = """You generate source files that match a given prompt and stay consistent with the other files in the same set.

Requirements:
- Return the content of the single requested file only.
- Include the complete file with every import and function it needs.
- The extension is .{extension}; write in that language.
- Do not add explanations or any text outside the file content.
- If you use a code fence, tag it with the file's language."""

CONTENT_USER_TEMPLATE = """Main prompt:
{prompt}

All files being generated:
{all_files}

Other related files:
{related}

Generate the file at path: {target}
Existing workspace (partial):
- Directories: {directories}
- Files: {files}

Return the file content only."""


def kind_rule(kinds: Iterable[PathKind]) -> str:
    wanted = set(kinds)
    if wanted == {PathKind.DIRECTORY}:
        return "directories only (no files)"
    if wanted == {PathKind.FILE}:
        return "files only (no directories)"
    return "include both directories and files"


def _excerpt(values: Sequence[str], limit: int) -> str:
    shown = ", ".join(values[:limit])
    return f"{shown}..." if len(values) > limit else shown


def _bullets(values: Sequence[str]) -> str:
    return "\n".join(f"- {value}" for value in values) if values else "- (none)"


def build_plan_prompts(
    instructions: str,
    summary: ExistingPathsSummary,
    kinds: Iterable[PathKind],
) -> tuple[str, str]:
    """Return the (system, user) prompts for a path plan request."""
    rule = kind_rule(list(kinds))
    system = PLAN_SYSTEM_TEMPLATE.format(
        directories=_excerpt(summary.directories, 20),
        files=_excerpt(summary.files, 10),
        total=summary.total,
        kind_rule=rule,
    )
    user = PLAN_USER_TEMPLATE.format(instructions=instructions, kind_rule=rule)
    return system, user


def build_content_prompts(
    prompt: str,
    summary: ExistingPathsSummary,
    all_paths: Sequence[str],
    target: str,
) -> tuple[str, str]:
    """Return the (system, user) prompts for generating one file."""
    extension = PurePosixPath(target).suffix.lstrip(".") or "plain"
    related = [path for path in all_paths if path != target]
    system = CONTENT_SYSTEM_TEMPLATE.format(extension=extension)
    user = CONTENT_USER_TEMPLATE.format(
        prompt=prompt,
        all_files=_bullets(all_paths),
        related=_bullets(related),
        target=target,
        directories=_excerpt(summary.directories, 20),
        files=_excerpt(summary.files, 20),
    )
    return system, user


__all__ = ["build_content_prompts", "build_plan_prompts", "kind_rule"]
