"""Sequential per-file content generation with overwrite policy."""

from __future__ import annotations

from typing import Callable, List, Optional, Sequence

from .errors import ContentGenerationError, FileSystemError
from .failsafe import fallback_content
from .llm.runner import LLMRunner
from .logging import get_logger
from .models import ContentOutcome, ExistingPathsSummary, FailedPath, GenerationResult
from .planning.extract import extract_code
from .planning.paths import parent_path
from .planning.prompts import build_content_prompts
from .workspace import FileSystem

ContentProvider = Callable[[str, Sequence[str], str], str]
ProgressCallback = Callable[[int, int, str], None]

_LOGGER = get_logger("generation")


class ContentRequester:
    """`ContentProvider` that asks the runner for one file at a time."""

    def __init__(self, runner: LLMRunner, summary: ExistingPathsSummary | None = None) -> None:
        self.runner = runner
        self.summary = summary or ExistingPathsSummary()

    def __call__(self, prompt: str, all_paths: Sequence[str], target: str) -> str:
        system, user = build_content_prompts(prompt, self.summary, all_paths, target)
        try:
            response = self.runner.run(user, system=system)
        except RuntimeError as exc:
            raise ContentGenerationError(f"Content request for {target} failed: {exc}") from exc
        extracted = extract_code(response)
        return extracted or response or ""


def request_content(
    provider: ContentProvider,
    prompt: str,
    all_paths: Sequence[str],
    target: str,
) -> ContentOutcome:
    """Call `provider`, substituting fallback content when it fails."""
    try:
        text = provider(prompt, all_paths, target)
    except Exception as exc:
        _LOGGER.warning("Content generation failed for %s; writing fallback content: %s", target, exc)
        return ContentOutcome(text=fallback_content(target, prompt), fallback=True, reason=str(exc))
    return ContentOutcome(text=_as_text(text))


def _as_text(value: object) -> str:
    if isinstance(value, str):
        return value
    if isinstance(value, (bytes, bytearray)):
        return bytes(value).decode("utf-8", errors="replace")
    return ""


def generate_files(
    prompt: str,
    target_paths: Sequence[str],
    overwrite: bool,
    content_provider: ContentProvider,
    fs: FileSystem,
    *,
    progress: Optional[ProgressCallback] = None,
) -> GenerationResult:
    """Generate every target path in order and bucket the outcome of each.

    Existing files are skipped unless `overwrite` is set. A failed content
    request is masked by fallback content; only filesystem failures mark a path
    as failed. Processing always continues with the next path.
    """
    result = GenerationResult()
    targets: List[str] = list(target_paths)
    total = len(targets)

    for done, path in enumerate(targets, start=1):
        message = _generate_one(prompt, targets, path, overwrite, content_provider, fs, result)
        if progress is not None:
            progress(done, total, message)

    _LOGGER.info("Generation finished: %s", result.summary())
    return result


def _generate_one(
    prompt: str,
    targets: Sequence[str],
    path: str,
    overwrite: bool,
    content_provider: ContentProvider,
    fs: FileSystem,
    result: GenerationResult,
) -> str:
    try:
        fs.create_directory(parent_path(path))
        existed = fs.exists(path)
    except FileSystemError as exc:
        return _record_failure(result, path, exc.reason)
    except OSError as exc:
        return _record_failure(result, path, str(exc))

    if existed and not overwrite:
        result.skipped.append(path)
        _LOGGER.debug("Skipping existing file %s", path)
        return f"skipped {path}"

    outcome = request_content(content_provider, prompt, targets, path)
    try:
        fs.write_file(path, outcome.text.encode("utf-8"))
    except FileSystemError as exc:
        return _record_failure(result, path, exc.reason)
    except OSError as exc:
        return _record_failure(result, path, str(exc))

    if outcome.fallback:
        result.fallbacks.append(path)
    if existed:
        result.overwritten.append(path)
        return f"overwrote {path}"
    result.created.append(path)
    return f"created {path}"


def _record_failure(result: GenerationResult, path: str, reason: str) -> str:
    _LOGGER.error("Failed to generate %s: %s", path, reason)
    result.failed.append(FailedPath(path=path, reason=reason))
    return f"failed {path}"


__all__ = [
    "ContentProvider",
    "ContentRequester",
    "ProgressCallback",
    "generate_files",
    "request_content",
]
